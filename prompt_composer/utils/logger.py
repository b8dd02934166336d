"""
日志模块

结构化日志记录（DEBUG/INFO/WARNING/ERROR），控制台输出与日志文件轮转。
"""

import os
import sys
import logging
import logging.handlers
from typing import Optional

from ..config.config_manager import get_config


def setup_logger(
    name: str = "prompt_composer",
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    设置日志记录器

    Args:
        name: 日志记录器名称
        level: 日志级别，如为None则从配置读取
        log_file: 日志文件路径，如为None则从配置读取，为空字符串时不写文件
        max_file_size: 日志文件最大大小（字节）
        backup_count: 备份文件数量

    Returns:
        配置好的日志记录器
    """
    config = get_config("logging", {})
    if level is None:
        level = config.get("level", "INFO")
    if log_file is None:
        log_file = config.get("file_path", "")
    if "max_file_size" in config:
        max_file_size = config["max_file_size"]
    if "backup_count" in config:
        backup_count = config["backup_count"]

    log_level = getattr(logging, str(level).upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # 移除现有处理器，避免重复
    logger.handlers.clear()

    log_format = config.get(
        "format",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding='utf-8',
            )
            file_handler.setFormatter(formatter)
            file_handler.setLevel(log_level)
            logger.addHandler(file_handler)

            logger.debug(f"日志文件处理器已设置: {log_file} (最大大小: {max_file_size} bytes, 备份数: {backup_count})")
        except OSError as e:
            logger.error(f"设置日志文件处理器失败: {e}")

    # 不传播到根日志记录器
    logger.propagate = False

    return logger

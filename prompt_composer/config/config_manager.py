"""
配置管理

内置默认配置，叠加YAML/JSON用户配置文件和环境变量覆盖。
"""

import copy
import os
import yaml
from typing import Dict, Any, List, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "composer": {
        "user_query_key": "user_query",
        "chars_per_token": 4,
        "structured": False,
        "encoding": "utf-8",
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "file_path": "",  # 为空时不写日志文件
        "max_file_size": 10485760,
        "backup_count": 5,
    },
}

# 未显式指定配置文件时依次查找
SEARCH_PATHS = (
    "./configs/local.yaml",
    "./configs/local.yml",
    "./configs/local.json",
    "./prompt_composer.yaml",
    "./prompt_composer.yml",
    "./prompt_composer.json",
    "~/.config/prompt-composer/config.yaml",
)

# 环境变量后缀 -> 配置键
ENV_OVERRIDES = {
    "USER_QUERY_KEY": "composer.user_query_key",
    "CHARS_PER_TOKEN": "composer.chars_per_token",
    "STRUCTURED": "composer.structured",
    "TEMPLATE_ENCODING": "composer.encoding",
    "LOG_LEVEL": "logging.level",
    "LOG_FILE_PATH": "logging.file_path",
    "LOG_MAX_FILE_SIZE": "logging.max_file_size",
    "LOG_BACKUP_COUNT": "logging.backup_count",
}


def _coerce(raw: str, current: Any) -> Any:
    """按默认值的类型转换环境变量字符串"""
    if isinstance(current, bool):
        return raw.strip().lower() in ("true", "1", "yes", "y")
    if isinstance(current, int):
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"无法转换为整数，保留原始字符串: {raw}")
    return raw


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Optional[str] = None, env_prefix: str = "PROMPT_COMPOSER_"):
        """
        Args:
            config_path: 用户配置文件路径，如为None则按 SEARCH_PATHS 查找
            env_prefix: 环境变量前缀
        """
        self.config_path = config_path
        self.env_prefix = env_prefix
        self.config: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """重新计算配置：默认值 → 配置文件 → 环境变量"""
        self.config = copy.deepcopy(DEFAULT_CONFIG)

        path = self._find_config_file()
        if path:
            self.config_path = path
            overlay = self._read(path)
            if overlay:
                self._merge(self.config, overlay)

        for suffix, key in ENV_OVERRIDES.items():
            raw = os.getenv(f"{self.env_prefix}{suffix}")
            if raw is not None:
                section, name = key.split(".")
                current = self.config.setdefault(section, {}).get(name)
                self.config[section][name] = _coerce(raw, current)

        logger.info(f"配置加载完成，用户配置文件: {self.config_path or '无'}")

    def _find_config_file(self) -> Optional[str]:
        candidates = [self.config_path] if self.config_path else []
        candidates.extend(SEARCH_PATHS)
        for candidate in candidates:
            expanded = os.path.expanduser(candidate)
            if os.path.isfile(expanded):
                return expanded
        return None

    def _read(self, path: str) -> Optional[Dict[str, Any]]:
        # JSON是YAML的子集，统一用safe_load解析
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"读取配置文件失败 {path}，使用默认配置: {e}")
            return None
        if data is not None and not isinstance(data, dict):
            logger.error(f"配置文件顶层必须是映射结构: {path}")
            return None
        return data

    def _merge(self, base: Dict[str, Any], overlay: Dict[str, Any]) -> None:
        for key, value in overlay.items():
            if isinstance(base.get(key), dict) and isinstance(value, dict):
                self._merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        获取配置值

        Args:
            key: 点号分隔的配置键（如 "composer.user_query_key"）
            default: 键不存在时的返回值
        """
        current: Any = self.config
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def validate(self) -> List[str]:
        """
        检查配置取值

        Returns:
            问题描述列表，为空表示配置有效
        """
        problems = []
        chars_per_token = self.get("composer.chars_per_token")
        if isinstance(chars_per_token, bool) or not isinstance(chars_per_token, int) or chars_per_token <= 0:
            problems.append(f"composer.chars_per_token 必须是正整数: {chars_per_token!r}")
        user_query_key = self.get("composer.user_query_key")
        if not isinstance(user_query_key, str) or not user_query_key:
            problems.append(f"composer.user_query_key 必须是非空字符串: {user_query_key!r}")

        for problem in problems:
            logger.error(f"配置无效: {problem}")
        return problems


# 全局配置管理器实例
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_path: Optional[str] = None, reload: bool = False) -> ConfigManager:
    """获取全局配置管理器，reload 为真时重新创建"""
    global _config_manager

    if _config_manager is None or reload:
        _config_manager = ConfigManager(config_path)

    return _config_manager


def get_config(key: str, default: Any = None) -> Any:
    """获取配置值（快捷函数）"""
    return get_config_manager().get(key, default)

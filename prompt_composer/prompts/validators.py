"""
模板验证器

扫描模板中的占位符，检查参数是否齐全。
"""

import re
from typing import Dict, Any, List, Optional, Iterable
import logging

from .sections import SectionTag, DEFAULT_VALUE_SETTINGS

logger = logging.getLogger(__name__)

# 占位符语法: {{identifier}}
PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


def find_placeholders(text: str) -> List[str]:
    """
    按出现顺序返回文本中的占位符名称（保留重复项）

    Args:
        text: 模板或渲染结果

    Returns:
        占位符名称列表
    """
    return PLACEHOLDER_PATTERN.findall(text)


class ValidationResult:
    """验证结果"""

    def __init__(self, is_valid: bool = True):
        self.is_valid = is_valid
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.info: List[str] = []
        self.missing: List[str] = []

    def add_error(self, message: str) -> None:
        """添加错误"""
        self.is_valid = False
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        """添加警告"""
        self.warnings.append(message)

    def add_info(self, message: str) -> None:
        """添加信息"""
        self.info.append(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info,
            "missing": self.missing,
        }

    def __str__(self) -> str:
        lines = [f"验证结果: {'通过' if self.is_valid else '失败'}"]
        if self.errors:
            lines.append("错误:")
            lines.extend(f"  - {error}" for error in self.errors)
        if self.warnings:
            lines.append("警告:")
            lines.extend(f"  - {warning}" for warning in self.warnings)
        if self.info:
            lines.append("信息:")
            lines.extend(f"  - {info}" for info in self.info)
        return "\n".join(lines)


class TemplateValidator:
    """模板验证器"""

    def __init__(self, optional_names: Optional[Iterable[str]] = None):
        """
        初始化模板验证器

        Args:
            optional_names: 可以不提供值的占位符，默认为全部段落标签和默认值占位符
        """
        if optional_names is None:
            optional_names = [tag.value for tag in SectionTag]
            optional_names.append(DEFAULT_VALUE_SETTINGS.placeholder)
        self.optional_names = set(optional_names)

    def validate(
        self,
        template: str,
        arguments: Optional[Dict[str, str]] = None,
        sections: Optional[Iterable[str]] = None,
    ) -> ValidationResult:
        """
        验证模板

        Args:
            template: 模板字符串
            arguments: 已提供的参数
            sections: 已填充的段落标签

        Returns:
            验证结果
        """
        result = ValidationResult()
        arguments = arguments or {}
        provided = set(arguments) | {str(getattr(s, "value", s)) for s in (sections or [])}

        if not template or not template.strip():
            result.add_error("模板不能为空")
            return result

        names = find_placeholders(template)
        unique_names = list(dict.fromkeys(names))
        result.add_info(f"发现 {len(unique_names)} 个占位符: {', '.join(unique_names) or '无'}")

        for name in unique_names:
            if name in provided or name in self.optional_names:
                continue
            result.missing.append(name)
            result.add_error(f"占位符 {{{{{name}}}}} 未提供值")

        for key in arguments:
            if key not in unique_names:
                result.add_warning(f"参数 '{key}' 没有对应的占位符")

        if result.missing:
            logger.debug(f"模板缺少参数: {result.missing}")

        return result

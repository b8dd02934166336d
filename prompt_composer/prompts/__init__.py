"""
提示词组合系统

提供基于占位符的提示词模板组合，支持动态参数替换、条件段落和默认值汇总。
"""

from .composer import PromptComposer
from .errors import (
    PromptComposerError,
    UnresolvedPlaceholderError,
    MissingUserMessageError,
    TemplateLoadError,
)
from .messages import PromptRole, PromptMessage
from .sections import SectionTag, STRUCTURED_SECTION_ORDER, DEFAULT_VALUE_SETTINGS
from .validators import TemplateValidator, ValidationResult, find_placeholders

__all__ = [
    "PromptComposer",
    "PromptComposerError",
    "UnresolvedPlaceholderError",
    "MissingUserMessageError",
    "TemplateLoadError",
    "PromptRole",
    "PromptMessage",
    "SectionTag",
    "STRUCTURED_SECTION_ORDER",
    "DEFAULT_VALUE_SETTINGS",
    "TemplateValidator",
    "ValidationResult",
    "find_placeholders",
]

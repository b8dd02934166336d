"""
prompt-composer

为LLM构建结构化提示词的模板组合引擎。
"""

from .prompts import (
    PromptComposer,
    PromptComposerError,
    UnresolvedPlaceholderError,
    MissingUserMessageError,
    TemplateLoadError,
    PromptRole,
    PromptMessage,
    SectionTag,
    TemplateValidator,
    find_placeholders,
)

__all__ = [
    "PromptComposer",
    "PromptComposerError",
    "UnresolvedPlaceholderError",
    "MissingUserMessageError",
    "TemplateLoadError",
    "PromptRole",
    "PromptMessage",
    "SectionTag",
    "TemplateValidator",
    "find_placeholders",
]

__version__ = "1.0.0"

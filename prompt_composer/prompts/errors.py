"""
提示词组合错误
"""

from typing import List


class PromptComposerError(Exception):
    """提示词组合错误基类"""
    pass


class UnresolvedPlaceholderError(PromptComposerError):
    """构建完成后仍有占位符未被替换"""

    def __init__(self, placeholders: List[str]):
        self.placeholders = list(placeholders)
        super().__init__(
            f"构建失败，以下占位符未提供: {', '.join(self.placeholders)}"
        )


class MissingUserMessageError(PromptComposerError):
    """缺少用户消息参数"""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"无法构建LLM消息: 未提供键为 \"{key}\" 的参数")


class TemplateLoadError(PromptComposerError):
    """模板文件读取失败"""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"读取提示词模板失败: {path}，错误: {cause}")

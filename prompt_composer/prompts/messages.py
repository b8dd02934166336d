"""
LLM消息格式

OpenAI兼容的聊天消息结构。
"""

from typing import Dict
from dataclasses import dataclass
from enum import Enum


class PromptRole(Enum):
    """提示词角色"""
    SYSTEM = "system"
    USER = "user"


@dataclass
class PromptMessage:
    """提示词消息"""
    role: PromptRole
    content: str

    def to_dict(self) -> Dict[str, str]:
        """转换为OpenAI API格式"""
        return {
            "role": self.role.value,
            "content": self.content,
        }

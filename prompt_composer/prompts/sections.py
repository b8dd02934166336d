"""
结构化段落定义

封闭的段落标签集合，以及默认值段落的固定设置。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from ..utils.text import dedent_block


class SectionTag(str, Enum):
    """结构化段落标签"""
    SYSTEM_CONSTRAINTS = "system_constraints"
    MESSAGE_FORMATTING_INFO = "message_formatting_info"
    ARTIFACT_INFO = "artifact_info"
    CRITICAL_RULES = "critical_rules"
    EXAMPLES = "examples"
    OUTPUT_CONSTRAINTS = "output_constraints"
    DATA_PROCESSING_RULES = "data_processing_rules"

    @classmethod
    def parse(cls, tag: Union["SectionTag", str]) -> "SectionTag":
        """
        解析段落标签

        Raises:
            ValueError: 标签不在封闭集合中
        """
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"未知的段落标签: {tag}（可用: {allowed}）") from None


# 结构化模式下自动追加的段落，顺序固定
STRUCTURED_SECTION_ORDER: Tuple[SectionTag, ...] = (
    SectionTag.SYSTEM_CONSTRAINTS,
    SectionTag.MESSAGE_FORMATTING_INFO,
    SectionTag.ARTIFACT_INFO,
    SectionTag.CRITICAL_RULES,
    SectionTag.EXAMPLES,
)


@dataclass(frozen=True)
class DefaultValueSettings:
    """默认值段落设置"""
    placeholder: str
    section_name: str
    instructions: str


DEFAULT_VALUE_SETTINGS = DefaultValueSettings(
    placeholder="dvao",  # default_values_and_overrides
    section_name="default_values_and_overrides",
    instructions=dedent_block("""
        - The user's input is the primary source of truth and ALWAYS overrides the default values listed below.
        - Use these default values ONLY IF the corresponding information is MISSING from the user's text prompt.
    """),
)


def placeholder(name: str) -> str:
    """生成占位符标记"""
    return "{{" + name + "}}"

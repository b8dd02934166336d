"""
提示词组合器

以流式API构建结构化、动态的LLM提示词：参数替换、条件段落、默认值汇总，
以及拒绝不完整输出的最终校验。
"""

import math
import re
from pathlib import Path
from typing import Dict, Any, Optional, List, Mapping, Iterable, Union
import logging

from ..utils.text import dedent_block
from .errors import UnresolvedPlaceholderError, MissingUserMessageError, TemplateLoadError
from .messages import PromptRole, PromptMessage
from .sections import (
    SectionTag,
    STRUCTURED_SECTION_ORDER,
    DEFAULT_VALUE_SETTINGS,
    DefaultValueSettings,
    placeholder,
)
from .validators import find_placeholders

logger = logging.getLogger(__name__)

# 构建结束前清除的结构化段落占位符
_SECTION_CLEANUP_PATTERN = re.compile(
    r"\{\{(" + "|".join(tag.value for tag in SectionTag) + r")\}\}"
)

_EXAMPLE_TEMPLATE = dedent_block("""
    <example>
      <user_query>{query}</user_query>
      <assistant_response>{response}</assistant_response>
    </example>
""")

SectionKey = Union[SectionTag, str]


def _substitute(text: str, replacements: Mapping[str, str]) -> str:
    """一次扫描替换全部占位符，插入的值不会被再次展开"""
    if not replacements:
        return text
    pattern = re.compile(r"\{\{(" + "|".join(re.escape(name) for name in replacements) + r")\}\}")
    return pattern.sub(lambda match: replacements[match.group(1)], text)


class PromptComposer:
    """提示词组合器"""

    def __init__(self, base_prompt: str, structured: bool = False):
        """
        初始化提示词组合器

        Args:
            base_prompt: 基础模板
            structured: 是否启用结构化模式（自动追加结构化段落占位符）
        """
        self._base_prompt = base_prompt
        self._structured = structured
        self._arguments: Dict[str, str] = {}
        self._sections: Dict[SectionTag, str] = {}
        self._defaults: List[str] = []
        self._default_settings: DefaultValueSettings = DEFAULT_VALUE_SETTINGS

        self._template = base_prompt
        if structured:
            markers = "\n".join(placeholder(tag.value) for tag in STRUCTURED_SECTION_ORDER)
            self._template = f"{base_prompt}\n{markers}"

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        structured: bool = False,
        encoding: str = "utf-8",
    ) -> "PromptComposer":
        """
        从文件加载基础模板

        Args:
            path: 模板文件路径
            structured: 是否启用结构化模式
            encoding: 文件编码

        Returns:
            PromptComposer实例

        Raises:
            TemplateLoadError: 文件读取失败
        """
        try:
            base_prompt = Path(path).read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"读取提示词模板失败 {path}: {e}")
            raise TemplateLoadError(str(path), e) from e

        logger.debug(f"已加载提示词模板: {path} ({len(base_prompt)} 字符)")
        return cls(base_prompt, structured)

    # --- 配置 ---

    def add_argument(self, name: str, value: str) -> "PromptComposer":
        """
        添加单个动态参数，同名参数会被覆盖

        Args:
            name: 占位符名称（如 "user_query"）
            value: 要注入的值
        """
        self._arguments[name] = value
        return self

    def with_arguments(self, arguments: Mapping[str, str]) -> "PromptComposer":
        """批量添加动态参数，同名参数以新值为准"""
        self._arguments.update(arguments)
        return self

    def add_section(self, tag: SectionKey, content: str) -> "PromptComposer":
        """
        添加结构化段落内容，多次添加同一标签时内容依次拼接

        Raises:
            ValueError: 标签不在封闭集合中
        """
        section = SectionTag.parse(tag)
        self._sections[section] = self._sections.get(section, "") + content
        return self

    def add_section_if(self, condition: Any, tag: SectionKey, content: str) -> "PromptComposer":
        """仅当条件为真时添加结构化段落"""
        if condition:
            self.add_section(tag, content)
        return self

    def add_examples(self, examples: Iterable[Mapping[str, str]]) -> "PromptComposer":
        """
        添加格式化的示例列表到 examples 段落

        Args:
            examples: 包含 query 和 response 字段的示例
        """
        blocks = [
            _EXAMPLE_TEMPLATE.format(query=example["query"], response=example["response"])
            for example in examples
        ]
        return self.add_section(SectionTag.EXAMPLES, "\n\n".join(blocks))

    def add_default(self, value: str) -> "PromptComposer":
        """添加默认值，空值会被忽略"""
        if value:
            self._defaults.append(value)
        return self

    def add_default_if(self, condition: Any, value: str) -> "PromptComposer":
        """仅当条件为真时添加默认值"""
        if condition:
            self.add_default(value)
        return self

    def add_defaults(self, values: Iterable[str]) -> "PromptComposer":
        """按顺序添加多个默认值"""
        for value in values:
            self.add_default(value)
        return self

    # --- 状态 ---

    @property
    def template(self) -> str:
        """待解析的模板（结构化模式下包含自动追加的占位符）"""
        return self._template

    @property
    def structured(self) -> bool:
        return self._structured

    @property
    def arguments(self) -> Dict[str, str]:
        return dict(self._arguments)

    @property
    def sections(self) -> Dict[SectionTag, str]:
        return dict(self._sections)

    @property
    def defaults(self) -> List[str]:
        return list(self._defaults)

    # --- 构建与导出 ---

    def build(self) -> str:
        """
        构建最终的提示词字符串

        Returns:
            解析完成的提示词

        Raises:
            UnresolvedPlaceholderError: 仍有占位符未提供值
        """
        arguments = dict(self._arguments)
        arguments[self._default_settings.placeholder] = self._render_defaults()

        # 第一轮: 动态参数
        prompt = _substitute(
            self._template,
            {name: self._render_value(value) for name, value in arguments.items()},
        )

        # 第二轮: 结构化段落
        prompt = _substitute(
            prompt,
            {
                tag.value: f"<{tag.value}>{dedent_block(content)}</{tag.value}>"
                for tag, content in self._sections.items()
                if content
            },
        )

        # 清除未填充的结构化段落
        prompt = _SECTION_CLEANUP_PATTERN.sub("", prompt)

        remaining = [placeholder(name) for name in find_placeholders(prompt)]
        if remaining:
            logger.error(f"提示词构建失败，未提供的占位符: {', '.join(remaining)}")
            raise UnresolvedPlaceholderError(remaining)

        prompt = prompt.strip()
        logger.debug(
            f"提示词构建完成: {len(prompt)} 字符, {len(arguments)} 个参数, "
            f"{len(self._sections)} 个段落, {len(self._defaults)} 个默认值"
        )
        return prompt

    def build_for_llm(self, user_query_key: str = "user_query") -> List[Dict[str, str]]:
        """
        格式化为OpenAI（或兼容）API的消息列表

        用户消息单独作为 user 消息发送，其余参数和默认值由一个独立的组合器解析为 system 消息，
        结构化段落不会传递，当前实例的状态不会被修改。

        Args:
            user_query_key: 保存用户消息的参数键

        Returns:
            [system消息, user消息]

        Raises:
            MissingUserMessageError: 未提供用户消息
            UnresolvedPlaceholderError: system 提示词仍有占位符未提供值
        """
        user_message = self._arguments.get(user_query_key)
        if not user_message:
            logger.error(f"无法构建LLM消息，缺少参数: {user_query_key}")
            raise MissingUserMessageError(user_query_key)

        system_arguments = {
            name: value for name, value in self._arguments.items() if name != user_query_key
        }
        system_prompt = self._derive(system_arguments).build()

        return [
            PromptMessage(PromptRole.SYSTEM, system_prompt).to_dict(),
            PromptMessage(PromptRole.USER, user_message).to_dict(),
        ]

    def estimate_tokens(self, chars_per_token: int = 4) -> int:
        """
        粗略估算最终提示词的token数量

        英文文本约 4 个字符对应 1 个token，这只是近似值，需要精确计数时请使用专门的分词器。

        Raises:
            ValueError: chars_per_token 不是正数
        """
        if chars_per_token <= 0:
            raise ValueError(f"chars_per_token 必须为正数: {chars_per_token}")
        return math.ceil(len(self.build()) / chars_per_token)

    def _derive(self, arguments: Dict[str, str]) -> "PromptComposer":
        """以相同模板创建新的组合器，只复制给定参数和默认值"""
        derived = PromptComposer(self._base_prompt, self._structured)
        return derived.with_arguments(arguments).add_defaults(self._defaults)

    def _render_value(self, value: Optional[str]) -> str:
        if not value:
            return ""
        if not isinstance(value, str):
            value = str(value)
        if "\n" in value:
            return dedent_block(value)
        return value

    def _render_defaults(self) -> str:
        if not self._defaults:
            return ""

        settings = self._default_settings
        block = "\n".join([
            f"<{settings.section_name}>",
            settings.instructions,
            "\n".join(self._defaults),
            f"</{settings.section_name}>",
        ])
        return dedent_block(block)

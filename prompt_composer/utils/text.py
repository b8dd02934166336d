"""
文本工具

多行文本块的缩进规整，保证调用方源码里的缩进不会泄漏到最终提示词中。
"""

import textwrap


def dedent_block(text: str) -> str:
    """
    去除多行文本块的公共前导缩进并裁剪首尾空白

    对已经规整过的文本再次调用结果不变。

    Args:
        text: 原始文本

    Returns:
        规整后的文本
    """
    if not text:
        return ""
    return textwrap.dedent(text).strip()

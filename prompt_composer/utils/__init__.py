"""
工具模块
"""

from .text import dedent_block
from .logger import setup_logger

__all__ = [
    "dedent_block",
    "setup_logger",
]

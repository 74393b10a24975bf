"""
Output format interfaces and implementations for `rust-releases`.
"""

from .columns import ColumnsFormat
from .interface import ReleaseFormat
from .json import JsonFormat

__all__ = [
    "ColumnsFormat",
    "ReleaseFormat",
    "JsonFormat",
]

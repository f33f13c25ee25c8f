"""Type definitions for :mod:`intl_modern`."""

from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

MessageValue: TypeAlias = "str | MessageDict"
MessageDict: TypeAlias = dict[str, MessageValue]

FormatValue: TypeAlias = bool | float | int | str
FormatParam: TypeAlias = dict[str, Any]

Locales: TypeAlias = str | Sequence[str]
FormatOptions: TypeAlias = dict[str, Any]
CustomFormats: TypeAlias = dict[str, dict[str, FormatOptions]]

OnErrorFn: TypeAlias = Callable[[str], None]

CacheKeyType: TypeAlias = str
CacheDict: TypeAlias = dict[CacheKeyType, Any]

__all__ = [
    "CacheDict",
    "CacheKeyType",
    "CustomFormats",
    "FormatOptions",
    "FormatParam",
    "FormatValue",
    "Locales",
    "MessageDict",
    "MessageValue",
    "OnErrorFn",
]

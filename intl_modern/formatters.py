"""
Memoized formatter getters.

:func:`create_formatters` binds every formatter kind to its sub-cache in one
:class:`~intl_modern.cache.IntlCache` and returns the resulting get-or-create
functions as a :class:`Formatters` bundle.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .cache import IntlCache, create_intl_cache, memoize_constructor
from .message import MessageFormat
from .primitives import DateTimeFormat, ListFormat, NumberFormat, PluralRules, RelativeTimeFormat


class FormatterKind(Enum):
    """Supported formatter kinds: sub-cache name, getter name, default constructor."""

    DATE_TIME = ("date_time", "get_date_time_format", DateTimeFormat)
    NUMBER = ("number", "get_number_format", NumberFormat)
    MESSAGE = ("message", "get_message_format", MessageFormat)
    RELATIVE_TIME = ("relative_time", "get_relative_time_format", RelativeTimeFormat)
    PLURAL_RULES = ("plural_rules", "get_plural_rules", PluralRules)
    LIST = ("list", "get_list_format", ListFormat)

    def __init__(self, cache_name: str, getter_name: str, constructor: Callable[..., Any]):
        self.cache_name = cache_name
        self.getter_name = getter_name
        self.constructor = constructor


@dataclass(frozen=True)
class Formatters:
    """Get-or-create functions for every formatter kind, backed by one cache."""

    cache: IntlCache
    get_date_time_format: Callable[..., DateTimeFormat]
    get_number_format: Callable[..., NumberFormat]
    get_message_format: Callable[..., MessageFormat]
    get_relative_time_format: Callable[..., RelativeTimeFormat]
    get_plural_rules: Callable[..., PluralRules]
    get_list_format: Callable[..., ListFormat]

    def getter(self, kind: FormatterKind) -> Callable[..., Any]:
        """Return the getter bound to ``kind``."""
        return getattr(self, kind.getter_name)


def create_formatters(
        cache: IntlCache | None = None,
        **constructors: Callable[..., Any] | None,
) -> Formatters:
    """
    Create memoized formatter getters and populate ``cache`` through them.

    Args:
        cache: Explicit cache to prevent leaking memory; a new one when omitted
        **constructors: Replacement constructors keyed by kind (``number=...``).
            ``None`` marks a kind the host does not provide; its getter raises
            :class:`~intl_modern.cache.MissingFormatterError`.

    Returns:
        Formatters bundle
    """
    known = {kind.cache_name for kind in FormatterKind}
    unknown = sorted(set(constructors) - known)
    if unknown:
        raise TypeError(f"Unknown formatter kinds: {', '.join(unknown)}")

    if cache is None:
        cache = create_intl_cache()

    getters = {
        kind.getter_name: memoize_constructor(
            constructors.get(kind.cache_name, kind.constructor),
            getattr(cache, kind.cache_name),
            kind.cache_name,
        )
        for kind in FormatterKind
    }
    return Formatters(cache=cache, **getters)


__all__ = ["FormatterKind", "Formatters", "create_formatters"]

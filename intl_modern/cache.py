"""Formatter cache store and per-kind memoization.

An :class:`IntlCache` holds one dictionary per formatter kind. Each dictionary
maps a cache id, derived from the arguments a formatter was constructed with,
to the formatter instance. Entries are never evicted one by one: a cache lives
as long as the configuration scope that created it and is dropped as a whole.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from .types import CacheDict, CacheKeyType

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class MissingFormatterError(TypeError):
    """Raised when the host environment provides no constructor for a kind."""

    def __init__(self, kind: str | None):
        self.kind = kind
        super().__init__(f"No formatter constructor is available for kind '{kind}'")


@dataclass(slots=True)
class IntlCache:
    """One sub-cache per formatter kind.

    The set of sub-caches is fixed: ``slots=True`` rejects any attribute not
    declared here, so only the contents of each dictionary can grow.
    """

    date_time: CacheDict = field(default_factory=dict)
    number: CacheDict = field(default_factory=dict)
    message: CacheDict = field(default_factory=dict)
    relative_time: CacheDict = field(default_factory=dict)
    plural_rules: CacheDict = field(default_factory=dict)
    list: CacheDict = field(default_factory=dict)


def create_intl_cache() -> IntlCache:
    """Create a fresh cache store with an empty sub-cache per formatter kind."""
    return IntlCache()


def _type_tag(value: Any) -> dict[str, str]:
    # Tagged with the type so that equal strings of different types don't collide.
    value_type = type(value)
    return {"__type__": f"{value_type.__module__}.{value_type.__qualname__}", "value": str(value)}


def _canonical(value: Any) -> Any:
    # Mappings become sorted [key, value] pairs so keys of any type survive
    # serialization with their type; json would stringify or refuse them.
    if isinstance(value, Mapping):
        pairs = [
            [key if isinstance(key, str) else _type_tag(key), _canonical(item)]
            for key, item in value.items()
        ]
        pairs.sort(key=lambda pair: repr(pair[0]))
        return {"__map__": pairs}
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_canonical(item) for item in value), key=repr)
    return value


def get_cache_id(*args: Any, **kwargs: Any) -> CacheKeyType:
    """Derive a deterministic cache id from constructor arguments.

    Mappings are serialized as key/value pairs sorted by key at every nesting
    level, so two option dictionaries with the same entries give the same id
    regardless of insertion order. Non-string keys keep their type.

    Args:
        *args: Positional constructor arguments (locales, options, ...)
        **kwargs: Keyword constructor arguments

    Returns:
        Cache id string
    """
    return json.dumps(
        [_canonical(list(args)), _canonical(kwargs)],
        separators=(",", ":"),
        ensure_ascii=False,
        default=_type_tag,
    )


def memoize_constructor(
        constructor: Callable[..., _T] | None,
        cache: CacheDict,
        kind: str | None = None,
) -> Callable[..., _T]:
    """
    Wrap a formatter constructor with a get-or-create lookup over ``cache``.

    Args:
        constructor: Formatter constructor, or None when the host has none
        cache: The sub-cache dedicated to this constructor's kind
        kind: Kind name used in diagnostics

    Returns:
        A function accepting the constructor's arguments and returning the
        shared instance for them
    """

    def get_instance(*args: Any, **kwargs: Any) -> _T:
        cache_id = get_cache_id(*args, **kwargs)
        if cache_id in cache:
            return cache[cache_id]

        if constructor is None:
            raise MissingFormatterError(kind)

        logger.debug("Creating %s formatter for %s", kind or "intl", cache_id)
        instance = constructor(*args, **kwargs)
        cache[cache_id] = instance
        return instance

    return get_instance


__all__ = [
    "IntlCache",
    "MissingFormatterError",
    "create_intl_cache",
    "get_cache_id",
    "memoize_constructor",
]

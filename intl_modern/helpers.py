"""Helpers for nested message dictionaries and named format tables."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def get_deep_value(data: Mapping[str, Any] | None, key: str) -> Any:
    """
    Look up a dot separated ``key`` in nested mappings.

    An exact match on the full key wins over the dotted path, so flat message
    tables with ids like ``"app.title"`` work too.

    Args:
        data: Nested mapping
        key: Key, e.g. ``"cart.items"``

    Returns:
        The value or None if any step is missing
    """
    if not data:
        return None
    if key in data:
        return data[key]

    current: Any = data
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current


def merge_formats(
        default_formats: Mapping[str, Mapping[str, Any]] | None,
        formats: Mapping[str, Mapping[str, Any]] | None,
) -> dict[str, dict[str, Any]]:
    """
    Combine two named format tables, kind by kind.

    A preset in ``formats`` replaces the ``default_formats`` preset of the same
    kind and name as a whole; preset options are never mixed.

    Args:
        default_formats: Fallback table, kind -> name -> options
        formats: Table whose presets win

    Returns:
        New table
    """
    merged: dict[str, dict[str, Any]] = {}
    for table in (default_formats or {}, formats or {}):
        for kind, presets in table.items():
            merged.setdefault(kind, {}).update(presets)
    return merged

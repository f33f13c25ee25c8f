"""
Small helpers shared by the formatters and the :class:`~intl_modern.intl.IntlModern` facade.

HTML escaping matches React's, on purpose.
"""

import logging
import re
import traceback
from collections.abc import Iterable, Mapping
from typing import Any

from .types import CustomFormats, FormatOptions, OnErrorFn

logger = logging.getLogger("intl_modern")

ERROR_PREFIX = "[Intl Modern]"

ESCAPED_CHARS = {
    "&": "&amp;",
    ">": "&gt;",
    "<": "&lt;",
    '"': "&quot;",
    "'": "&#x27;",
}

UNSAFE_CHARS_REGEX = re.compile(r"[&><\"']")


class InvariantViolation(Exception):
    """A required precondition does not hold."""


def escape(text: Any) -> str:
    """Replace ``& > < " '`` with their HTML entities."""
    return UNSAFE_CHARS_REGEX.sub(lambda match: ESCAPED_CHARS[match.group(0)], str(text))


def filter_props(
        props: Mapping[str, Any],
        whitelist: Iterable[str],
        defaults: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Project ``props`` onto ``whitelist``.

    Args:
        props: Source mapping
        whitelist: Keys to keep
        defaults: Fallback values for whitelisted keys missing from ``props``

    Returns:
        New dict holding only whitelisted keys
    """
    defaults = defaults or {}
    filtered: dict[str, Any] = {}
    for name in whitelist:
        if name in props:
            filtered[name] = props[name]
        elif name in defaults:
            filtered[name] = defaults[name]
    return filtered


def invariant_intl_context(intl: Any = None) -> None:
    """Raise if the ``intl`` object a component depends on is missing."""
    if not intl:
        raise InvariantViolation(
            f"{ERROR_PREFIX} Could not find required `intl` object. "
            "An IntlModern instance needs to be provided to this component."
        )


def create_error(message: str, exception: BaseException | None = None) -> str:
    """Build a diagnostic string, with the exception's traceback appended when given."""
    details = ""
    if exception is not None:
        details = "\n" + "".join(
            traceback.format_exception(type(exception), exception, exception.__traceback__)
        ).rstrip()
    return f"{ERROR_PREFIX} {message}{details}"


def default_error_handler(error: str) -> None:
    """Log ``error`` unless Python runs optimized (``-O``)."""
    if __debug__:
        logger.error(error)


def get_named_format(
        formats: CustomFormats | None,
        kind: str,
        name: str,
        on_error: OnErrorFn,
) -> FormatOptions | None:
    """
    Resolve a named format preset.

    Args:
        formats: Named format table, kind -> name -> options
        kind: Format kind, e.g. ``"number"``
        name: Preset name
        on_error: Called once with a diagnostic when the preset is missing

    Returns:
        The preset options or None
    """
    format_type = formats.get(kind) if formats else None
    preset = format_type.get(name) if format_type else None
    if preset:
        return preset

    on_error(create_error(f"No {kind} format named: {name}"))
    return None


__all__ = [
    "ERROR_PREFIX",
    "InvariantViolation",
    "create_error",
    "default_error_handler",
    "escape",
    "filter_props",
    "get_named_format",
    "invariant_intl_context",
]

"""Message formatting with typed placeholders and conditional variants.

A message is either a template string or a mapping of conditional keys to
templates (nested mappings are allowed)::

    {
        "count == 0": "Your cart is empty",
        "count == 1": "One item, {total, number, USD}",
        "default": "{count} items, {total, number, USD}",
    }

Templates use ``{name}``, ``{name, number[, style]}``, ``{name, date[, style]}``
and ``{name, time[, style]}`` placeholders. ``'{'`` and ``'}'`` are literal
braces and ``''`` is a literal apostrophe.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, time
from decimal import Decimal
from typing import Any, NamedTuple

from .ast_evaluator import eval_key
from .cache import create_intl_cache, memoize_constructor
from .helpers import get_deep_value
from .primitives import STYLES, DateTimeFormat, NumberFormat, resolve_locale
from .types import CustomFormats, FormatOptions, FormatParam, Locales, MessageValue

DEFAULT_KEY = "default"

_TOKEN = re.compile(
    r"'(?P<quoted>[{}])'"
    r"|(?P<apostrophe>'')"
    r"|\{\s*(?P<name>[A-Za-z_][\w.]*)\s*"
    r"(?:,\s*(?P<type>\w+)\s*(?:,\s*(?P<style>[^{}]*?)\s*)?)?\}"
    r"|(?P<stray>[{}])"
)

_NUMBER_STYLES: dict[str, FormatOptions] = {
    "percent": {"style": "percent"},
    "integer": {"maximum_fraction_digits": 0},
}


class Placeholder(NamedTuple):
    name: str
    kind: str | None
    options: FormatOptions | None


class MessageFormat:
    """
    Compiled message.

    Args:
        message: Template string or mapping of conditional keys to templates
        locales: Locale identifier or sequence of them
        formats: Named format table used by placeholder styles
        time_zone: IANA time zone for date and time arguments, unless a preset sets one
    """

    __slots__ = (
        "message",
        "locale",
        "formats",
        "time_zone",
        "_compiled",
        "_get_number_format",
        "_get_date_time_format",
    )

    def __init__(
            self,
            message: MessageValue,
            locales: Locales,
            formats: CustomFormats | None = None,
            time_zone: str | None = None,
    ):
        self.message = message
        self.locale = resolve_locale(locales)
        self.formats: CustomFormats = formats or {}
        self.time_zone = time_zone

        cache = create_intl_cache()
        self._get_number_format = memoize_constructor(NumberFormat, cache.number, "number")
        self._get_date_time_format = memoize_constructor(DateTimeFormat, cache.date_time, "date_time")

        self._compiled = self._compile(message)

    def _compile(self, message: MessageValue) -> Any:
        if isinstance(message, Mapping):
            return {key: self._compile(value) for key, value in message.items()}
        if not isinstance(message, str):
            raise TypeError(f"Message must be a string or a mapping, not {type(message).__name__}")
        return self._parse(message)

    def _parse(self, template: str) -> list[str | Placeholder]:
        parts: list[str | Placeholder] = []
        literal: list[str] = []
        position = 0

        for match in _TOKEN.finditer(template):
            literal.append(template[position:match.start()])
            position = match.end()

            if match.group("stray"):
                raise ValueError(f"Unbalanced brace at {match.start()} in message: {template!r}")
            if match.group("quoted"):
                literal.append(match.group("quoted"))
                continue
            if match.group("apostrophe"):
                literal.append("'")
                continue

            text = "".join(literal)
            if text:
                parts.append(text)
            literal = []
            parts.append(self._placeholder(match.group("name"), match.group("type"), match.group("style")))

        literal.append(template[position:])
        text = "".join(literal)
        if text:
            parts.append(text)
        return parts

    def _placeholder(self, name: str, arg_type: str | None, style: str | None) -> Placeholder:
        if arg_type is None:
            return Placeholder(name, None, None)

        if arg_type == "number":
            if not style:
                return Placeholder(name, "number", None)
            options = _NUMBER_STYLES.get(style) or self._named_format("number", style)
            return Placeholder(name, "number", options)

        if arg_type in ("date", "time"):
            if not style:
                style = "medium"
            if style in STYLES:
                return Placeholder(name, "date_time", self._date_time_options({f"{arg_type}_style": style}))
            return Placeholder(name, "date_time", self._date_time_options(self._named_format(arg_type, style)))

        raise ValueError(f"Unknown argument type '{arg_type}' for '{name}'")

    def _date_time_options(self, options: FormatOptions | None) -> FormatOptions | None:
        if not self.time_zone:
            return options
        return {"time_zone": self.time_zone, **(options or {})}

    def _named_format(self, kind: str, name: str) -> FormatOptions:
        preset = self.formats.get(kind, {}).get(name)
        if not preset:
            raise ValueError(f"No {kind} format named: {name}")
        return preset

    def _select(self, compiled: Any, values: FormatParam) -> list[str | Placeholder]:
        while isinstance(compiled, dict):
            for key, branch in compiled.items():
                if key != DEFAULT_KEY and eval_key(key, values):
                    compiled = branch
                    break
            else:
                if DEFAULT_KEY not in compiled:
                    return []
                compiled = compiled[DEFAULT_KEY]
        return compiled

    def _lookup(self, values: FormatParam, name: str) -> Any:
        if name in values:
            return values[name]
        value = get_deep_value(values, name)
        if value is None:
            raise KeyError(f"The context variable '{name}' was not provided to the message: {self.message!r}")
        return value

    def _format_argument(self, placeholder: Placeholder, value: Any) -> str:
        locale = str(self.locale)
        if placeholder.kind == "number" or (
                placeholder.kind is None
                and isinstance(value, (int, float, Decimal))
                and not isinstance(value, bool)
        ):
            return self._get_number_format(locale, placeholder.options).format(value)
        if placeholder.kind == "date_time" or (placeholder.kind is None and isinstance(value, (date, time))):
            options = placeholder.options if placeholder.kind else self._date_time_options(None)
            return self._get_date_time_format(locale, options).format(value)
        return str(value)

    def format(self, values: FormatParam | None = None) -> str:
        """
        Render the message.

        Args:
            values: Placeholder values, also visible to conditional keys

        Returns:
            Formatted string

        Raises:
            KeyError: If a placeholder has no value
        """
        values = values or {}
        parts = self._select(self._compiled, values)
        return "".join(
            part if isinstance(part, str) else self._format_argument(part, self._lookup(values, part.name))
            for part in parts
        )

    def __repr__(self) -> str:
        return f"<MessageFormat {self.locale} {self.message!r}>"


__all__ = ["MessageFormat", "Placeholder"]

"""
Locale-aware formatting facade.

Composes an :class:`~intl_modern.config.IntlConfig`, one
:class:`~intl_modern.cache.IntlCache` and the memoized formatter getters bound
to it.
"""
import dataclasses
from collections.abc import Iterable
from typing import Any

from intl_modern.cache import IntlCache, create_intl_cache
from intl_modern.config import IntlConfig
from intl_modern.formatters import Formatters, create_formatters
from intl_modern.helpers import get_deep_value, merge_formats
from intl_modern.primitives import resolve_locale
from intl_modern.types import CustomFormats, FormatOptions, FormatParam
from intl_modern.utils import create_error, escape, get_named_format, invariant_intl_context


class IntlModern:
    """
    Formats numbers, dates, times, relative times, plurals, lists and messages for one locale.

    The formatter cache belongs to this object: drop the object (or call
    :meth:`with_locale`) to start a new scope.

    Args:
        config: Configuration; built from ``overrides`` when omitted
        cache: Explicit formatter cache to share between facades of the same scope
        **overrides: Config values, applied on top of ``config``
    """

    __slots__ = (
        "_config",
        "_locale",
        "_formats",
        "_formatters",
    )

    def __init__(
            self,
            config: IntlConfig | None = None,
            cache: IntlCache | None = None,
            **overrides: Any
    ):
        if config is None:
            config = IntlConfig.create(**overrides)
        elif overrides:
            config = dataclasses.replace(config, **overrides)

        self._config: IntlConfig = config
        self._formats: CustomFormats = merge_formats(config.default_formats, config.formats)
        self._formatters: Formatters = create_formatters(cache if cache is not None else create_intl_cache())
        self._locale: str = self._negotiate_locale(config)

    @staticmethod
    def _negotiate_locale(config: IntlConfig) -> str:
        locale = config.effective_locale
        try:
            resolve_locale(locale)
        except ValueError as error:
            config.on_error(create_error(
                f'Missing locale data for locale: "{locale}". '
                f'Using default locale: "{config.default_locale}" as fallback.',
                error,
            ))
            return config.default_locale
        return locale

    @property
    def config(self) -> IntlConfig:
        return self._config

    @property
    def locale(self) -> str:
        """The locale formatters are created for."""
        return self._locale

    @property
    def cache(self) -> IntlCache:
        return self._formatters.cache

    @property
    def formatters(self) -> Formatters:
        return self._formatters

    def with_locale(self, locale: str) -> "IntlModern":
        """Return a facade for ``locale`` with the same config and a fresh cache."""
        return IntlModern(dataclasses.replace(self._config, locale=locale))

    def _report(self, message: str, error: BaseException | None = None) -> None:
        self._config.on_error(create_error(message, error))

    def _options(
            self,
            kind: str,
            name: str | None,
            options: FormatOptions,
            defaults: FormatOptions | None = None,
    ) -> FormatOptions:
        preset = None
        if name:
            preset = get_named_format(self._formats, kind, name, self._config.on_error)
        return {**(defaults or {}), **(preset or {}), **options}

    def _date_time_options(self, kind: str, name: str | None, options: FormatOptions) -> FormatOptions:
        defaults = {"time_zone": self._config.time_zone} if self._config.time_zone else {}
        resolved = self._options(kind, name, options, defaults)
        if kind == "time" and not any(resolved.get(key) for key in ("time_style", "date_style", "skeleton")):
            resolved["time_style"] = "short"
        return resolved

    def format_number(self, value: Any, format: str | None = None, **options: Any) -> str:
        """
        Format a number.

        Args:
            value: Number to format
            format: Name of a ``number`` preset
            **options: NumberFormat options, winning over the preset

        Returns:
            Formatted number, or ``str(value)`` if formatting failed
        """
        try:
            number_format = self._formatters.get_number_format(
                self._locale, self._options("number", format, options)
            )
            return number_format.format(value)
        except Exception as error:
            self._report("Error formatting number.", error)
            return str(value)

    def format_date(self, value: Any, format: str | None = None, **options: Any) -> str:
        """Format the date part of ``value``; ``format`` names a ``date`` preset."""
        try:
            date_format = self._formatters.get_date_time_format(
                self._locale, self._date_time_options("date", format, options)
            )
            return date_format.format(value)
        except Exception as error:
            self._report("Error formatting date.", error)
            return str(value)

    def format_time(self, value: Any, format: str | None = None, **options: Any) -> str:
        """Format the time part of ``value``; ``format`` names a ``time`` preset."""
        try:
            time_format = self._formatters.get_date_time_format(
                self._locale, self._date_time_options("time", format, options)
            )
            return time_format.format(value)
        except Exception as error:
            self._report("Error formatting time.", error)
            return str(value)

    def format_relative_time(self, value: int | float, unit: str = "second",
                             format: str | None = None, **options: Any) -> str:
        try:
            relative_format = self._formatters.get_relative_time_format(
                self._locale, self._options("relative_time", format, options)
            )
            return relative_format.format(value, unit)
        except Exception as error:
            self._report("Error formatting relative time.", error)
            return str(value)

    def format_plural(self, value: int | float, **options: Any) -> str:
        """Return the plural category of ``value``, ``"other"`` on failure."""
        try:
            return self._formatters.get_plural_rules(self._locale, options).select(value)
        except Exception as error:
            self._report("Error formatting plural.", error)
            return "other"

    def format_list(self, items: Iterable[Any], **options: Any) -> str:
        items = list(items)
        try:
            return self._formatters.get_list_format(self._locale, options).format(items)
        except Exception as error:
            self._report("Error formatting list.", error)
            return ", ".join(str(item) for item in items)

    def format_message(self, message_id: str, values: FormatParam | None = None) -> str:
        """
        Format the message stored under ``message_id``.

        Args:
            message_id: Dot separated message id
            values: Placeholder values

        Returns:
            Formatted message, or ``message_id`` if it's missing or failed to format
        """
        message = get_deep_value(self._config.messages, message_id)
        if message is None:
            self._report(f'Missing message: "{message_id}" for locale: "{self._locale}"')
            return message_id

        try:
            message_format = self._formatters.get_message_format(
                message, self._locale, self._formats, self._config.time_zone
            )
            return message_format.format(values)
        except Exception as error:
            self._report(f'Error formatting message: "{message_id}" for locale: "{self._locale}"', error)
            return message_id

    def format_html_message(self, message_id: str, values: FormatParam | None = None) -> str:
        """Like :meth:`format_message`, with string values HTML-escaped first."""
        escaped = {
            key: escape(value) if isinstance(value, str) else value
            for key, value in (values or {}).items()
        }
        return self.format_message(message_id, escaped)


def get_intl(intl: IntlModern | None) -> IntlModern:
    """Return ``intl``, raising :class:`~intl_modern.utils.InvariantViolation` when it is missing."""
    invariant_intl_context(intl)
    return intl  # type: ignore[return-value]


__all__ = ["IntlModern", "get_intl"]

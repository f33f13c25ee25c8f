"""Locale-sensitive formatter constructors backed by Babel.

Every class here has the same construction shape, ``(locales, options=None)``,
and does its expensive work (locale negotiation, CLDR pattern parsing, time
zone lookup) in ``__init__``. That is what makes them worth memoizing through
:mod:`intl_modern.cache`. Instances are treated as immutable once built.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, ClassVar

from babel import Locale, UnknownLocaleError
from babel import dates as babel_dates
from babel import lists as babel_lists
from babel import numbers as babel_numbers

from .types import FormatOptions, Locales

logger = logging.getLogger(__name__)

STYLES = ("full", "long", "medium", "short")

# Same unit lengths Babel uses for timedelta formatting.
_SECONDS_PER_UNIT = {
    "year": 3600 * 24 * 365,
    "month": 3600 * 24 * 30,
    "week": 3600 * 24 * 7,
    "day": 3600 * 24,
    "hour": 3600,
    "minute": 60,
    "second": 1,
}

_LIST_TYPES = {
    "conjunction": "standard",
    "disjunction": "or",
    "unit": "unit",
}


def resolve_locale(locales: Locales | None) -> Locale:
    """Pick the first requested locale Babel has data for.

    Args:
        locales: A locale identifier (``en-US`` or ``en_US``) or a sequence of them

    Returns:
        Babel Locale

    Raises:
        ValueError: If none of the requested locales is supported
    """
    if isinstance(locales, str):
        candidates = [locales]
    else:
        candidates = list(locales or [])

    for candidate in candidates:
        try:
            return Locale.parse(candidate.replace("-", "_"))
        except (UnknownLocaleError, ValueError, TypeError, AttributeError) as error:
            logger.debug("Skipping unsupported locale %r: %s", candidate, error)

    raise ValueError(f"None of the requested locales is supported: {candidates!r}")


class LocaleFormat:
    """Common construction for the Babel-backed formatters."""

    kind: ClassVar[str] = "intl"
    defaults: ClassVar[FormatOptions] = {}
    choices: ClassVar[dict[str, tuple[Any, ...]]] = {}

    __slots__ = ("locale", "_options")

    def __init__(self, locales: Locales, options: FormatOptions | None = None):
        self.locale: Locale = resolve_locale(locales)
        self._options: FormatOptions = self._resolve_options(options or {})

    def _resolve_options(self, options: FormatOptions) -> FormatOptions:
        unknown = sorted(set(options) - set(self.defaults))
        if unknown:
            raise ValueError(f"Unknown {self.kind} options: {', '.join(unknown)}")

        resolved = {**self.defaults, **options}
        for name, allowed in self.choices.items():
            if resolved[name] not in allowed:
                raise ValueError(
                    f"Invalid value {resolved[name]!r} for {self.kind} option '{name}'"
                )
        return resolved

    def resolved_options(self) -> FormatOptions:
        """Return the locale and options this formatter settled on."""
        return {"locale": str(self.locale), **self._options}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.locale} {self._options!r}>"


class NumberFormat(LocaleFormat):
    """Decimal, percent and currency formatting."""

    kind = "number"
    defaults = {
        "style": "decimal",
        "currency": None,
        "currency_display": "symbol",
        "minimum_fraction_digits": None,
        "maximum_fraction_digits": None,
        "use_grouping": True,
        "notation": "standard",
        "compact_display": "short",
    }
    choices = {
        "style": ("decimal", "percent", "currency"),
        "currency_display": ("symbol", "code", "name"),
        "notation": ("standard", "compact", "scientific"),
        "compact_display": ("short", "long"),
        "use_grouping": (True, False),
    }

    __slots__ = ("_pattern",)

    def __init__(self, locales: Locales, options: FormatOptions | None = None):
        super().__init__(locales, options)
        options = self._options

        if options["style"] == "currency":
            if not options["currency"]:
                raise ValueError("Currency code is required with currency style")
            options["currency"] = str(options["currency"]).upper()
            if options["currency"] not in babel_numbers.list_currencies():
                raise ValueError(f"Unknown currency code: {options['currency']}")

        low = options["minimum_fraction_digits"]
        high = options["maximum_fraction_digits"]
        if low is not None and high is not None and low > high:
            raise ValueError("minimum_fraction_digits is greater than maximum_fraction_digits")

        if options["notation"] == "scientific" and options["style"] != "decimal":
            raise ValueError("Scientific notation only supports the decimal style")
        if options["notation"] == "compact" and options["style"] == "percent":
            raise ValueError("Compact notation does not support the percent style")

        self._pattern = self._build_pattern() if options["notation"] == "standard" else None

    def _build_pattern(self) -> babel_numbers.NumberPattern:
        style = self._options["style"]
        if style == "percent":
            base = self.locale.percent_formats[None]
        elif style == "currency":
            base = self.locale.currency_formats["standard"]
        else:
            base = self.locale.decimal_formats[None]

        text = base.pattern
        if style == "currency" and self._options["currency_display"] == "code":
            text = re.sub("¤+", "¤¤", text)

        # Parse a private copy: the locale's own patterns are shared data.
        pattern = babel_numbers.parse_pattern(text)
        low, high = pattern.frac_prec
        if self._options["minimum_fraction_digits"] is not None:
            low = self._options["minimum_fraction_digits"]
            high = max(high, low)
        if self._options["maximum_fraction_digits"] is not None:
            high = self._options["maximum_fraction_digits"]
            low = min(low, high)
        pattern.frac_prec = (low, high)
        return pattern

    @property
    def _explicit_digits(self) -> bool:
        return (self._options["minimum_fraction_digits"] is not None
                or self._options["maximum_fraction_digits"] is not None)

    def format(self, value: int | float | Decimal) -> str:
        """
        Format a number.

        Args:
            value: Number to format

        Returns:
            Localized string
        """
        options = self._options
        currency = options["currency"]

        if options["notation"] == "scientific":
            return babel_numbers.format_scientific(value, locale=self.locale)

        if options["notation"] == "compact":
            digits = options["maximum_fraction_digits"] or 0
            if options["style"] == "currency":
                return babel_numbers.format_compact_currency(
                    value, currency, format_type="short", locale=self.locale, fraction_digits=digits
                )
            return babel_numbers.format_compact_decimal(
                value, format_type=options["compact_display"], locale=self.locale, fraction_digits=digits
            )

        if options["style"] == "currency" and options["currency_display"] == "name":
            return babel_numbers.format_currency(
                value,
                currency,
                locale=self.locale,
                format_type="name",
                currency_digits=not self._explicit_digits,
                group_separator=options["use_grouping"],
            )

        return self._pattern.apply(
            value,
            self.locale,
            currency=currency,
            currency_digits=not self._explicit_digits,
            group_separator=options["use_grouping"],
        )


class DateTimeFormat(LocaleFormat):
    """Date and time formatting with CLDR styles or skeletons."""

    kind = "date_time"
    defaults = {
        "date_style": None,
        "time_style": None,
        "skeleton": None,
        "time_zone": None,
    }
    choices = {
        "date_style": (None, *STYLES),
        "time_style": (None, *STYLES),
    }

    __slots__ = ("_tzinfo",)

    def __init__(self, locales: Locales, options: FormatOptions | None = None):
        super().__init__(locales, options)
        options = self._options

        if options["skeleton"] and (options["date_style"] or options["time_style"]):
            raise ValueError("skeleton can't be combined with date_style or time_style")
        if not options["skeleton"] and not options["time_style"] and not options["date_style"]:
            options["date_style"] = "short"

        self._tzinfo = None
        if options["time_zone"]:
            try:
                self._tzinfo = babel_dates.get_timezone(options["time_zone"])
            except LookupError as error:
                raise ValueError(f"Unknown time zone: {options['time_zone']}") from error

        # Touch the CLDR patterns now so a bad locale/style fails at construction.
        if options["date_style"]:
            babel_dates.get_date_format(options["date_style"], locale=self.locale)
        if options["time_style"]:
            babel_dates.get_time_format(options["time_style"], locale=self.locale)

    def _prepare(self, value: date | time | int | float) -> date | time:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = datetime.fromtimestamp(value, tz=timezone.utc)
        if self._tzinfo is not None and isinstance(value, datetime) and value.tzinfo is not None:
            value = value.astimezone(self._tzinfo)
        return value

    def format(self, value: date | time | int | float) -> str:
        """
        Format a date, time or datetime.

        Args:
            value: ``date``, ``time``, ``datetime`` or a POSIX timestamp

        Returns:
            Localized string
        """
        value = self._prepare(value)
        options = self._options
        date_style = options["date_style"]
        time_style = options["time_style"]

        if options["skeleton"]:
            return babel_dates.format_skeleton(
                options["skeleton"], value, locale=self.locale
            )

        if date_style and time_style:
            return (
                babel_dates.get_datetime_format(date_style, locale=self.locale)
                .replace("'", "")
                .replace("{0}", babel_dates.format_time(value, time_style, locale=self.locale))
                .replace("{1}", babel_dates.format_date(value, date_style, locale=self.locale))
            )

        if time_style:
            return babel_dates.format_time(value, time_style, locale=self.locale)

        return babel_dates.format_date(value, date_style, locale=self.locale)


class PluralRules(LocaleFormat):
    """Plural category selection."""

    kind = "plural_rules"
    defaults = {"type": "cardinal"}
    choices = {"type": ("cardinal", "ordinal")}

    __slots__ = ("_rule",)

    def __init__(self, locales: Locales, options: FormatOptions | None = None):
        super().__init__(locales, options)
        if self._options["type"] == "ordinal":
            self._rule = self.locale.ordinal_form
        else:
            self._rule = self.locale.plural_form

    def select(self, value: int | float | Decimal) -> str:
        """Return the plural category (``one``, ``few``, ``other``, ...) for ``value``."""
        return self._rule(value)

    def resolved_options(self) -> FormatOptions:
        return {**super().resolved_options(), "plural_categories": sorted(self._rule.tags | {"other"})}


class ListFormat(LocaleFormat):
    """Locale-aware joining of list items."""

    kind = "list"
    defaults = {"type": "conjunction", "style": "long"}
    choices = {
        "type": tuple(_LIST_TYPES),
        "style": ("long", "short", "narrow"),
    }

    __slots__ = ("_babel_style",)

    def __init__(self, locales: Locales, options: FormatOptions | None = None):
        super().__init__(locales, options)
        style = _LIST_TYPES[self._options["type"]]
        if self._options["style"] != "long":
            style = f"{style}-{self._options['style']}"
        if style not in self.locale.list_patterns:
            raise ValueError(f"Locale {self.locale} has no {style} list patterns")
        self._babel_style = style

    def format(self, items: Iterable[Any]) -> str:
        """Join ``items`` into one localized string."""
        return babel_lists.format_list(
            [str(item) for item in items], style=self._babel_style, locale=self.locale
        )


class RelativeTimeFormat(LocaleFormat):
    """Phrases such as "in 3 days" or "2 hours ago"."""

    kind = "relative_time"
    defaults = {"style": "long"}
    choices = {"style": ("long", "short", "narrow")}

    __slots__ = ()

    @staticmethod
    def _normalize_unit(unit: str) -> str:
        normalized = unit[:-1] if unit.endswith("s") else unit
        if normalized not in _SECONDS_PER_UNIT:
            raise ValueError(f"Invalid unit argument for relative time: {unit!r}")
        return normalized

    def format(self, value: int | float, unit: str) -> str:
        """
        Format a relative amount of time.

        Args:
            value: Amount of ``unit``; negative values are in the past
            unit: ``year``, ``month``, ``week``, ``day``, ``hour``, ``minute`` or ``second``

        Returns:
            Localized phrase
        """
        unit = self._normalize_unit(unit)
        # An infinite threshold pins Babel to ``granularity`` instead of
        # letting it pick the largest fitting unit.
        return babel_dates.format_timedelta(
            value * _SECONDS_PER_UNIT[unit],
            granularity=unit,
            threshold=math.inf,
            add_direction=True,
            format=self._options["style"],
            locale=self.locale,
        )


__all__ = [
    "DateTimeFormat",
    "ListFormat",
    "LocaleFormat",
    "NumberFormat",
    "PluralRules",
    "RelativeTimeFormat",
    "resolve_locale",
]

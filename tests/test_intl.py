"""Tests for the IntlModern facade."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from intl_modern.cache import create_intl_cache
from intl_modern.config import IntlConfig
from intl_modern.intl import IntlModern, get_intl
from intl_modern.utils import ERROR_PREFIX, InvariantViolation


@pytest.fixture
def intl(on_error) -> IntlModern:
    return IntlModern(
        locale="en-US",
        formats={
            "number": {"USD": {"style": "currency", "currency": "USD"}},
            "date": {"month_day": {"skeleton": "MMMd"}},
        },
        default_formats={"number": {"whole": {"maximum_fraction_digits": 0}}},
        messages={
            "greeting": "Hello, {name}!",
            "cart": {
                "items": {"count == 0": "No items", "default": "{count} items"},
                "total": "Total: {total, number, USD}",
            },
            "broken": "Hello, {name}!",
        },
        on_error=on_error,
    )


class TestConstruction:
    """Test config and cache wiring."""

    def test_overrides_build_a_config(self, intl) -> None:
        assert intl.locale == "en-US"
        assert intl.config.default_locale == "en"

    def test_config_with_overrides(self) -> None:
        intl = IntlModern(IntlConfig.create(locale="de"), locale="fr")
        assert intl.locale == "fr"

    def test_default_locale(self) -> None:
        assert IntlModern().locale == "en"

    def test_unsupported_locale_falls_back(self, errors, on_error) -> None:
        intl = IntlModern(locale="xx-XX", default_locale="de", on_error=on_error)

        assert intl.locale == "de"
        assert len(errors) == 1
        assert 'Missing locale data for locale: "xx-XX"' in errors[0]

    def test_shared_cache(self) -> None:
        cache = create_intl_cache()
        first = IntlModern(locale="en", cache=cache)
        second = IntlModern(locale="en", cache=cache)

        first.format_number(1)
        second.format_number(2)

        assert first.cache is second.cache is cache
        assert len(cache.number) == 1

    def test_with_locale_starts_a_new_scope(self, intl) -> None:
        intl.format_number(1)
        german = intl.with_locale("de")

        assert german.locale == "de"
        assert german.cache is not intl.cache
        assert german.cache.number == {}
        assert german.format_number(1234.5) == "1.234,5"


class TestFormatNumber:
    """Test number formatting through presets."""

    def test_plain(self, intl) -> None:
        assert intl.format_number(1234.5) == "1,234.5"

    def test_preset(self, intl, errors) -> None:
        assert intl.format_number(3, "USD") == "$3.00"
        assert errors == []

    def test_default_formats_preset(self, intl) -> None:
        assert intl.format_number(2.4, "whole") == "2"

    def test_preset_replaces_default_preset_of_the_same_name(self, on_error) -> None:
        intl = IntlModern(
            locale="en",
            formats={"number": {"money": {"maximum_fraction_digits": 0}}},
            default_formats={
                "number": {
                    "money": {"style": "currency", "currency": "USD"},
                    "pct": {"style": "percent"},
                },
            },
            on_error=on_error,
        )

        assert intl.format_number(3.4, "money") == "3"
        assert intl.format_number(0.5, "pct") == "50%"

    def test_options_win_over_preset(self, intl) -> None:
        assert intl.format_number(3, "USD", currency="EUR") == "€3.00"

    def test_missing_preset_reports_and_formats(self, intl, errors) -> None:
        assert intl.format_number(1, "GBP") == "1"
        assert errors == [f"{ERROR_PREFIX} No number format named: GBP"]

    def test_repeated_calls_reuse_formatters(self, intl) -> None:
        intl.format_number(1, "USD")
        intl.format_number(2, "USD")
        assert len(intl.cache.number) == 1

    def test_error_is_reported_with_fallback(self, intl, errors) -> None:
        assert intl.format_number(5, style="currency") == "5"
        assert len(errors) == 1
        assert errors[0].startswith(f"{ERROR_PREFIX} Error formatting number.")
        assert "Currency code is required" in errors[0]


class TestFormatDateTime:
    """Test date and time formatting."""

    def test_date(self, intl) -> None:
        assert intl.format_date(date(2024, 3, 5)) == "3/5/24"

    def test_date_preset(self, intl) -> None:
        assert intl.format_date(date(2024, 3, 5), "month_day") == "Mar 5"

    def test_time_defaults_to_short(self, intl) -> None:
        result = intl.format_time(datetime(2024, 3, 5, 14, 30))
        assert result.startswith("2:30")

    def test_config_time_zone(self, on_error) -> None:
        intl = IntlModern(locale="de", time_zone="Europe/Berlin", on_error=on_error)
        assert intl.format_time(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)) == "13:00"

    def test_config_time_zone_applies_to_messages(self, on_error) -> None:
        intl = IntlModern(
            locale="en",
            time_zone="Asia/Tokyo",
            messages={"at": "{t, time, short}", "on": "{t, date, medium}"},
            on_error=on_error,
        )
        instant = datetime(2024, 1, 1, 23, 30, tzinfo=timezone.utc)

        assert intl.format_message("at", {"t": instant}) == intl.format_time(instant)
        assert intl.format_message("at", {"t": instant}).startswith("8:30")
        assert intl.format_message("on", {"t": instant}) == "Jan 2, 2024"

    def test_error_is_reported(self, intl, errors) -> None:
        assert intl.format_date("yesterday") == "yesterday"
        assert errors[0].startswith(f"{ERROR_PREFIX} Error formatting date.")


class TestOtherFormatters:
    """Test relative time, plural and list formatting."""

    def test_relative_time(self, intl) -> None:
        assert intl.format_relative_time(-2, "day") == "2 days ago"

    def test_relative_time_error(self, intl, errors) -> None:
        assert intl.format_relative_time(1, "eon") == "1"
        assert len(errors) == 1

    def test_plural(self, intl) -> None:
        assert intl.format_plural(1) == "one"
        assert intl.format_plural(2, type="ordinal") == "two"

    def test_plural_error(self, intl, errors) -> None:
        assert intl.format_plural(1, type="dual") == "other"
        assert len(errors) == 1

    def test_list(self, intl) -> None:
        assert intl.format_list(["a", "b", "c"], type="disjunction") == "a, b, or c"

    def test_list_error(self, intl, errors) -> None:
        assert intl.format_list(iter(["a", "b"]), style="huge") == "a, b"
        assert len(errors) == 1


class TestFormatMessage:
    """Test message lookup and formatting."""

    def test_simple(self, intl) -> None:
        assert intl.format_message("greeting", {"name": "Ada"}) == "Hello, Ada!"

    def test_nested_id_and_condition(self, intl) -> None:
        assert intl.format_message("cart.items", {"count": 0}) == "No items"
        assert intl.format_message("cart.items", {"count": 1200}) == "1,200 items"

    def test_named_format_in_message(self, intl) -> None:
        assert intl.format_message("cart.total", {"total": 9.5}) == "Total: $9.50"

    def test_message_formats_are_cached(self, intl) -> None:
        intl.format_message("greeting", {"name": "Ada"})
        intl.format_message("greeting", {"name": "Grace"})
        assert len(intl.cache.message) == 1

    def test_missing_message(self, intl, errors) -> None:
        assert intl.format_message("nope") == "nope"
        assert errors == [f'{ERROR_PREFIX} Missing message: "nope" for locale: "en-US"']

    def test_missing_value(self, intl, errors) -> None:
        assert intl.format_message("broken", {}) == "broken"
        assert errors[0].startswith(f'{ERROR_PREFIX} Error formatting message: "broken"')

    def test_html_message_escapes_values(self, intl) -> None:
        result = intl.format_html_message("greeting", {"name": "<b>Ada</b>"})
        assert result == "Hello, &lt;b&gt;Ada&lt;/b&gt;!"


class TestGetIntl:
    """Test the context precondition."""

    def test_returns_the_instance(self, intl) -> None:
        assert get_intl(intl) is intl

    def test_missing_instance(self) -> None:
        with pytest.raises(InvariantViolation):
            get_intl(None)

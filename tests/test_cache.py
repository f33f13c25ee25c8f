"""Tests for the cache store, cache ids and constructor memoization."""

from __future__ import annotations

import dataclasses
import gc
import logging
import weakref
from datetime import timezone
from decimal import Decimal

import pytest

from intl_modern.cache import (
    IntlCache,
    MissingFormatterError,
    create_intl_cache,
    get_cache_id,
    memoize_constructor,
)

SUB_CACHES = ("date_time", "number", "message", "relative_time", "plural_rules", "list")


class TestCreateIntlCache:
    """Test the cache store structure."""

    def test_has_one_empty_sub_cache_per_kind(self) -> None:
        cache = create_intl_cache()
        assert tuple(f.name for f in dataclasses.fields(cache)) == SUB_CACHES
        for name in SUB_CACHES:
            assert getattr(cache, name) == {}

    def test_stores_are_independent(self) -> None:
        first = create_intl_cache()
        second = create_intl_cache()
        first.number["key"] = object()

        assert second.number == {}
        for name in SUB_CACHES:
            assert getattr(first, name) is not getattr(second, name)

    def test_sub_cache_set_is_closed(self) -> None:
        cache = create_intl_cache()
        with pytest.raises(AttributeError):
            cache.currency = {}  # type: ignore[attr-defined]

    def test_store_is_plain_data(self) -> None:
        cache = create_intl_cache()
        cache.list["a"] = "b"
        assert dataclasses.asdict(cache)["list"] == {"a": "b"}


class TestGetCacheId:
    """Test cache id derivation."""

    def test_option_order_is_irrelevant(self) -> None:
        assert get_cache_id("en", {"style": "currency", "currency": "USD"}) == get_cache_id(
            "en", {"currency": "USD", "style": "currency"}
        )

    def test_nested_option_order_is_irrelevant(self) -> None:
        assert get_cache_id("en", {"a": {"x": 1, "y": 2}}) == get_cache_id("en", {"a": {"y": 2, "x": 1}})

    def test_different_option_values_differ(self) -> None:
        assert get_cache_id("en", {"currency": "USD"}) != get_cache_id("en", {"currency": "EUR"})

    def test_different_locales_differ(self) -> None:
        assert get_cache_id("en", {}) != get_cache_id("de", {})
        assert get_cache_id(["en", "de"]) != get_cache_id(["de", "en"])

    def test_missing_options_differs_from_extra_option(self) -> None:
        assert get_cache_id("en") != get_cache_id("en", {"style": "percent"})

    def test_keyword_arguments(self) -> None:
        assert get_cache_id("en", a=1, b=2) == get_cache_id("en", b=2, a=1)
        assert get_cache_id("en", style="x") != get_cache_id("en", {"style": "x"})

    def test_type_is_part_of_the_id(self) -> None:
        assert get_cache_id("en", {"digits": 1}) != get_cache_id("en", {"digits": "1"})
        assert get_cache_id(Decimal("1")) != get_cache_id("1")

    def test_key_type_is_part_of_the_id(self) -> None:
        assert get_cache_id("en", {1: "x"}) != get_cache_id("en", {"1": "x"})
        assert get_cache_id("en", {True: "x"}) != get_cache_id("en", {1: "x"})

    def test_mixed_key_types(self) -> None:
        assert get_cache_id("en", {1: "x", "a": "y"}) == get_cache_id("en", {"a": "y", 1: "x"})
        assert get_cache_id("en", {1: "x", "a": "y"}) != get_cache_id("en", {"1": "x", "a": "y"})

    def test_mixed_key_types_reach_the_constructor(self, recording_formatter) -> None:
        get_formatter = memoize_constructor(recording_formatter, {}, "number")
        options = {1: "x", "a": "y"}

        instance = get_formatter("en", options)

        assert instance.args == ("en", options)
        assert get_formatter("en", {"a": "y", 1: "x"}) is instance

    def test_non_json_values(self) -> None:
        assert get_cache_id({"tz": timezone.utc}) == get_cache_id({"tz": timezone.utc})
        assert get_cache_id({"tags": {"b", "a"}}) == get_cache_id({"tags": {"a", "b"}})


class TestMemoizeConstructor:
    """Test get-or-create behavior."""

    def test_same_arguments_return_same_instance(self, recording_formatter) -> None:
        get_formatter = memoize_constructor(recording_formatter, {}, "number")

        first = get_formatter("en", {"style": "percent", "use_grouping": False})
        second = get_formatter("en", {"use_grouping": False, "style": "percent"})

        assert first is second
        assert len(recording_formatter.instances) == 1

    def test_different_arguments_get_separate_slots(self, recording_formatter) -> None:
        sub_cache: dict = {}
        get_formatter = memoize_constructor(recording_formatter, sub_cache, "number")

        first = get_formatter("en", {"currency": "USD"})
        second = get_formatter("en", {"currency": "EUR"})

        assert first is not second
        assert len(sub_cache) == 2

    def test_constructor_receives_original_arguments(self, recording_formatter) -> None:
        options = {"style": "percent"}
        instance = memoize_constructor(recording_formatter, {})("en", options, extra=True)

        assert instance.args == ("en", options)
        assert instance.args[1] is options
        assert instance.kwargs == {"extra": True}

    def test_hit_skips_revalidation(self, recording_formatter) -> None:
        sub_cache: dict = {}
        get_formatter = memoize_constructor(recording_formatter, sub_cache)
        sentinel = object()
        sub_cache[get_cache_id("en")] = sentinel

        assert get_formatter("en") is sentinel
        assert recording_formatter.instances == []

    def test_missing_constructor_fails_at_construction(self) -> None:
        get_formatter = memoize_constructor(None, {}, "list")

        with pytest.raises(MissingFormatterError) as exc_info:
            get_formatter("en")

        assert exc_info.value.kind == "list"
        assert "list" in str(exc_info.value)
        assert isinstance(exc_info.value, TypeError)

    def test_constructor_errors_propagate_and_nothing_is_stored(self) -> None:
        def broken(*args):
            raise ValueError("bad locale")

        sub_cache: dict = {}
        with pytest.raises(ValueError, match="bad locale"):
            memoize_constructor(broken, sub_cache)("xx")
        assert sub_cache == {}

    def test_miss_is_logged(self, recording_formatter, caplog) -> None:
        get_formatter = memoize_constructor(recording_formatter, {}, "number")

        with caplog.at_level(logging.DEBUG, logger="intl_modern.cache"):
            get_formatter("en")
            get_formatter("en")

        misses = [record for record in caplog.records if "Creating number formatter" in record.getMessage()]
        assert len(misses) == 1


class TestStoreLifecycle:
    """Test that dropping a store releases its formatters."""

    def test_dropping_the_store_releases_instances(self, recording_formatter) -> None:
        cache: IntlCache | None = create_intl_cache()
        get_formatter = memoize_constructor(recording_formatter, cache.number)
        ref = weakref.ref(get_formatter("en"))
        recording_formatter.instances = []

        assert ref() is not None
        del cache, get_formatter
        gc.collect()

        assert ref() is None

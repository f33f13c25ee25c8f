"""Shared fixtures for intl_modern tests."""

from __future__ import annotations

from typing import Any

import pytest

from intl_modern.cache import IntlCache, create_intl_cache
from intl_modern.formatters import Formatters, create_formatters


class RecordingFormatter:
    """Stand-in formatter that remembers its construction arguments."""

    instances: list["RecordingFormatter"] = []

    def __init__(self, *args: Any, **kwargs: Any):
        self.args = args
        self.kwargs = kwargs
        RecordingFormatter.instances.append(self)


@pytest.fixture
def recording_formatter() -> type[RecordingFormatter]:
    RecordingFormatter.instances = []
    return RecordingFormatter


@pytest.fixture
def cache() -> IntlCache:
    return create_intl_cache()


@pytest.fixture
def formatters(cache: IntlCache) -> Formatters:
    return create_formatters(cache)


@pytest.fixture
def errors() -> list[str]:
    return []


@pytest.fixture
def on_error(errors: list[str]):
    return errors.append

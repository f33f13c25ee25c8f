"""Locale-aware formatters with an explicit, scope-bound memoization cache."""

from intl_modern.cache import IntlCache, MissingFormatterError, create_intl_cache, get_cache_id, memoize_constructor
from intl_modern.config import DEFAULT_INTL_CONFIG, IntlConfig, load_config_file
from intl_modern.formatters import FormatterKind, Formatters, create_formatters
from intl_modern.intl import IntlModern, get_intl
from intl_modern.message import MessageFormat
from intl_modern.primitives import DateTimeFormat, ListFormat, NumberFormat, PluralRules, RelativeTimeFormat
from intl_modern.utils import (
    InvariantViolation,
    create_error,
    default_error_handler,
    escape,
    filter_props,
    get_named_format,
    invariant_intl_context,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_INTL_CONFIG",
    "DateTimeFormat",
    "FormatterKind",
    "Formatters",
    "IntlCache",
    "IntlConfig",
    "IntlModern",
    "InvariantViolation",
    "ListFormat",
    "MessageFormat",
    "MissingFormatterError",
    "NumberFormat",
    "PluralRules",
    "RelativeTimeFormat",
    "create_error",
    "create_formatters",
    "create_intl_cache",
    "default_error_handler",
    "escape",
    "filter_props",
    "get_cache_id",
    "get_intl",
    "get_named_format",
    "invariant_intl_context",
    "load_config_file",
    "memoize_constructor",
]

"""
Configuration for :class:`~intl_modern.intl.IntlModern`.

Configuration is always passed explicitly; nothing in the formatter cache reads
:data:`DEFAULT_INTL_CONFIG` on its own.
"""
import copy
import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

from intl_modern.types import CustomFormats, MessageDict, OnErrorFn
from intl_modern.utils import default_error_handler, filter_props

try:
    import yaml
except ImportError:
    yaml = None

try:
    import tomli
except ImportError:
    tomli = None


DEFAULT_INTL_CONFIG = MappingProxyType({
    "formats": {},
    "messages": {},
    "time_zone": None,
    "default_locale": "en",
    "default_formats": {},
    "on_error": default_error_handler,
})


@dataclass
class IntlConfig:
    """
    Settings shared by everything formatting for one locale.

    Args:
        locale: Requested locale; ``default_locale`` is used when None
        time_zone: IANA time zone applied to dates and times
        formats: Named format presets, kind -> name -> options
        messages: Message table, addressed by dot separated ids
        default_locale: Fallback locale
        default_formats: Presets consulted when ``formats`` has no match
        on_error: Diagnostic callback
    """

    locale: str | None = None
    time_zone: str | None = None
    formats: CustomFormats = field(default_factory=dict)
    messages: MessageDict = field(default_factory=dict)
    default_locale: str = "en"
    default_formats: CustomFormats = field(default_factory=dict)
    on_error: OnErrorFn = default_error_handler

    @property
    def effective_locale(self) -> str:
        return self.locale or self.default_locale

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def create(cls, **overrides: Any) -> "IntlConfig":
        """
        Build a config from ``overrides`` merged onto :data:`DEFAULT_INTL_CONFIG`.

        Raises:
            TypeError: If an override is not a config field
        """
        names = cls.field_names()
        unknown = sorted(set(overrides) - set(names))
        if unknown:
            raise TypeError(f"Unknown configuration options: {', '.join(unknown)}")

        defaults = {key: copy.deepcopy(value) for key, value in DEFAULT_INTL_CONFIG.items()}
        return cls(**filter_props(overrides, names, defaults))

    @classmethod
    def from_file(cls, file_path: str | Path, **overrides: Any) -> "IntlConfig":
        """
        Load a config from a JSON, YAML or TOML file.

        Args:
            file_path: Path to the config file
            **overrides: Values that win over the file's (``on_error`` goes here)
        """
        data = load_config_file(file_path)
        allowed = set(cls.field_names()) - {"on_error"}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ValueError(f"Unknown configuration keys in {file_path}: {', '.join(unknown)}")
        return cls.create(**{**data, **overrides})


def load_config_file(file_path: str | Path) -> dict[str, Any]:
    """
    Read a configuration document from a file (JSON, YAML, or TOML).

    Args:
        file_path: Path to the file

    Returns:
        Top-level mapping of the document
    """
    path: Path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    suffix: str = path.suffix.lower()

    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    elif suffix in [".yaml", ".yml"]:
        if yaml is None:
            raise ImportError("PyYAML is required for YAML support. Install with: pip install pyyaml")
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)  # type: ignore
    elif suffix == ".toml":
        if tomli is None:
            raise ImportError("tomli is required for TOML support. Install with: pip install tomli")
        with open(path, "rb") as f:
            data = tomli.load(f)  # type: ignore
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Supported formats: .json, .yaml, .yml, .toml")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping at the top level: {file_path}")
    return cast(dict[str, Any], data)


__all__ = ["DEFAULT_INTL_CONFIG", "IntlConfig", "load_config_file"]

"""Generator configuration.

Configuration is read from the [preferencer] table of preferencer.toml, or
from [tool.preferencer] in pyproject.toml:

```toml
[preferencer]
naming = "snake"                      # or "camel"
runtime_module = "preferencer.runtime"
class_suffix = "Impl"
header = "Generated by preferencer. Do not edit."

# Extra value types, on top of bool/int/float/str/set[str]
[preferencer.types."list[str]"]
get = "get_str_list"
put = "put_str_list"
default = "None"
```

Usage:
    from preferencer.config import load_config

    config = load_config(Path("preferencer.toml"))
    generator = PreferenceGenerator(config=config)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from preferencer.errors import ConfigError
from preferencer.gen.assembler import DEFAULT_RUNTIME_MODULE
from preferencer.gen.render import DEFAULT_HEADER
from preferencer.naming import NAMING_STYLES, NamingConvention, get_naming
from preferencer.resolver import PreferenceResolver, StorageMethod

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "preferencer.toml"
PYPROJECT_FILENAME = "pyproject.toml"


@dataclass
class PreferencerConfig:
    """Settings shared by every generated class."""

    naming: str = "snake"
    runtime_module: str = DEFAULT_RUNTIME_MODULE
    class_suffix: str = "Impl"
    header: str = DEFAULT_HEADER
    types: dict[str, StorageMethod] = field(default_factory=dict)

    def build_resolver(self) -> PreferenceResolver:
        """Default resolver plus the configured extra types."""
        resolver = PreferenceResolver()
        for value_type, method in self.types.items():
            resolver.register(value_type, method)
        return resolver

    def build_naming(self) -> NamingConvention:
        return get_naming(self.naming)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (for TOML serialization)."""
        return {
            "naming": self.naming,
            "runtime_module": self.runtime_module,
            "class_suffix": self.class_suffix,
            "header": self.header,
            "types": {
                name: {"get": m.get, "put": m.put, "default": m.default_value}
                for name, m in self.types.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> PreferencerConfig:
        """Create from dictionary (from TOML)."""
        config = cls()

        if "naming" in data:
            if data["naming"] not in NAMING_STYLES:
                raise ConfigError(f"Unknown naming style {data['naming']!r}", path)
            config.naming = data["naming"]
        if "runtime_module" in data:
            config.runtime_module = data["runtime_module"]
        if "class_suffix" in data:
            config.class_suffix = data["class_suffix"]
        if "header" in data:
            config.header = data["header"]

        for value_type, method in data.get("types", {}).items():
            try:
                config.types[value_type] = StorageMethod(
                    get=method["get"],
                    put=method["put"],
                    default_value=method.get("default", "None"),
                )
            except (KeyError, TypeError, AttributeError) as e:
                raise ConfigError(
                    f"Invalid storage method for type {value_type!r}: {e}", path
                ) from e

        return config


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}", path) from e


def load_config(path: Path) -> PreferencerConfig:
    """Load configuration from a TOML file.

    Looks for a [preferencer] table, then [tool.preferencer]. A missing
    file or table yields the defaults.

    Args:
        path: preferencer.toml or pyproject.toml

    Returns:
        PreferencerConfig

    Raises:
        ConfigError: If the file is not valid TOML or a setting is invalid
    """
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return PreferencerConfig()

    data = _load_toml(path)
    section = data.get("preferencer")
    if section is None:
        section = data.get("tool", {}).get("preferencer")
    if section is None:
        return PreferencerConfig()

    return PreferencerConfig.from_dict(section, path)


def find_config(start: Path) -> Path | None:
    """Find preferencer.toml, or a pyproject.toml with [tool.preferencer].

    Searches `start` and its parents.
    """
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.exists() and "preferencer" in _load_toml(pyproject).get("tool", {}):
            return pyproject
    return None


__all__ = [
    "CONFIG_FILENAME",
    "PreferencerConfig",
    "find_config",
    "load_config",
]

"""Naming conventions for generated mutators and parameters.

The generator never hard-codes a naming style. It asks a NamingConvention
for the suffix appended to "set"/"remove" and for the parameter name of a
setter:

    snake: set + method_suffix("userName") -> "set_user_name"
    camel: set + method_suffix("userName") -> "setUserName"
"""

from __future__ import annotations

import keyword
import re
from typing import Protocol, runtime_checkable

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")
_SEPARATORS = re.compile(r"[\s\-.]+")


@runtime_checkable
class NamingConvention(Protocol):
    """Derives generated names from a preference name."""

    def method_suffix(self, name: str) -> str:
        """Suffix appended to a mutator prefix such as "set"."""
        ...

    def variable_name(self, name: str) -> str:
        """Parameter name holding the preference value."""
        ...


def to_snake_case(name: str) -> str:
    """Convert camelCase, PascalCase or dashed names to snake_case."""
    name = _SEPARATORS.sub("_", name.strip())
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return name.lower().strip("_")


def _safe_identifier(name: str) -> str:
    if keyword.iskeyword(name) or name == "self":
        return f"{name}_"
    return name


class SnakeCaseNaming:
    """PEP 8 names: set_user_name(user_name)."""

    name = "snake"

    def method_suffix(self, name: str) -> str:
        return f"_{to_snake_case(name)}"

    def variable_name(self, name: str) -> str:
        return _safe_identifier(to_snake_case(name))


class CamelCaseNaming:
    """Bean-style names: setUserName(userName)."""

    name = "camel"

    def method_suffix(self, name: str) -> str:
        return name[:1].upper() + name[1:]

    def variable_name(self, name: str) -> str:
        return _safe_identifier(name[:1].lower() + name[1:])


NAMING_STYLES: dict[str, type[SnakeCaseNaming] | type[CamelCaseNaming]] = {
    "snake": SnakeCaseNaming,
    "camel": CamelCaseNaming,
}


def get_naming(style: str) -> NamingConvention:
    """Get a naming convention by style name.

    Raises:
        KeyError: If the style is unknown
    """
    try:
        return NAMING_STYLES[style]()
    except KeyError:
        available = ", ".join(sorted(NAMING_STYLES))
        raise KeyError(f"Unknown naming style {style!r} (available: {available})") from None


__all__ = [
    "NAMING_STYLES",
    "CamelCaseNaming",
    "NamingConvention",
    "SnakeCaseNaming",
    "get_naming",
    "to_snake_case",
]

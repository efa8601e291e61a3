"""Mapping from preference value types to store operations.

Each supported value type resolves to a StorageMethod: the name of the
typed read on the store, the name of the typed write on an editor, and the
canonical default expression used when a preference declares none.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class StorageMethod:
    """Store operations for one value type."""

    get: str
    put: str
    default_value: str


DEFAULT_METHODS: dict[str, StorageMethod] = {
    "bool": StorageMethod("get_bool", "put_bool", "False"),
    "int": StorageMethod("get_int", "put_int", "0"),
    "float": StorageMethod("get_float", "put_float", "0.0"),
    "str": StorageMethod("get_str", "put_str", "None"),
    "set[str]": StorageMethod("get_str_set", "put_str_set", "None"),
}


def normalize_type(value_type: str) -> str:
    """Normalize a type expression for lookup ("set[ str ]" -> "set[str]")."""
    return _WHITESPACE.sub("", value_type)


class PreferenceResolver:
    """Lookup table from value type to StorageMethod.

    Usage:
        resolver = PreferenceResolver()
        resolver.resolve("int")   # StorageMethod("get_int", "put_int", "0")
        resolver.resolve("bytes") # None

        resolver.register("list[str]", StorageMethod("get_list", "put_list", "None"))
    """

    def __init__(self, methods: Mapping[str, StorageMethod] | None = None) -> None:
        source = DEFAULT_METHODS if methods is None else methods
        self._methods = {normalize_type(k): v for k, v in source.items()}

    def resolve(self, value_type: str) -> StorageMethod | None:
        """Resolve a value type, or None if the store cannot hold it."""
        return self._methods.get(normalize_type(value_type))

    def register(self, value_type: str, method: StorageMethod) -> None:
        """Add or replace the storage method for a value type."""
        self._methods[normalize_type(value_type)] = method

    def supported_types(self) -> list[str]:
        return sorted(self._methods)


__all__ = [
    "DEFAULT_METHODS",
    "PreferenceResolver",
    "StorageMethod",
    "normalize_type",
]

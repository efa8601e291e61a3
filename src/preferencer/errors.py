"""Exceptions raised by preferencer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from preferencer.model import SourceLocation


class PreferencerError(Exception):
    """Base class for all preferencer errors."""


class ModelError(PreferencerError):
    """Raised when a preference model breaks one of its invariants."""

    def __init__(self, message: str, location: SourceLocation | None = None) -> None:
        if location is not None:
            message = f"{location}: {message}"
        super().__init__(message)
        self.location = location


class UnsupportedTypeError(PreferencerError):
    """Raised when a preference's value type has no storage method.

    Fatal for the generation of the declaring class only.
    """

    def __init__(
        self,
        value_type: str,
        class_name: str,
        location: SourceLocation | None = None,
    ) -> None:
        message = f"Type {value_type} not supported by the preference store (in {class_name})"
        if location is not None:
            message = f"{location}: {message}"
        super().__init__(message)
        self.value_type = value_type
        self.class_name = class_name
        self.location = location


class ConfigError(PreferencerError):
    """Raised when a configuration file cannot be used."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


__all__ = [
    "ConfigError",
    "ModelError",
    "PreferencerError",
    "UnsupportedTypeError",
]

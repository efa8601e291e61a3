"""Declaring class for the basic usage example."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class UserSettings(ABC):
    """Settings of the signed-in user."""

    @abstractmethod
    def get_age(self) -> int: ...

    @abstractmethod
    def get_token(self) -> str: ...

    @abstractmethod
    def is_dark_mode(self) -> bool: ...

    @abstractmethod
    def get_tags(self) -> set[str]: ...

    def on_created(self, context: Any) -> None:
        print(f"UserSettings ready (default store: {context.default_store_name})")

"""Shared fixtures for preferencer tests."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from types import ModuleType

import pytest

from preferencer.model import (
    GeneratedMethod,
    MethodCapability,
    PostConstructHook,
    Preference,
    PreferenceClass,
    TypeRef,
)

SOURCE_MODULE = "usersettings_src"

SOURCE_CODE = '''
from abc import ABC, abstractmethod


class UserSettings(ABC):
    created = 0

    @abstractmethod
    def get_age(self) -> int: ...

    @abstractmethod
    def get_token(self) -> str: ...

    @abstractmethod
    def is_enabled(self) -> bool: ...

    @abstractmethod
    def get_tags(self) -> set[str]: ...

    def on_created(self, context):
        type(self).created += 1
        self.context = context
'''


def make_preference(
    name: str,
    value_type: str = "int",
    *,
    getter: str | None = None,
    key: str | None = None,
    default: str = "",
    setter: GeneratedMethod | None = None,
    remover: GeneratedMethod | None = None,
) -> Preference:
    return Preference(
        name=name,
        value_type=value_type,
        accessor=MethodCapability(getter or f"get_{name}"),
        key=key,
        default_value=default,
        setter=setter or GeneratedMethod.canonical(),
        remover=remover or GeneratedMethod.skip(),
    )


@pytest.fixture
def preference_factory():
    """Factory for Preference models with canonical setters."""
    return make_preference


@pytest.fixture
def user_settings() -> PreferenceClass:
    """Model matching SOURCE_CODE's UserSettings."""
    return PreferenceClass(
        source=TypeRef(SOURCE_MODULE, "UserSettings"),
        name="UserSettingsImpl",
        preferences=(
            make_preference("age"),
            make_preference("token", "str", default='"abc"', remover=GeneratedMethod.canonical()),
            make_preference(
                "enabled",
                "bool",
                getter="is_enabled",
                setter=GeneratedMethod.override(MethodCapability("enable")),
            ),
            make_preference("tags", "set[str]", remover=GeneratedMethod.canonical()),
        ),
        post_construct=PostConstructHook("on_created", injects_context=True),
    )


@pytest.fixture
def load_generated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Write modules to a temporary directory and import the last one.

    Usage:
        module = load_generated("settings_impl", generated_source)
    """
    monkeypatch.syspath_prepend(str(tmp_path))

    def load(module_name: str, source: str, extra: dict[str, str] | None = None) -> ModuleType:
        modules = {SOURCE_MODULE: SOURCE_CODE, **(extra or {}), module_name: source}
        for name, text in modules.items():
            (tmp_path / f"{name}.py").write_text(text, encoding="utf-8")
            monkeypatch.delitem(sys.modules, name, raising=False)
        importlib.invalidate_caches()
        return importlib.import_module(module_name)

    return load

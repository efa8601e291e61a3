"""Input model for preference class generation.

A PreferenceClass describes one declaring type (an abstract base class or a
Protocol) together with the ordered preferences it exposes. Models are
built upstream, either in code or by `preferencer.loader` from a TOML
description, and are consumed once by the generator.

Usage:
    from preferencer.model import (
        GeneratedMethod,
        MethodCapability,
        Preference,
        PreferenceClass,
        TypeRef,
    )

    clazz = PreferenceClass(
        source=TypeRef.parse("myapp.settings:UserSettings"),
        name="UserSettingsImpl",
        preferences=[
            Preference(
                name="age",
                value_type="int",
                accessor=MethodCapability("get_age"),
                setter=GeneratedMethod.canonical(),
            ),
        ],
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from preferencer.errors import ModelError


class Visibility(Enum):
    """Visibility of a declared or generated method."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


@dataclass(frozen=True)
class SourceLocation:
    """Where a declaration came from, for diagnostics."""

    file: Path | None = None
    line: int | None = None

    def __str__(self) -> str:
        if self.file is None:
            return f"<unknown>:{self.line}" if self.line is not None else "<unknown>"
        if self.line is None:
            return str(self.file)
        return f"{self.file}:{self.line}"


@dataclass(frozen=True)
class TypeRef:
    """Reference to a Python type by module and name."""

    module: str
    name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}"

    @classmethod
    def parse(cls, text: str) -> TypeRef:
        """Parse "pkg.mod:Name" or "pkg.mod.Name"."""
        text = text.strip()
        if ":" in text:
            module, _, name = text.partition(":")
        else:
            module, _, name = text.rpartition(".")
        if not name or not name.isidentifier():
            raise ModelError(f"Invalid type reference: {text!r}")
        if not module:
            raise ModelError(f"Type reference {text!r} needs a module to import from")
        return cls(module=module, name=name)

    def __str__(self) -> str:
        return self.qualified_name


@dataclass(frozen=True)
class MethodCapability:
    """A user-declared method, described as plain data.

    Generated methods reuse `source_name`, `visibility` and `is_override`.
    `is_abstract` is recorded for completeness and never carried over.
    """

    source_name: str
    visibility: Visibility = Visibility.PUBLIC
    is_override: bool = True
    is_abstract: bool = False


@dataclass(frozen=True)
class GeneratedMethod:
    """Whether a mutator is generated, and an optional declared override."""

    should_generate: bool = False
    declared: MethodCapability | None = None

    def __post_init__(self) -> None:
        if self.declared is not None and not self.should_generate:
            raise ModelError(
                f"Method {self.declared.source_name!r} is declared but generation is disabled"
            )

    @classmethod
    def skip(cls) -> GeneratedMethod:
        return cls(should_generate=False)

    @classmethod
    def canonical(cls) -> GeneratedMethod:
        """Generate with the derived name and public visibility."""
        return cls(should_generate=True)

    @classmethod
    def override(cls, declared: MethodCapability) -> GeneratedMethod:
        """Generate using the name and visibility of a declared method."""
        return cls(should_generate=True, declared=declared)


@dataclass(frozen=True)
class PostConstructHook:
    """Method invoked at the end of the generated constructor."""

    method_name: str
    injects_context: bool = False


@dataclass(frozen=True)
class Preference:
    """One declared persistent property.

    Attributes:
        name: Property name, used to derive mutator and parameter names
        value_type: Python type expression (e.g. "int", "set[str]")
        accessor: The declaring getter
        key: Storage key (defaults to `name`)
        default_value: Python expression used when the key is absent;
            empty means the resolver's canonical default
        setter: Setter generation descriptor
        remover: Remover generation descriptor
        location: Declaration site
    """

    name: str
    value_type: str
    accessor: MethodCapability
    key: str | None = None
    default_value: str = ""
    setter: GeneratedMethod = field(default_factory=GeneratedMethod)
    remover: GeneratedMethod = field(default_factory=GeneratedMethod)
    location: SourceLocation | None = None

    @property
    def key_name(self) -> str:
        return self.key or self.name


@dataclass(frozen=True)
class PreferenceClass:
    """A declaring type and the preferences it exposes.

    Attributes:
        source: The declaring type the generated class extends
        name: Name of the generated class
        preferences: Preferences in declaration order (non-empty)
        is_interface: Declaring type is a Protocol rather than a base class
        use_default_store: Acquire the context's default store
        store_name: Named store to acquire when `use_default_store` is false
        post_construct: Hook called at the end of the constructor
        location: Declaration site
    """

    source: TypeRef
    name: str
    preferences: tuple[Preference, ...]
    is_interface: bool = False
    use_default_store: bool = True
    store_name: str | None = None
    post_construct: PostConstructHook | None = None
    location: SourceLocation | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "preferences", tuple(self.preferences))
        if not self.source.module:
            raise ModelError(
                f"{self.name} extends {self.source.name!r}, which has no module", self.location
            )
        if not self.preferences:
            raise ModelError(f"{self.name} declares no preferences", self.location)
        if self.use_default_store and self.store_name is not None:
            raise ModelError(
                f"{self.name} uses the default store but names store {self.store_name!r}",
                self.location,
            )
        if not self.use_default_store and not self.store_name:
            raise ModelError(f"{self.name} needs a store name", self.location)


__all__ = [
    "GeneratedMethod",
    "MethodCapability",
    "PostConstructHook",
    "Preference",
    "PreferenceClass",
    "SourceLocation",
    "TypeRef",
    "Visibility",
]

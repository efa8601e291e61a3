"""Assembly of complete generated types.

The assembler drives the accessor, lifecycle and transaction synthesizers
in a fixed order and attaches type-level metadata:

    fields -> get_instance -> per-preference methods -> __init__ -> clear
    -> begin_transaction -> Transaction -> bases, docstring, imports

Usage:
    from preferencer.gen import PreferenceGenerator

    generator = PreferenceGenerator()
    type_spec = generator.generate(clazz)

    # Several classes; failures become diagnostics instead of exceptions
    report = generator.generate_all(classes)
    for diagnostic in report.errors:
        print(diagnostic)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from preferencer.errors import ModelError, UnsupportedTypeError
from preferencer.gen.accessors import generate_preference_methods, resolve_preferences
from preferencer.gen.lifecycle import generate_clear, generate_constructor, generate_get_instance
from preferencer.gen.structure import (
    FIELD_CURRENT_TRANSACTION,
    FIELD_INSTANCE,
    FIELD_LOCK,
    FIELD_STORE,
    TRANSACTION_TYPE,
    FieldSpec,
    ImportSpec,
    MethodSpec,
    TypeSpec,
)
from preferencer.gen.transaction import generate_begin_transaction, generate_transaction_type
from preferencer.naming import SnakeCaseNaming
from preferencer.resolver import PreferenceResolver

if TYPE_CHECKING:
    from preferencer.config import PreferencerConfig
    from preferencer.model import PreferenceClass, SourceLocation
    from preferencer.naming import NamingConvention

logger = logging.getLogger(__name__)

DEFAULT_RUNTIME_MODULE = "preferencer.runtime"

_STDLIB_SECTION = 0
_SOURCE_SECTION = 1
_RUNTIME_SECTION = 2


class Severity(Enum):
    """Severity of a generation diagnostic."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A problem attributed to one preference class."""

    message: str
    class_name: str
    severity: Severity = Severity.ERROR
    location: SourceLocation | None = None

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.message}"


@dataclass
class GenerationReport:
    """Outcome of generating a batch of classes."""

    types: list[TypeSpec] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def ok(self) -> bool:
        return not self.errors


def generate_default_fields(owner_name: str) -> tuple[FieldSpec, ...]:
    return (
        FieldSpec(FIELD_INSTANCE, f"{owner_name} | None", is_static=True, initializer="None"),
        FieldSpec(FIELD_LOCK, "threading.Lock", is_static=True, initializer="threading.Lock()"),
        FieldSpec(FIELD_STORE, "Store"),
        FieldSpec(
            FIELD_CURRENT_TRANSACTION,
            f"{owner_name}.{TRANSACTION_TYPE} | None",
            initializer="None",
        ),
    )


def generate_imports(clazz: PreferenceClass, runtime_module: str) -> tuple[ImportSpec, ...]:
    """Imports the generated module needs, grouped stdlib, source, runtime."""
    imports = [
        ImportSpec("threading", section=_STDLIB_SECTION),
        ImportSpec("types", ("TracebackType",), section=_STDLIB_SECTION),
        ImportSpec("typing", ("ClassVar",), section=_STDLIB_SECTION),
    ]
    imports.append(ImportSpec(clazz.source.module, (clazz.source.name,), _SOURCE_SECTION))

    runtime_names = ["Editor", "MissingContextError", "Store", "StoreContext"]
    if clazz.use_default_store:
        runtime_names.append("get_default_store")
    imports.append(ImportSpec(runtime_module, tuple(runtime_names), _RUNTIME_SECTION))
    return tuple(imports)


def _check_unique_names(clazz: PreferenceClass, methods: Iterable[MethodSpec]) -> None:
    seen: set[str] = set()
    for method in methods:
        if method.name in seen:
            raise ModelError(
                f"{clazz.name} would define method {method.name!r} more than once",
                clazz.location,
            )
        seen.add(method.name)


class PreferenceGenerator:
    """Generates accessor types from preference class models.

    The generator holds no per-call state: generating the same model twice
    yields equal TypeSpecs.
    """

    def __init__(
        self,
        resolver: PreferenceResolver | None = None,
        naming: NamingConvention | None = None,
        *,
        config: PreferencerConfig | None = None,
    ) -> None:
        if config is not None:
            resolver = resolver or config.build_resolver()
            naming = naming or config.build_naming()
            self.runtime_module = config.runtime_module
        else:
            self.runtime_module = DEFAULT_RUNTIME_MODULE
        self.resolver = resolver or PreferenceResolver()
        self.naming = naming or SnakeCaseNaming()

    def generate(self, clazz: PreferenceClass) -> TypeSpec:
        """Generate the accessor type for one class.

        Raises:
            UnsupportedTypeError: If any preference has an unsupported type;
                nothing is generated for the class in that case
            ModelError: If two generated methods share a name (a preference
                named "instance" gets the getter get_instance, for example)
        """
        resolved = resolve_preferences(clazz, self.resolver)
        owner = clazz.name

        methods = (
            generate_get_instance(clazz),
            *generate_preference_methods(resolved, self.naming),
            generate_constructor(clazz),
            generate_clear(),
            generate_begin_transaction(owner),
        )
        _check_unique_names(clazz, methods)

        if clazz.is_interface:
            superclass, interfaces = None, (clazz.source,)
        else:
            superclass, interfaces = clazz.source, ()

        logger.debug("Generated %s from %s (%d methods)", owner, clazz.source, len(methods))
        return TypeSpec(
            name=owner,
            fields=generate_default_fields(owner),
            methods=methods,
            types=(generate_transaction_type(owner),),
            superclass=superclass,
            interfaces=interfaces,
            docstring=f"Preference accessors for {clazz.source.qualified_name}.",
            imports=generate_imports(clazz, self.runtime_module),
        )

    def generate_all(self, classes: Iterable[PreferenceClass]) -> GenerationReport:
        """Generate every class, collecting failures as diagnostics.

        A class with an unsupported preference type, or whose methods collide
        by name, is skipped; the others are still generated.
        """
        report = GenerationReport()
        for clazz in classes:
            try:
                report.types.append(self.generate(clazz))
            except (UnsupportedTypeError, ModelError) as e:
                logger.error("%s", e)
                report.diagnostics.append(
                    Diagnostic(message=str(e), class_name=clazz.name, location=e.location)
                )
        return report


def generate_type(
    clazz: PreferenceClass,
    resolver: PreferenceResolver | None = None,
    naming: NamingConvention | None = None,
) -> TypeSpec:
    """Generate one accessor type with a fresh PreferenceGenerator."""
    return PreferenceGenerator(resolver, naming).generate(clazz)


__all__ = [
    "DEFAULT_RUNTIME_MODULE",
    "Diagnostic",
    "GenerationReport",
    "PreferenceGenerator",
    "Severity",
    "generate_default_fields",
    "generate_imports",
    "generate_type",
]

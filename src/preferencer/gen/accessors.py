"""Getter, setter and remover synthesis.

Every preference yields a getter, plus a setter and a remover when its
model asks for them. Setters and removers share one control-flow rule:

    transaction = self._current_transaction
    editor = transaction.editor if transaction is not None else self._store.edit()
    editor.<operation>
    if transaction is None:
        editor.apply()

so a direct write applies immediately while a write inside an open
transaction waits for its commit. The current transaction is read once, so
at most one uncommitted editor per instance is ever in play.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from preferencer.errors import UnsupportedTypeError
from preferencer.gen.structure import (
    FIELD_CURRENT_TRANSACTION,
    FIELD_EDITOR,
    FIELD_STORE,
    VAR_EDITOR,
    VAR_TRANSACTION,
    MethodKind,
    MethodSpec,
    ParameterSpec,
)
from preferencer.model import GeneratedMethod, Preference, PreferenceClass, Visibility

if TYPE_CHECKING:
    from preferencer.naming import NamingConvention
    from preferencer.resolver import PreferenceResolver, StorageMethod

logger = logging.getLogger(__name__)

SETTER_PREFIX = "set"
REMOVER_PREFIX = "remove"

_RESERVED_LOCALS = frozenset({VAR_EDITOR, VAR_TRANSACTION})


@dataclass(frozen=True)
class ResolvedPreference:
    """A preference paired with the store operations for its type."""

    preference: Preference
    method: StorageMethod


def resolve_preferences(
    clazz: PreferenceClass, resolver: PreferenceResolver
) -> list[ResolvedPreference]:
    """Resolve the storage method of every preference in a class.

    All types are resolved before anything is synthesized, so an
    unsupported type never leaves a partially generated class behind.

    Raises:
        UnsupportedTypeError: On the first preference whose type the
            resolver does not know
    """
    resolved: list[ResolvedPreference] = []
    for preference in clazz.preferences:
        method = resolver.resolve(preference.value_type)
        if method is None:
            raise UnsupportedTypeError(
                preference.value_type,
                clazz.name,
                preference.location or clazz.location,
            )
        resolved.append(ResolvedPreference(preference, method))
    return resolved


def string_literal(text: str) -> str:
    """Quote text as a Python string literal, double-quoted where possible."""
    literal = repr(text)
    if literal.startswith("'") and '"' not in text:
        return f'"{literal[1:-1]}"'
    return literal


def effective_default(resolved: ResolvedPreference) -> str:
    """The declared default if there is one, else the type's canonical default."""
    return resolved.preference.default_value or resolved.method.default_value


def generate_getter(resolved: ResolvedPreference) -> MethodSpec:
    preference = resolved.preference
    accessor = preference.accessor
    read = (
        f"return self.{FIELD_STORE}.{resolved.method.get}("
        f"{string_literal(preference.key_name)}, {effective_default(resolved)})"
    )
    return MethodSpec(
        name=accessor.source_name,
        kind=MethodKind.GETTER,
        body=(read,),
        returns=preference.value_type,
        visibility=accessor.visibility,
        is_override=accessor.is_override,
    )


def _mutator_identity(
    generated: GeneratedMethod,
    prefix: str,
    preference: Preference,
    naming: NamingConvention,
) -> tuple[str, Visibility, bool]:
    if generated.declared is not None:
        declared = generated.declared
        return declared.source_name, declared.visibility, declared.is_override
    return prefix + naming.method_suffix(preference.name), Visibility.PUBLIC, False


def _edit_lines(operation: str) -> tuple[str, ...]:
    return (
        f"{VAR_TRANSACTION} = self.{FIELD_CURRENT_TRANSACTION}",
        f"{VAR_EDITOR} = {VAR_TRANSACTION}.{FIELD_EDITOR} if {VAR_TRANSACTION} is not None"
        f" else self.{FIELD_STORE}.edit()",
        f"{VAR_EDITOR}.{operation}",
        f"if {VAR_TRANSACTION} is None:",
        f"    {VAR_EDITOR}.apply()",
    )


def parameter_name(preference: Preference, naming: NamingConvention) -> str:
    """Setter parameter name, kept clear of the body's local variables."""
    name = naming.variable_name(preference.name)
    if name in _RESERVED_LOCALS:
        return f"{name}_value"
    return name


def generate_setter(resolved: ResolvedPreference, naming: NamingConvention) -> MethodSpec:
    preference = resolved.preference
    name, visibility, is_override = _mutator_identity(
        preference.setter, SETTER_PREFIX, preference, naming
    )
    parameter = parameter_name(preference, naming)
    write = f"{resolved.method.put}({string_literal(preference.key_name)}, {parameter})"
    return MethodSpec(
        name=name,
        kind=MethodKind.SETTER,
        body=_edit_lines(write),
        parameters=(ParameterSpec(parameter, preference.value_type),),
        visibility=visibility,
        is_override=is_override,
    )


def generate_remover(resolved: ResolvedPreference, naming: NamingConvention) -> MethodSpec:
    preference = resolved.preference
    name, visibility, is_override = _mutator_identity(
        preference.remover, REMOVER_PREFIX, preference, naming
    )
    return MethodSpec(
        name=name,
        kind=MethodKind.REMOVER,
        body=_edit_lines(f"remove({string_literal(preference.key_name)})"),
        visibility=visibility,
        is_override=is_override,
    )


def generate_preference_methods(
    resolved: list[ResolvedPreference], naming: NamingConvention
) -> list[MethodSpec]:
    """Getter/setter/remover groups, in preference declaration order."""
    specs: list[MethodSpec] = []
    for item in resolved:
        specs.append(generate_getter(item))
        if item.preference.setter.should_generate:
            specs.append(generate_setter(item, naming))
        if item.preference.remover.should_generate:
            specs.append(generate_remover(item, naming))
        logger.debug("Generated accessors for preference %s", item.preference.name)
    return specs


__all__ = [
    "REMOVER_PREFIX",
    "SETTER_PREFIX",
    "ResolvedPreference",
    "effective_default",
    "generate_getter",
    "generate_preference_methods",
    "generate_remover",
    "generate_setter",
    "parameter_name",
    "resolve_preferences",
    "string_literal",
]

"""Records describing a generated type.

The synthesizers build these immutable records by plain composition; the
renderer in `preferencer.gen.render` turns them into source text. Method
bodies are tuples of source lines, indented relative to the method body
with four spaces per level.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from preferencer.model import TypeRef, Visibility

# Member names shared by every generated type
FIELD_INSTANCE = "_instance"
FIELD_LOCK = "_lock"
FIELD_STORE = "_store"
FIELD_CURRENT_TRANSACTION = "_current_transaction"
FIELD_EDITOR = "editor"
FIELD_OWNER = "_owner"
VAR_CONTEXT = "context"
VAR_EDITOR = "editor"
VAR_TRANSACTION = "transaction"
TRANSACTION_TYPE = "Transaction"


class MethodKind(Enum):
    """Role of a generated method."""

    GETTER = "getter"
    SETTER = "setter"
    REMOVER = "remover"
    CONSTRUCTOR = "constructor"
    GET_INSTANCE = "get_instance"
    CLEAR = "clear"
    BEGIN_TRANSACTION = "begin_transaction"
    COMMIT = "commit"
    ROLLBACK = "rollback"
    ENTER = "enter"
    EXIT = "exit"


@dataclass(frozen=True)
class ImportSpec:
    """An import of the generated module.

    `names` empty renders as `import module`. Imports render grouped by
    `section`, lowest first.
    """

    module: str
    names: tuple[str, ...] = ()
    section: int = 0


@dataclass(frozen=True)
class FieldSpec:
    """A class attribute of the generated type.

    Attributes:
        name: Attribute name
        type_hint: Annotation, without ClassVar
        is_static: Shared by the class rather than per instance
        initializer: Initial value expression, or None for annotation only
    """

    name: str
    type_hint: str
    is_static: bool = False
    initializer: str | None = None


@dataclass(frozen=True)
class ParameterSpec:
    name: str
    type_hint: str


@dataclass(frozen=True)
class MethodSpec:
    """A generated method.

    Attributes:
        name: Method name
        kind: Role of the method
        body: Source lines of the body
        parameters: Parameters after self (or all of them when static)
        returns: Return annotation
        visibility: Visibility copied from the declaration, or PUBLIC
        is_static: Rendered as a staticmethod
        is_override: Implements a method of the declaring type
        docstring: One-line docstring, empty for none
    """

    name: str
    kind: MethodKind
    body: tuple[str, ...]
    parameters: tuple[ParameterSpec, ...] = ()
    returns: str = "None"
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_override: bool = False
    docstring: str = ""


@dataclass(frozen=True)
class TypeSpec:
    """A generated class.

    Attributes:
        name: Class name
        fields: Class attributes in declaration order
        methods: Methods in declaration order
        types: Nested classes
        superclass: Extended type, when the declaring type is a class
        interfaces: Implemented protocols, when the declaring type is one
        docstring: Class docstring
        imports: Imports the enclosing module needs (top-level types only)
    """

    name: str
    fields: tuple[FieldSpec, ...] = ()
    methods: tuple[MethodSpec, ...] = ()
    types: tuple[TypeSpec, ...] = ()
    superclass: TypeRef | None = None
    interfaces: tuple[TypeRef, ...] = ()
    docstring: str = ""
    imports: tuple[ImportSpec, ...] = ()

    @property
    def bases(self) -> tuple[TypeRef, ...]:
        if self.superclass is None:
            return self.interfaces
        return (self.superclass, *self.interfaces)

    def method(self, name: str) -> MethodSpec | None:
        """Find a method by name."""
        return next((m for m in self.methods if m.name == name), None)

    def nested(self, name: str) -> TypeSpec | None:
        """Find a nested type by name."""
        return next((t for t in self.types if t.name == name), None)


__all__ = [
    "FIELD_CURRENT_TRANSACTION",
    "FIELD_EDITOR",
    "FIELD_INSTANCE",
    "FIELD_LOCK",
    "FIELD_OWNER",
    "FIELD_STORE",
    "TRANSACTION_TYPE",
    "VAR_CONTEXT",
    "VAR_EDITOR",
    "VAR_TRANSACTION",
    "FieldSpec",
    "ImportSpec",
    "MethodKind",
    "MethodSpec",
    "ParameterSpec",
    "TypeSpec",
]

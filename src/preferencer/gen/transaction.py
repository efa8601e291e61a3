"""Transaction synthesis.

Each generated class gets a nested Transaction type wrapping one editor,
and a begin_transaction() method that makes it the instance's current
transaction. While it is current, setters and removers write into its
editor instead of applying immediately.

Generated shape:

    class Transaction:
        editor: Editor

        def __init__(self, owner: UserSettingsImpl) -> None:
            self._owner = owner
            self.editor = owner._store.edit()

        def commit(self) -> None:
            self.editor.apply()
            if self._owner._current_transaction is self:
                self._owner._current_transaction = None
        ...
"""

from __future__ import annotations

from preferencer.gen.structure import (
    FIELD_CURRENT_TRANSACTION,
    FIELD_EDITOR,
    FIELD_OWNER,
    FIELD_STORE,
    TRANSACTION_TYPE,
    FieldSpec,
    MethodKind,
    MethodSpec,
    ParameterSpec,
    TypeSpec,
)
from preferencer.model import Visibility


def _release_lines() -> tuple[str, ...]:
    # A replaced transaction must not detach its successor
    return (
        f"if self.{FIELD_OWNER}.{FIELD_CURRENT_TRANSACTION} is self:",
        f"    self.{FIELD_OWNER}.{FIELD_CURRENT_TRANSACTION} = None",
    )


def generate_transaction_type(owner_name: str) -> TypeSpec:
    """Build the nested Transaction type of `owner_name`."""
    constructor = MethodSpec(
        name="__init__",
        kind=MethodKind.CONSTRUCTOR,
        parameters=(ParameterSpec("owner", owner_name),),
        body=(
            f"self.{FIELD_OWNER} = owner",
            f"self.{FIELD_EDITOR} = owner.{FIELD_STORE}.edit()",
        ),
        visibility=Visibility.PRIVATE,
    )
    commit = MethodSpec(
        name="commit",
        kind=MethodKind.COMMIT,
        body=(f"self.{FIELD_EDITOR}.apply()", *_release_lines()),
        docstring="Apply every edit made while this transaction was open.",
    )
    rollback = MethodSpec(
        name="rollback",
        kind=MethodKind.ROLLBACK,
        body=_release_lines(),
        docstring="Discard the edits made while this transaction was open.",
    )
    enter = MethodSpec(
        name="__enter__",
        kind=MethodKind.ENTER,
        body=("return self",),
        returns=f"{owner_name}.{TRANSACTION_TYPE}",
    )
    exit_ = MethodSpec(
        name="__exit__",
        kind=MethodKind.EXIT,
        parameters=(
            ParameterSpec("exc_type", "type[BaseException] | None"),
            ParameterSpec("exc", "BaseException | None"),
            ParameterSpec("tb", "TracebackType | None"),
        ),
        body=(
            "if exc_type is None:",
            "    self.commit()",
            "else:",
            "    self.rollback()",
        ),
    )
    return TypeSpec(
        name=TRANSACTION_TYPE,
        fields=(
            FieldSpec(FIELD_EDITOR, "Editor"),
            FieldSpec(FIELD_OWNER, owner_name),
        ),
        methods=(constructor, commit, rollback, enter, exit_),
        docstring="Batch of edits applied together on commit.",
    )


def generate_begin_transaction(owner_name: str) -> MethodSpec:
    """Build begin_transaction(); an open transaction is replaced, not reused."""
    return MethodSpec(
        name="begin_transaction",
        kind=MethodKind.BEGIN_TRANSACTION,
        body=(
            f"self.{FIELD_CURRENT_TRANSACTION} = {owner_name}.{TRANSACTION_TYPE}(self)",
            f"return self.{FIELD_CURRENT_TRANSACTION}",
        ),
        returns=f"{owner_name}.{TRANSACTION_TYPE}",
    )


__all__ = ["generate_begin_transaction", "generate_transaction_type"]

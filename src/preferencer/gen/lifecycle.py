"""Constructor, singleton accessor and clear() synthesis."""

from __future__ import annotations

from preferencer.gen.accessors import string_literal
from preferencer.gen.structure import (
    FIELD_INSTANCE,
    FIELD_LOCK,
    FIELD_STORE,
    VAR_CONTEXT,
    MethodKind,
    MethodSpec,
    ParameterSpec,
)
from preferencer.model import PreferenceClass

CONTEXT_TYPE = "StoreContext"
MISSING_CONTEXT_MESSAGE = "Context must not be None"


def generate_constructor(clazz: PreferenceClass) -> MethodSpec:
    """Build __init__(context).

    The context check runs first, then the declaring type's own __init__,
    then store acquisition. The store is the context's default store or the
    named store of the model, and the post-construct hook, if any, runs last.
    """
    body = [
        f"if {VAR_CONTEXT} is None:",
        f"    raise MissingContextError({string_literal(MISSING_CONTEXT_MESSAGE)})",
        "super().__init__()",
    ]
    if clazz.use_default_store:
        body.append(f"self.{FIELD_STORE} = get_default_store({VAR_CONTEXT})")
    else:
        body.append(
            f"self.{FIELD_STORE} = {VAR_CONTEXT}.get_store({string_literal(clazz.store_name)})"
        )

    hook = clazz.post_construct
    if hook is not None:
        argument = VAR_CONTEXT if hook.injects_context else ""
        body.append(f"self.{hook.method_name}({argument})")

    return MethodSpec(
        name="__init__",
        kind=MethodKind.CONSTRUCTOR,
        parameters=(ParameterSpec(VAR_CONTEXT, CONTEXT_TYPE),),
        body=tuple(body),
    )


def generate_get_instance(clazz: PreferenceClass) -> MethodSpec:
    """Build the static get_instance(context) with double-checked locking."""
    owner = clazz.name
    instance = f"{owner}.{FIELD_INSTANCE}"
    return MethodSpec(
        name="get_instance",
        kind=MethodKind.GET_INSTANCE,
        parameters=(ParameterSpec(VAR_CONTEXT, CONTEXT_TYPE),),
        body=(
            f"if {instance} is None:",
            f"    with {owner}.{FIELD_LOCK}:",
            f"        if {instance} is None:",
            f"            {instance} = {owner}({VAR_CONTEXT})",
            f"return {instance}",
        ),
        returns=owner,
        is_static=True,
        docstring="Return the process-wide instance, creating it on first use.",
    )


def generate_clear() -> MethodSpec:
    """Build clear(); it applies at once and leaves any open transaction alone."""
    return MethodSpec(
        name="clear",
        kind=MethodKind.CLEAR,
        body=(f"self.{FIELD_STORE}.edit().clear().apply()",),
        docstring="Remove every stored preference.",
    )


__all__ = [
    "CONTEXT_TYPE",
    "MISSING_CONTEXT_MESSAGE",
    "generate_clear",
    "generate_constructor",
    "generate_get_instance",
]

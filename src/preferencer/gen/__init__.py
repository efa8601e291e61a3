"""Accessor class generation from preference models.

This package turns a PreferenceClass into a complete generated type:
- accessors: getters, setters and removers per preference
- transaction: the nested Transaction type and begin_transaction()
- lifecycle: constructor, get_instance() singleton and clear()
- assembler: fixed-order assembly and batch generation
- render: Python source for the generated type
"""

from preferencer.gen.assembler import (
    Diagnostic,
    GenerationReport,
    PreferenceGenerator,
    Severity,
    generate_type,
)
from preferencer.gen.render import PythonRenderer, render_module
from preferencer.gen.structure import (
    FieldSpec,
    ImportSpec,
    MethodKind,
    MethodSpec,
    ParameterSpec,
    TypeSpec,
)

__all__ = [
    "Diagnostic",
    "FieldSpec",
    "GenerationReport",
    "ImportSpec",
    "MethodKind",
    "MethodSpec",
    "ParameterSpec",
    "PreferenceGenerator",
    "PythonRenderer",
    "Severity",
    "TypeSpec",
    "generate_type",
    "render_module",
]

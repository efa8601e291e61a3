"""Python source rendering of generated types.

Turns TypeSpec records into module source. Rendering is deterministic:
equal TypeSpecs always produce identical text.

Usage:
    from preferencer.gen.render import render_module

    source = render_module(type_spec)
    # or several classes in one module, with merged imports
    source = render_module([first, second])
"""

from __future__ import annotations

from collections.abc import Sequence

from preferencer.gen.structure import FieldSpec, ImportSpec, MethodSpec, TypeSpec

DEFAULT_HEADER = "Generated by preferencer. Do not edit."
MAX_LINE_LENGTH = 99

_INDENT = " " * 4


def _merge_imports(imports: Sequence[ImportSpec]) -> dict[int, dict[str, set[str]]]:
    sections: dict[int, dict[str, set[str]]] = {}
    for spec in imports:
        modules = sections.setdefault(spec.section, {})
        modules.setdefault(spec.module, set()).update(spec.names)
    return sections


def _render_from_import(module: str, names: set[str]) -> list[str]:
    ordered = sorted(names)
    line = f"from {module} import {', '.join(ordered)}"
    if len(line) <= MAX_LINE_LENGTH:
        return [line]
    return [f"from {module} import (", *(f"{_INDENT}{name}," for name in ordered), ")"]


def render_imports(imports: Sequence[ImportSpec]) -> list[str]:
    """Render imports grouped by section, bare imports before from-imports."""
    lines: list[str] = []
    merged = _merge_imports(imports)
    for section in sorted(merged):
        modules = merged[section]
        if lines:
            lines.append("")
        bare = sorted(module for module, names in modules.items() if not names)
        lines.extend(f"import {module}" for module in bare)
        for module in sorted(m for m, names in modules.items() if names):
            lines.extend(_render_from_import(module, modules[module]))
    return lines


class PythonRenderer:
    """Renders TypeSpecs as Python classes."""

    def __init__(self, header: str = DEFAULT_HEADER) -> None:
        self.header = header

    def render_field(self, spec: FieldSpec) -> str:
        hint = f"ClassVar[{spec.type_hint}]" if spec.is_static else spec.type_hint
        if spec.initializer is None:
            return f"{spec.name}: {hint}"
        return f"{spec.name}: {hint} = {spec.initializer}"

    def render_method(self, spec: MethodSpec) -> list[str]:
        params = [f"{p.name}: {p.type_hint}" for p in spec.parameters]
        if not spec.is_static:
            params.insert(0, "self")

        lines: list[str] = []
        if spec.is_static:
            lines.append("@staticmethod")
        lines.append(f"def {spec.name}({', '.join(params)}) -> {spec.returns}:")
        if spec.docstring:
            lines.append(f'{_INDENT}"""{spec.docstring}"""')
        body = spec.body or ("pass",)
        lines.extend(f"{_INDENT}{line}" for line in body)
        return lines

    def render_type(self, spec: TypeSpec) -> list[str]:
        """Render a class and its nested types, without imports."""
        bases = ", ".join(base.name for base in spec.bases)
        lines = [f"class {spec.name}({bases}):" if bases else f"class {spec.name}:"]

        members: list[list[str]] = []
        if spec.docstring:
            members.append([f'"""{spec.docstring}"""'])
        if spec.fields:
            members.append([self.render_field(f) for f in spec.fields])
        members.extend(self.render_method(m) for m in spec.methods)
        members.extend(self.render_type(t) for t in spec.types)
        if not members:
            members.append(["pass"])

        for index, block in enumerate(members):
            if index:
                lines.append("")
            lines.extend(f"{_INDENT}{line}" if line else "" for line in block)
        return lines

    def render_module(self, specs: TypeSpec | Sequence[TypeSpec]) -> str:
        """Render one or more top-level types as a complete module."""
        if isinstance(specs, TypeSpec):
            specs = [specs]

        lines = [f"# {self.header}", "", "from __future__ import annotations"]
        imports = render_imports([i for spec in specs for i in spec.imports])
        if imports:
            lines.append("")
            lines.extend(imports)
        for spec in specs:
            lines.extend(["", ""])
            lines.extend(self.render_type(spec))
        return "\n".join(lines) + "\n"


def render_module(specs: TypeSpec | Sequence[TypeSpec], header: str = DEFAULT_HEADER) -> str:
    """Render types as a module with the default renderer."""
    return PythonRenderer(header).render_module(specs)


__all__ = [
    "DEFAULT_HEADER",
    "PythonRenderer",
    "render_imports",
    "render_module",
]

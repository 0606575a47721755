"""Deterministic PlantUML class-diagram generator.

Takes the documented files and produces PlantUML syntax: one block per
type, heritage inline in the block header, association edges after all
blocks. Output is a pure function of the files and the options.
"""

import logging
import os
from typing import List, Sequence

from ..constants import ASSOCIATION_LINE_PALETTE, FUNCTIONS_STEREOTYPE, VISIBILITY_GLYPHS
from ..model import Class, ComponentKind, Enum, File, Interface, Method, Namespace, Parameter, Property, TypeParameter
from .associations import Association, infer_associations
from .filters import apply_filters
from .options import RenderOptions

logger = logging.getLogger(__name__)

_INDENT = "    "


def generate_class_diagram(files: List[File], options: RenderOptions) -> str:
    """Render ``files`` as a PlantUML document.

    Args:
        files: Output of ``generate_documentation``
        options: Filters and association settings

    Returns:
        PlantUML text from ``@startuml`` to ``@enduml``, lines joined by ``\\n``
    """
    files = apply_filters(files, options)

    lines: List[str] = ["@startuml"]
    for file in files:
        lines.extend(_render_parts(file.parts, _file_label(file.name), ""))

    if options.draws_associations:
        associations = infer_associations(files, field_level=options.field_associations)
        lines.extend(_render_associations(associations, options.colored_association_lines))

    lines.append("@enduml")
    return "\n".join(lines)


def _file_label(file_name: str) -> str:
    return os.path.splitext(os.path.basename(file_name))[0]


def _render_parts(parts: Sequence, container_label: str, indent: str) -> List[str]:
    lines: List[str] = []
    functions: List[Method] = []
    for part in parts:
        kind = part.component_kind
        if kind == ComponentKind.CLASS:
            lines.extend(_render_class(part, indent))
        elif kind == ComponentKind.INTERFACE:
            lines.extend(_render_interface(part, indent))
        elif kind == ComponentKind.ENUM:
            lines.extend(_render_enum(part, indent))
        elif kind == ComponentKind.NAMESPACE:
            lines.extend(_render_namespace(part, indent))
        elif kind == ComponentKind.METHOD:
            functions.append(part)

    if functions:
        lines.append(f'{indent}class "{container_label} functions" {FUNCTIONS_STEREOTYPE} {{')
        for function in functions:
            lines.append(f"{indent}{_INDENT}{_method_line(function)}")
        lines.append(f"{indent}}}")
    return lines


# ── Blocks ───────────────────────────────────────────────────────────


def _render_class(cls: Class, indent: str) -> List[str]:
    header = f"{'abstract ' if cls.is_abstract else ''}class {cls.name}{_type_parameters(cls.type_parameters)}"
    if cls.extends_class is not None and not cls.extends_class.is_empty:
        header += f" extends {cls.extends_class.qualified_name}"
    implemented = [pair.qualified_name for pair in cls.implements_interfaces if not pair.is_empty]
    if implemented:
        header += f" implements {', '.join(implemented)}"
    return _block(header, [_member_line(m) for m in cls.members], indent)


def _render_interface(interface: Interface, indent: str) -> List[str]:
    header = f"interface {interface.name}{_type_parameters(interface.type_parameters)}"
    bases = [pair.qualified_name for pair in interface.heritage]
    if bases:
        header += f" extends {', '.join(bases)}"
    return _block(header, [_member_line(m) for m in interface.members], indent)


def _render_enum(enum: Enum, indent: str) -> List[str]:
    return _block(f"enum {enum.name}", [member.name for member in enum.members], indent)


def _render_namespace(namespace: Namespace, indent: str) -> List[str]:
    lines = [f"{indent}namespace {namespace.name} {{"]
    lines.extend(_render_parts(namespace.parts, namespace.name, indent + _INDENT))
    lines.append(f"{indent}}}")
    return lines


def _block(header: str, body: List[str], indent: str) -> List[str]:
    lines = [f"{indent}{header} {{"]
    lines.extend(f"{indent}{_INDENT}{line}" for line in body)
    lines.append(f"{indent}}}")
    return lines


# ── Members ──────────────────────────────────────────────────────────


def _visibility_symbol(modifier: str) -> str:
    return VISIBILITY_GLYPHS.get(modifier, "+")


def _member_line(member) -> str:
    if isinstance(member, Property):
        return _property_line(member)
    return _method_line(member)


def _property_line(prop: Property) -> str:
    static = "{static} " if prop.is_static else ""
    optional = "?" if prop.is_optional else ""
    return f"{_visibility_symbol(prop.modifier)}{static}{prop.name}{optional}: {prop.return_type}"


def _method_line(method: Method) -> str:
    abstract = "{abstract} " if method.is_abstract else ""
    static = "{static} " if method.is_static else ""
    optional = "?" if method.is_optional else ""
    params = ", ".join(_parameter_text(p) for p in method.parameters)
    return f"{_visibility_symbol(method.modifier)}{abstract}{static}{method.name}{optional}({params}): {method.return_type}"


def _parameter_text(parameter: Parameter) -> str:
    optional = "?" if parameter.is_optional or parameter.has_initializer else ""
    return f"{parameter.name}{optional}: {parameter.parameter_type}"


def _type_parameters(type_parameters: Sequence[TypeParameter]) -> str:
    if not type_parameters:
        return ""
    rendered = [
        f"{tp.name} extends {tp.constraint}" if tp.constraint else tp.name
        for tp in type_parameters
    ]
    return f"<{', '.join(rendered)}>"


# ── Associations ─────────────────────────────────────────────────────


def association_color(index: int) -> str:
    return ASSOCIATION_LINE_PALETTE[index % len(ASSOCIATION_LINE_PALETTE)]


def _render_associations(associations: List[Association], colored: bool) -> List[str]:
    lines: List[str] = []
    for index, association in enumerate(associations):
        arrow = f"-[{association_color(index)}]->" if colored else "-->"
        source = association.owner
        if association.member is not None:
            source = f"{association.owner}::{association.member}"
        marker = '"*" ' if association.many else ""
        lines.append(f"{source} {arrow} {marker}{association.target}")
    return lines

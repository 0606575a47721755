"""Mermaid class-diagram generator.

Same model and filters as the PlantUML generator. Mermaid has no member
endpoints for edges, so member-level associations become class edges
labelled with the member name; colored lines are not supported and the
option is ignored.
"""

import logging
import os
import re
from typing import List, Sequence

from ..constants import VISIBILITY_GLYPHS
from ..model import Class, ComponentKind, Enum, File, Interface, Method, Parameter, Property, TypeParameter
from .associations import Association, infer_associations
from .filters import apply_filters
from .options import RenderOptions

logger = logging.getLogger(__name__)

_INDENT = "    "


def _safe_id(name: str) -> str:
    """Mermaid identifiers allow word characters only."""
    cleaned = re.sub(r"\W", "_", name)
    return cleaned or "unnamed"


def _generic(name: str, type_parameters: Sequence[TypeParameter]) -> str:
    if not type_parameters:
        return name
    return f"{name}~{', '.join(tp.name for tp in type_parameters)}~"


def generate_mermaid_diagram(files: List[File], options: RenderOptions) -> str:
    files = apply_filters(files, options)

    lines: List[str] = ["classDiagram"]
    edges: List[str] = []
    for file in files:
        _render_parts(file.parts, os.path.splitext(os.path.basename(file.name))[0], lines, edges, _INDENT)
    lines.extend(edges)

    if options.draws_associations:
        associations = infer_associations(files, field_level=options.field_associations)
        lines.extend(_association_line(a) for a in associations)

    return "\n".join(lines)


def _render_parts(parts: Sequence, container_label: str, lines: List[str], edges: List[str], indent: str) -> None:
    functions: List[Method] = []
    for part in parts:
        kind = part.component_kind
        if kind == ComponentKind.CLASS:
            lines.extend(_render_class(part, indent))
            edges.extend(_heritage_edges(part))
        elif kind == ComponentKind.INTERFACE:
            lines.extend(_render_interface(part, indent))
            edges.extend(_heritage_edges(part))
        elif kind == ComponentKind.ENUM:
            lines.extend(_render_enum(part, indent))
        elif kind == ComponentKind.NAMESPACE:
            lines.append(f"{indent}namespace {_safe_id(part.name)} {{")
            _render_parts(part.parts, part.name, lines, edges, indent + _INDENT)
            lines.append(f"{indent}}}")
        elif kind == ComponentKind.METHOD:
            functions.append(part)

    if functions:
        label = f"{container_label} functions"
        lines.append(f'{indent}class {_safe_id(label)}["{label}"] {{')
        lines.append(f"{indent}{_INDENT}<<functions>>")
        for function in functions:
            lines.append(f"{indent}{_INDENT}{_method_line(function)}")
        lines.append(f"{indent}}}")


def _block(name: str, annotation: str, body: List[str], indent: str) -> List[str]:
    lines = [f"{indent}class {name} {{"]
    if annotation:
        lines.append(f"{indent}{_INDENT}<<{annotation}>>")
    lines.extend(f"{indent}{_INDENT}{line}" for line in body)
    lines.append(f"{indent}}}")
    return lines


def _render_class(cls: Class, indent: str) -> List[str]:
    annotation = "abstract" if cls.is_abstract else ""
    body = [_member_line(m) for m in cls.members]
    return _block(_generic(_safe_id(cls.name), cls.type_parameters), annotation, body, indent)


def _render_interface(interface: Interface, indent: str) -> List[str]:
    body = [_member_line(m) for m in interface.members]
    return _block(_generic(_safe_id(interface.name), interface.type_parameters), "interface", body, indent)


def _render_enum(enum: Enum, indent: str) -> List[str]:
    return _block(_safe_id(enum.name), "enumeration", [m.name for m in enum.members], indent)


def _heritage_edges(node) -> List[str]:
    edges = []
    sub = _safe_id(node.name)
    if isinstance(node, Class):
        if node.extends_class is not None and not node.extends_class.is_empty:
            edges.append(f"{_INDENT}{_short_id(node.extends_class.qualified_name)} <|-- {sub}")
        for pair in node.implements_interfaces:
            if not pair.is_empty:
                edges.append(f"{_INDENT}{_short_id(pair.qualified_name)} <|.. {sub}")
    else:
        for pair in node.heritage:
            edges.append(f"{_INDENT}{_short_id(pair.qualified_name)} <|-- {sub}")
    return edges


def _short_id(qualified_name: str) -> str:
    return _safe_id(qualified_name.rsplit(".", 1)[-1])


def _member_line(member) -> str:
    if isinstance(member, Property):
        return _property_line(member)
    return _method_line(member)


def _property_line(prop: Property) -> str:
    optional = "?" if prop.is_optional else ""
    static = "$" if prop.is_static else ""
    return f"{VISIBILITY_GLYPHS.get(prop.modifier, '+')}{prop.name}{optional}: {prop.return_type}{static}"


def _method_line(method: Method) -> str:
    params = ", ".join(_parameter_text(p) for p in method.parameters)
    classifier = "*" if method.is_abstract else "$" if method.is_static else ""
    optional = "?" if method.is_optional else ""
    glyph = VISIBILITY_GLYPHS.get(method.modifier, "+")
    return f"{glyph}{method.name}{optional}({params}){classifier} {method.return_type}"


def _parameter_text(parameter: Parameter) -> str:
    optional = "?" if parameter.is_optional or parameter.has_initializer else ""
    return f"{parameter.name}{optional}: {parameter.parameter_type}"


def _association_line(association: Association) -> str:
    owner = _short_id(association.owner)
    target = _short_id(association.target)
    marker = '"*" ' if association.many else ""
    label = f" : {association.member}" if association.member is not None else ""
    return f"{_INDENT}{owner} --> {marker}{target}{label}"

"""Enum factory."""

from ..ast_parser import DeclarationKind, Symbol
from ..ast_parser.utils import collapse_whitespace, node_text
from ..model import Enum, EnumMember


def create(enum_symbol: Symbol) -> Enum:
    members = []
    for member_symbol in enum_symbol.exports.values():
        declaration = member_symbol.value_declaration
        value = None
        if declaration is not None and declaration.node.type == "enum_assignment":
            value_node = declaration.node.child_by_field_name("value")
            if value_node is None and len(declaration.node.named_children) > 1:
                value_node = declaration.node.named_children[-1]
            value = collapse_whitespace(node_text(value_node)) if value_node is not None else None
        members.append(EnumMember(name=member_symbol.get_name(), value=value))

    declaration = next(
        (d for d in enum_symbol.get_declarations() if d.kind == DeclarationKind.ENUM),
        enum_symbol.value_declaration,
    )
    return Enum(
        name=enum_symbol.get_name(),
        file_name=declaration.file_name if declaration else "",
        members=tuple(members),
    )

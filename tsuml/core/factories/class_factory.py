"""Class factory."""

import logging

from ..ast_parser import DeclarationKind, Symbol, TypeChecker
from ..model import Class
from .common import get_heritage_clause_names, get_member_modifier, is_modifier
from .members import serialize_constructors, serialize_methods, serialize_type_parameters

logger = logging.getLogger(__name__)


def create(file_name: str, class_symbol: Symbol, checker: TypeChecker) -> Class:
    """Build a ``Class`` from its symbol.

    Instance members come first, followed by static members; both keep
    declaration order.
    """
    declaration = next(
        (d for d in class_symbol.get_declarations() if d.kind == DeclarationKind.CLASS),
        class_symbol.value_declaration,
    )

    extends = get_heritage_clause_names(checker.get_heritage_references(declaration, "extends"), checker)
    implements = get_heritage_clause_names(checker.get_heritage_references(declaration, "implements"), checker)

    result = Class(
        name=class_symbol.get_name(),
        file_name=file_name,
        modifier=get_member_modifier(declaration),
        is_abstract=declaration.node.type == "abstract_class_declaration" or is_modifier(declaration, "abstract"),
        type_parameters=serialize_type_parameters(class_symbol.members, checker),
        constructor_methods=serialize_constructors(class_symbol.members, checker),
        members=serialize_methods(class_symbol.members, checker) + serialize_methods(class_symbol.exports, checker),
        extends_class=extends[0] if extends else None,
        implements_interfaces=tuple(implements),
    )
    logger.debug(f"Class {result.name}: {len(result.members)} members")
    return result

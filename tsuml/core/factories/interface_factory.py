"""Interface factory."""

from typing import List

from ..ast_parser import DeclarationKind, Symbol, TypeChecker
from ..model import HeritagePair, Interface
from .common import get_heritage_clause_names
from .members import serialize_methods, serialize_type_parameters


def create(interface_symbol: Symbol, checker: TypeChecker) -> Interface:
    """Build an ``Interface``; merged declarations contribute all their bases."""
    declarations = [d for d in interface_symbol.get_declarations() if d.kind == DeclarationKind.INTERFACE]

    extends: List[HeritagePair] = []
    for declaration in declarations:
        for pair in get_heritage_clause_names(checker.get_heritage_references(declaration, "extends"), checker):
            if pair not in extends:
                extends.append(pair)

    return Interface(
        name=interface_symbol.get_name(),
        file_name=declarations[0].file_name if declarations else "",
        type_parameters=serialize_type_parameters(interface_symbol.members, checker),
        members=serialize_methods(interface_symbol.members, checker),
        extends_interfaces=tuple(extends),
    )

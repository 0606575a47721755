"""Type parameter factory."""

from ..ast_parser import Declaration, Symbol, TypeChecker
from ..ast_parser.utils import field_or_type
from ..model import TypeParameter


def create(symbol: Symbol, declaration: Declaration, checker: TypeChecker) -> TypeParameter:
    constraint = field_or_type(declaration.node, "constraint", "constraint")
    constraint_text = None
    if constraint is not None and constraint.named_children:
        constraint_type = checker.get_type_from_type_node(constraint.named_children[0])
        constraint_text = checker.type_to_string(constraint_type, declaration)
    return TypeParameter(name=symbol.get_name(), constraint=constraint_text)

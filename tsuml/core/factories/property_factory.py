"""Property factory — fields, property signatures, accessors and parameter properties."""

from ..ast_parser import Declaration, Symbol, TypeChecker
from ..model import Property
from .common import (
    get_member_modifier,
    get_original_type_reference,
    has_initializer,
    is_modifier,
    is_optional,
)


def create(symbol: Symbol, declaration: Declaration, checker: TypeChecker) -> Property:
    property_type = checker.get_type_of_symbol_at_location(symbol, declaration.node)
    type_file, type_name = get_original_type_reference(property_type, checker)
    return Property(
        name=symbol.get_name(),
        modifier=get_member_modifier(declaration),
        is_static=is_modifier(declaration, "static"),
        is_optional=is_optional(declaration),
        has_initializer=has_initializer(declaration),
        return_type=checker.type_to_string(property_type, declaration),
        return_type_file=type_file,
        return_type_name=type_name,
        is_readonly=is_modifier(declaration, "readonly"),
    )

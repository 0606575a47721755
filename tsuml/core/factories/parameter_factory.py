"""Parameter factory."""

from ..ast_parser import Symbol, TypeChecker
from ..model import Parameter
from .common import get_original_type_reference, has_initializer, is_optional


def create(parameter_symbol: Symbol, checker: TypeChecker) -> Parameter:
    declaration = parameter_symbol.value_declaration
    parameter_type = checker.get_type_of_symbol_at_location(
        parameter_symbol, declaration.node if declaration else None
    )
    type_file, type_name = get_original_type_reference(parameter_type, checker)
    return Parameter(
        name=parameter_symbol.get_name(),
        parameter_type=checker.type_to_string(parameter_type, declaration),
        parameter_type_file=type_file,
        parameter_type_name=type_name,
        is_optional=is_optional(declaration) if declaration else False,
        has_initializer=has_initializer(declaration) if declaration else False,
    )

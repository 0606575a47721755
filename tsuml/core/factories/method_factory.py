"""Method factory — methods, constructors and top-level functions."""

import logging

from ..ast_parser import Declaration, DeclarationKind, Symbol, TypeChecker
from ..model import Method
from . import parameter_factory, type_parameter_factory
from .common import get_member_modifier, get_original_type_reference, is_modifier, is_optional

logger = logging.getLogger(__name__)


def create(symbol: Symbol, declaration: Declaration, checker: TypeChecker) -> Method:
    """Build a ``Method`` from one declaration of ``symbol``.

    Overloaded methods have one declaration per signature, so callers
    invoke this once per declaration.
    """
    signature = checker.get_signature_from_declaration(declaration)
    return_type = signature.get_return_type()
    is_constructor = declaration.kind == DeclarationKind.CONSTRUCTOR
    return_file, return_name = get_original_type_reference(return_type, checker)

    return Method(
        name="constructor" if is_constructor else symbol.get_name(),
        modifier=get_member_modifier(declaration),
        is_static=is_modifier(declaration, "static"),
        is_abstract=is_modifier(declaration, "abstract"),
        is_optional=is_optional(declaration),
        parameters=tuple(parameter_factory.create(p, checker) for p in signature.parameters),
        return_type=checker.type_to_string(return_type, declaration),
        return_type_file=return_file,
        return_type_name=return_name,
        is_constructor=is_constructor,
        type_parameters=tuple(
            type_parameter_factory.create(tp, tp.declarations[0], checker) for tp in signature.type_parameters
        ),
    )

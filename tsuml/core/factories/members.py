"""Member table serializers.

Turn a symbol's ``members`` or ``exports`` table into model nodes, in
table order, one category at a time.
"""

from typing import Dict, List, Tuple

from ..ast_parser import Symbol, TypeChecker
from ..model import Member, Method, TypeParameter
from . import method_factory, property_factory, type_parameter_factory
from .classifiers import MemberCategory, classify
from .common import has_body


def serialize_constructors(member_symbols: Dict[str, Symbol], checker: TypeChecker) -> Tuple[Method, ...]:
    result: List[Method] = []
    for member_symbol in member_symbols.values():
        for declaration in member_symbol.get_declarations():
            if classify(declaration) is MemberCategory.CONSTRUCTOR:
                result.append(method_factory.create(member_symbol, declaration, checker))
    return tuple(result)


def serialize_methods(member_symbols: Dict[str, Symbol], checker: TypeChecker) -> Tuple[Member, ...]:
    """Methods and properties of a member table.

    A get/set pair yields one property. When a method has overload
    signatures only the signatures are listed, not the implementation.
    """
    result: List[Member] = []
    for member_symbol in member_symbols.values():
        declarations = member_symbol.get_declarations()
        method_declarations = [d for d in declarations if classify(d) is MemberCategory.METHOD]
        overloaded = len(method_declarations) > 1 and any(not has_body(d) for d in method_declarations)
        property_emitted = False

        for declaration in declarations:
            category = classify(declaration)
            if category is MemberCategory.METHOD:
                if overloaded and has_body(declaration):
                    continue
                result.append(method_factory.create(member_symbol, declaration, checker))
            elif category is MemberCategory.PROPERTY and not property_emitted:
                result.append(property_factory.create(member_symbol, declaration, checker))
                property_emitted = True
    return tuple(result)


def serialize_type_parameters(member_symbols: Dict[str, Symbol], checker: TypeChecker) -> Tuple[TypeParameter, ...]:
    result: List[TypeParameter] = []
    for member_symbol in member_symbols.values():
        for declaration in member_symbol.get_declarations():
            if classify(declaration) is MemberCategory.TYPE_PARAMETER:
                result.append(type_parameter_factory.create(member_symbol, declaration, checker))
    return tuple(result)

"""Member classifiers.

Every declaration found in a class or interface member table falls into
at most one category. Declarations in no category (index, call and
construct signatures) are skipped by the serializers.
"""

import enum
from typing import Optional

from ..ast_parser import Declaration, DeclarationKind


class MemberCategory(enum.Enum):
    CONSTRUCTOR = "constructor"
    METHOD = "method"
    PROPERTY = "property"
    TYPE_PARAMETER = "type_parameter"


_CATEGORIES = {
    DeclarationKind.CONSTRUCTOR: MemberCategory.CONSTRUCTOR,
    # Method bodies, overload signatures, abstract methods, interface methods
    DeclarationKind.METHOD: MemberCategory.METHOD,
    DeclarationKind.METHOD_SIGNATURE: MemberCategory.METHOD,
    # Fields, property signatures, accessors, constructor parameter properties
    DeclarationKind.PROPERTY: MemberCategory.PROPERTY,
    DeclarationKind.PROPERTY_SIGNATURE: MemberCategory.PROPERTY,
    DeclarationKind.GET_ACCESSOR: MemberCategory.PROPERTY,
    DeclarationKind.SET_ACCESSOR: MemberCategory.PROPERTY,
    DeclarationKind.PARAMETER: MemberCategory.PROPERTY,
    DeclarationKind.TYPE_PARAMETER: MemberCategory.TYPE_PARAMETER,
}


def classify(declaration: Declaration) -> Optional[MemberCategory]:
    return _CATEGORIES.get(declaration.kind)


def is_constructor(declaration: Declaration) -> bool:
    return classify(declaration) is MemberCategory.CONSTRUCTOR


def is_method(declaration: Declaration) -> bool:
    return classify(declaration) is MemberCategory.METHOD


def is_property(declaration: Declaration) -> bool:
    return classify(declaration) is MemberCategory.PROPERTY


def is_type_parameter(declaration: Declaration) -> bool:
    return classify(declaration) is MemberCategory.TYPE_PARAMETER

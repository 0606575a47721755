"""Type representations produced by the checker.

Each type knows how to print itself the way ``tsc`` displays it, so
``TypeChecker.type_to_string`` is a thin wrapper over ``display()``.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .models import Symbol


class Type:
    """Base class for all checker types."""

    def display(self) -> str:
        raise NotImplementedError

    def get_symbol(self) -> Optional[Symbol]:
        return None

    @property
    def type_arguments(self) -> List["Type"]:
        return []

    def needs_parentheses(self) -> bool:
        """True when the type must be wrapped before appending ``[]``."""
        return False

    def __str__(self) -> str:
        return self.display()


@dataclass(eq=False)
class IntrinsicType(Type):
    """Keyword types: any, number, string, void, unknown, never ..."""

    name: str

    def display(self) -> str:
        return self.name


@dataclass(eq=False)
class LiteralType(Type):
    text: str

    def display(self) -> str:
        return self.text


@dataclass(eq=False)
class TypeReference(Type):
    """A named type, optionally instantiated with type arguments."""

    name: str
    symbol: Optional[Symbol] = None
    arguments: List[Type] = field(default_factory=list)

    def display(self) -> str:
        if not self.arguments:
            return self.name
        return f"{self.name}<{', '.join(arg.display() for arg in self.arguments)}>"

    def get_symbol(self) -> Optional[Symbol]:
        return self.symbol

    @property
    def type_arguments(self) -> List[Type]:
        return list(self.arguments)


@dataclass(eq=False)
class ArrayType(Type):
    """``T[]``; behaves like ``Array<T>`` for symbol and argument queries."""

    element: Type
    array_symbol: Optional[Symbol] = None
    readonly: bool = False

    def display(self) -> str:
        inner = self.element.display()
        if self.element.needs_parentheses():
            inner = f"({inner})"
        prefix = "readonly " if self.readonly else ""
        return f"{prefix}{inner}[]"

    def get_symbol(self) -> Optional[Symbol]:
        return self.array_symbol

    @property
    def type_arguments(self) -> List[Type]:
        return [self.element]


@dataclass(eq=False)
class UnionType(Type):
    types: List[Type]
    separator: str = " | "

    def display(self) -> str:
        parts = []
        for member in self.types:
            text = member.display()
            if isinstance(member, FunctionType):
                text = f"({text})"
            parts.append(text)
        return self.separator.join(parts)

    def needs_parentheses(self) -> bool:
        return True


@dataclass(eq=False)
class IntersectionType(UnionType):
    separator: str = " & "


@dataclass(eq=False)
class ParameterInfo:
    name: str
    type: Type
    optional: bool = False
    rest: bool = False

    def display(self) -> str:
        prefix = "..." if self.rest else ""
        marker = "?" if self.optional else ""
        return f"{prefix}{self.name}{marker}: {self.type.display()}"


@dataclass(eq=False)
class FunctionType(Type):
    parameters: List[ParameterInfo]
    return_type: Type
    type_parameters: List[str] = field(default_factory=list)
    is_constructor: bool = False

    def display(self) -> str:
        generics = f"<{', '.join(self.type_parameters)}>" if self.type_parameters else ""
        params = ", ".join(p.display() for p in self.parameters)
        keyword = "new " if self.is_constructor else ""
        return f"{keyword}{generics}({params}) => {self.return_type.display()}"

    def needs_parentheses(self) -> bool:
        return True


@dataclass(eq=False)
class ObjectType(Type):
    """An anonymous object type; ``members`` are pre-rendered entries."""

    members: List[str] = field(default_factory=list)

    def display(self) -> str:
        if not self.members:
            return "{}"
        return "{ " + " ".join(f"{member};" for member in self.members) + " }"


@dataclass(eq=False)
class TupleType(Type):
    elements: List[Type]
    readonly: bool = False

    def display(self) -> str:
        prefix = "readonly " if self.readonly else ""
        return f"{prefix}[{', '.join(e.display() for e in self.elements)}]"


@dataclass(eq=False)
class TextType(Type):
    """Verbatim fallback for type syntax the checker does not model."""

    text: str

    def display(self) -> str:
        return self.text

    def needs_parentheses(self) -> bool:
        return " " in self.text


ANY_TYPE = IntrinsicType("any")
VOID_TYPE = IntrinsicType("void")
NUMBER_TYPE = IntrinsicType("number")
STRING_TYPE = IntrinsicType("string")
BOOLEAN_TYPE = IntrinsicType("boolean")
BIGINT_TYPE = IntrinsicType("bigint")
UNDEFINED_TYPE = IntrinsicType("undefined")
NULL_TYPE = IntrinsicType("null")

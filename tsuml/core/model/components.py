"""Component model — the composite tree the factories build.

Every node is a frozen dataclass; containers hold tuples in declaration
order. ``component_kind`` identifies the variant for dispatch in the
renderers.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from ..constants import MODIFIER_PUBLIC


class ComponentKind(enum.Enum):
    FILE = "file"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ENUM_MEMBER = "enum_member"
    NAMESPACE = "namespace"
    METHOD = "method"
    PROPERTY = "property"
    PARAMETER = "parameter"
    TYPE_PARAMETER = "type_parameter"


@dataclass(frozen=True)
class HeritagePair:
    """Qualified name of a base type plus the file that declares it.

    The empty pair ``("", "")`` stands for a reference that did not
    resolve; renderers skip it.
    """

    qualified_name: str = ""
    origin_file: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.qualified_name


@dataclass(frozen=True)
class TypeParameter:
    name: str
    constraint: Optional[str] = None

    component_kind = ComponentKind.TYPE_PARAMETER


@dataclass(frozen=True)
class Parameter:
    name: str
    parameter_type: str = "any"
    parameter_type_file: str = ""
    parameter_type_name: str = ""
    is_optional: bool = False
    has_initializer: bool = False

    component_kind = ComponentKind.PARAMETER


@dataclass(frozen=True)
class Method:
    name: str
    modifier: str = MODIFIER_PUBLIC
    is_static: bool = False
    is_abstract: bool = False
    is_optional: bool = False
    parameters: Tuple[Parameter, ...] = ()
    return_type: str = "any"
    return_type_file: str = ""
    return_type_name: str = ""
    is_constructor: bool = False
    type_parameters: Tuple[TypeParameter, ...] = ()

    component_kind = ComponentKind.METHOD


@dataclass(frozen=True)
class Property:
    name: str
    modifier: str = MODIFIER_PUBLIC
    is_static: bool = False
    is_optional: bool = False
    has_initializer: bool = False
    return_type: str = "any"
    return_type_file: str = ""
    return_type_name: str = ""
    is_readonly: bool = False

    component_kind = ComponentKind.PROPERTY


Member = Union[Method, Property]


@dataclass(frozen=True)
class Class:
    name: str
    file_name: str
    modifier: str = MODIFIER_PUBLIC
    is_abstract: bool = False
    type_parameters: Tuple[TypeParameter, ...] = ()
    constructor_methods: Tuple[Method, ...] = ()
    members: Tuple[Member, ...] = ()
    extends_class: Optional[HeritagePair] = None
    implements_interfaces: Tuple[HeritagePair, ...] = ()

    component_kind = ComponentKind.CLASS

    @property
    def heritage(self) -> Tuple[HeritagePair, ...]:
        """Every non-empty base reference, extends first."""
        pairs = ((self.extends_class,) if self.extends_class else ()) + self.implements_interfaces
        return tuple(pair for pair in pairs if not pair.is_empty)


@dataclass(frozen=True)
class Interface:
    name: str
    file_name: str
    modifier: str = MODIFIER_PUBLIC
    type_parameters: Tuple[TypeParameter, ...] = ()
    members: Tuple[Member, ...] = ()
    extends_interfaces: Tuple[HeritagePair, ...] = ()

    component_kind = ComponentKind.INTERFACE

    @property
    def heritage(self) -> Tuple[HeritagePair, ...]:
        return tuple(pair for pair in self.extends_interfaces if not pair.is_empty)


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: Optional[str] = None

    component_kind = ComponentKind.ENUM_MEMBER


@dataclass(frozen=True)
class Enum:
    name: str
    file_name: str
    members: Tuple[EnumMember, ...] = ()

    component_kind = ComponentKind.ENUM


@dataclass(frozen=True)
class Namespace:
    name: str
    file_name: str
    parts: Tuple["Component", ...] = ()

    component_kind = ComponentKind.NAMESPACE


@dataclass(frozen=True)
class File:
    """All top-level components of one analyzed module."""

    name: str
    parts: Tuple["Component", ...] = field(default_factory=tuple)

    component_kind = ComponentKind.FILE


# Anything that may appear in a File or Namespace
Component = Union[Class, Interface, Enum, Namespace, Method]

"""Component model produced by the factories and consumed by the renderers."""

from .components import (
    Class,
    Component,
    ComponentKind,
    Enum,
    EnumMember,
    File,
    HeritagePair,
    Interface,
    Member,
    Method,
    Namespace,
    Parameter,
    Property,
    TypeParameter,
)

__all__ = [
    "Class",
    "Component",
    "ComponentKind",
    "Enum",
    "EnumMember",
    "File",
    "HeritagePair",
    "Interface",
    "Member",
    "Method",
    "Namespace",
    "Parameter",
    "Property",
    "TypeParameter",
]

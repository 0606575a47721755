"""Symbol-table data models.

Defines the structures the binder produces and the checker queries:
source files, declarations, symbols and signatures. These are plain data
containers; resolution logic lives in ``binder`` and ``checker``.
"""

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

import tree_sitter

from .utils import modifier_tokens, node_text

if TYPE_CHECKING:
    from .types import Type


class DeclarationKind(enum.Enum):
    """Closed set of declaration kinds the binder records."""

    SOURCE_FILE = "source_file"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ENUM_MEMBER = "enum_member"
    MODULE = "module"
    FUNCTION = "function"
    CONSTRUCTOR = "constructor"
    METHOD = "method"
    METHOD_SIGNATURE = "method_signature"
    PROPERTY = "property"
    PROPERTY_SIGNATURE = "property_signature"
    GET_ACCESSOR = "get_accessor"
    SET_ACCESSOR = "set_accessor"
    PARAMETER = "parameter"
    TYPE_PARAMETER = "type_parameter"
    TYPE_ALIAS = "type_alias"
    VARIABLE = "variable"
    IMPORT = "import"
    EXPORT_SPECIFIER = "export_specifier"
    INDEX_SIGNATURE = "index_signature"
    CALL_SIGNATURE = "call_signature"
    CONSTRUCT_SIGNATURE = "construct_signature"
    STATIC_BLOCK = "static_block"


class SymbolFlags(enum.IntFlag):
    NONE = 0
    CLASS = 1 << 0
    INTERFACE = 1 << 1
    ENUM = 1 << 2
    ENUM_MEMBER = 1 << 3
    NAMESPACE = 1 << 4
    FUNCTION = 1 << 5
    CONSTRUCTOR = 1 << 6
    METHOD = 1 << 7
    PROPERTY = 1 << 8
    ACCESSOR = 1 << 9
    PARAMETER = 1 << 10
    TYPE_PARAMETER = 1 << 11
    TYPE_ALIAS = 1 << 12
    VARIABLE = 1 << 13
    ALIAS = 1 << 14
    SOURCE_FILE = 1 << 15
    SIGNATURE = 1 << 16

    TYPE = CLASS | INTERFACE | ENUM | TYPE_ALIAS | TYPE_PARAMETER
    VALUE = CLASS | ENUM | FUNCTION | VARIABLE | PARAMETER | ENUM_MEMBER | PROPERTY | METHOD | NAMESPACE


# Name TypeScript gives the constructor entry of a class member table
CONSTRUCTOR_SYMBOL_NAME = "__constructor"


@dataclass(eq=False)
class SourceFile:
    """One parsed TypeScript module."""

    file_name: str
    source: bytes
    tree: tree_sitter.Tree
    is_declaration_file: bool = False
    has_parse_errors: bool = False
    # Module specifiers in the order they appear in import/export statements
    module_specifiers: List[str] = field(default_factory=list)
    symbol: Optional["Symbol"] = None

    @property
    def root_node(self) -> tree_sitter.Node:
        return self.tree.root_node

    @property
    def is_external_module(self) -> bool:
        """True when the file has a top-level import or export."""
        return bool(self.symbol is not None and self.symbol.meta.get("is_module"))


@dataclass(eq=False)
class Declaration:
    """A declaration node bound to a symbol.

    ``node`` is the declaration itself (``class_declaration``,
    ``public_field_definition`` ...); ``name_node`` is the identifier the
    checker resolves from. ``container`` is the declaration whose scope
    encloses this one.
    """

    kind: DeclarationKind
    node: tree_sitter.Node
    source_file: SourceFile
    name_node: Optional[tree_sitter.Node] = None
    container: Optional["Declaration"] = None
    exported: bool = False
    symbol: Optional["Symbol"] = None
    # Local scope for declarations that open one (functions, namespaces ...)
    locals: Dict[str, "Symbol"] = field(default_factory=dict)
    # Ordered parameter and type-parameter symbols of function-like declarations
    parameters: List["Symbol"] = field(default_factory=list)
    type_parameters: List["Symbol"] = field(default_factory=list)

    @property
    def name(self) -> Optional[str]:
        if self.name_node is None:
            return None
        return node_text(self.name_node)

    @property
    def file_name(self) -> str:
        return self.source_file.file_name

    @property
    def modifiers(self) -> List[str]:
        return modifier_tokens(self.node)

    def has_modifier(self, modifier: str) -> bool:
        return modifier in self.modifiers

    @property
    def start_line(self) -> int:
        return self.node.start_point[0] + 1

    def __repr__(self) -> str:
        return f"<Declaration {self.kind.value} {self.name!r} {self.file_name}:{self.start_line}>"


@dataclass(eq=False)
class Symbol:
    """A named entity with one or more declarations.

    ``members`` and ``exports`` keep insertion order, which is declaration
    order; the rendered diagram depends on it.
    """

    name: str
    flags: SymbolFlags
    declarations: List[Declaration] = field(default_factory=list)
    members: Dict[str, "Symbol"] = field(default_factory=dict)
    exports: Dict[str, "Symbol"] = field(default_factory=dict)
    parent: Optional["Symbol"] = None
    # Free-form binder annotations (alias targets, module flags ...)
    meta: Dict[str, object] = field(default_factory=dict)

    def get_name(self) -> str:
        return self.name

    def get_declarations(self) -> List[Declaration]:
        return list(self.declarations)

    @property
    def value_declaration(self) -> Optional[Declaration]:
        return self.declarations[0] if self.declarations else None

    def has_flag(self, flag: SymbolFlags) -> bool:
        return bool(self.flags & flag)

    def __repr__(self) -> str:
        return f"<Symbol {self.name!r} {self.flags!r}>"


@dataclass(eq=False)
class Signature:
    """A callable's parameters and return type."""

    declaration: Declaration
    parameters: List[Symbol]
    type_parameters: List[Symbol]
    return_type: "Type"

    def get_return_type(self) -> "Type":
        return self.return_type

"""Binder — builds symbol tables from tree-sitter trees.

One ``Binder`` is shared by all files of a program. Binding a file walks
its top-level statements (and namespace bodies) and records:

- a ``Declaration`` for every declaration node, indexed by node identity
- ``Symbol`` tables: file/namespace locals and exports, class members
  (instance side, constructor, type parameters, parameter properties) and
  class exports (static side), interface members, enum members
- alias symbols for imports and re-exports, resolved lazily by the checker

Function, method and class bodies are not walked for nested declarations;
only their parameters and type parameters are bound.
"""

import logging
from typing import Dict, List, Optional, Tuple

import tree_sitter

from .models import (
    CONSTRUCTOR_SYMBOL_NAME,
    Declaration,
    DeclarationKind,
    SourceFile,
    Symbol,
    SymbolFlags,
)
from .utils import (
    child_by_type,
    children_by_type,
    field_or_type,
    has_token,
    modifier_tokens,
    node_key,
    node_text,
    string_literal_value,
)

logger = logging.getLogger(__name__)

CLASS_NODE_TYPES = ("class_declaration", "abstract_class_declaration")
MODULE_NODE_TYPES = ("internal_module", "module")
FUNCTION_NODE_TYPES = ("function_declaration", "function_signature", "generator_function_declaration")
VARIABLE_NODE_TYPES = ("lexical_declaration", "variable_declaration")
PARAMETER_NODE_TYPES = ("required_parameter", "optional_parameter")

# Top-level node type → declaration kind
DECLARATION_NODE_KINDS: Dict[str, DeclarationKind] = {
    "class_declaration": DeclarationKind.CLASS,
    "abstract_class_declaration": DeclarationKind.CLASS,
    "interface_declaration": DeclarationKind.INTERFACE,
    "enum_declaration": DeclarationKind.ENUM,
    "internal_module": DeclarationKind.MODULE,
    "module": DeclarationKind.MODULE,
    "function_declaration": DeclarationKind.FUNCTION,
    "function_signature": DeclarationKind.FUNCTION,
    "generator_function_declaration": DeclarationKind.FUNCTION,
    "type_alias_declaration": DeclarationKind.TYPE_ALIAS,
    "lexical_declaration": DeclarationKind.VARIABLE,
    "variable_declaration": DeclarationKind.VARIABLE,
}

_KIND_FLAGS: Dict[DeclarationKind, SymbolFlags] = {
    DeclarationKind.CLASS: SymbolFlags.CLASS,
    DeclarationKind.INTERFACE: SymbolFlags.INTERFACE,
    DeclarationKind.ENUM: SymbolFlags.ENUM,
    DeclarationKind.ENUM_MEMBER: SymbolFlags.ENUM_MEMBER,
    DeclarationKind.MODULE: SymbolFlags.NAMESPACE,
    DeclarationKind.FUNCTION: SymbolFlags.FUNCTION,
    DeclarationKind.CONSTRUCTOR: SymbolFlags.CONSTRUCTOR,
    DeclarationKind.METHOD: SymbolFlags.METHOD,
    DeclarationKind.METHOD_SIGNATURE: SymbolFlags.METHOD,
    DeclarationKind.PROPERTY: SymbolFlags.PROPERTY,
    DeclarationKind.PROPERTY_SIGNATURE: SymbolFlags.PROPERTY,
    DeclarationKind.GET_ACCESSOR: SymbolFlags.ACCESSOR,
    DeclarationKind.SET_ACCESSOR: SymbolFlags.ACCESSOR,
    DeclarationKind.PARAMETER: SymbolFlags.PARAMETER,
    DeclarationKind.TYPE_PARAMETER: SymbolFlags.TYPE_PARAMETER,
    DeclarationKind.TYPE_ALIAS: SymbolFlags.TYPE_ALIAS,
    DeclarationKind.VARIABLE: SymbolFlags.VARIABLE,
    DeclarationKind.IMPORT: SymbolFlags.ALIAS,
    DeclarationKind.EXPORT_SPECIFIER: SymbolFlags.ALIAS,
    DeclarationKind.INDEX_SIGNATURE: SymbolFlags.SIGNATURE,
    DeclarationKind.CALL_SIGNATURE: SymbolFlags.SIGNATURE,
    DeclarationKind.CONSTRUCT_SIGNATURE: SymbolFlags.SIGNATURE,
}

# Interface/object-type member node → (kind, synthetic name for unnamed members)
_TYPE_MEMBER_KINDS: Dict[str, Tuple[DeclarationKind, Optional[str]]] = {
    "property_signature": (DeclarationKind.PROPERTY_SIGNATURE, None),
    "method_signature": (DeclarationKind.METHOD_SIGNATURE, None),
    "call_signature": (DeclarationKind.CALL_SIGNATURE, "__call"),
    "construct_signature": (DeclarationKind.CONSTRUCT_SIGNATURE, "__new"),
    "index_signature": (DeclarationKind.INDEX_SIGNATURE, "__index"),
}

NodeKey = Tuple[int, int, int, str]


def unwrap_statement(node: tree_sitter.Node) -> Tuple[Optional[tree_sitter.Node], bool]:
    """Return the declaration wrapped by a statement and whether it is exported.

    Handles ``export ...``, ``export default ...``, ``declare ...`` and the
    ``expression_statement`` tree-sitter uses for some namespace blocks.
    """
    exported = False
    current: Optional[tree_sitter.Node] = node
    while current is not None:
        if current.type == "export_statement":
            exported = True
            current = current.child_by_field_name("declaration")
        elif current.type == "ambient_declaration":
            current = next(
                (c for c in current.named_children if c.type in DECLARATION_NODE_KINDS),
                None,
            )
        elif current.type == "expression_statement":
            current = next((c for c in current.named_children if c.type in MODULE_NODE_TYPES), None)
        else:
            break
    return current, exported


class Binder:
    """Program-wide binder.

    Attributes:
        globals: Top-level symbols of script files (files without imports
            or exports) and ``declare global`` blocks.
    """

    def __init__(self) -> None:
        self.globals: Dict[str, Symbol] = {}
        self._declarations: Dict[NodeKey, Declaration] = {}
        self._symbols_by_name: Dict[NodeKey, Symbol] = {}

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_declaration(self, node: tree_sitter.Node) -> Optional[Declaration]:
        return self._declarations.get(node_key(node))

    def get_symbol_of_name(self, name_node: tree_sitter.Node) -> Optional[Symbol]:
        return self._symbols_by_name.get(node_key(name_node))

    def get_enclosing_declaration(self, node: tree_sitter.Node) -> Optional[Declaration]:
        """Nearest bound declaration at or above ``node``."""
        current: Optional[tree_sitter.Node] = node
        while current is not None:
            declaration = self._declarations.get(node_key(current))
            if declaration is not None:
                return declaration
            current = current.parent
        return None

    # =========================================================================
    # Files
    # =========================================================================

    def bind_source_file(self, source_file: SourceFile) -> Symbol:
        root = source_file.root_node
        file_declaration = Declaration(
            kind=DeclarationKind.SOURCE_FILE,
            node=root,
            source_file=source_file,
        )
        file_symbol = Symbol(
            name=source_file.file_name,
            flags=SymbolFlags.SOURCE_FILE,
            declarations=[file_declaration],
        )
        file_symbol.meta["is_module"] = any(
            child.type in ("import_statement", "export_statement") for child in root.children
        )
        file_symbol.meta["export_stars"] = []
        file_declaration.symbol = file_symbol
        source_file.symbol = file_symbol
        self._index(file_declaration)

        self._bind_statements(root.children, file_declaration, file_symbol)

        if not file_symbol.meta["is_module"]:
            for name, symbol in file_declaration.locals.items():
                self.globals.setdefault(name, symbol)

        logger.debug(
            f"Bound {source_file.file_name}: {len(file_declaration.locals)} locals, "
            f"{len(file_symbol.exports)} exports"
        )
        return file_symbol

    def _bind_statements(
        self,
        statements: List[tree_sitter.Node],
        container: Declaration,
        container_symbol: Symbol,
    ) -> None:
        for statement in statements:
            if statement.type == "import_statement":
                self._bind_import(statement, container)
            elif statement.type == "import_alias":
                self._bind_import_alias(statement, container, exported=False)
            elif statement.type == "export_statement" and statement.child_by_field_name("declaration") is None:
                self._bind_export_clause(statement, container, container_symbol)
            elif statement.type == "ambient_declaration" and child_by_type(statement, "statement_block"):
                # declare global { ... }
                block = child_by_type(statement, "statement_block")
                global_declaration = Declaration(
                    kind=DeclarationKind.MODULE,
                    node=statement,
                    source_file=container.source_file,
                    container=container,
                )
                self._bind_statements(block.named_children, global_declaration, container_symbol)
                for name, symbol in global_declaration.locals.items():
                    self.globals.setdefault(name, symbol)
            else:
                node, exported = unwrap_statement(statement)
                if node is None:
                    continue
                is_default = statement.type == "export_statement" and has_token(statement, "default")
                self._bind_declaration(node, container, container_symbol, exported, is_default)

    def _bind_declaration(
        self,
        node: tree_sitter.Node,
        container: Declaration,
        container_symbol: Symbol,
        exported: bool,
        is_default: bool = False,
    ) -> None:
        kind = DECLARATION_NODE_KINDS.get(node.type)
        if kind is None:
            if node.type == "import_alias":
                self._bind_import_alias(node, container, exported)
            return

        if kind == DeclarationKind.VARIABLE:
            self._bind_variables(node, container, container_symbol, exported)
            return

        name_node = node.child_by_field_name("name")
        declaration = Declaration(
            kind=kind,
            node=node,
            source_file=container.source_file,
            name_node=name_node,
            container=container,
            exported=exported,
        )
        self._index(declaration)

        symbol: Optional[Symbol] = None
        if name_node is not None:
            symbol = self._declare(container.locals, node_text(name_node), declaration)
            symbol.parent = container_symbol
            if exported and not is_default:
                container_symbol.exports[symbol.name] = symbol
        if is_default:
            if symbol is None:
                symbol = Symbol(name="default", flags=_KIND_FLAGS[kind], declarations=[declaration])
                declaration.symbol = symbol
            container_symbol.exports["default"] = symbol

        if kind == DeclarationKind.CLASS:
            self._bind_class(declaration, symbol)
        elif kind == DeclarationKind.INTERFACE:
            self._bind_interface(declaration, symbol)
        elif kind == DeclarationKind.ENUM:
            self._bind_enum(declaration, symbol)
        elif kind == DeclarationKind.MODULE:
            self._bind_module(declaration, symbol)
        elif kind in (DeclarationKind.FUNCTION, DeclarationKind.TYPE_ALIAS):
            self._bind_function_like(declaration)

    # =========================================================================
    # Containers
    # =========================================================================

    def _bind_class(self, declaration: Declaration, symbol: Optional[Symbol]) -> None:
        node = declaration.node
        members_owner = symbol if symbol is not None else Symbol(name="", flags=SymbolFlags.CLASS)

        self._bind_type_parameters(node, declaration, members_owner.members, members_owner)

        body = field_or_type(node, "body", "class_body")
        if body is None:
            return
        for member in body.named_children:
            self._bind_class_member(member, declaration, members_owner)

    def _bind_class_member(self, member: tree_sitter.Node, class_declaration: Declaration, class_symbol: Symbol) -> None:
        member_type = member.type
        if member_type in ("decorator", "comment", "class_static_block"):
            return

        modifiers = modifier_tokens(member)
        table = class_symbol.exports if "static" in modifiers else class_symbol.members
        name_node = member.child_by_field_name("name")

        if member_type == "index_signature":
            kind = DeclarationKind.INDEX_SIGNATURE
            name = "__index"
        elif member_type in ("method_definition", "method_signature", "abstract_method_signature"):
            name = node_text(name_node)
            if has_token(member, "get"):
                kind = DeclarationKind.GET_ACCESSOR
            elif has_token(member, "set"):
                kind = DeclarationKind.SET_ACCESSOR
            elif name == "constructor" and table is class_symbol.members:
                kind = DeclarationKind.CONSTRUCTOR
                name = CONSTRUCTOR_SYMBOL_NAME
            else:
                kind = DeclarationKind.METHOD
        elif member_type == "public_field_definition":
            kind = DeclarationKind.PROPERTY
            name = node_text(name_node)
        else:
            logger.debug(f"Skipping unsupported class member {member_type}")
            return

        if not name:
            return

        declaration = Declaration(
            kind=kind,
            node=member,
            source_file=class_declaration.source_file,
            name_node=name_node,
            container=class_declaration,
        )
        self._index(declaration)
        symbol = self._declare(table, name, declaration)
        symbol.parent = class_symbol

        if kind in (
            DeclarationKind.METHOD,
            DeclarationKind.CONSTRUCTOR,
            DeclarationKind.GET_ACCESSOR,
            DeclarationKind.SET_ACCESSOR,
        ):
            self._bind_function_like(declaration)

        if kind == DeclarationKind.CONSTRUCTOR:
            # Parameter properties become instance members
            for parameter_symbol in declaration.parameters:
                parameter_declaration = parameter_symbol.declarations[0]
                parameter_modifiers = modifier_tokens(parameter_declaration.node)
                if any(m in parameter_modifiers for m in ("public", "private", "protected", "readonly", "override")):
                    property_symbol = self._declare(
                        class_symbol.members,
                        parameter_symbol.name,
                        parameter_declaration,
                        flags=SymbolFlags.PROPERTY,
                        rebind=False,
                    )
                    property_symbol.parent = class_symbol

    def _bind_interface(self, declaration: Declaration, symbol: Optional[Symbol]) -> None:
        node = declaration.node
        owner = symbol if symbol is not None else Symbol(name="", flags=SymbolFlags.INTERFACE)
        self._bind_type_parameters(node, declaration, owner.members, owner)

        body = field_or_type(node, "body", "interface_body", "object_type")
        if body is None:
            return
        for member in body.named_children:
            self.bind_type_member(member, declaration, owner.members, owner)

    def bind_type_member(
        self,
        member: tree_sitter.Node,
        container: Declaration,
        table: Dict[str, Symbol],
        owner: Optional[Symbol] = None,
    ) -> Optional[Symbol]:
        """Bind one interface or object-type member into ``table``."""
        entry = _TYPE_MEMBER_KINDS.get(member.type)
        if entry is None:
            return None
        kind, synthetic_name = entry
        name_node = member.child_by_field_name("name")
        name = synthetic_name or node_text(name_node)
        if not name:
            return None
        declaration = Declaration(
            kind=kind,
            node=member,
            source_file=container.source_file,
            name_node=name_node if synthetic_name is None else None,
            container=container,
        )
        self._index(declaration)
        symbol = self._declare(table, name, declaration)
        symbol.parent = owner
        if kind in (
            DeclarationKind.METHOD_SIGNATURE,
            DeclarationKind.CALL_SIGNATURE,
            DeclarationKind.CONSTRUCT_SIGNATURE,
            DeclarationKind.INDEX_SIGNATURE,
        ):
            self._bind_function_like(declaration)
        return symbol

    def _bind_enum(self, declaration: Declaration, symbol: Optional[Symbol]) -> None:
        body = field_or_type(declaration.node, "body", "enum_body")
        if body is None or symbol is None:
            return
        for member in body.named_children:
            if member.type == "comment":
                continue
            if member.type == "enum_assignment":
                name_node = member.child_by_field_name("name") or member.named_children[0]
            else:
                name_node = member
            name = node_text(name_node)
            if member.type == "string" or name_node.type == "string":
                name = string_literal_value(name_node) or name
            member_declaration = Declaration(
                kind=DeclarationKind.ENUM_MEMBER,
                node=member,
                source_file=declaration.source_file,
                name_node=name_node,
                container=declaration,
            )
            self._index(member_declaration)
            member_symbol = self._declare(symbol.exports, name, member_declaration)
            member_symbol.parent = symbol

    def _bind_module(self, declaration: Declaration, symbol: Optional[Symbol]) -> None:
        body = field_or_type(declaration.node, "body", "statement_block")
        if body is None or symbol is None:
            return
        self._bind_statements(body.named_children, declaration, symbol)

    # =========================================================================
    # Function-like declarations
    # =========================================================================

    def _bind_function_like(self, declaration: Declaration) -> None:
        node = declaration.node
        self._bind_type_parameters(node, declaration, declaration.locals, None)
        declaration.type_parameters = [
            s for s in declaration.locals.values() if s.has_flag(SymbolFlags.TYPE_PARAMETER)
        ]

        parameters = field_or_type(node, "parameters", "formal_parameters")
        if parameters is None:
            return
        for parameter in parameters.named_children:
            if parameter.type not in PARAMETER_NODE_TYPES:
                continue
            pattern = parameter.child_by_field_name("pattern")
            if pattern is None:
                pattern = next(
                    (c for c in parameter.named_children if c.type not in ("accessibility_modifier", "override_modifier", "decorator")),
                    None,
                )
            if pattern is None or pattern.type == "this":
                continue
            name_node = pattern
            if pattern.type == "rest_pattern":
                name_node = next((c for c in pattern.named_children), pattern)
            parameter_declaration = Declaration(
                kind=DeclarationKind.PARAMETER,
                node=parameter,
                source_file=declaration.source_file,
                name_node=name_node,
                container=declaration,
            )
            self._index(parameter_declaration)
            parameter_symbol = self._declare(declaration.locals, node_text(name_node), parameter_declaration)
            parameter_symbol.parent = declaration.symbol
            declaration.parameters.append(parameter_symbol)

    def _bind_type_parameters(
        self,
        node: tree_sitter.Node,
        container: Declaration,
        table: Dict[str, Symbol],
        owner: Optional[Symbol],
    ) -> None:
        type_parameters = field_or_type(node, "type_parameters", "type_parameters")
        if type_parameters is None:
            return
        for type_parameter in children_by_type(type_parameters, "type_parameter"):
            name_node = type_parameter.child_by_field_name("name") or child_by_type(type_parameter, "type_identifier")
            if name_node is None:
                continue
            declaration = Declaration(
                kind=DeclarationKind.TYPE_PARAMETER,
                node=type_parameter,
                source_file=container.source_file,
                name_node=name_node,
                container=container,
            )
            self._index(declaration)
            symbol = self._declare(table, node_text(name_node), declaration)
            symbol.parent = owner

    def _bind_variables(
        self,
        node: tree_sitter.Node,
        container: Declaration,
        container_symbol: Symbol,
        exported: bool,
    ) -> None:
        for declarator in children_by_type(node, "variable_declarator"):
            name_node = declarator.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                continue
            declaration = Declaration(
                kind=DeclarationKind.VARIABLE,
                node=declarator,
                source_file=container.source_file,
                name_node=name_node,
                container=container,
                exported=exported,
            )
            self._index(declaration)
            symbol = self._declare(container.locals, node_text(name_node), declaration)
            symbol.parent = container_symbol
            if exported:
                container_symbol.exports[symbol.name] = symbol

    # =========================================================================
    # Imports and exports
    # =========================================================================

    def _bind_import(self, node: tree_sitter.Node, container: Declaration) -> None:
        specifier = string_literal_value(node.child_by_field_name("source"))
        clause = child_by_type(node, "import_clause")

        require_clause = child_by_type(node, "import_require_clause")
        if require_clause is not None:
            name_node = child_by_type(require_clause, "identifier")
            specifier = string_literal_value(
                require_clause.child_by_field_name("source") or child_by_type(require_clause, "string")
            )
            if name_node is not None and specifier:
                self._declare_alias(container, name_node, node, module=specifier, import_name="*")
            return

        if clause is None or not specifier:
            return

        for part in clause.named_children:
            if part.type == "identifier":
                self._declare_alias(container, part, node, module=specifier, import_name="default")
            elif part.type == "namespace_import":
                name_node = child_by_type(part, "identifier")
                if name_node is not None:
                    self._declare_alias(container, name_node, part, module=specifier, import_name="*")
            elif part.type == "named_imports":
                for import_specifier in children_by_type(part, "import_specifier"):
                    name_node = import_specifier.child_by_field_name("name")
                    alias_node = import_specifier.child_by_field_name("alias")
                    if name_node is None:
                        continue
                    imported = string_literal_value(name_node) if name_node.type == "string" else node_text(name_node)
                    self._declare_alias(
                        container,
                        alias_node or name_node,
                        import_specifier,
                        module=specifier,
                        import_name=imported,
                    )

    def _bind_import_alias(self, node: tree_sitter.Node, container: Declaration, exported: bool) -> None:
        # import Shape = Geometry.Shape;
        named = node.named_children
        if len(named) < 2:
            return
        symbol = self._declare_alias(container, named[0], node, entity=named[1])
        if exported and container.symbol is not None:
            container.symbol.exports[symbol.name] = symbol

    def _bind_export_clause(self, node: tree_sitter.Node, container: Declaration, container_symbol: Symbol) -> None:
        specifier = string_literal_value(node.child_by_field_name("source"))
        export_clause = child_by_type(node, "export_clause")
        namespace_export = child_by_type(node, "namespace_export")

        if export_clause is None and namespace_export is None:
            if specifier and has_token(node, "*"):
                # export * from './module'
                container_symbol.meta.setdefault("export_stars", []).append(specifier)
                return
            value = node.child_by_field_name("value")
            if value is not None and value.type == "identifier" and has_token(node, "default"):
                alias = Symbol(name="default", flags=SymbolFlags.ALIAS, meta={"local": node_text(value), "scope": container})
                alias.declarations.append(
                    Declaration(kind=DeclarationKind.EXPORT_SPECIFIER, node=node, source_file=container.source_file, container=container)
                )
                container_symbol.exports["default"] = alias
            return

        if namespace_export is not None and specifier:
            name_node = next(iter(namespace_export.named_children), None)
            if name_node is not None:
                symbol = self._make_alias(container, name_node, namespace_export, module=specifier, import_name="*")
                container_symbol.exports[symbol.name] = symbol
            return

        for export_specifier in children_by_type(export_clause, "export_specifier"):
            name_node = export_specifier.child_by_field_name("name")
            alias_node = export_specifier.child_by_field_name("alias")
            if name_node is None:
                continue
            local_name = node_text(name_node)
            if specifier:
                symbol = self._make_alias(
                    container, alias_node or name_node, export_specifier, module=specifier, import_name=local_name
                )
            else:
                symbol = self._make_alias(container, alias_node or name_node, export_specifier, local=local_name)
            container_symbol.exports[symbol.name] = symbol

    def _declare_alias(
        self,
        container: Declaration,
        name_node: tree_sitter.Node,
        node: tree_sitter.Node,
        **target: object,
    ) -> Symbol:
        symbol = self._make_alias(container, name_node, node, kind=DeclarationKind.IMPORT, **target)
        container.locals[symbol.name] = symbol
        return symbol

    def _make_alias(
        self,
        container: Declaration,
        name_node: tree_sitter.Node,
        node: tree_sitter.Node,
        kind: DeclarationKind = DeclarationKind.EXPORT_SPECIFIER,
        **target: object,
    ) -> Symbol:
        name = string_literal_value(name_node) if name_node.type == "string" else node_text(name_node)
        declaration = Declaration(
            kind=kind,
            node=node,
            source_file=container.source_file,
            name_node=name_node,
            container=container,
        )
        self._index(declaration)
        symbol = Symbol(name=name, flags=SymbolFlags.ALIAS, declarations=[declaration])
        symbol.meta.update(target)
        symbol.meta["scope"] = container
        declaration.symbol = symbol
        self._symbols_by_name[node_key(name_node)] = symbol
        return symbol

    # =========================================================================
    # Helpers
    # =========================================================================

    def _index(self, declaration: Declaration) -> None:
        self._declarations[node_key(declaration.node)] = declaration

    def _declare(
        self,
        table: Dict[str, Symbol],
        name: str,
        declaration: Declaration,
        flags: Optional[SymbolFlags] = None,
        rebind: bool = True,
    ) -> Symbol:
        """Add ``declaration`` to the symbol called ``name`` in ``table``.

        Declarations sharing a name merge into one symbol (accessor pairs,
        overloads, interface and namespace merging).
        """
        symbol_flags = flags if flags is not None else _KIND_FLAGS.get(declaration.kind, SymbolFlags.NONE)
        symbol = table.get(name)
        if symbol is None:
            symbol = Symbol(name=name, flags=symbol_flags)
            table[name] = symbol
        else:
            symbol.flags |= symbol_flags
        symbol.declarations.append(declaration)
        if rebind:
            declaration.symbol = symbol
            if declaration.name_node is not None:
                self._symbols_by_name[node_key(declaration.name_node)] = symbol
        return symbol

"""Model builder — turns the statements of a module or namespace into components.

``create`` walks the direct children of a program root or namespace body,
unwraps ``export``/``declare`` wrappers and hands each class, interface,
enum, namespace and function to its factory. Other statements are
ignored, and class, interface and function bodies are not entered.
"""

import logging
from typing import Callable, Dict, List, Set, Tuple

import tree_sitter

from ..ast_parser import Declaration, DeclarationKind, TypeChecker
from ..ast_parser.binder import unwrap_statement
from ..model import Component
from . import class_factory, enum_factory, interface_factory, method_factory, namespace_factory
from .common import has_body

logger = logging.getLogger(__name__)

_CONTAINER_NODE_TYPES = ("program", "statement_block")


def is_node_exported(node: tree_sitter.Node) -> bool:
    """True if the statement is exported or sits directly in a module or namespace body."""
    if node.type == "export_statement":
        return True
    parent = node.parent
    return parent is not None and parent.type in _CONTAINER_NODE_TYPES


def create(file_name: str, node: tree_sitter.Node, checker: TypeChecker) -> Tuple[Component, ...]:
    """Build the components declared directly inside ``node``.

    Args:
        file_name: Name recorded on classes and namespaces
        node: A ``program`` root or a namespace ``statement_block``
        checker: Type checker of the program that owns ``node``

    Returns:
        Components in declaration order
    """
    components: List[Component] = []
    emitted: Set[int] = set()

    for child in node.named_children:
        if not is_node_exported(child):
            continue
        declaration_node, _ = unwrap_statement(child)
        if declaration_node is None:
            continue
        declaration = checker.binder.get_declaration(declaration_node)
        if declaration is None:
            continue
        handler = _HANDLERS.get(declaration.kind)
        if handler is None:
            continue
        if declaration.name_node is None:
            logger.debug(f"Skipping unnamed {declaration.kind.value} in {file_name}")
            continue
        symbol = checker.get_symbol_at_location(declaration.name_node)
        if symbol is None:
            logger.debug(f"Skipping {declaration.name}: no symbol in {file_name}")
            continue
        component = handler(file_name, declaration, checker, emitted)
        if component is not None:
            components.append(component)

    return tuple(components)


# ── Per-kind handlers ────────────────────────────────────────────────


def _create_class(file_name: str, declaration: Declaration, checker: TypeChecker, emitted: Set[int]):
    symbol = declaration.symbol
    if id(symbol) in emitted:
        return None
    emitted.add(id(symbol))
    return class_factory.create(file_name, symbol, checker)


def _create_interface(file_name: str, declaration: Declaration, checker: TypeChecker, emitted: Set[int]):
    symbol = declaration.symbol
    if id(symbol) in emitted:
        return None
    emitted.add(id(symbol))
    return interface_factory.create(symbol, checker)


def _create_enum(file_name: str, declaration: Declaration, checker: TypeChecker, emitted: Set[int]):
    symbol = declaration.symbol
    if id(symbol) in emitted:
        return None
    emitted.add(id(symbol))
    return enum_factory.create(symbol)


def _create_namespace(file_name: str, declaration: Declaration, checker: TypeChecker, emitted: Set[int]):
    return namespace_factory.create(file_name, declaration.symbol, declaration, checker)


def _create_function(file_name: str, declaration: Declaration, checker: TypeChecker, emitted: Set[int]):
    symbol = declaration.symbol
    overloaded = any(not has_body(d) for d in symbol.get_declarations() if d.kind == DeclarationKind.FUNCTION)
    if overloaded and has_body(declaration):
        return None
    return method_factory.create(symbol, declaration, checker)


_HANDLERS: Dict[DeclarationKind, Callable] = {
    DeclarationKind.CLASS: _create_class,
    DeclarationKind.INTERFACE: _create_interface,
    DeclarationKind.ENUM: _create_enum,
    DeclarationKind.MODULE: _create_namespace,
    DeclarationKind.FUNCTION: _create_function,
}

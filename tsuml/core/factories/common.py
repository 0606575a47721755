"""Helpers shared by the component factories.

Modifier probing, optional/initializer checks, heritage clauses and the
origin-file lookup used to draw associations.
"""

import logging
from typing import List, Optional, Tuple

import tree_sitter

from ..ast_parser import Declaration, Symbol, SymbolFlags, Type, TypeChecker
from ..ast_parser.utils import has_token
from ..constants import COLLECTION_TYPE_NAMES, MODIFIER_PROBE_ORDER, MODIFIER_PUBLIC
from ..model import HeritagePair

logger = logging.getLogger(__name__)


def get_member_modifier(declaration: Declaration) -> str:
    """Visibility written on a declaration; ``public`` when none is."""
    modifiers = declaration.modifiers
    for modifier in MODIFIER_PROBE_ORDER:
        if modifier in modifiers:
            return modifier
    return MODIFIER_PUBLIC


def is_modifier(declaration: Declaration, modifier: str) -> bool:
    return declaration.has_modifier(modifier)


def is_optional(declaration: Declaration) -> bool:
    node = declaration.node
    return node.type == "optional_parameter" or has_token(node, "?")


def has_initializer(declaration: Declaration) -> bool:
    return declaration.node.child_by_field_name("value") is not None


def has_body(declaration: Declaration) -> bool:
    return declaration.node.child_by_field_name("body") is not None


def get_original_file(symbol: Symbol, checker: TypeChecker) -> str:
    """File of the first declaration of ``symbol``, looking through aliases."""
    if symbol.has_flag(SymbolFlags.ALIAS):
        symbol = checker.get_aliased_symbol(symbol)
    declarations = symbol.get_declarations()
    if not declarations:
        return ""
    return declarations[0].file_name


def get_original_type_reference(type_: Optional[Type], checker: TypeChecker) -> Tuple[str, str]:
    """File and qualified name of the declaration ``type_`` names.

    Collections are unwrapped to their element type and import aliases to
    the declaration they bind, so a renamed import still reports the
    declared name. ``("", "")`` when nothing resolves.
    """
    if type_ is None:
        return "", ""
    current = type_
    type_symbol = current.get_symbol()
    while type_symbol is not None and type_symbol.name in COLLECTION_TYPE_NAMES:
        arguments = checker.get_type_arguments(current)
        if not arguments:
            return "", ""
        current = arguments[0]
        type_symbol = current.get_symbol()
    if type_symbol is None:
        return "", ""
    target = checker.get_aliased_symbol(type_symbol)
    declarations = target.get_declarations()
    if not declarations:
        return "", ""
    return declarations[0].file_name, checker.get_fully_qualified_name(target)


def get_heritage_clause_names(references: List[tree_sitter.Node], checker: TypeChecker) -> List[HeritagePair]:
    """One ``HeritagePair`` per base reference; unresolved ones are empty."""
    pairs: List[HeritagePair] = []
    for reference in references:
        symbol = checker.get_symbol_at_location(reference)
        if symbol is None:
            logger.debug(f"Unresolved heritage reference {reference.text!r}")
            pairs.append(HeritagePair())
            continue
        target = checker.get_aliased_symbol(symbol)
        if not target.get_declarations():
            target = symbol
        pairs.append(HeritagePair(checker.get_fully_qualified_name(target), get_original_file(symbol, checker)))
    return pairs

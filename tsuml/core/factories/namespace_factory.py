"""Namespace factory."""

from ..ast_parser import Declaration, Symbol, TypeChecker
from ..ast_parser.utils import field_or_type
from ..model import Namespace


def create(file_name: str, namespace_symbol: Symbol, declaration: Declaration, checker: TypeChecker) -> Namespace:
    """Build a ``Namespace`` from one ``namespace`` block.

    A namespace split over several blocks yields one node per block, each
    holding the parts declared in that block. Ambient modules named by a
    string literal (``declare module 'ext'``) drop the quotes.
    """
    from .component_factory import create as create_components

    body = field_or_type(declaration.node, "body", "statement_block")
    parts = create_components(file_name, body, checker) if body is not None else ()
    name = namespace_symbol.get_name().strip("'\"`")
    return Namespace(name=name, file_name=file_name, parts=parts)

"""tsuml AST Parser — tree-sitter based TypeScript program model.

Public API:
    create_program(root_names, options, host) → Program
    create_program_from_sources(mapping, options) → Program
    Program.get_type_checker() → TypeChecker
    parse_source(source, file_path) → SourceFile
"""

from .checker import TypeChecker
from .models import Declaration, DeclarationKind, Signature, SourceFile, Symbol, SymbolFlags
from .parser import TypeScriptParser
from .program import (
    CompilerHost,
    CompilerOptions,
    InMemoryCompilerHost,
    Program,
    create_program,
    create_program_from_sources,
)
from .types import Type
from .utils import detect_dialect, is_declaration_file

__all__ = [
    "parse_source",
    "create_program",
    "create_program_from_sources",
    "detect_dialect",
    "is_declaration_file",
    "CompilerHost",
    "CompilerOptions",
    "Declaration",
    "DeclarationKind",
    "InMemoryCompilerHost",
    "Program",
    "Signature",
    "SourceFile",
    "Symbol",
    "SymbolFlags",
    "Type",
    "TypeChecker",
    "TypeScriptParser",
]


def parse_source(source_text: str, file_path: str) -> SourceFile:
    """Parse TypeScript source text without binding it.

    Args:
        source_text: Source code as string
        file_path: File name recorded on the result; selects TSX for ``.tsx``

    Returns:
        SourceFile holding the tree-sitter tree and module specifiers
    """
    return TypeScriptParser().parse_source(source_text, file_path)

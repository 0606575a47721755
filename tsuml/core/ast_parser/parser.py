"""TypeScript source parser using tree-sitter.

Turns source text into ``SourceFile`` objects: the tree-sitter tree plus
the module specifiers the file imports or re-exports, which the program
uses to discover dependencies.
"""

import logging
from typing import List

import tree_sitter
import tree_sitter_typescript

from .models import SourceFile
from .utils import child_by_type, detect_dialect, is_declaration_file, string_literal_value

logger = logging.getLogger(__name__)

_TS_LANGUAGE = tree_sitter.Language(tree_sitter_typescript.language_typescript())
_TSX_LANGUAGE = tree_sitter.Language(tree_sitter_typescript.language_tsx())


class TypeScriptParser:
    """tree-sitter based TypeScript parser.

    Produces one ``SourceFile`` per module. ``.tsx`` files use the TSX
    grammar; everything else uses the plain TypeScript grammar.
    """

    def get_tree_sitter_language(self, file_path: str) -> tree_sitter.Language:
        if detect_dialect(file_path) == "tsx":
            return _TSX_LANGUAGE
        return _TS_LANGUAGE

    def parse_source(self, source_text: str, file_path: str) -> SourceFile:
        """Parse source code string into a SourceFile.

        Args:
            source_text: Source code as string
            file_path: File path recorded as the module's name

        Returns:
            SourceFile with the parsed tree and its module specifiers
        """
        source_bytes = source_text.encode("utf-8")
        parser = tree_sitter.Parser(self.get_tree_sitter_language(file_path))
        tree = parser.parse(source_bytes)

        if tree.root_node.has_error:
            logger.warning(f"Tree-sitter reported parse errors in {file_path}")

        return SourceFile(
            file_name=file_path,
            source=source_bytes,
            tree=tree,
            is_declaration_file=is_declaration_file(file_path),
            has_parse_errors=tree.root_node.has_error,
            module_specifiers=self.extract_module_specifiers(tree),
        )

    def extract_module_specifiers(self, tree: tree_sitter.Tree) -> List[str]:
        """Extract the ``from '...'`` specifiers of imports and re-exports."""
        specifiers: List[str] = []
        for child in tree.root_node.children:
            if child.type not in ("import_statement", "export_statement"):
                continue
            source_node = child.child_by_field_name("source")
            if source_node is None and child.type == "import_statement":
                # import x = require('...')
                require_clause = child_by_type(child, "import_require_clause")
                if require_clause is not None:
                    source_node = require_clause.child_by_field_name("source") or child_by_type(
                        require_clause, "string"
                    )
            value = string_literal_value(source_node)
            if value:
                specifiers.append(value)
        return specifiers

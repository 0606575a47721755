"""AST Parser utilities.

Source-file detection and small tree-sitter node helpers shared by the
parser, binder and checker.
"""

import os
from typing import Dict, Iterator, List, Optional, Tuple

import tree_sitter

# Extension → tree-sitter dialect mapping
SUPPORTED_EXTENSIONS: Dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

# Probe order used when resolving an extension-less module specifier
RESOLUTION_SUFFIXES = (".ts", ".tsx", ".d.ts", ".mts", ".cts")

DECLARATION_FILE_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")

# Keyword tokens that tree-sitter-typescript exposes as modifier children
MODIFIER_KEYWORDS = frozenset({
    "export",
    "default",
    "declare",
    "abstract",
    "static",
    "readonly",
    "async",
    "const",
    "accessor",
    "override",
    "public",
    "private",
    "protected",
})


def detect_dialect(file_path: str) -> Optional[str]:
    """Detect the tree-sitter dialect from a file extension.

    Args:
        file_path: Path to the source file

    Returns:
        "typescript", "tsx" or None if the file is not TypeScript
    """
    _, ext = os.path.splitext(file_path)
    return SUPPORTED_EXTENSIONS.get(ext.lower())


def is_supported_file(file_path: str) -> bool:
    """Check if a file has a TypeScript extension."""
    return detect_dialect(file_path) is not None


def is_declaration_file(file_path: str) -> bool:
    """Check if a file is an ambient declaration file (``.d.ts``)."""
    lowered = file_path.lower()
    return any(lowered.endswith(suffix) for suffix in DECLARATION_FILE_SUFFIXES)


# =========================================================================
# Node helpers
# =========================================================================


def node_key(node: tree_sitter.Node) -> Tuple[int, int, int, str]:
    """Stable identity for a node across every tree of a program.

    tree-sitter hands out a fresh Python wrapper on every access, so the
    underlying subtree id plus span and type is used to index nodes.
    """
    return (node.id, node.start_byte, node.end_byte, node.type)


def node_text(node: Optional[tree_sitter.Node]) -> str:
    if node is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def child_by_type(node: tree_sitter.Node, *type_names: str) -> Optional[tree_sitter.Node]:
    for child in node.children:
        if child.type in type_names:
            return child
    return None


def children_by_type(node: tree_sitter.Node, *type_names: str) -> List[tree_sitter.Node]:
    return [child for child in node.children if child.type in type_names]


def field_or_type(node: tree_sitter.Node, field_name: str, *type_names: str) -> Optional[tree_sitter.Node]:
    """Look a child up by field name, falling back to its node type.

    Field names moved between tree-sitter-typescript releases; the
    fallback keeps lookups working on either side of those changes.
    """
    child = node.child_by_field_name(field_name)
    if child is not None:
        return child
    if type_names:
        return child_by_type(node, *type_names)
    return None


def modifier_tokens(node: tree_sitter.Node) -> List[str]:
    """Return the modifier keywords written on a declaration, in source order.

    ``accessibility_modifier`` and ``override_modifier`` are named wrapper
    nodes; the remaining modifiers are anonymous keyword tokens.
    """
    tokens: List[str] = []
    for child in node.children:
        if child.type == "accessibility_modifier":
            tokens.append(node_text(child).strip())
        elif child.type == "override_modifier":
            tokens.append("override")
        elif not child.is_named and child.type in MODIFIER_KEYWORDS:
            tokens.append(child.type)
        elif child.type in ("decorator", "comment"):
            continue
        elif child.is_named:
            # Modifiers always precede the declaration name
            break
    return tokens


def has_token(node: tree_sitter.Node, token: str) -> bool:
    """Check for an anonymous punctuation/keyword child such as ``?``."""
    return any(not child.is_named and child.type == token for child in node.children)


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def iter_descendants(node: tree_sitter.Node, stop_types: Tuple[str, ...] = ()) -> Iterator[tree_sitter.Node]:
    """Depth-first walk below ``node`` that does not enter ``stop_types``."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        if current.type in stop_types:
            continue
        stack.extend(reversed(current.children))


def string_literal_value(node: Optional[tree_sitter.Node]) -> Optional[str]:
    """Return the unquoted value of a ``string`` node."""
    if node is None:
        return None
    fragment = child_by_type(node, "string_fragment")
    if fragment is not None:
        return node_text(fragment)
    text = node_text(node)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text or None

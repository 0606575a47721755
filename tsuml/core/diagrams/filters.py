"""Output-shaping filters applied to the documented files before rendering."""

import logging
from collections import deque
from dataclasses import replace
from typing import Callable, Dict, List, Set, Tuple

from ..errors import ConfigurationError
from ..model import Component, ComponentKind, File
from .options import RenderOptions

logger = logging.getLogger(__name__)

Predicate = Callable[[Component], bool]


def qualified_name(namespace_path: Tuple[str, ...], name: str) -> str:
    return ".".join(namespace_path + (name,))


def iter_type_nodes(files: List[File]):
    """Yield ``(qualified name, node)`` for every class, interface and enum."""
    for file in files:
        yield from _iter_parts(file.parts, ())


def _iter_parts(parts, namespace_path: Tuple[str, ...]):
    for part in parts:
        if part.component_kind == ComponentKind.NAMESPACE:
            yield from _iter_parts(part.parts, namespace_path + (part.name,))
        elif part.component_kind in (ComponentKind.CLASS, ComponentKind.INTERFACE, ComponentKind.ENUM):
            yield qualified_name(namespace_path, part.name), part


def apply_filters(files: List[File], options: RenderOptions) -> List[File]:
    """Return the files with only the parts the options keep.

    Namespaces survive when at least one nested part does.
    """
    predicates: List[Predicate] = []
    if options.only_interfaces:
        predicates.append(lambda part: part.component_kind == ComponentKind.INTERFACE)
    if options.only_classes:
        predicates.append(lambda part: part.component_kind == ComponentKind.CLASS)
    if options.target_class:
        chain = hierarchy_chain(files, options.target_class)
        predicates.append(lambda part: id(part) in chain)

    if not predicates:
        return list(files)

    def keep(part: Component) -> bool:
        return all(predicate(part) for predicate in predicates)

    return [replace(file, parts=_filter_parts(file.parts, keep)) for file in files]


def _filter_parts(parts, keep: Predicate):
    kept = []
    for part in parts:
        if part.component_kind == ComponentKind.NAMESPACE:
            nested = _filter_parts(part.parts, keep)
            if nested:
                kept.append(replace(part, parts=nested))
        elif keep(part):
            kept.append(part)
    return tuple(kept)


def hierarchy_chain(files: List[File], target_name: str) -> Set[int]:
    """Ids of the target type plus its transitive ancestors and descendants.

    ``target_name`` may be a bare or namespace-qualified name. Bases are
    looked up by the file and qualified name their heritage pair resolves
    to; pairs without an origin file fall back to the name alone.

    Raises:
        ConfigurationError: If no class or interface has that name.
    """
    nodes: Dict[str, List] = {}
    declared: Dict[Tuple[str, str], List] = {}
    for name, node in iter_type_nodes(files):
        if node.component_kind in (ComponentKind.CLASS, ComponentKind.INTERFACE):
            nodes.setdefault(name, []).append(node)
            declared.setdefault((node.file_name, name), []).append(node)
            short = name.rsplit(".", 1)[-1]
            if short != name:
                nodes.setdefault(short, []).append(node)

    targets = nodes.get(target_name)
    if not targets:
        raise ConfigurationError(f"Target class '{target_name}' was not found in the input files")

    def bases_of(node) -> List:
        bases = []
        for pair in node.heritage:
            if pair.origin_file:
                bases.extend(declared.get((pair.origin_file, pair.qualified_name), []))
            else:
                bases.extend(nodes.get(pair.qualified_name, []))
        return bases

    chain: Dict[int, object] = {id(node): node for node in targets}

    # Ancestors
    queue = deque(targets)
    while queue:
        node = queue.popleft()
        for base in bases_of(node):
            if id(base) not in chain:
                chain[id(base)] = base
                queue.append(base)

    # Descendants
    children: Dict[int, List] = {}
    for candidates in nodes.values():
        for node in candidates:
            for base in bases_of(node):
                siblings = children.setdefault(id(base), [])
                if all(s is not node for s in siblings):
                    siblings.append(node)
    queue = deque(targets)
    seen: Set[int] = {id(node) for node in targets}
    while queue:
        node = queue.popleft()
        for child in children.get(id(node), []):
            if id(child) not in seen:
                seen.add(id(child))
                chain[id(child)] = child
                queue.append(child)

    logger.debug(f"Hierarchy of {target_name}: {len(chain)} types")
    return set(chain)


"""Association inference.

A type uses another when one of its properties, method parameters,
constructor parameters or return types resolves to it. The used type must be a
retained class, interface or enum declared in the file the usage resolves
to, and either be the declaration the usage resolves to or have its name
appear in the type text. Renamed imports match through the resolved name;
the origin file keeps same-named types in different modules apart.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..constants import COLLECTION_TYPE_NAMES
from ..model import ComponentKind, File, Method, Property
from .filters import iter_type_nodes

logger = logging.getLogger(__name__)

_COLLECTION_PREFIX = re.compile(r"^(?:readonly\s+)?(?:%s)<" % "|".join(sorted(COLLECTION_TYPE_NAMES)))


@dataclass(frozen=True)
class Association:
    """An edge from ``owner`` to ``target``.

    ``member`` is set for member-level edges only; ``many`` marks usage
    through a collection.
    """

    owner: str
    target: str
    many: bool = False
    member: Optional[str] = None


@dataclass(frozen=True)
class _Usage:
    member: str
    type_text: str
    origin_file: str
    origin_name: str


def is_collection_type(type_text: str) -> bool:
    text = type_text.strip()
    return text.endswith("[]") or bool(_COLLECTION_PREFIX.match(text))


def _iter_usages(node) -> Iterator[_Usage]:
    constructors = getattr(node, "constructor_methods", ())
    for member in tuple(constructors) + tuple(node.members):
        if isinstance(member, Property):
            yield _Usage(member.name, member.return_type, member.return_type_file, member.return_type_name)
        elif isinstance(member, Method):
            for parameter in member.parameters:
                yield _Usage(
                    member.name, parameter.parameter_type, parameter.parameter_type_file, parameter.parameter_type_name
                )
            if not member.is_constructor:
                yield _Usage(member.name, member.return_type, member.return_type_file, member.return_type_name)


def infer_associations(files: List[File], field_level: bool = False) -> List[Association]:
    """Association edges between the types in ``files``, in member order.

    Class-level edges are deduplicated per owner, target and cardinality;
    member-level edges per owner, member, target and cardinality.
    """
    type_nodes: List[Tuple[str, object]] = list(iter_type_nodes(files))
    by_file: Dict[str, List[Tuple[str, object]]] = {}
    for name, node in type_nodes:
        by_file.setdefault(node.file_name, []).append((name, node))

    associations: List[Association] = []
    seen = set()
    for owner_name, owner in type_nodes:
        if owner.component_kind == ComponentKind.ENUM:
            continue
        for usage in _iter_usages(owner):
            if not usage.origin_file:
                continue
            many = is_collection_type(usage.type_text)
            for target_name, target in by_file.get(usage.origin_file, []):
                if target is owner or not _resolves_to(usage, target_name, target):
                    continue
                member = usage.member if field_level else None
                key = (owner_name, member, target_name, many)
                if key in seen:
                    continue
                seen.add(key)
                associations.append(Association(owner_name, target_name, many, member))

    logger.debug(f"Inferred {len(associations)} associations")
    return associations


def _resolves_to(usage: _Usage, target_name: str, target) -> bool:
    if usage.origin_name == target_name:
        return True
    return _names_type(usage.type_text, target.name)


def _names_type(type_text: str, name: str) -> bool:
    return re.search(r"(?<![\w$])%s(?![\w$])" % re.escape(name), type_text) is not None

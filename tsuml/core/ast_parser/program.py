"""Program — a set of parsed and bound source files.

Root files are parsed first; every relative (or ``paths``-mapped) import
is then followed depth-first, and files are appended in postorder so that
dependencies precede the files that import them.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .binder import Binder
from .models import SourceFile
from .parser import TypeScriptParser
from .utils import RESOLUTION_SUFFIXES, is_supported_file

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """The subset of ``compilerOptions`` used for module resolution."""

    base_url: Optional[str] = None
    paths: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, options: Optional[Mapping], config_dir: str = ".") -> "CompilerOptions":
        """Build from a tsconfig ``compilerOptions`` mapping.

        ``baseUrl`` is resolved against the directory holding the tsconfig.
        """
        if not options:
            return cls()
        base_url = options.get("baseUrl")
        if base_url is not None:
            base_url = os.path.normpath(os.path.join(config_dir, base_url))
        paths = {
            pattern: list(targets)
            for pattern, targets in (options.get("paths") or {}).items()
        }
        if paths and base_url is None:
            base_url = os.path.normpath(config_dir)
        return cls(base_url=base_url, paths=paths)


class CompilerHost:
    """Reads source files from disk."""

    def file_exists(self, file_name: str) -> bool:
        return os.path.isfile(file_name)

    def read_file(self, file_name: str) -> str:
        with open(file_name, "r", encoding="utf-8", errors="replace") as f:
            return f.read()


class InMemoryCompilerHost(CompilerHost):
    """Serves sources from a ``{path: text}`` mapping."""

    def __init__(self, sources: Mapping[str, str]):
        self.sources = {os.path.normpath(name): text for name, text in sources.items()}

    def file_exists(self, file_name: str) -> bool:
        return os.path.normpath(file_name) in self.sources

    def read_file(self, file_name: str) -> str:
        try:
            return self.sources[os.path.normpath(file_name)]
        except KeyError:
            raise FileNotFoundError(file_name) from None


class Program:
    """Parsed, bound source files plus the module graph between them."""

    def __init__(
        self,
        root_names: List[str],
        options: Optional[CompilerOptions] = None,
        host: Optional[CompilerHost] = None,
    ):
        self.options = options or CompilerOptions()
        self.host = host or CompilerHost()
        self.binder = Binder()
        self._parser = TypeScriptParser()
        self._files: Dict[str, SourceFile] = {}
        self._order: List[SourceFile] = []
        # (importing file, specifier) → resolved file name
        self._resolved: Dict[tuple, Optional[str]] = {}
        self._checker = None

        for root_name in root_names:
            self._visit(os.path.normpath(root_name))

        logger.info(f"Program created with {len(self._order)} source files")

    def _visit(self, file_name: str) -> None:
        if file_name in self._files:
            return
        source_file = self._parser.parse_source(self.host.read_file(file_name), file_name)
        self._files[file_name] = source_file
        self.binder.bind_source_file(source_file)

        for specifier in source_file.module_specifiers:
            resolved = self.resolve_module(specifier, file_name)
            if resolved is not None:
                self._visit(resolved)
        self._order.append(source_file)

    # =========================================================================
    # Module resolution
    # =========================================================================

    def resolve_module(self, specifier: str, containing_file: str) -> Optional[str]:
        """Resolve an import specifier to a file name, or None."""
        cache_key = (containing_file, specifier)
        if cache_key in self._resolved:
            return self._resolved[cache_key]

        if specifier.startswith("./") or specifier.startswith("../") or specifier in (".", ".."):
            base = os.path.join(os.path.dirname(containing_file), specifier)
            resolved = self._try_file_or_directory(base)
        elif os.path.isabs(specifier):
            resolved = self._try_file_or_directory(specifier)
        else:
            resolved = self._resolve_non_relative(specifier)

        if resolved is None:
            logger.debug(f"Could not resolve module '{specifier}' from {containing_file}")
        self._resolved[cache_key] = resolved
        return resolved

    def _resolve_non_relative(self, specifier: str) -> Optional[str]:
        options = self.options
        for pattern, targets in options.paths.items():
            if "*" in pattern:
                prefix, _, suffix = pattern.partition("*")
                if not (specifier.startswith(prefix) and specifier.endswith(suffix)):
                    continue
                if len(specifier) < len(prefix) + len(suffix):
                    continue
                matched = specifier[len(prefix):len(specifier) - len(suffix)]
            elif pattern == specifier:
                matched = ""
            else:
                continue
            for target in targets:
                candidate = os.path.join(options.base_url or ".", target.replace("*", matched))
                resolved = self._try_file_or_directory(candidate)
                if resolved is not None:
                    return resolved
        if options.base_url is not None:
            return self._try_file_or_directory(os.path.join(options.base_url, specifier))
        return None

    def _try_file_or_directory(self, base: str) -> Optional[str]:
        base = os.path.normpath(base)
        candidates = []
        if is_supported_file(base):
            candidates.append(base)
        stem, ext = os.path.splitext(base)
        if ext in (".js", ".jsx", ".mjs", ".cjs"):
            # TypeScript lets imports name the emitted .js file
            candidates.extend(stem + suffix for suffix in RESOLUTION_SUFFIXES)
        candidates.extend(base + suffix for suffix in RESOLUTION_SUFFIXES)
        candidates.extend(os.path.join(base, "index" + suffix) for suffix in RESOLUTION_SUFFIXES)
        for candidate in candidates:
            if self.host.file_exists(candidate):
                return candidate
        return None

    # =========================================================================
    # Public API
    # =========================================================================

    def get_source_files(self) -> List[SourceFile]:
        """All source files, dependencies first."""
        return list(self._order)

    def get_source_file(self, file_name: str) -> Optional[SourceFile]:
        return self._files.get(os.path.normpath(file_name))

    def get_type_checker(self):
        if self._checker is None:
            from .checker import TypeChecker

            self._checker = TypeChecker(self)
        return self._checker


def create_program(
    root_names: List[str],
    options: Optional[CompilerOptions] = None,
    host: Optional[CompilerHost] = None,
) -> Program:
    """Parse and bind ``root_names`` and every file they import."""
    return Program(root_names, options, host)


def create_program_from_sources(
    sources: Mapping[str, str],
    options: Optional[CompilerOptions] = None,
) -> Program:
    """Build a program over in-memory sources; every key is a root file."""
    return Program(list(sources), options, InMemoryCompilerHost(sources))

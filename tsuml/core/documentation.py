"""Documentation builder — one ``File`` of components per analyzed module."""

import logging
from typing import List, Mapping, Optional, Union

from .ast_parser import CompilerOptions, Program, create_program, create_program_from_sources
from .factories import component_factory
from .model import File

logger = logging.getLogger(__name__)

CompilerOptionsLike = Union[CompilerOptions, Mapping, None]


def _as_compiler_options(options: CompilerOptionsLike) -> CompilerOptions:
    if isinstance(options, CompilerOptions):
        return options
    return CompilerOptions.from_dict(options)


def document_program(program: Program) -> List[File]:
    """Build one ``File`` per source file of ``program``.

    Declaration files (``.d.ts``) contribute types for resolution but are
    not documented. Files come in program order: dependencies first.
    """
    checker = program.get_type_checker()
    files: List[File] = []
    for source_file in program.get_source_files():
        if source_file.is_declaration_file:
            continue
        parts = component_factory.create(source_file.file_name, source_file.root_node, checker)
        files.append(File(name=source_file.file_name, parts=parts))
        logger.debug(f"Documented {source_file.file_name}: {len(parts)} components")
    return files


def generate_documentation(file_names: List[str], compiler_options: CompilerOptionsLike = None) -> List[File]:
    """Analyze ``file_names`` and everything they import.

    Args:
        file_names: Root TypeScript files
        compiler_options: ``CompilerOptions`` or a tsconfig ``compilerOptions`` mapping

    Raises:
        OSError: If a root file cannot be read.
    """
    program = create_program(list(file_names), _as_compiler_options(compiler_options))
    return document_program(program)


def generate_documentation_from_sources(
    sources: Mapping[str, str],
    compiler_options: Optional[CompilerOptionsLike] = None,
) -> List[File]:
    """Like ``generate_documentation`` for a ``{file name: source}`` mapping."""
    program = create_program_from_sources(sources, _as_compiler_options(compiler_options))
    return document_program(program)

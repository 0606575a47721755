"""tsuml core: program analysis, component model and diagram rendering.

Public API:
    generate_documentation(file_names, compiler_options) → list[File]
    generate_documentation_from_sources(mapping) → list[File]
    convert(files, options) → str
    convert_to_plant(files, options) → str
"""

from .diagrams import RenderOptions, convert, convert_to_plant
from .documentation import generate_documentation, generate_documentation_from_sources
from .errors import ConfigurationError, RenderError, TsumlError

__all__ = [
    "generate_documentation",
    "generate_documentation_from_sources",
    "convert",
    "convert_to_plant",
    "RenderOptions",
    "ConfigurationError",
    "RenderError",
    "TsumlError",
]

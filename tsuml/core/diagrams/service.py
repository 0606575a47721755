"""Diagram service — dispatches documented files to the selected markup."""

import logging
from typing import List, Optional

from ..constants import FORMAT_MERMAID
from ..model import File
from .mermaid import generate_mermaid_diagram
from .options import RenderOptions
from .structural import generate_class_diagram

logger = logging.getLogger(__name__)


def convert_to_plant(files: List[File], options: Optional[RenderOptions] = None) -> str:
    """Render ``files`` as PlantUML regardless of ``options.format``."""
    return generate_class_diagram(files, options or RenderOptions())


def convert(files: List[File], options: Optional[RenderOptions] = None) -> str:
    """Render ``files`` in the markup ``options.format`` selects."""
    options = options or RenderOptions()
    if options.format == FORMAT_MERMAID:
        return generate_mermaid_diagram(files, options)
    return generate_class_diagram(files, options)

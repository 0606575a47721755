"""Class-diagram generation from documented files.

Public API:
  convert(files, options) — markup selected by options.format
  convert_to_plant(files, options) — PlantUML
  render_plantuml(puml, output_format) — svg/png/txt via JAR or server
"""

from .options import RenderOptions
from .renderer import render_plantuml
from .service import convert, convert_to_plant

__all__ = ["RenderOptions", "convert", "convert_to_plant", "render_plantuml"]

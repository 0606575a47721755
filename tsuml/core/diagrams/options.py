"""Rendering options."""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from ..constants import FORMAT_PLANTUML, SUPPORTED_FORMATS
from ..errors import ConfigurationError


@dataclass(frozen=True)
class RenderOptions:
    """What to draw and in which markup.

    Raises:
        ConfigurationError: On conflicting filters or an unknown format.
    """

    associations: bool = False
    field_associations: bool = False
    only_interfaces: bool = False
    only_classes: bool = False
    colored_association_lines: bool = False
    target_class: Optional[str] = None
    format: str = FORMAT_PLANTUML

    def __post_init__(self):
        if self.only_interfaces and self.only_classes:
            raise ConfigurationError("only_interfaces and only_classes cannot be combined")
        if self.format not in SUPPORTED_FORMATS:
            raise ConfigurationError(
                f"Unknown output format '{self.format}' (expected one of: {', '.join(SUPPORTED_FORMATS)})"
            )
        if self.target_class is not None and not self.target_class.strip():
            raise ConfigurationError("target_class must not be empty")

    @property
    def draws_associations(self) -> bool:
        return self.associations or self.field_associations

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "RenderOptions":
        """Build from a mapping, ignoring keys that are not options and None values."""
        names = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in values.items() if k in names and v is not None}
        if "format" in kwargs:
            kwargs["format"] = str(kwargs["format"]).lower()
        return cls(**kwargs)

"""Exceptions raised by tsuml."""


class TsumlError(Exception):
    """Base class for errors reported to the user."""


class ConfigurationError(TsumlError, ValueError):
    """Invalid render options, tsconfig or YAML configuration."""


class RenderError(TsumlError, RuntimeError):
    """PlantUML rendering (JAR or server) failed."""

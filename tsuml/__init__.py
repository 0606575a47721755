"""tsuml — TypeScript to UML class diagrams."""

__version__ = "0.1.0"

"""Component factories: symbols and declarations → model nodes.

Every factory takes the ``TypeChecker`` of the program explicitly.
"""

from .component_factory import create, is_node_exported

__all__ = ["create", "is_node_exported"]

"""Shared constants for tsuml.

Values used by both the component factories and the diagram renderers.
"""

# =============================================================================
# Visibility
# =============================================================================

MODIFIER_PUBLIC = "public"
MODIFIER_PRIVATE = "private"
MODIFIER_PROTECTED = "protected"

# Probe order when reading access modifiers off a declaration
MODIFIER_PROBE_ORDER = (MODIFIER_PRIVATE, MODIFIER_PUBLIC, MODIFIER_PROTECTED)

VISIBILITY_GLYPHS = {
    MODIFIER_PUBLIC: "+",
    MODIFIER_PRIVATE: "-",
    MODIFIER_PROTECTED: "#",
}

# =============================================================================
# Types
# =============================================================================

# Generic containers unwrapped to their element type when locating the
# file a member's type comes from
COLLECTION_TYPE_NAMES = frozenset({"Array", "ReadonlyArray", "Set", "ReadonlySet"})

# =============================================================================
# Output
# =============================================================================

FORMAT_PLANTUML = "plantuml"
FORMAT_MERMAID = "mermaid"
SUPPORTED_FORMATS = (FORMAT_PLANTUML, FORMAT_MERMAID)

# Output extensions rendered to images/ASCII art by PlantUML
PLANTUML_IMAGE_EXTENSIONS = ("svg", "png", "txt")

FUNCTIONS_STEREOTYPE = "<< (F,#FF7700) >>"

# Tableau 10
ASSOCIATION_LINE_PALETTE = (
    "#4E79A7",
    "#F28E2B",
    "#E15759",
    "#76B7B2",
    "#59A14F",
    "#EDC948",
    "#B07AA1",
    "#FF9DA7",
    "#9C755F",
    "#BAB0AC",
)

DEFAULT_CONFIG_FILE = "tsuml.yaml"
TSCONFIG_FILE = "tsconfig.json"

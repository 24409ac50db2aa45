"""
Collection names and their schema versions.

Stored shapes carry an explicit version so that a newer writer can never be
silently misread by older code.
"""

BREAKTHROUGH_OBJECTIVES = "x-matrix-breakthrough"
ANNUAL_OBJECTIVES = "x-matrix-annual"
METRICS = "x-matrix-metrics"
ACTIONS = "x-matrix-improvements"
ALIGNMENT_LINKS = "x-matrix-relationships"
DEPENDENCIES = "portfolio-dependencies"
PDCA_CYCLES = "pdca-cycles"
INITIATIVES = "initiatives"

COLLECTION_SCHEMA_VERSIONS: dict[str, int] = {
    BREAKTHROUGH_OBJECTIVES: 1,
    ANNUAL_OBJECTIVES: 1,
    METRICS: 1,
    ACTIONS: 1,
    ALIGNMENT_LINKS: 1,
    DEPENDENCIES: 1,
    PDCA_CYCLES: 1,
    INITIATIVES: 1,
}

# Collections not listed above (written by other views) use this version.
DEFAULT_SCHEMA_VERSION = 1


def schema_version_for(name: str) -> int:
    """Schema version this code writes for a collection."""
    return COLLECTION_SCHEMA_VERSIONS.get(name, DEFAULT_SCHEMA_VERSION)

"""
Geometry Layer
==============

Bounded Context: Pure scheme geometry and normalization.

Responsibilities:
- Shape representation (immutable)
- Padded bounding rect of places and lines
- Re-origin of all coordinates into a renderable canvas
- NO threading, NO zoom, NO drawing

Design Philosophy:
- Pure functions where possible
- Immutable data structures
- Malformed input is skipped, not fatal
- Zero side effects
"""

from lotmap_scheme.geometry.shapes import (
    PLACE_SIZE,
    Point,
    Size,
    Place,
    Line,
    SchemeRect,
    SchemeModel,
)
from lotmap_scheme.geometry.normalizer import (
    BoundsMode,
    GeometryNormalizer,
    NormalizationResult,
    DEFAULT_WIDTH_OFFSET,
    DEFAULT_HEIGHT_OFFSET,
)

__all__ = [
    "PLACE_SIZE",
    "Point",
    "Size",
    "Place",
    "Line",
    "SchemeRect",
    "SchemeModel",
    "BoundsMode",
    "GeometryNormalizer",
    "NormalizationResult",
    "DEFAULT_WIDTH_OFFSET",
    "DEFAULT_HEIGHT_OFFSET",
]

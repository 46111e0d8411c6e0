"""
Viewport Layer
==============

Bounded Context: Zoom bounds and content placement.

Responsibilities:
- Minimum zoom that fits a scheme into the viewport
- Content frame origin (centering rule)
- Frame size after interactive rotation
"""

from lotmap_scheme.viewport.fitter import (
    ViewportFitter,
    ViewportFit,
    ZoomBounds,
    DEFAULT_MAX_ZOOM,
    DEFAULT_TOP_OFFSET,
)

__all__ = [
    "ViewportFitter",
    "ViewportFit",
    "ZoomBounds",
    "DEFAULT_MAX_ZOOM",
    "DEFAULT_TOP_OFFSET",
]

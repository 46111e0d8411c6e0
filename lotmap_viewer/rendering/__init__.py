"""
Rendering Layer
===============

Bounded Context: Preview drawing of normalized schemes.

Responsibilities:
- Rotated parking-place rectangles with labels
- Boundary polylines
- NO bounds, NO zoom computation

Design Philosophy:
- Stateless drawing
- Configurable styles
- supervision + numpy
"""

from lotmap_viewer.rendering.visualizer import SchemeVisualizer

__all__ = [
    "SchemeVisualizer",
]

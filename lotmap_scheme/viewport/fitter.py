"""
Viewport Fitter Module
======================

Stateless zoom fitting for a normalized scheme.

Design:
- Pure functions (same inputs, same scale)
- Immutable results (ViewportFit, ZoomBounds)
- Works on sizes only; never touches the scheme itself
"""

import math
from dataclasses import dataclass

from lotmap_scheme.geometry.shapes import Point, Size


DEFAULT_MAX_ZOOM = 1.0
DEFAULT_TOP_OFFSET = 50.0


@dataclass(frozen=True)
class ZoomBounds:
    """
    Allowed zoom range for the scrollable surface.

    Attributes:
        minimum: Fit scale; content is never shown smaller than this
        maximum: Detail limit
    """

    minimum: float
    maximum: float = DEFAULT_MAX_ZOOM

    def __post_init__(self):
        """Validate invariants."""
        if self.minimum <= 0:
            raise ValueError(f"minimum zoom must be > 0, got {self.minimum}")
        if self.maximum < self.minimum:
            raise ValueError(
                f"maximum zoom ({self.maximum}) must be >= minimum ({self.minimum})"
            )

    def clamp(self, scale: float) -> float:
        return min(max(scale, self.minimum), self.maximum)

    def zoom_in(self, current: float, factor: float = 2.0) -> float:
        """Double-tap step: multiply the current scale and clamp."""
        return self.clamp(current * factor)


@dataclass(frozen=True)
class ViewportFit:
    """
    Result of fitting a scheme into a viewport.

    Attributes:
        content_size: Scrollable content size (reported verbatim)
        zoom: Zoom range; zoom.minimum is the fit scale
        content_origin: Where the content frame sits inside the viewport
    """

    content_size: Size
    zoom: ZoomBounds
    content_origin: Point

    @property
    def min_scale(self) -> float:
        return self.zoom.minimum


class ViewportFitter:
    """
    Stateless fitter from content size to zoom bounds.

    Design Philosophy:
    - All methods are static (no instance state)
    - Fail fast on empty sizes (empty schemes never reach the fitter)
    """

    @staticmethod
    def fit_scale(content_size: Size, viewport_size: Size) -> float:
        """
        Minimum zoom at which the whole scheme is visible.

        Content wider than the viewport, or wider than tall, is fitted by
        width; otherwise it is fitted by height.

        Args:
            content_size: Normalized scheme size
            viewport_size: Visible surface size

        Returns:
            Scale factor

        Raises:
            ValueError: If either size is empty
        """
        if content_size.is_empty:
            raise ValueError(f"content_size must be positive, got {content_size}")
        if viewport_size.is_empty:
            raise ValueError(f"viewport_size must be positive, got {viewport_size}")

        if content_size.width > viewport_size.width:
            return viewport_size.width / content_size.width
        if content_size.width > content_size.height:
            return viewport_size.width / content_size.width
        return viewport_size.height / content_size.height

    @staticmethod
    def content_origin(
        content_size: Size,
        viewport_size: Size,
        top_offset: float = DEFAULT_TOP_OFFSET,
    ) -> Point:
        """
        Frame origin of the content inside the viewport.

        Vertically centered when the viewport is taller than the content,
        otherwise pushed down by top_offset.
        """
        if viewport_size.height > content_size.height:
            origin_y = viewport_size.height / 2 - content_size.height / 2
        else:
            origin_y = top_offset
        return Point(0.0, origin_y)

    @staticmethod
    def rotated_size(size: Size, angle_radians: float) -> Size:
        """
        Axis-aligned frame of a size rotated about its center.

        Args:
            size: Unrotated content size
            angle_radians: Accumulated rotation

        Returns:
            Size of the bounding frame after rotation
        """
        cos_a = abs(math.cos(angle_radians))
        sin_a = abs(math.sin(angle_radians))
        return Size(
            width=size.width * cos_a + size.height * sin_a,
            height=size.width * sin_a + size.height * cos_a,
        )

    @staticmethod
    def fit(
        content_size: Size,
        viewport_size: Size,
        max_scale: float = DEFAULT_MAX_ZOOM,
        top_offset: float = DEFAULT_TOP_OFFSET,
    ) -> ViewportFit:
        """
        Fit content into the viewport.

        When the fit scale exceeds max_scale (a scheme smaller than the
        screen) the maximum is raised to the fit scale.

        Args:
            content_size: Normalized scheme size
            viewport_size: Visible surface size
            max_scale: Configured maximum zoom
            top_offset: Top margin for content taller than the viewport

        Returns:
            ViewportFit
        """
        scale = ViewportFitter.fit_scale(content_size, viewport_size)
        return ViewportFit(
            content_size=content_size,
            zoom=ZoomBounds(minimum=scale, maximum=max(max_scale, scale)),
            content_origin=ViewportFitter.content_origin(content_size, viewport_size, top_offset),
        )

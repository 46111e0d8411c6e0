"""
Scheme Surface Module
=====================

Consumer of view model events: holds what a scrollable, zoomable surface
needs to draw the current scheme.

Design:
- Reacts to events only (no geometry math of its own)
- Resets zoom to the new minimum on every layout
- Keeps the last error for display
"""

import logging
from typing import List, Optional

import numpy as np

from lotmap_scheme.events import EventType, SchemeEvent
from lotmap_scheme.geometry.shapes import Point, Size
from lotmap_scheme.viewmodel import EmptyScheme, ReadyScheme, SchemeState
from lotmap_scheme.viewport.fitter import ZoomBounds
from lotmap_viewer.rendering.visualizer import SchemeVisualizer

logger = logging.getLogger(__name__)


class SchemeSurface:
    """
    Pannable/zoomable surface state for the map screen.

    Usage:
        surface = SchemeSurface()
        viewmodel.add_observer(surface.on_event)
        ...
        image = surface.render()
    """

    def __init__(self, visualizer: Optional[SchemeVisualizer] = None):
        self.visualizer = visualizer or SchemeVisualizer()

        self.state: SchemeState = EmptyScheme()
        self.content_size: Size = Size.zero()
        self.content_origin: Point = Point(0.0, 0.0)
        self.zoom: Optional[ZoomBounds] = None
        self.zoom_scale: float = 1.0
        self.loading: bool = False
        self.error: Optional[str] = None
        self.events: List[SchemeEvent] = []

    def on_event(self, event: SchemeEvent) -> None:
        """Observer callback (main context)."""
        self.events.append(event)

        if event.event_type == EventType.PROGRESS_START:
            self.loading = True
            self.error = None

        elif event.event_type == EventType.PROGRESS_END:
            self.loading = False

        elif event.event_type == EventType.ERROR:
            self.error = event.message
            logger.warning(f"Scheme error: {event.message}")

        elif event.event_type == EventType.LAYOUT_READY:
            self.state = event.state if event.state is not None else EmptyScheme()
            self.content_size = event.content_size
            if isinstance(self.state, ReadyScheme):
                self.content_origin = self.state.fit.content_origin
            else:
                self.content_origin = Point(0.0, 0.0)

        elif event.event_type == EventType.MIN_SCALE_READY:
            maximum = event.min_scale
            if isinstance(self.state, ReadyScheme):
                maximum = max(self.state.fit.zoom.maximum, event.min_scale)
            self.zoom = ZoomBounds(minimum=event.min_scale, maximum=maximum)
            self.content_size = event.content_size or self.content_size
            self.zoom_scale = self.zoom.minimum

    @property
    def has_scheme(self) -> bool:
        return isinstance(self.state, ReadyScheme)

    def double_tap(self) -> float:
        """Zoom in x2, clamped to the allowed range."""
        if self.zoom is not None:
            self.zoom_scale = self.zoom.zoom_in(self.zoom_scale)
        return self.zoom_scale

    def render(self, scale: Optional[float] = None) -> Optional[np.ndarray]:
        """
        Draw the current scheme.

        Args:
            scale: Zoom to render at (default: current zoom)

        Returns:
            BGR image, or None when there is nothing to display
        """
        if not isinstance(self.state, ReadyScheme):
            return None
        return self.visualizer.render(
            self.state, scale=self.zoom_scale if scale is None else scale
        )

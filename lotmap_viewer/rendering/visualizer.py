"""
Scheme Visualizer Module
========================

Pure visualization layer for a normalized scheme.

Design:
- Stateless rendering (pure functions)
- No business logic (geometry comes from the view model)
- Configurable styles
- Uses supervision drawing utilities

Dependencies:
- supervision (draw utilities, Color, Point)
- numpy (arrays)
"""

import math

import numpy as np
import supervision as sv

from lotmap_scheme.geometry.shapes import Line, Place
from lotmap_scheme.viewmodel import ReadyScheme


class SchemeVisualizer:
    """
    Stateless visualizer for scheme previews.

    Design Philosophy:
    - SRP: Only draws, doesn't compute bounds or zoom
    - Places are rotated rectangles about their own center
    - Lines are open polylines (single-point lines draw nothing)

    Usage:
        visualizer = SchemeVisualizer()
        image = visualizer.render(ready_scheme, scale=0.5)
    """

    def __init__(
        self,
        place_color: sv.Color = sv.Color(r=240, g=205, b=120),
        place_outline_color: sv.Color = sv.Color(r=150, g=120, b=50),
        line_color: sv.Color = sv.Color(r=180, g=180, b=180),
        text_color: sv.Color = sv.Color(r=40, g=40, b=40),
        background_color: sv.Color = sv.Color(r=255, g=255, b=255),
        line_thickness: int = 5,
        outline_thickness: int = 1,
        text_scale: float = 0.4,
        text_thickness: int = 1,
        opacity: float = 1.0,
        draw_labels: bool = True,
    ):
        """
        Initialize visualizer with style configuration.

        Args:
            place_color: Fill color of parking places
            place_outline_color: Outline color of parking places
            line_color: Stroke color of boundary lines
            text_color: Color of place labels
            background_color: Canvas color
            line_thickness: Stroke width of boundary lines (at scale 1)
            outline_thickness: Stroke width of place outlines
            text_scale: Scale factor for labels (at scale 1)
            text_thickness: Thickness for labels
            opacity: Fill opacity of places (0-1)
            draw_labels: Whether to draw place names
        """
        self.place_color = place_color
        self.place_outline_color = place_outline_color
        self.line_color = line_color
        self.text_color = text_color
        self.background_color = background_color
        self.line_thickness = line_thickness
        self.outline_thickness = outline_thickness
        self.text_scale = text_scale
        self.text_thickness = text_thickness
        self.opacity = opacity
        self.draw_labels = draw_labels

    def create_canvas(self, width: int, height: int) -> np.ndarray:
        """Blank BGR canvas of the given pixel size."""
        canvas = np.zeros((height, width, 3), dtype=np.uint8)
        canvas[:] = self.background_color.as_bgr()
        return canvas

    def render(self, scheme: ReadyScheme, scale: float = 1.0) -> np.ndarray:
        """
        Draw a normalized scheme at the given zoom.

        Args:
            scheme: Ready snapshot from the view model
            scale: Zoom factor applied to scheme units

        Returns:
            BGR image of size ceil(content_size * scale)
        """
        if scale <= 0:
            raise ValueError(f"scale must be > 0, got {scale}")

        size = scheme.content_size.scaled(scale)
        frame = self.create_canvas(
            max(1, int(math.ceil(size.width))),
            max(1, int(math.ceil(size.height))),
        )

        for line in scheme.model.lines:
            frame = self.draw_line(frame, line, scale)

        for place in scheme.model.places:
            frame = self.draw_place(frame, place, scale)

        return frame

    def draw_place(self, frame: np.ndarray, place: Place, scale: float = 1.0) -> np.ndarray:
        """
        Draw one parking place as a rotated rectangle.

        Args:
            frame: Canvas to draw on
            place: Normalized place
            scale: Zoom factor

        Returns:
            Frame with place drawn
        """
        polygon = np.round(place.corners() * scale).astype(np.int32)

        frame = sv.draw_filled_polygon(
            scene=frame,
            polygon=polygon,
            color=self.place_color,
            opacity=self.opacity,
        )
        frame = sv.draw_polygon(
            scene=frame,
            polygon=polygon,
            color=self.place_outline_color,
            thickness=self.outline_thickness,
        )

        if self.draw_labels and place.label:
            center = place.center
            frame = sv.draw_text(
                scene=frame,
                text=place.label,
                text_anchor=sv.Point(x=int(center.x * scale), y=int(center.y * scale)),
                text_color=self.text_color,
                text_scale=self.text_scale * scale,
                text_thickness=self.text_thickness,
                text_padding=0,
            )

        return frame

    def draw_line(self, frame: np.ndarray, line: Line, scale: float = 1.0) -> np.ndarray:
        """
        Draw one boundary polyline.

        Args:
            frame: Canvas to draw on
            line: Normalized line
            scale: Zoom factor

        Returns:
            Frame with line drawn
        """
        thickness = max(1, int(round(self.line_thickness * scale)))

        for start, end in line.segments():
            frame = sv.draw_line(
                scene=frame,
                start=sv.Point(x=int(round(start.x * scale)), y=int(round(start.y * scale))),
                end=sv.Point(x=int(round(end.x * scale)), y=int(round(end.y * scale))),
                color=self.line_color,
                thickness=thickness,
            )

        return frame

"""
Geometry Normalizer Module
==========================

Stateless normalization - applies bounding and re-origin to a scheme.

Design:
- Pure functions (no state)
- Returns a new model + the padded bounding rect (functional style)
- Malformed items are dropped and reported, never raised
- Thread-safe (no mutations)
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from lotmap_scheme.geometry.shapes import Place, Line, SchemeModel, SchemeRect, Point, Size


DEFAULT_WIDTH_OFFSET = 60.0
DEFAULT_HEIGHT_OFFSET = 60.0


class BoundsMode(str, Enum):
    """
    How a place grows the right/bottom edge of the bounds.

    LEGACY: a place extends the max only when its origin is past the current
        max, and then the max becomes origin + size. Order dependent; matches
        schemes laid out by existing clients.
    FOOTPRINT: the max always covers origin + size.
    """
    LEGACY = "legacy"
    FOOTPRINT = "footprint"


@dataclass(frozen=True)
class NormalizationResult:
    """
    Output of one normalization pass.

    Attributes:
        model: Re-origined scheme (malformed items removed)
        rect: Padded bounding rect computed from the raw coordinates
        issues: Human-readable description of every dropped item
    """

    model: SchemeModel
    rect: SchemeRect
    issues: Tuple[str, ...] = ()

    @property
    def content_size(self) -> Size:
        return self.rect.size


class GeometryNormalizer:
    """
    Stateless normalizer for parking schemes.

    Design Philosophy:
    - All methods are static (no instance state)
    - Input model is never modified
    - Normalizing twice shifts twice: callers normalize once per payload
    """

    @staticmethod
    def discard_malformed(model: SchemeModel) -> Tuple[SchemeModel, List[str]]:
        """
        Drop places and lines that cannot be laid out.

        Args:
            model: Raw scheme

        Returns:
            Tuple of:
            - model with only finite places and non-empty finite lines
            - list of issue descriptions (empty when nothing was dropped)
        """
        issues: List[str] = []

        places = []
        for idx, place in enumerate(model.places):
            if place.is_finite:
                places.append(place)
            else:
                issues.append(f"place #{idx} ({place.label!r}) has non-finite geometry")

        lines = []
        for idx, line in enumerate(model.lines):
            if len(line) == 0:
                issues.append(f"line #{idx} has no points")
            elif not line.is_valid:
                issues.append(f"line #{idx} has non-finite points")
            else:
                lines.append(line)

        if not issues:
            return model, issues
        return SchemeModel(places=tuple(places), lines=tuple(lines)), issues

    @staticmethod
    def bounding_rect(
        model: SchemeModel,
        width_offset: float = DEFAULT_WIDTH_OFFSET,
        height_offset: float = DEFAULT_HEIGHT_OFFSET,
        bounds_mode: BoundsMode = BoundsMode.LEGACY,
    ) -> SchemeRect:
        """
        Padded bounding rect of all places and line points.

        Args:
            model: Well-formed scheme (see discard_malformed)
            width_offset: Padding added to the width
            height_offset: Padding added to the height
            bounds_mode: Max-expansion rule for places

        Returns:
            SchemeRect with origin (minX, minY) and size
            (maxX - minX + width_offset, maxY - minY + height_offset),
            or SchemeRect.zero() when the model has no places
        """
        if model.is_empty:
            return SchemeRect.zero()

        first = model.places[0]
        min_x = first.origin.x
        min_y = first.origin.y
        max_x = first.origin.x + first.size.width
        max_y = first.origin.y + first.size.height

        # Sequential on purpose: LEGACY depends on iteration order
        for place in model.places:
            right = place.origin.x + place.size.width
            bottom = place.origin.y + place.size.height

            min_x = min(min_x, place.origin.x)
            min_y = min(min_y, place.origin.y)

            if bounds_mode == BoundsMode.LEGACY:
                if place.origin.x > max_x:
                    max_x = right
                if place.origin.y > max_y:
                    max_y = bottom
            else:
                max_x = max(max_x, right)
                max_y = max(max_y, bottom)

        # Lines have zero extent
        line_points = [line.points for line in model.lines if len(line) > 0]
        if line_points:
            stacked = np.vstack(line_points)
            min_x = min(min_x, float(stacked[:, 0].min()))
            min_y = min(min_y, float(stacked[:, 1].min()))
            max_x = max(max_x, float(stacked[:, 0].max()))
            max_y = max(max_y, float(stacked[:, 1].max()))

        return SchemeRect(
            origin=Point(min_x, min_y),
            size=Size(max_x - min_x + width_offset, max_y - min_y + height_offset),
        )

    @staticmethod
    def normalize(
        model: SchemeModel,
        width_offset: float = DEFAULT_WIDTH_OFFSET,
        height_offset: float = DEFAULT_HEIGHT_OFFSET,
        bounds_mode: BoundsMode = BoundsMode.LEGACY,
    ) -> NormalizationResult:
        """
        Re-origin a scheme so its padded bounds start at the origin.

        After normalization the raw (minX, minY) lands on
        (width_offset / 2, height_offset / 2), leaving a symmetric margin on
        the left/top.

        Args:
            model: Raw scheme as decoded from the payload
            width_offset: Horizontal padding (half of it becomes the left margin)
            height_offset: Vertical padding (half of it becomes the top margin)
            bounds_mode: Max-expansion rule for places

        Returns:
            NormalizationResult; for a scheme without places the model is
            returned unshifted with SchemeRect.zero()
        """
        sanitized, issues = GeometryNormalizer.discard_malformed(model)

        if sanitized.is_empty:
            return NormalizationResult(model=sanitized, rect=SchemeRect.zero(), issues=tuple(issues))

        rect = GeometryNormalizer.bounding_rect(
            sanitized, width_offset, height_offset, bounds_mode
        )

        left_offset = rect.origin.x - width_offset / 2
        top_offset = rect.origin.y - height_offset / 2

        return NormalizationResult(
            model=sanitized.translated(-left_offset, -top_offset),
            rect=rect,
            issues=tuple(issues),
        )

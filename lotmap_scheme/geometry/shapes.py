"""
Scheme Shapes Module
====================

Pure geometric representations of a parking floor - NO state, NO side effects.

Design:
- Immutable shapes (frozen dataclass pattern)
- Translation returns new objects (the owner swaps them in)
- Polylines stored as read-only Nx2 arrays
- Rotation only used for drawing, never for bounds
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class Point:
    """
    2D coordinate in scheme-local units.

    Attributes:
        x: Horizontal coordinate (grows to the right)
        y: Vertical coordinate (grows downwards)
    """

    x: float
    y: float

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def translated(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Size:
    """Width/height pair in scheme-local units."""

    width: float
    height: float

    @classmethod
    def zero(cls) -> "Size":
        return cls(0.0, 0.0)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.width) and math.isfinite(self.height)

    def scaled(self, factor: float) -> "Size":
        return Size(self.width * factor, self.height * factor)


# Every place on a floor has the same footprint
PLACE_SIZE = Size(34.0, 60.0)


@dataclass(frozen=True)
class Place:
    """
    Immutable parking space.

    The rectangle is rotated about its own center when drawn. Bounding
    computations use the unrotated axis-aligned footprint
    (origin, origin + size).

    Attributes:
        origin: Top-left corner before rotation
        size: Footprint (uniform across a scheme)
        angle: Rotation in degrees, clockwise in screen coordinates
        label: Display name of the space
    """

    origin: Point
    size: Size = PLACE_SIZE
    angle: float = 0.0
    label: str = ""

    @property
    def is_finite(self) -> bool:
        return self.origin.is_finite and self.size.is_finite and math.isfinite(self.angle)

    @property
    def center(self) -> Point:
        return Point(
            self.origin.x + self.size.width / 2,
            self.origin.y + self.size.height / 2,
        )

    def translated(self, dx: float, dy: float) -> "Place":
        return Place(
            origin=self.origin.translated(dx, dy),
            size=self.size,
            angle=self.angle,
            label=self.label,
        )

    def corners(self) -> np.ndarray:
        """
        Footprint corners after rotation about the place center.

        Returns:
            4x2 float array ordered top-left, top-right, bottom-right,
            bottom-left (before rotation)
        """
        half_w = self.size.width / 2
        half_h = self.size.height / 2
        local = np.array([
            [-half_w, -half_h],
            [half_w, -half_h],
            [half_w, half_h],
            [-half_w, half_h],
        ])

        radians = math.radians(self.angle)
        cos_a, sin_a = math.cos(radians), math.sin(radians)
        rotation = np.array([[cos_a, -sin_a], [sin_a, cos_a]])

        center = self.center
        return local @ rotation.T + np.array([center.x, center.y])


@dataclass(frozen=True, eq=False)
class Line:
    """
    Immutable open polyline marking a boundary or divider.

    Attributes:
        points: Nx2 array of (x, y) vertices, read-only

    A single-point line is valid (it still counts for bounds) but has no
    visible segment. A zero-point line is malformed.
    """

    points: np.ndarray

    def __post_init__(self):
        """Coerce to a read-only float array and validate shape."""
        points = np.asarray(self.points, dtype=float)
        if points.size == 0:
            points = points.reshape((0, 2))
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"points must be Nx2 array, got shape {points.shape}")

        points = points.copy()
        points.flags.writeable = False
        object.__setattr__(self, 'points', points)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "Line":
        return cls(points=np.array([p.as_tuple() for p in points], dtype=float).reshape((-1, 2)))

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_valid(self) -> bool:
        return len(self.points) > 0 and bool(np.isfinite(self.points).all())

    @property
    def is_visible(self) -> bool:
        return len(self.points) >= 2

    def segments(self) -> List[Tuple[Point, Point]]:
        """Consecutive (start, end) pairs; empty for fewer than two points."""
        pts = [Point(float(x), float(y)) for x, y in self.points]
        return list(zip(pts[:-1], pts[1:]))

    def translated(self, dx: float, dy: float) -> "Line":
        return Line(points=self.points + np.array([dx, dy]))


@dataclass(frozen=True)
class SchemeRect:
    """
    Padded bounding rectangle of a scheme.

    Attributes:
        origin: (minX, minY) of the raw geometry
        size: Extent plus the width/height padding
    """

    origin: Point
    size: Size

    @classmethod
    def zero(cls) -> "SchemeRect":
        return cls(origin=Point(0.0, 0.0), size=Size.zero())

    @property
    def is_empty(self) -> bool:
        return self.size.is_empty


@dataclass(frozen=True)
class SchemeModel:
    """
    In-memory floor scheme: parking places plus boundary lines.

    Replaced wholesale on every payload; never mutated.
    """

    places: Tuple[Place, ...] = ()
    lines: Tuple[Line, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'places', tuple(self.places))
        object.__setattr__(self, 'lines', tuple(self.lines))

    @classmethod
    def empty(cls) -> "SchemeModel":
        return cls()

    @property
    def is_empty(self) -> bool:
        """A scheme without places has nothing to display."""
        return len(self.places) == 0

    @property
    def place_count(self) -> int:
        return len(self.places)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def translated(self, dx: float, dy: float) -> "SchemeModel":
        return SchemeModel(
            places=tuple(place.translated(dx, dy) for place in self.places),
            lines=tuple(line.translated(dx, dy) for line in self.lines),
        )

"""
Scheme Payload Schema
=====================

Bounded Context: Backend Scheme Data Structures

This module defines the decoded shape of the parking scheme returned by the
backend and its mapping onto the geometry model.

Design:
- PointDTO / ParkingLotDTO / FloorDTO / SchemePayload
- Immutable (frozen dataclasses)
- from_dict() validates, to_dict() mirrors the wire keys
- Only floor 0 is consumed by the map screen

Message Flow:
    Fetcher → dict → SchemePayload → SchemeModel → SchemeViewModel
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from lotmap_scheme.errors import PayloadError
from lotmap_scheme.geometry.shapes import PLACE_SIZE, Line, Place, Point, SchemeModel, Size


@dataclass(frozen=True)
class PointDTO:
    """
    Wire point.

    Example:
        >>> PointDTO.from_dict({'x': 10, 'y': 20.5}).to_dict()
        {'x': 10.0, 'y': 20.5}
    """
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PointDTO':
        """Deserialize from dict.

        Raises:
            PayloadError: If x/y are missing or not numbers
        """
        try:
            return cls(x=float(data['x']), y=float(data['y']))
        except KeyError as e:
            raise PayloadError(f"Missing required point field: {e}")
        except (TypeError, ValueError) as e:
            raise PayloadError(f"Invalid point data: {e}")

    def to_point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class ParkingLotDTO:
    """
    Wire parking place.

    Attributes:
        x: Left edge before rotation
        y: Top edge before rotation
        angle: Rotation in degrees
        name: Place label
    """
    x: float
    y: float
    angle: float = 0.0
    name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {'x': self.x, 'y': self.y, 'angle': self.angle, 'name': self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ParkingLotDTO':
        """Deserialize from dict.

        angle defaults to 0 and name to "" when absent.

        Raises:
            PayloadError: If x/y are missing or a field has the wrong type
        """
        try:
            name = data.get('name')
            return cls(
                x=float(data['x']),
                y=float(data['y']),
                angle=float(data.get('angle') or 0.0),
                name="" if name is None else str(name),
            )
        except KeyError as e:
            raise PayloadError(f"Missing required parking lot field: {e}")
        except (TypeError, ValueError, AttributeError) as e:
            raise PayloadError(f"Invalid parking lot data: {e}")

    def to_place(self, place_size: Size = PLACE_SIZE) -> Place:
        return Place(
            origin=Point(self.x, self.y),
            size=place_size,
            angle=self.angle,
            label=self.name,
        )


@dataclass(frozen=True)
class FloorDTO:
    """
    One floor of the scheme.

    Attributes:
        parking_lines: Polylines, each a list of points
        parking_lots: Parking places
    """
    parking_lines: List[List[PointDTO]] = field(default_factory=list)
    parking_lots: List[ParkingLotDTO] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'parkingLines': [[p.to_dict() for p in line] for line in self.parking_lines],
            'parkingLots': [lot.to_dict() for lot in self.parking_lots],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FloorDTO':
        """Deserialize from dict.

        Missing parkingLines/parkingLots are treated as empty.

        Raises:
            PayloadError: If the floor or one of its items is malformed
        """
        if not isinstance(data, dict):
            raise PayloadError(f"Floor must be an object, got {type(data).__name__}")

        lines_data = data.get('parkingLines') or []
        lots_data = data.get('parkingLots') or []
        if not isinstance(lines_data, list) or not isinstance(lots_data, list):
            raise PayloadError("parkingLines and parkingLots must be arrays")

        lines = []
        for line_data in lines_data:
            if not isinstance(line_data, list):
                raise PayloadError(f"Line must be an array of points, got {type(line_data).__name__}")
            lines.append([PointDTO.from_dict(p) for p in line_data])

        return cls(
            parking_lines=lines,
            parking_lots=[ParkingLotDTO.from_dict(lot) for lot in lots_data],
        )


@dataclass(frozen=True)
class SchemePayload:
    """
    Complete scheme as returned by the backend.

    Example:
        >>> payload = SchemePayload.from_dict({
        ...     'floors': [{
        ...         'parkingLines': [[{'x': 0, 'y': 0}, {'x': 100, 'y': 0}]],
        ...         'parkingLots': [{'x': 10, 'y': 10, 'angle': 0, 'name': 'A1'}],
        ...     }]
        ... })
        >>> payload.to_scheme_model().place_count
        1
    """
    floors: List[FloorDTO] = field(default_factory=list)

    @property
    def floor_count(self) -> int:
        return len(self.floors)

    def to_dict(self) -> Dict[str, Any]:
        return {'floors': [floor.to_dict() for floor in self.floors]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SchemePayload':
        """Deserialize from dict.

        Raises:
            PayloadError: If the payload is not an object or a floor is malformed
        """
        if not isinstance(data, dict):
            raise PayloadError(f"Scheme payload must be an object, got {type(data).__name__}")

        floors_data = data.get('floors') or []
        if not isinstance(floors_data, list):
            raise PayloadError("floors must be an array")

        return cls(floors=[FloorDTO.from_dict(f) for f in floors_data])

    def to_scheme_model(self, place_size: Size = PLACE_SIZE) -> SchemeModel:
        """
        Map floor 0 onto the geometry model.

        Args:
            place_size: Footprint given to every place

        Returns:
            SchemeModel (empty when the payload has no floors)
        """
        if not self.floors:
            return SchemeModel.empty()

        floor = self.floors[0]
        return SchemeModel(
            places=tuple(lot.to_place(place_size) for lot in floor.parking_lots),
            lines=tuple(
                Line.from_points(p.to_point() for p in line)
                for line in floor.parking_lines
            ),
        )

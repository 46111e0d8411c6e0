"""
lotmap Payload Schemas
======================

Bounded Context: Data Structures

Immutable, typed data structures for the scheme payload.

Public API
----------
    PointDTO: Wire point
    ParkingLotDTO: Wire parking place
    FloorDTO: One floor (lines + lots)
    SchemePayload: Complete payload, maps floor 0 to a SchemeModel
"""

from .payload import PointDTO, ParkingLotDTO, FloorDTO, SchemePayload

__all__ = [
    'PointDTO',
    'ParkingLotDTO',
    'FloorDTO',
    'SchemePayload',
]

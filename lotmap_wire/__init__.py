"""
lotmap Wire Package
===================

Bounded Context: Payload Protocol and Observability

This package decodes the parking scheme delivered by the backend and provides
the structured logging shared by the view model, the loading service and the
CLI.

Architecture:
- schemas/: Immutable payload DTOs with from_dict/to_dict
- logging/: Structured JSON logging for observability

Design Philosophy:
- Type Safety: Leverage Python typing for correctness
- Immutability: Use frozen dataclasses for DTOs
- Observability: Structured logs (JSON) for production queries

Public API
----------
Schemas:
    PointDTO, ParkingLotDTO, FloorDTO, SchemePayload

Logging:
    LogEvent, StructuredLogger, create_logger

Example:
    >>> from lotmap_wire import SchemePayload
    >>> model = SchemePayload.from_dict(data).to_scheme_model()
"""

from .schemas import PointDTO, ParkingLotDTO, FloorDTO, SchemePayload
from .logging import LogEvent, StructuredLogger, create_logger

__all__ = [
    # Schemas
    'PointDTO',
    'ParkingLotDTO',
    'FloorDTO',
    'SchemePayload',
    # Logging
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]

__version__ = "1.0.0"

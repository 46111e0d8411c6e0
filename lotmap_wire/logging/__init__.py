"""
Structured Logging for lotmap
=============================

Bounded Context: Observability

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from lotmap_wire.logging import StructuredLogger, LogEvent
    >>> logger = StructuredLogger(component="viewmodel")
    >>> logger.info(
    ...     event=LogEvent.SCHEME_LAYOUT_APPLIED,
    ...     message="Layout applied",
    ...     metadata={'generation': 1}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]

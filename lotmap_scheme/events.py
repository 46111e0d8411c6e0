"""
Scheme Events
=============

Bounded Context: Notifications from the view model to its consumers.

Design:
- Enum-based event types (prevents typos)
- Immutable event objects (frozen dataclass)
- Constructor validates the fields each type requires

Event Order (one accepted update):
    LAYOUT_READY(content_size, state) → MIN_SCALE_READY(min_scale)

Loading (service):
    PROGRESS_START → PROGRESS_END → [ERROR(message)]
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from lotmap_scheme.geometry.shapes import Size


class EventType(str, Enum):
    """Scheme event type enumeration."""
    PROGRESS_START = "progress_start"
    PROGRESS_END = "progress_end"
    LAYOUT_READY = "layout_ready"
    MIN_SCALE_READY = "min_scale_ready"
    ERROR = "error"


@dataclass(frozen=True)
class SchemeEvent:
    """
    Single notification delivered on the main context.

    Attributes:
        event_type: What happened
        generation: Update generation the event belongs to
        content_size: Scrollable content size (LAYOUT_READY, MIN_SCALE_READY)
        min_scale: Minimum zoom (MIN_SCALE_READY)
        state: EmptyScheme or ReadyScheme snapshot (LAYOUT_READY)
        message: Displayable error text (ERROR)

    Invariants:
        - LAYOUT_READY has content_size
        - MIN_SCALE_READY has min_scale
        - ERROR has message
    """
    event_type: EventType
    generation: int = 0
    content_size: Optional[Size] = None
    min_scale: Optional[float] = None
    state: Any = None
    message: Optional[str] = None

    def __post_init__(self):
        """Validate invariants."""
        if self.event_type == EventType.LAYOUT_READY and self.content_size is None:
            raise ValueError("LAYOUT_READY events must have content_size set")
        if self.event_type == EventType.MIN_SCALE_READY and self.min_scale is None:
            raise ValueError("MIN_SCALE_READY events must have min_scale set")
        if self.event_type == EventType.ERROR and not self.message:
            raise ValueError("ERROR events must have a message")

    def to_dict(self) -> Dict[str, Union[str, int, float, Dict[str, float], None]]:
        """Serialize to JSON-compatible dict (state is omitted)."""
        result: Dict[str, Union[str, int, float, Dict[str, float], None]] = {
            'event_type': self.event_type.value,
            'generation': self.generation,
        }
        if self.content_size is not None:
            result['content_size'] = {
                'width': self.content_size.width,
                'height': self.content_size.height,
            }
        if self.min_scale is not None:
            result['min_scale'] = self.min_scale
        if self.message is not None:
            result['message'] = self.message
        return result

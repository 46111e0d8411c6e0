"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

This module defines typed event names for structured logging.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <component>.<category>.<action>

    component: scheme, geometry, fetch, error
    category: update, layout, refit
    action: requested, applied, discarded

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, message, metadata.generation
    | filter event = "scheme.stale_discarded"
    | stats count() by bin(5m)
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - scheme.*: View model lifecycle
    - geometry.*: Normalization diagnostics
    - fetch.*: Scheme loading
    - error.*: Error conditions
    """

    # ========== Scheme Events ==========
    SCHEME_UPDATE_REQUESTED = "scheme.update.requested"
    """New scheme handed to the view model."""

    SCHEME_NORMALIZED = "scheme.normalized"
    """Worker finished normalization and fitting."""

    SCHEME_LAYOUT_APPLIED = "scheme.layout.applied"
    """Result accepted on the main context and observers notified."""

    SCHEME_EMPTY = "scheme.empty"
    """Scheme had no places; nothing to display."""

    SCHEME_STALE_DISCARDED = "scheme.stale_discarded"
    """Result dropped because a newer update superseded it."""

    SCHEME_REFIT = "scheme.refit"
    """Zoom recomputed after viewport resize or rotation."""

    SCHEME_CLOSED = "scheme.closed"
    """Owning screen went away; pending results will be dropped."""

    # ========== Geometry Events ==========
    GEOMETRY_SKIPPED = "geometry.skipped"
    """Malformed place or line dropped during normalization."""

    # ========== Fetch Events ==========
    FETCH_STARTED = "fetch.started"
    """Scheme request dispatched to the fetcher."""

    FETCH_SUCCEEDED = "fetch.succeeded"
    """Fetcher returned a payload."""

    FETCH_FAILED = "fetch.failed"
    """Fetcher reported a failure."""

    # ========== Error Events ==========
    PAYLOAD_INVALID = "error.payload"
    """Payload did not match the scheme schema."""

    NORMALIZATION_ERROR = "error.normalization"
    """Unexpected failure while normalizing or fitting."""


# Event categories for filtering
SCHEME_EVENTS = {
    LogEvent.SCHEME_UPDATE_REQUESTED,
    LogEvent.SCHEME_NORMALIZED,
    LogEvent.SCHEME_LAYOUT_APPLIED,
    LogEvent.SCHEME_EMPTY,
    LogEvent.SCHEME_STALE_DISCARDED,
    LogEvent.SCHEME_REFIT,
    LogEvent.SCHEME_CLOSED,
}

FETCH_EVENTS = {
    LogEvent.FETCH_STARTED,
    LogEvent.FETCH_SUCCEEDED,
    LogEvent.FETCH_FAILED,
}

ERROR_EVENTS = {
    LogEvent.FETCH_FAILED,
    LogEvent.PAYLOAD_INVALID,
    LogEvent.NORMALIZATION_ERROR,
}

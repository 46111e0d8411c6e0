"""
Scheme View Model
=================

Bounded Context: Orchestration of normalization, fitting and notification.

Design:
- Owns the current scheme behind a generation counter
- Normalization + fit run on an executor worker
- Results are applied on the main context (dispatcher) only if their
  generation is still current
- Observers receive immutable snapshots, never the live state

Threading Model:
- Caller thread: update_scheme() bumps the generation and submits work
- Worker thread: GeometryNormalizer + ViewportFitter (pure)
- Main context: _apply() mutates state and notifies observers

Usage:
    viewmodel = SchemeViewModel(viewport_size=Size(390, 844), dispatcher=dispatcher)
    viewmodel.add_observer(surface.on_event)
    viewmodel.update_scheme(model)
    ...
    dispatcher.run_pending(timeout=0.1)
"""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Set, Union

from lotmap_scheme.dispatch import Dispatcher, MainThreadDispatcher
from lotmap_scheme.events import EventType, SchemeEvent
from lotmap_scheme.geometry.normalizer import (
    DEFAULT_HEIGHT_OFFSET,
    DEFAULT_WIDTH_OFFSET,
    BoundsMode,
    GeometryNormalizer,
    NormalizationResult,
)
from lotmap_scheme.geometry.shapes import SchemeModel, SchemeRect, Size
from lotmap_scheme.viewport.fitter import (
    DEFAULT_MAX_ZOOM,
    DEFAULT_TOP_OFFSET,
    ViewportFit,
    ViewportFitter,
)
from lotmap_wire.logging import LogEvent, StructuredLogger, create_logger


SchemeObserver = Callable[[SchemeEvent], None]


class SchemePhase(str, Enum):
    """View model lifecycle: IDLE → LOADING → NORMALIZING → READY."""
    IDLE = "idle"
    LOADING = "loading"
    NORMALIZING = "normalizing"
    READY = "ready"


@dataclass(frozen=True)
class SchemeSettings:
    """
    Layout constants for one screen.

    Attributes:
        width_offset: Horizontal padding around the scheme
        height_offset: Vertical padding around the scheme
        bounds_mode: Max-expansion rule for places
        max_zoom: Maximum zoom of the surface
        top_offset: Top margin for content taller than the viewport
    """

    width_offset: float = DEFAULT_WIDTH_OFFSET
    height_offset: float = DEFAULT_HEIGHT_OFFSET
    bounds_mode: BoundsMode = BoundsMode.LEGACY
    max_zoom: float = DEFAULT_MAX_ZOOM
    top_offset: float = DEFAULT_TOP_OFFSET

    def __post_init__(self):
        """Validate settings."""
        if self.width_offset < 0 or self.height_offset < 0:
            raise ValueError(
                f"offsets must be >= 0, got ({self.width_offset}, {self.height_offset})"
            )
        if self.max_zoom <= 0:
            raise ValueError(f"max_zoom must be > 0, got {self.max_zoom}")


@dataclass(frozen=True)
class EmptyScheme:
    """Nothing to display (no payload yet, zero floors or zero places)."""

    @property
    def content_size(self) -> Size:
        return Size.zero()


@dataclass(frozen=True)
class ReadyScheme:
    """
    Normalized scheme ready for drawing.

    Attributes:
        model: Normalized scheme
        rect: Padded bounding rect from the raw coordinates
        fit: Zoom bounds and content placement
    """

    model: SchemeModel
    rect: SchemeRect
    fit: ViewportFit

    @property
    def content_size(self) -> Size:
        return self.rect.size


SchemeState = Union[EmptyScheme, ReadyScheme]


@dataclass(frozen=True)
class _Outcome:
    """Worker output handed back to the main context."""
    normalized: NormalizationResult
    fit: Optional[ViewportFit]


class SchemeViewModel:
    """
    Owns the current scheme and notifies observers on the main context.

    Design Philosophy:
    - Single owner of mutable state (phase, state, generation)
    - Workers compute, the main context applies
    - A newer update supersedes an older one; stale results are dropped
    - No exception crosses the boundary: failures become ERROR events

    Thread Safety:
        update_scheme() may be called from any thread. State is only read
        by observers inside notifications (main context).
    """

    def __init__(
        self,
        viewport_size: Size,
        settings: Optional[SchemeSettings] = None,
        executor: Optional[Executor] = None,
        dispatcher: Optional[Dispatcher] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize view model.

        Args:
            viewport_size: Visible surface size
            settings: Layout constants (default: SchemeSettings())
            executor: Worker pool (default: single-thread pool, owned)
            dispatcher: Main context (default: MainThreadDispatcher on the
                constructing thread)
            logger: Structured logger (default: component "viewmodel")
        """
        if viewport_size.is_empty:
            raise ValueError(f"viewport_size must be positive, got {viewport_size}")

        self.settings = settings or SchemeSettings()
        self.dispatcher = dispatcher or MainThreadDispatcher()
        self.logger = logger or create_logger("viewmodel")

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="lotmap-normalize"
        )

        self._viewport_size = viewport_size
        self._rotation = 0.0
        self._phase = SchemePhase.IDLE
        self._state: SchemeState = EmptyScheme()

        self._generation = 0
        self._closed = False
        self._lock = threading.Lock()
        self._pending: Set[Future] = set()
        self._observers: List[SchemeObserver] = []

    # ===== Read-only views =====

    @property
    def phase(self) -> SchemePhase:
        return self._phase

    @property
    def state(self) -> SchemeState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def viewport_size(self) -> Size:
        return self._viewport_size

    @property
    def closed(self) -> bool:
        return self._closed

    # ===== Observers =====

    def add_observer(self, observer: SchemeObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: SchemeObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def notify(self, event: SchemeEvent) -> None:
        """Deliver an event to every observer (main context only)."""
        for observer in list(self._observers):
            observer(event)

    # ===== Updates =====

    def mark_loading(self) -> int:
        """
        Enter LOADING while a fetch is in flight (main context).

        Bumps the generation, so normalizations started for an earlier
        load are discarded when they complete.

        Returns:
            Current generation (0 when closed)
        """
        with self._lock:
            if self._closed:
                return 0
            self._generation += 1
            self._phase = SchemePhase.LOADING
            return self._generation

    def mark_failed(self) -> None:
        """Leave LOADING after the fetch failed (main context)."""
        with self._lock:
            if not self._closed and self._phase == SchemePhase.LOADING:
                self._phase = SchemePhase.READY

    def update_scheme(self, model: SchemeModel) -> int:
        """
        Replace the scheme and start normalization.

        Args:
            model: Raw scheme (as mapped from the payload)

        Returns:
            Generation assigned to this update (0 when closed)
        """
        with self._lock:
            if self._closed:
                return 0
            self._generation += 1
            generation = self._generation
            viewport_size = self._viewport_size
            self._phase = SchemePhase.NORMALIZING

        self.logger.info(
            event=LogEvent.SCHEME_UPDATE_REQUESTED,
            message="Scheme update requested",
            metadata={
                'generation': generation,
                'place_count': model.place_count,
                'line_count': model.line_count,
            }
        )

        future = self._executor.submit(self._compute, model, viewport_size)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(
            lambda f: self._on_done(f, generation)
        )
        return generation

    def _compute(self, model: SchemeModel, viewport_size: Size) -> _Outcome:
        """Worker: normalize and fit. Pure apart from logging."""
        settings = self.settings
        normalized = GeometryNormalizer.normalize(
            model,
            width_offset=settings.width_offset,
            height_offset=settings.height_offset,
            bounds_mode=settings.bounds_mode,
        )

        fit = None
        if not normalized.model.is_empty:
            fit = ViewportFitter.fit(
                normalized.content_size,
                viewport_size,
                max_scale=settings.max_zoom,
                top_offset=settings.top_offset,
            )
        return _Outcome(normalized=normalized, fit=fit)

    def _on_done(self, future: Future, generation: int) -> None:
        """Executor callback (worker thread): hop to the main context."""
        with self._lock:
            self._pending.discard(future)
        if future.cancelled():
            return
        self.dispatcher.post(lambda: self._apply(future, generation))

    def _apply(self, future: Future, generation: int) -> None:
        """Main context: accept the result if it is still current."""
        with self._lock:
            stale = self._closed or generation != self._generation
        if stale:
            self.logger.debug(
                event=LogEvent.SCHEME_STALE_DISCARDED,
                message="Discarded stale scheme result",
                metadata={'generation': generation, 'current': self._generation}
            )
            return

        error = future.exception()
        if error is not None:
            self._phase = SchemePhase.READY
            self.logger.error(
                event=LogEvent.NORMALIZATION_ERROR,
                message="Failed to normalize scheme",
                metadata={'generation': generation},
                exc_info=error
            )
            self.notify(SchemeEvent(
                event_type=EventType.ERROR,
                generation=generation,
                message=str(error) or type(error).__name__,
            ))
            return

        outcome: _Outcome = future.result()
        normalized = outcome.normalized

        for issue in normalized.issues:
            self.logger.warning(
                event=LogEvent.GEOMETRY_SKIPPED,
                message=issue,
                metadata={'generation': generation}
            )

        if outcome.fit is None:
            self._state = EmptyScheme()
            min_scale = self.settings.max_zoom
            self.logger.info(
                event=LogEvent.SCHEME_EMPTY,
                message="Scheme has no places",
                metadata={'generation': generation}
            )
        else:
            self._state = ReadyScheme(
                model=normalized.model,
                rect=normalized.rect,
                fit=outcome.fit,
            )
            min_scale = outcome.fit.min_scale
            self.logger.info(
                event=LogEvent.SCHEME_NORMALIZED,
                message="Scheme normalized",
                metadata={
                    'generation': generation,
                    'content_size': [normalized.content_size.width, normalized.content_size.height],
                    'min_scale': min_scale,
                    'skipped': len(normalized.issues),
                }
            )

        self._rotation = 0.0
        self._phase = SchemePhase.READY
        state = self._state

        self.notify(SchemeEvent(
            event_type=EventType.LAYOUT_READY,
            generation=generation,
            content_size=state.content_size,
            state=state,
        ))
        self.notify(SchemeEvent(
            event_type=EventType.MIN_SCALE_READY,
            generation=generation,
            content_size=state.content_size,
            min_scale=min_scale,
        ))
        self.logger.debug(
            event=LogEvent.SCHEME_LAYOUT_APPLIED,
            message="Layout applied",
            metadata={'generation': generation}
        )

    # ===== Re-layout (main context) =====

    def resize_viewport(self, viewport_size: Size) -> Optional[ViewportFit]:
        """
        Re-fit the current scheme to a new viewport size.

        Returns:
            New ViewportFit, or None when nothing is displayed
        """
        if viewport_size.is_empty:
            raise ValueError(f"viewport_size must be positive, got {viewport_size}")
        with self._lock:
            self._viewport_size = viewport_size
        return self._refit()

    def rotate(self, angle_radians: float) -> Optional[ViewportFit]:
        """
        Re-fit after the surface was rotated to an absolute angle.

        The normalized model is unchanged; only the frame used for the zoom
        calculation grows to the rotated bounding box.

        Returns:
            New ViewportFit, or None when nothing is displayed
        """
        self._rotation = angle_radians
        return self._refit()

    def _refit(self) -> Optional[ViewportFit]:
        state = self._state
        if self._closed or not isinstance(state, ReadyScheme):
            return None

        content_size = ViewportFitter.rotated_size(state.rect.size, self._rotation)
        fit = ViewportFitter.fit(
            content_size,
            self._viewport_size,
            max_scale=self.settings.max_zoom,
            top_offset=self.settings.top_offset,
        )
        self._state = ReadyScheme(model=state.model, rect=state.rect, fit=fit)

        self.logger.info(
            event=LogEvent.SCHEME_REFIT,
            message="Zoom recomputed",
            metadata={
                'generation': self._generation,
                'rotation': self._rotation,
                'min_scale': fit.min_scale,
            }
        )
        self.notify(SchemeEvent(
            event_type=EventType.MIN_SCALE_READY,
            generation=self._generation,
            content_size=content_size,
            min_scale=fit.min_scale,
        ))
        return fit

    # ===== Lifecycle =====

    def close(self) -> None:
        """
        Drop pending work; late results are discarded.

        Safe to call multiple times.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pending = list(self._pending)
            self._pending.clear()

        for future in pending:
            future.cancel()

        self._observers.clear()
        if self._owns_executor:
            self._executor.shutdown(wait=False)

        self.logger.info(
            event=LogEvent.SCHEME_CLOSED,
            message="View model closed",
            metadata={'generation': self._generation, 'cancelled': len(pending)}
        )

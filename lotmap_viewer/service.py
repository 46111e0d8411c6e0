"""
Parking Scheme Service - loads a scheme and feeds the view model.

This module provides the ParkingSchemeService class which orchestrates one
map screen: fetch the payload, decode it, map floor 0 onto the geometry
model and hand it to SchemeViewModel.

Threading Model:
- Caller thread: load_scheme() bumps the load generation and submits the fetch
- Worker thread: fetcher.fetch() + SchemePayload decoding
- Main context (view model dispatcher): mark_loading(), PROGRESS_START,
  PROGRESS_END, ERROR, update_scheme()

Events (through the view model's observers):
    PROGRESS_START → PROGRESS_END → ERROR(message)
    PROGRESS_START → PROGRESS_END → LAYOUT_READY → MIN_SCALE_READY
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional

from lotmap_scheme.errors import FetchFailed, PayloadError
from lotmap_scheme.events import EventType, SchemeEvent
from lotmap_scheme.geometry.shapes import PLACE_SIZE, SchemeModel, Size
from lotmap_scheme.viewmodel import SchemeViewModel
from lotmap_viewer.fetchers import SchemeFetcher
from lotmap_wire.logging import LogEvent, StructuredLogger, create_logger
from lotmap_wire.schemas import SchemePayload

logger = logging.getLogger(__name__)


class ParkingSchemeService:
    """
    Loading service for one parking map screen.

    Thread Safety:
    - load generation: protected by _lock
    - view model: only touched on its dispatcher (main context)
    - fetcher: called from one worker at a time

    Usage:
        viewmodel = SchemeViewModel(viewport_size=Size(390, 844), dispatcher=dispatcher)
        service = ParkingSchemeService(
            parking_id="lot-7",
            fetcher=FileSchemeFetcher(Path("./data/schemes")),
            viewmodel=viewmodel,
        )
        service.load_scheme()
        dispatcher.run_pending(timeout=1.0)
    """

    def __init__(
        self,
        parking_id: str,
        fetcher: SchemeFetcher,
        viewmodel: SchemeViewModel,
        place_size: Size = PLACE_SIZE,
        executor: Optional[Executor] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize service.

        Args:
            parking_id: Parking whose scheme is shown
            fetcher: Scheme source (backend client, file fetcher, ...)
            viewmodel: View model that owns the scheme
            place_size: Footprint given to every place
            executor: Worker pool for fetch + decode (default: own pool)
            logger: Structured logger (default: component "service")
        """
        if not parking_id:
            raise ValueError("parking_id cannot be empty")

        self.parking_id = parking_id
        self.fetcher = fetcher
        self.viewmodel = viewmodel
        self.place_size = place_size
        self.logger = logger or create_logger("service")

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="lotmap-fetch"
        )

        self._load_generation = 0
        self._closed = False
        self._lock = threading.Lock()
        self._inflight: Optional[Future] = None

    def load_scheme(self) -> int:
        """
        Start loading the scheme.

        A newer call supersedes an older in-flight load.

        Returns:
            Load generation (0 when closed)
        """
        with self._lock:
            if self._closed:
                return 0
            self._load_generation += 1
            generation = self._load_generation

        self.logger.info(
            event=LogEvent.FETCH_STARTED,
            message="Loading parking scheme",
            metadata={'parking_id': self.parking_id, 'generation': generation}
        )
        self.viewmodel.dispatcher.post(lambda: self._begin(generation))

        future = self._executor.submit(self._fetch_model)
        with self._lock:
            self._inflight = future
        future.add_done_callback(lambda f: self._on_fetched(f, generation))
        return generation

    def _is_stale(self, generation: int) -> bool:
        with self._lock:
            return self._closed or generation != self._load_generation

    def _begin(self, generation: int) -> None:
        """Main context: invalidate older results and report progress."""
        if self._is_stale(generation):
            return
        self.viewmodel.mark_loading()
        self.viewmodel.notify(SchemeEvent(
            event_type=EventType.PROGRESS_START,
            generation=generation,
        ))

    def _fetch_model(self) -> SchemeModel:
        """Worker: fetch, decode and map floor 0."""
        payload = self.fetcher.fetch(self.parking_id)
        return SchemePayload.from_dict(payload).to_scheme_model(self.place_size)

    def _on_fetched(self, future: Future, generation: int) -> None:
        if future.cancelled():
            return
        self.viewmodel.dispatcher.post(lambda: self._apply(future, generation))

    def _apply(self, future: Future, generation: int) -> None:
        """Main context: report progress and forward the model."""
        if self._is_stale(generation):
            logger.debug(f"Dropping stale load #{generation} for {self.parking_id}")
            return

        self.viewmodel.notify(SchemeEvent(
            event_type=EventType.PROGRESS_END,
            generation=generation,
        ))

        error = future.exception()
        if error is not None:
            self.viewmodel.mark_failed()
            self._report_error(error, generation)
            return

        model: SchemeModel = future.result()
        self.logger.info(
            event=LogEvent.FETCH_SUCCEEDED,
            message="Parking scheme loaded",
            metadata={
                'parking_id': self.parking_id,
                'generation': generation,
                'place_count': model.place_count,
                'line_count': model.line_count,
            }
        )
        self.viewmodel.update_scheme(model)

    def _report_error(self, error: BaseException, generation: int) -> None:
        if isinstance(error, FetchFailed):
            message = error.message
            self.logger.warning(
                event=LogEvent.FETCH_FAILED,
                message=message,
                metadata={'parking_id': self.parking_id, 'generation': generation}
            )
        elif isinstance(error, PayloadError):
            message = str(error)
            self.logger.error(
                event=LogEvent.PAYLOAD_INVALID,
                message="Invalid scheme payload",
                metadata={'parking_id': self.parking_id, 'generation': generation},
                exc_info=error
            )
        else:
            message = str(error) or type(error).__name__
            self.logger.error(
                event=LogEvent.FETCH_FAILED,
                message="Unexpected error while loading scheme",
                metadata={'parking_id': self.parking_id, 'generation': generation},
                exc_info=error
            )

        self.viewmodel.notify(SchemeEvent(
            event_type=EventType.ERROR,
            generation=generation,
            message=message,
        ))

    def close(self) -> None:
        """
        Stop the screen: cancel the in-flight load and close the view model.

        Safe to call multiple times.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            inflight = self._inflight
            self._inflight = None

        if inflight is not None:
            inflight.cancel()
        self.viewmodel.close()
        if self._owns_executor:
            self._executor.shutdown(wait=False)
        logger.info(f"ParkingSchemeService closed for {self.parking_id}")

from __future__ import annotations

import json
import logging
import threading
from typing import List

import pytest

from lotmap_scheme import (
    Dispatcher,
    EventType,
    ImmediateDispatcher,
    MainThreadDispatcher,
    SchemeEvent,
    SchemeViewModel,
    Size,
)
from lotmap_wire import LogEvent, StructuredLogger
from lotmap_wire.logging.events import ERROR_EVENTS, FETCH_EVENTS, SCHEME_EVENTS


def test_dispatcher_runs_in_fifo_order() -> None:
    dispatcher = MainThreadDispatcher()
    calls: List[int] = []
    for i in range(3):
        dispatcher.post(lambda i=i: calls.append(i))

    assert dispatcher.pending == 3
    assert dispatcher.run_pending() == 3
    assert calls == [0, 1, 2]
    assert dispatcher.run_pending() == 0


def test_dispatcher_waits_for_posts_from_workers() -> None:
    dispatcher = MainThreadDispatcher()
    ran_on: List[threading.Thread] = []

    worker = threading.Thread(
        target=lambda: dispatcher.post(lambda: ran_on.append(threading.current_thread()))
    )
    worker.start()

    assert dispatcher.run_pending(timeout=5.0) == 1
    worker.join()
    assert ran_on == [threading.current_thread()]


def test_dispatcher_rejects_foreign_threads() -> None:
    dispatcher = MainThreadDispatcher()
    errors: List[BaseException] = []

    def drain() -> None:
        try:
            dispatcher.run_pending()
        except RuntimeError as exc:
            errors.append(exc)

    worker = threading.Thread(target=drain)
    worker.start()
    worker.join()

    assert len(errors) == 1


@pytest.mark.parametrize(
    "event_type",
    [EventType.LAYOUT_READY, EventType.MIN_SCALE_READY, EventType.ERROR],
)
def test_events_require_their_payload(event_type: EventType) -> None:
    with pytest.raises(ValueError):
        SchemeEvent(event_type)


def test_event_to_dict() -> None:
    event = SchemeEvent(
        EventType.MIN_SCALE_READY,
        generation=4,
        content_size=Size(94, 120),
        min_scale=0.5,
    )

    data = event.to_dict()

    assert data["event_type"] == "min_scale_ready"
    assert data["generation"] == 4
    assert data["content_size"] == {"width": 94, "height": 120}
    assert data["min_scale"] == 0.5


def test_structured_logger_emits_json(caplog: pytest.LogCaptureFixture) -> None:
    logger = StructuredLogger(component="test", logger_name="lotmap.test.structured")

    with caplog.at_level(logging.INFO, logger="lotmap.test.structured"):
        logger.info(
            event=LogEvent.SCHEME_NORMALIZED,
            message="Scheme normalized",
            metadata={"generation": 3},
        )
        logger.debug(event=LogEvent.SCHEME_REFIT, message="hidden")

    assert len(caplog.records) == 1
    entry = json.loads(caplog.records[0].getMessage())
    assert entry["event"] == "scheme.normalized"
    assert entry["component"] == "test"
    assert entry["metadata"] == {"generation": 3}


def test_log_event_categories() -> None:
    assert LogEvent.SCHEME_STALE_DISCARDED in SCHEME_EVENTS
    assert LogEvent.FETCH_FAILED in FETCH_EVENTS
    assert LogEvent.PAYLOAD_INVALID in ERROR_EVENTS


@pytest.mark.parametrize("dispatcher", [MainThreadDispatcher(), ImmediateDispatcher()])
def test_dispatchers_satisfy_protocol(dispatcher: Dispatcher) -> None:
    assert isinstance(dispatcher, Dispatcher)


def test_viewmodel_accepts_any_dispatcher() -> None:
    vm = SchemeViewModel(viewport_size=Size(390, 844), dispatcher=ImmediateDispatcher())
    try:
        assert isinstance(vm.dispatcher, ImmediateDispatcher)
    finally:
        vm.close()

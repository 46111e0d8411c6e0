from __future__ import annotations

import json
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple

import pytest

from lotmap_scheme import Line, Place, Point, SchemeEvent, SchemeModel


class ManualExecutor(Executor):
    """Executor that only runs submitted jobs when told to, in any order."""

    def __init__(self) -> None:
        self.jobs: List[Tuple[Future, Callable[..., Any], tuple, dict]] = []

    def submit(self, fn, *args, **kwargs) -> Future:  # type: ignore[override]
        future: Future = Future()
        self.jobs.append((future, fn, args, kwargs))
        return future

    def run(self, index: int = 0) -> None:
        future, fn, args, kwargs = self.jobs.pop(index)
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)

    def run_all(self) -> None:
        while self.jobs:
            self.run(0)


class EventRecorder:
    def __init__(self) -> None:
        self.events: List[SchemeEvent] = []

    def __call__(self, event: SchemeEvent) -> None:
        self.events.append(event)

    @property
    def types(self) -> List[str]:
        return [event.event_type.value for event in self.events]


@pytest.fixture
def manual_executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


def make_place(x: float, y: float, angle: float = 0.0, label: str = "") -> Place:
    return Place(origin=Point(x, y), angle=angle, label=label)


def make_line(*points: Tuple[float, float]) -> Line:
    return Line.from_points(Point(x, y) for x, y in points)


@pytest.fixture
def single_place_model() -> SchemeModel:
    return SchemeModel(places=[make_place(100, 200, label="A1")])


SAMPLE_PAYLOAD: Dict[str, Any] = {
    "floors": [
        {
            "parkingLines": [
                [{"x": 0, "y": 0}, {"x": 300, "y": 0}],
                [{"x": 0, "y": 0}, {"x": 0, "y": 200}],
            ],
            "parkingLots": [
                {"x": 20, "y": 20, "angle": 0, "name": "A1"},
                {"x": 60, "y": 20, "angle": 0, "name": "A2"},
                {"x": 100, "y": 120, "angle": 90, "name": "B1"},
            ],
        }
    ]
}


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    return json.loads(json.dumps(SAMPLE_PAYLOAD))


@pytest.fixture
def scheme_file(tmp_path: Path, sample_payload: Dict[str, Any]) -> Path:
    path = tmp_path / "lot-1.json"
    path.write_text(json.dumps(sample_payload), encoding="utf-8")
    return path

from __future__ import annotations

import math
import threading

import pytest

from lotmap_scheme import (
    EmptyScheme,
    EventType,
    GeometryNormalizer,
    ImmediateDispatcher,
    MainThreadDispatcher,
    Point,
    ReadyScheme,
    SchemeModel,
    SchemePhase,
    SchemeSettings,
    SchemeViewModel,
    Size,
)
from tests.conftest import EventRecorder, ManualExecutor, make_place

VIEWPORT = Size(390, 844)


@pytest.fixture
def viewmodel(manual_executor: ManualExecutor, recorder: EventRecorder) -> SchemeViewModel:
    vm = SchemeViewModel(
        viewport_size=VIEWPORT,
        executor=manual_executor,
        dispatcher=ImmediateDispatcher(),
    )
    vm.add_observer(recorder)
    return vm


def test_update_emits_layout_then_min_scale(
    viewmodel: SchemeViewModel,
    manual_executor: ManualExecutor,
    recorder: EventRecorder,
    single_place_model: SchemeModel,
) -> None:
    generation = viewmodel.update_scheme(single_place_model)
    assert viewmodel.phase == SchemePhase.NORMALIZING
    assert recorder.events == []

    manual_executor.run_all()

    assert recorder.types == ["layout_ready", "min_scale_ready"]
    layout, min_scale = recorder.events
    assert layout.generation == min_scale.generation == generation
    assert layout.content_size == Size(94, 120)
    assert isinstance(layout.state, ReadyScheme)
    assert layout.state.model.places[0].origin == Point(30, 30)
    assert min_scale.min_scale == pytest.approx(844 / 120)
    assert viewmodel.phase == SchemePhase.READY


def test_ready_state_snapshot_matches_events(
    viewmodel: SchemeViewModel,
    manual_executor: ManualExecutor,
    single_place_model: SchemeModel,
) -> None:
    viewmodel.update_scheme(single_place_model)
    manual_executor.run_all()

    state = viewmodel.state
    assert isinstance(state, ReadyScheme)
    assert state.fit.zoom.maximum == pytest.approx(844 / 120)
    assert state.fit.content_origin == Point(0.0, 844 / 2 - 60)


def test_empty_scheme_reports_zero_size_and_max_zoom(
    viewmodel: SchemeViewModel,
    manual_executor: ManualExecutor,
    recorder: EventRecorder,
) -> None:
    viewmodel.update_scheme(SchemeModel.empty())
    manual_executor.run_all()

    assert recorder.types == ["layout_ready", "min_scale_ready"]
    assert recorder.events[0].content_size == Size.zero()
    assert isinstance(recorder.events[0].state, EmptyScheme)
    assert recorder.events[1].min_scale == 1.0
    assert isinstance(viewmodel.state, EmptyScheme)


@pytest.mark.parametrize("order", [(0, 0), (1, 0)])
def test_only_latest_update_is_applied(
    viewmodel: SchemeViewModel,
    manual_executor: ManualExecutor,
    recorder: EventRecorder,
    order: tuple,
) -> None:
    old = SchemeModel(places=[make_place(0, 0), make_place(500, 500)])
    new = SchemeModel(places=[make_place(0, 0)])

    viewmodel.update_scheme(old)
    latest = viewmodel.update_scheme(new)
    for index in order:
        manual_executor.run(index)

    layouts = [e for e in recorder.events if e.event_type == EventType.LAYOUT_READY]
    assert len(layouts) == 1
    assert layouts[0].generation == latest
    assert layouts[0].content_size == Size(94, 120)
    assert viewmodel.state.content_size == Size(94, 120)


def test_results_after_close_are_discarded(
    single_place_model: SchemeModel,
    manual_executor: ManualExecutor,
    recorder: EventRecorder,
) -> None:
    dispatcher = MainThreadDispatcher()
    vm = SchemeViewModel(viewport_size=VIEWPORT, executor=manual_executor, dispatcher=dispatcher)
    vm.add_observer(recorder)

    vm.update_scheme(single_place_model)
    manual_executor.run_all()
    vm.close()
    dispatcher.run_pending()

    assert recorder.events == []
    assert isinstance(vm.state, EmptyScheme)
    assert vm.closed


def test_close_cancels_pending_work(
    viewmodel: SchemeViewModel,
    manual_executor: ManualExecutor,
    recorder: EventRecorder,
    single_place_model: SchemeModel,
) -> None:
    viewmodel.update_scheme(single_place_model)
    viewmodel.close()
    manual_executor.run_all()

    assert recorder.events == []
    assert viewmodel.update_scheme(single_place_model) == 0
    viewmodel.close()


def test_worker_failure_becomes_error_event(
    viewmodel: SchemeViewModel,
    manual_executor: ManualExecutor,
    recorder: EventRecorder,
    single_place_model: SchemeModel,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def explode(*args, **kwargs):
        raise RuntimeError("normalizer exploded")

    monkeypatch.setattr(GeometryNormalizer, "normalize", staticmethod(explode))

    viewmodel.update_scheme(single_place_model)
    manual_executor.run_all()

    assert recorder.types == ["error"]
    assert recorder.events[0].message == "normalizer exploded"
    assert isinstance(viewmodel.state, EmptyScheme)


def test_malformed_geometry_is_skipped_not_fatal(
    viewmodel: SchemeViewModel,
    manual_executor: ManualExecutor,
    recorder: EventRecorder,
) -> None:
    model = SchemeModel(places=[make_place(100, 200), make_place(math.nan, 0)])

    viewmodel.update_scheme(model)
    manual_executor.run_all()

    assert recorder.types == ["layout_ready", "min_scale_ready"]
    assert viewmodel.state.model.place_count == 1


def test_rotate_refits_with_rotated_frame(
    viewmodel: SchemeViewModel,
    manual_executor: ManualExecutor,
    recorder: EventRecorder,
    single_place_model: SchemeModel,
) -> None:
    viewmodel.update_scheme(single_place_model)
    manual_executor.run_all()

    fit = viewmodel.rotate(math.pi / 2)

    assert fit is not None
    assert fit.min_scale == pytest.approx(390 / 120)
    assert recorder.types[-1] == "min_scale_ready"
    assert recorder.events[-1].min_scale == pytest.approx(390 / 120)
    assert viewmodel.state.content_size == Size(94, 120)

    back = viewmodel.rotate(0.0)
    assert back.min_scale == pytest.approx(844 / 120)


def test_resize_viewport_refits(
    viewmodel: SchemeViewModel,
    manual_executor: ManualExecutor,
    single_place_model: SchemeModel,
) -> None:
    viewmodel.update_scheme(single_place_model)
    manual_executor.run_all()

    fit = viewmodel.resize_viewport(Size(100, 100))

    assert fit.min_scale == pytest.approx(100 / 120)
    assert viewmodel.viewport_size == Size(100, 100)


def test_refit_without_scheme_is_noop(viewmodel: SchemeViewModel, recorder: EventRecorder) -> None:
    assert viewmodel.rotate(1.0) is None
    assert recorder.events == []


def test_rejects_empty_viewport() -> None:
    with pytest.raises(ValueError):
        SchemeViewModel(viewport_size=Size(0, 100), dispatcher=ImmediateDispatcher())


def test_settings_flow_into_layout(
    manual_executor: ManualExecutor,
    recorder: EventRecorder,
    single_place_model: SchemeModel,
) -> None:
    vm = SchemeViewModel(
        viewport_size=VIEWPORT,
        settings=SchemeSettings(width_offset=0, height_offset=0, max_zoom=50.0),
        executor=manual_executor,
        dispatcher=ImmediateDispatcher(),
    )
    vm.add_observer(recorder)

    vm.update_scheme(single_place_model)
    manual_executor.run_all()

    assert recorder.events[0].content_size == Size(34, 60)
    assert vm.state.fit.zoom.maximum == 50.0


def test_threaded_update_delivers_on_owner_thread(
    single_place_model: SchemeModel,
    recorder: EventRecorder,
) -> None:
    dispatcher = MainThreadDispatcher()
    vm = SchemeViewModel(viewport_size=VIEWPORT, dispatcher=dispatcher)
    threads = []
    vm.add_observer(lambda event: threads.append(threading.current_thread()))
    vm.add_observer(recorder)

    try:
        vm.update_scheme(single_place_model)
        while len(recorder.events) < 2:
            assert dispatcher.run_pending(timeout=5.0) > 0
    finally:
        vm.close()

    assert recorder.types == ["layout_ready", "min_scale_ready"]
    assert all(t is threading.current_thread() for t in threads)


def test_mark_loading_discards_running_normalization(
    viewmodel: SchemeViewModel,
    manual_executor: ManualExecutor,
    recorder: EventRecorder,
    single_place_model: SchemeModel,
) -> None:
    viewmodel.update_scheme(single_place_model)
    viewmodel.mark_loading()
    manual_executor.run_all()

    assert recorder.events == []
    assert isinstance(viewmodel.state, EmptyScheme)
    assert viewmodel.phase == SchemePhase.LOADING

    viewmodel.mark_failed()
    assert viewmodel.phase == SchemePhase.READY

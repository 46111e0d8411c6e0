from __future__ import annotations

import math

import numpy as np
import pytest

from lotmap_scheme import PLACE_SIZE, Line, Place, Point, SchemeModel, Size
from tests.conftest import make_line, make_place


def test_place_defaults_to_uniform_footprint() -> None:
    place = make_place(10, 20)

    assert place.size == PLACE_SIZE == Size(34.0, 60.0)
    assert place.center == Point(27.0, 50.0)


def test_unrotated_corners_match_footprint() -> None:
    corners = make_place(10, 20).corners()

    np.testing.assert_allclose(
        corners, [[10, 20], [44, 20], [44, 80], [10, 80]]
    )


def test_rotation_is_about_the_center() -> None:
    place = make_place(0, 0, angle=90)
    corners = place.corners()

    np.testing.assert_allclose(corners.mean(axis=0), [17.0, 30.0])
    width = corners[:, 0].max() - corners[:, 0].min()
    height = corners[:, 1].max() - corners[:, 1].min()
    assert width == pytest.approx(60.0)
    assert height == pytest.approx(34.0)


def test_place_translation_keeps_angle_and_label() -> None:
    moved = make_place(1, 2, angle=45, label="B7").translated(10, -2)

    assert moved.origin == Point(11, 0)
    assert moved.angle == 45
    assert moved.label == "B7"


def test_non_finite_place_is_reported() -> None:
    assert not Place(origin=Point(math.nan, 0)).is_finite
    assert not make_place(0, 0, angle=math.inf).is_finite


def test_line_points_are_read_only_copies() -> None:
    source = np.array([[0.0, 0.0], [10.0, 5.0]])
    line = Line(points=source)
    source[0, 0] = 99.0

    assert line.points[0, 0] == 0.0
    with pytest.raises(ValueError):
        line.points[0, 0] = 1.0


def test_line_rejects_wrong_shape() -> None:
    with pytest.raises(ValueError, match="Nx2"):
        Line(points=np.zeros((3, 3)))


def test_empty_line_is_malformed() -> None:
    line = Line(points=[])

    assert len(line) == 0
    assert line.points.shape == (0, 2)
    assert not line.is_valid
    assert line.segments() == []


def test_single_point_line_is_valid_but_not_visible() -> None:
    line = make_line((5, 5))

    assert line.is_valid
    assert not line.is_visible
    assert line.segments() == []


def test_line_segments_are_consecutive_pairs() -> None:
    line = make_line((0, 0), (10, 0), (10, 10))

    assert line.segments() == [
        (Point(0, 0), Point(10, 0)),
        (Point(10, 0), Point(10, 10)),
    ]


def test_scheme_without_places_is_empty_even_with_lines() -> None:
    model = SchemeModel(lines=[make_line((0, 0), (1, 1))])

    assert model.is_empty
    assert model.line_count == 1
    assert SchemeModel.empty().is_empty


def test_scheme_translation_returns_new_model() -> None:
    model = SchemeModel(places=[make_place(0, 0)], lines=[make_line((1, 1), (2, 2))])
    moved = model.translated(5, 5)

    assert model.places[0].origin == Point(0, 0)
    assert moved.places[0].origin == Point(5, 5)
    np.testing.assert_allclose(moved.lines[0].points, [[6, 6], [7, 7]])

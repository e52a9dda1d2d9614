from __future__ import annotations

import math

import pytest

from core.errors import GeometryDegenerate
from core.geometry import (
    Matrix,
    Rect,
    ViewportTriple,
    absolute_position,
    compose,
    cumulative_transform,
    fit_viewport,
    initial_viewport,
    interpolate_zoom,
    parse_transform_list,
    viewport_transform,
)

VIEWPORT = Rect(0, 0, 1000, 500)


def test_fit_viewport_uses_both_axes_when_they_agree() -> None:
    pos = fit_viewport(Rect(0, 0, 200, 100), 1.0, VIEWPORT)
    assert pos.width == 200
    assert (pos.center_x, pos.center_y) == (100, 50)


def test_fit_viewport_picks_the_more_constraining_axis() -> None:
    pos = fit_viewport(Rect(0, 0, 400, 100), 1.0, VIEWPORT)
    assert pos.width == 400


def test_fit_viewport_applies_margin_factor() -> None:
    pos = fit_viewport(Rect(100, 100, 200, 100), 1.5, VIEWPORT)
    assert pos == ViewportTriple(200, 150, pytest.approx(300))


@pytest.mark.parametrize("rect", [Rect(0, 0, 0, 100), Rect(0, 0, 100, 0), Rect(5, 5, -1, 10)])
def test_fit_viewport_rejects_degenerate_rectangles(rect: Rect) -> None:
    with pytest.raises(GeometryDegenerate):
        fit_viewport(rect, 1.0, VIEWPORT)


def test_fit_viewport_rejects_non_positive_scale() -> None:
    with pytest.raises(ValueError):
        fit_viewport(Rect(0, 0, 10, 10), 0, VIEWPORT)


def test_compose_applies_rightmost_matrix_first() -> None:
    m = compose(Matrix.translate(10, 0), Matrix.scale(2))
    assert m.apply(1, 1) == (12, 2)
    m = compose(Matrix.scale(2), Matrix.translate(10, 0))
    assert m.apply(1, 1) == (22, 2)


def test_compose_with_identity_is_exact() -> None:
    m = Matrix(0.1, 0.2, 0.3, 0.7, 1 / 3, -2 / 7)
    assert compose(Matrix.identity(), m) == m


def test_parse_transform_list_reads_every_entry_in_order() -> None:
    matrices = parse_transform_list("translate(10, 20) scale(2) rotate(90)")
    assert len(matrices) == 3
    assert matrices[0] == Matrix.translate(10, 20)
    assert matrices[1] == Matrix.scale(2, 2)
    x, y = matrices[2].apply(1, 0)
    assert x == pytest.approx(0, abs=1e-12)
    assert y == pytest.approx(1)


def test_parse_transform_list_handles_matrix_and_empty_values() -> None:
    assert parse_transform_list("matrix(1,0,0,1,5,6)") == [Matrix(1, 0, 0, 1, 5, 6)]
    assert parse_transform_list(None) == []
    assert parse_transform_list("  ") == []


@pytest.mark.parametrize("text", ["translate(1,2,3)", "wobble(2)", "scale(a)"])
def test_parse_transform_list_rejects_malformed_input(text: str) -> None:
    with pytest.raises(ValueError):
        parse_transform_list(text)


def test_to_svg_round_trips_exactly() -> None:
    m = Matrix(0.1, 0.0, 0.0, 1 / 3, 12.5, -7.0)
    assert parse_transform_list(m.to_svg()) == [m]


def test_rotate_about_centre_keeps_the_centre_fixed() -> None:
    x, y = Matrix.rotate(45, 10, 20).apply(10, 20)
    assert (x, y) == (pytest.approx(10), pytest.approx(20))


def test_absolute_position_composes_ancestor_transforms(scene) -> None:
    parent = scene.add("outer", 0, 0, 50, 50, transforms=[Matrix.translate(100, 0)])
    child = scene.add("inner", 5, 5, 10, 10, parent="outer", transforms=[Matrix.scale(2)])
    assert absolute_position(child) == (110, 10)
    assert absolute_position(parent) == (100, 0)
    assert cumulative_transform(child) == Matrix.scale(2)


def test_initial_viewport_shows_the_whole_document() -> None:
    assert initial_viewport(VIEWPORT) == ViewportTriple(500, 250, 1000)


def test_viewport_transform_of_initial_viewport_is_identity() -> None:
    assert viewport_transform(initial_viewport(VIEWPORT), VIEWPORT).is_identity()


def test_viewport_transform_centres_target() -> None:
    m = viewport_transform((100, 50, 200), VIEWPORT)
    assert m.a == 5
    assert m.apply(100, 50) == (500, 250)
    assert m.apply(120, 50) == (600, 250)


def test_interpolate_zoom_hits_both_endpoints() -> None:
    start, end = (500, 250, 1000), (100, 50, 200)
    interpolator = interpolate_zoom(start, end)
    assert interpolator(0) == start
    assert interpolator(1) == end
    mid = interpolator(0.5)
    assert all(math.isfinite(v) for v in mid)
    assert interpolator.duration > 0


def test_interpolate_zoom_pure_zoom_and_no_motion() -> None:
    zoom_in = interpolate_zoom((10, 10, 100), (10, 10, 50))
    assert zoom_in.duration > 0
    assert zoom_in(0.5).width == pytest.approx(math.sqrt(100 * 50))
    assert interpolate_zoom((1, 2, 3), (1, 2, 3)).duration == 0


def test_interpolate_zoom_rejects_zero_width() -> None:
    with pytest.raises(GeometryDegenerate):
        interpolate_zoom((0, 0, 0), (1, 1, 1))

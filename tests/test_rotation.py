import math

import numpy as np
import pytest

from scattertransition.transitions.rotation import (
    RotationParams,
    RotationTransition,
    SingleRotationTransition,
)


def _pos(view, point):
    return view.get_x(point), view.get_y(point)


@pytest.mark.parametrize("params", [
    {},
    {"perspective": 1.0},
    {"perspective": 1.0, "staged": True},
    {"perspective": 0.5, "staged": True, "ease": "exp", "zoom_time": 0.3},
    {"perspective": 1.0, "staged": True, "zoom_time": 0.0},
])
def test_endpoints_show_views(data, view_ab, view_ac, params):
    transition = RotationTransition([view_ab, view_ac], params)
    for point in data:
        assert transition.get_position(0.0, point) == pytest.approx(_pos(view_ab, point), abs=1e-9)
        assert transition.get_position(1.0, point) == pytest.approx(_pos(view_ac, point), abs=1e-9)


def test_rotation_around_y_axis(data, view_ab, view_cb):
    transition = RotationTransition([view_ab, view_cb])
    assert transition.transitions[0].rot_axis == "y"
    for point in data:
        assert transition.get_position(1.0, point) == pytest.approx(_pos(view_cb, point), abs=1e-9)


def test_half_rotation_orthographic(data, view_ab, view_ac):
    transition = RotationTransition([view_ab, view_ac])
    point = data[1]
    a, b, c = 0.05, 0.05, 0.95
    half = math.sqrt(2) / 2
    x, y = transition.get_position(0.5, point)
    assert x == pytest.approx(a)
    assert y == pytest.approx(0.5 + half * (b - 0.5) + half * (c - 0.5))


def test_intermediate_views(data, dims, view_ab, view_ac):
    from scattertransition.model.view import ScatterView

    view_bc = ScatterView(dims["b"], dims["c"])
    transition = RotationTransition([view_ab, view_ac, view_bc], {"perspective": 1.0})
    assert len(transition.transitions) == 2
    for point in data:
        assert transition.get_position(0.5, point) == pytest.approx(_pos(view_ac, point), abs=1e-9)
        assert transition.get_position(1.0, point) == pytest.approx(_pos(view_bc, point), abs=1e-9)


def test_x_axis_rotates_negatively(view_ab, view_ac):
    segment = SingleRotationTransition(view_ab, view_ac, RotationParams())
    assert segment.rot_axis == "x"
    assert segment.rotation_angle(1.0) == pytest.approx(-math.pi / 2)


def test_perspective_bump_peaks_mid_rotation(view_ab, view_ac):
    segment = SingleRotationTransition(view_ab, view_ac, RotationParams(perspective=1.0))
    assert segment.progress(0.0)[1] == pytest.approx(0.0, abs=1e-12)
    assert segment.progress(1.0)[1] == pytest.approx(0.0, abs=1e-12)
    assert segment.progress(0.5)[1] == pytest.approx(2.41 * (math.sqrt(2) - 1))


def test_staged_phases(view_ab, view_ac):
    params = RotationParams(perspective=1.0, staged=True, zoom_time=0.2)
    segment = SingleRotationTransition(view_ab, view_ac, params)
    rotation, persp = segment.progress(0.1)
    assert rotation == 0.0
    assert 0.0 < persp < 1.0
    rotation, persp = segment.progress(0.5)
    assert rotation == pytest.approx(0.5)
    assert persp == 1.0
    rotation, persp = segment.progress(0.9)
    assert rotation == 1.0
    assert 0.0 < persp < 1.0


def test_matrices_are_cached(view_ab, view_ac):
    segment = SingleRotationTransition(view_ab, view_ac, RotationParams())
    first = segment.get_rotation(0.3)
    assert segment.get_rotation(0.3) is first
    assert segment.get_rotation(0.4) is not first
    np.testing.assert_allclose(segment.get_projection(0.0) @ segment.get_rotation(0.0),
                               segment.get_projection(0.0))


def test_flags():
    assert RotationTransition.requires_common_dimensions
    assert not RotationTransition.can_swap_dimensions

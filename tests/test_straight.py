import pytest

from scattertransition.transitions.straight import StraightTransition


def test_endpoints(data, view_ab, view_bc):
    transition = StraightTransition([view_ab, view_bc])
    point = data[1]
    assert transition.get_position(0.0, point) == pytest.approx((0.05, 0.05))
    assert transition.get_position(1.0, point) == pytest.approx((0.05, 0.95))


def test_midpoint(data, view_ab, view_cb):
    transition = StraightTransition([view_ab, view_cb])
    point = data[0]
    assert transition.get_x(0.5, point) == pytest.approx(0.5)
    assert transition.get_y(0.5, point) == pytest.approx(0.0)


def test_intermediate_views_are_hit(data, view_ab, view_ac, view_bc):
    transition = StraightTransition([view_ab, view_ac, view_bc])
    point = data[2]
    assert transition.get_position(0.5, point) == pytest.approx((view_ac.get_x(point), view_ac.get_y(point)))
    assert transition.has_meaningful_intermediates
    assert transition.is_ready
    assert transition.prepare().result() is None


def test_needs_two_views(view_ab):
    with pytest.raises(ValueError):
        StraightTransition([view_ab])

import pytest

from scattertransition.model.view import ScatterView
from scattertransition.transitions.errors import IncompatibleViewTransition, TransitionIncompatibleViews
from scattertransition.transitions.rotation import RotationTransition
from scattertransition.transitions.straight import StraightTransition


def test_normalized_positions(view_ab):
    point = {"a": 2.5, "b": 7.5, "c": 0.0}
    assert view_ab.get_x(point) == pytest.approx(0.25)
    assert view_ab.get_y(point) == pytest.approx(0.75)


def test_str(view_ab):
    assert str(view_ab) == "ScatterView(x: a, y: b)"


def test_dict_round_trip(view_ab):
    assert ScatterView.from_dict(view_ab.to_dict()) == view_ab


def test_transition_to_nothing_raises(view_ab):
    with pytest.raises(ValueError, match="cannot transition to nothing"):
        view_ab.transition_to(StraightTransition, None)


def test_transition_to_builds_path(view_ab, view_ac, view_bc):
    transition = view_ab.transition_to(StraightTransition, None, view_ac, view_bc)
    assert transition.views == [view_ab, view_ac, view_bc]


def test_rotation_requires_common_dimension(dims):
    start = ScatterView(dims["a"], dims["a"])
    end = ScatterView(dims["b"], dims["c"])
    with pytest.raises(IncompatibleViewTransition) as info:
        start.transition_to(RotationTransition, None, end)
    assert info.value.reason == "no common dimensions"
    assert "RotationTransition" in str(info.value)


def test_rotation_rejects_swapped_dimensions(view_ab, dims):
    swapped = ScatterView(dims["b"], dims["a"])
    with pytest.raises(TransitionIncompatibleViews) as info:
        view_ab.validate_transition_to(swapped, RotationTransition)
    assert info.value.reason == "swapping is not supported"


def test_straight_accepts_anything(view_ab, dims):
    view_ab.validate_transition_to(ScatterView(dims["c"], dims["c"]), StraightTransition)

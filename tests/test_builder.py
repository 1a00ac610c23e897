import pytest

from scattertransition.model.data import Dimension
from scattertransition.model.view import ScatterView
from scattertransition.builder import TransitionBuilder, closest_view, exact_view_at
from scattertransition.transitions.errors import IncompatibleViewTransition
from scattertransition.transitions.rotation import RotationTransition
from scattertransition.transitions.spline import SplineParams, SplineTransition
from scattertransition.transitions.straight import StraightTransition


def test_build_by_names(data, view_ab):
    transition = TransitionBuilder(StraightTransition, None, data, view_ab).to_y("c").to_x("b").build()
    assert [str(v) for v in transition.views] == [
        "ScatterView(x: a, y: b)",
        "ScatterView(x: a, y: c)",
        "ScatterView(x: b, y: c)",
    ]


def test_to_view_by_name_pair(data, view_ab):
    builder = TransitionBuilder(StraightTransition, None, data, view_ab).to_view("c", "a", padding=0.5)
    assert builder.current_view.x.domain == (-2.5, 12.5)


def test_build_without_targets(data, view_ab):
    with pytest.raises(ValueError, match="cannot transition to nothing"):
        TransitionBuilder(StraightTransition, None, data, view_ab).build()


def test_build_validates_views(data, view_ab, view_cb):
    builder = TransitionBuilder(RotationTransition, {}, data, view_ab).to_view(view_cb)
    builder.build()
    with pytest.raises(IncompatibleViewTransition):
        builder.to_x("b").build()


def test_spline_gets_data(data, view_ab, view_bc):
    builder = TransitionBuilder(SplineTransition, {"clustering": {}}, data, view_ab).to_view(view_bc)
    transition = builder.prepare().result(timeout=60)
    assert transition.is_ready
    assert transition.params.data == data


def test_spline_params_object_gets_data(data, view_ab, view_bc):
    params = SplineParams(loose_intermediates=True)
    transition = TransitionBuilder(SplineTransition, params, data, view_ab).to_view(view_bc).build()
    assert transition.params.data == data
    assert transition.params.loose_intermediates
    assert params.data is None


def test_exact_view_at(view_ab, view_ac, view_bc):
    transition = StraightTransition([view_ab, view_ac, view_bc])
    assert exact_view_at(transition, 0.0) is view_ab
    assert exact_view_at(transition, 0.504) is view_ac
    assert exact_view_at(transition, 1.0) is view_bc
    assert exact_view_at(transition, 0.3) is None


def test_exact_view_without_meaningful_intermediates(view_ab, view_ac, view_bc):
    transition = SplineTransition([view_ab, view_ac, view_bc], SplineParams(loose_intermediates=True))
    assert exact_view_at(transition, 0.5) is None
    assert exact_view_at(transition, 0.0) is view_ab
    assert exact_view_at(transition, 0.999) is view_bc


def test_closest_view(view_ab, view_ac, view_bc):
    transition = StraightTransition([view_ab, view_ac, view_bc])
    assert closest_view(transition, 0.2) is view_ab
    assert closest_view(transition, 0.3) is view_ac
    assert closest_view(transition, 0.9) is view_bc


def test_rotation_gets_manhattan_corner(data, dims, view_ab):
    view_cd = ScatterView(dims["c"], Dimension("d", (0.0, 10.0)))
    transition = TransitionBuilder(RotationTransition, {}, data, view_ab).to_view(view_cd).build()
    assert [str(v) for v in transition.views] == [
        "ScatterView(x: a, y: b)",
        "ScatterView(x: a, y: d)",
        "ScatterView(x: c, y: d)",
    ]


def test_straight_keeps_path_by_default(data, view_ab, dims):
    view_ca = ScatterView(dims["c"], dims["a"])
    transition = TransitionBuilder(StraightTransition, None, data, view_ab).to_view(view_ca).build()
    assert transition.views == [view_ab, view_ca]


def test_named_path_transform(data, view_ab, dims):
    view_ca = ScatterView(dims["c"], dims["a"])
    builder = TransitionBuilder(StraightTransition, None, data, view_ab, path_transform="manhattan")
    transition = builder.to_view(view_ca).build()
    assert [str(v) for v in transition.views] == [
        "ScatterView(x: a, y: b)",
        "ScatterView(x: c, y: b)",
        "ScatterView(x: c, y: a)",
    ]


def test_path_transform_with_explicit_dimensions(data, dims, view_ab, view_cb):
    order = [dims["a"], dims["c"], dims["b"]]
    builder = TransitionBuilder(StraightTransition, None, data, view_ab, path_transform="diagonal_stairs", dimensions=order)
    assert builder.to_view(view_cb).path() == [view_ab, view_cb]


def test_unknown_path_transform(data, view_ab):
    with pytest.raises(ValueError, match="Unknown path transform"):
        TransitionBuilder(StraightTransition, None, data, view_ab, path_transform="zigzag")

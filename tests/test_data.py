import math

import numpy as np
import pytest

from scattertransition.model.data import Dimension, DimensionMapping


def test_linear_normalize_and_expand():
    dim = Dimension("a", (2.0, 12.0))
    assert dim.normalize(2.0) == 0.0
    assert dim.normalize(12.0) == 1.0
    assert dim.normalize(7.0) == pytest.approx(0.5)
    assert dim.expand(0.25) == pytest.approx(4.5)


@pytest.mark.parametrize("value", np.linspace(0.0, 1.0, 11))
def test_linear_expand_round_trip(value):
    dim = Dimension("a", (2.0, 12.0))
    assert dim.normalize(dim.expand(value)) == pytest.approx(value)


@pytest.mark.parametrize("value", [2.0, 3.5, 7.0, 11.25, 12.0, -4.0, 20.0])
def test_linear_normalize_round_trip(value):
    dim = Dimension("a", (2.0, 12.0))
    assert dim.expand(dim.normalize(value)) == pytest.approx(value)


def test_degenerate_domain_maps_to_center():
    dim = Dimension("a", (3.0, 3.0))
    assert dim.normalize(3.0) == 0.5
    assert dim.normalize(100.0) == 0.5


def test_log_mapping():
    dim = Dimension("a", (0.0, 99.0), Dimension.Log)
    assert dim.mapping is DimensionMapping.LOG
    assert dim.normalize(0.0) == 0.0
    assert dim.normalize(99.0) == pytest.approx(1.0)
    assert dim.normalize(9.0) == pytest.approx(0.5)
    assert dim.expand(dim.normalize(42.0)) == pytest.approx(42.0)


def test_log_mapping_rejects_values_below_range():
    dim = Dimension("a", (0.0, 10.0), Dimension.Log)
    with pytest.raises(ValueError):
        dim.normalize(-1.0)


def test_inverted_domain_raises():
    with pytest.raises(ValueError):
        Dimension("a", (1.0, 0.0))


def test_equality_uses_name_and_domain():
    a = Dimension("a", (0, 1))
    assert a == Dimension("a", (0.0, 1.0))
    assert a.eq(Dimension("a", (0.0, 1.0)))
    assert a != Dimension("a", (0.0, 2.0))
    assert a != Dimension("b", (0.0, 1.0))
    assert hash(a) == hash(Dimension("a", (0.0, 1.0)))


def test_from_data_skips_non_finite_values():
    points = [{"a": 1.0}, {"a": math.nan}, {"a": 5.0}, {"a": math.inf}]
    dim = Dimension.from_data("a", points)
    assert dim.domain == (1.0, 5.0)


def test_from_data_padding():
    dim = Dimension.from_data("a", [{"a": 0.0}, {"a": 10.0}], padding=0.2)
    assert dim.min == pytest.approx(-1.0)
    assert dim.max == pytest.approx(11.0)


def test_from_data_without_values():
    assert Dimension.from_data("a", []).domain == (0.0, 0.0)


def test_dict_round_trip():
    dim = Dimension("a", (0.0, 5.0), Dimension.Log)
    restored = Dimension.from_dict(dim.to_dict())
    assert restored == dim
    assert restored.mapping is DimensionMapping.LOG

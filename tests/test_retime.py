import pytest

from scattertransition.transitions.retime import (
    retime_equal_non_overlapping_cascade,
    retime_identity,
    retime_legacy_time_offset,
    retime_proportional_non_overlapping_cascade,
)
from scattertransition.transitions.spline_common import RetimeClusterInfo, RetimeInfo


def _info(index, sizes):
    return RetimeInfo(index=index, total=len(sizes), clusters=tuple(RetimeClusterInfo(s) for s in sizes))


def test_identity():
    assert retime_identity(0.3, RetimeInfo()) == 0.3


@pytest.mark.parametrize("index", range(4))
def test_equal_cascade_window(index):
    info = _info(index, [1, 1, 1, 1])
    assert retime_equal_non_overlapping_cascade(index / 4, info) == pytest.approx(0.0)
    assert retime_equal_non_overlapping_cascade((index + 1) / 4, info) == pytest.approx(1.0)
    assert retime_equal_non_overlapping_cascade((index + 0.5) / 4, info) == pytest.approx(0.5)


def test_equal_cascade_clamps():
    info = _info(1, [1, 1, 1])
    assert retime_equal_non_overlapping_cascade(0.0, info) == 0.0
    assert retime_equal_non_overlapping_cascade(1.0, info) == 1.0


def test_proportional_cascade():
    info = _info(1, [1, 3])
    assert retime_proportional_non_overlapping_cascade(0.25, info) == pytest.approx(0.0)
    assert retime_proportional_non_overlapping_cascade(0.625, info) == pytest.approx(0.5)
    assert retime_proportional_non_overlapping_cascade(1.0, info) == pytest.approx(1.0)
    assert retime_proportional_non_overlapping_cascade(0.1, _info(0, [1, 3])) == pytest.approx(0.4)


def test_legacy_time_offset():
    # index 3 of 4: offset 0.25, the window starts late
    assert retime_legacy_time_offset(0.25, _info(3, [1] * 4)) == pytest.approx(0.0)
    assert retime_legacy_time_offset(1.0, _info(3, [1] * 4)) == pytest.approx(1.0)
    # index 0 of 4: offset -0.5, the window ends early
    assert retime_legacy_time_offset(0.5, _info(0, [1] * 4)) == pytest.approx(1.0)
    assert retime_legacy_time_offset(0.3, _info(2, [1] * 4)) == pytest.approx(0.3)
    assert retime_legacy_time_offset(0.3, RetimeInfo()) == 0.3

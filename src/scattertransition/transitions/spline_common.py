"""
Spline Data Types
=================
Data types shared by the spline transition and its preparation worker, plus the
bezier and arc-length evaluation routines.

Why is this file needed?
------------------------
1. Exchange: The worker produces PathGuides and Paths, the transition consumes
   them. Both sides need the same definitions.
2. Uniform speed: Every PathSegment carries an arc-length lookup table (LUT) so a
   point travels along its curve at constant speed, regardless of how its
   control points are spaced.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Callable, TYPE_CHECKING

import numpy as np

from scattertransition import config
from scattertransition.utils import lerp

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass
class PathSegmentGuide:
    """A PathGuide segment."""
    in_tangent: npt.NDArray[np.float64]  # incoming tangent direction, for directional continuity
    out_tangent: npt.NDArray[np.float64]  # outgoing tangent direction
    bundling_points: list[npt.NDArray[np.float64]] = field(default_factory=list)


# A guide for points in a cluster; one entry per pair of adjacent views.
PathGuide = list[PathSegmentGuide]


@dataclass(frozen=True)
class RetimeClusterInfo:
    points: int


@dataclass(frozen=True)
class RetimeInfo:
    """Retime group info of the cluster a path belongs to."""
    index: int = 0
    total: int = 0
    clusters: tuple[RetimeClusterInfo, ...] = ()


RetimeFn = Callable[[float, RetimeInfo], float]


@dataclass
class PathSegment:
    """A point path segment: a bezier curve with its arc-length LUT."""
    curve: npt.NDArray[np.float64]  # (n_control_points, 2)
    lut: npt.NDArray[np.float64]  # cumulative length at uniformly spaced t
    retime: RetimeInfo = field(default_factory=RetimeInfo)

    @property
    def length(self) -> float:
        return float(self.lut[-1])


# A point path (poly-bezier).
Path = list[PathSegment]


def bezier_eval(bezier: npt.NDArray[np.float64], t: float) -> npt.NDArray[np.float64]:
    """
    Evaluates a bezier curve of any order with De Casteljau's algorithm.

    Args:
        bezier: Control points, shape (n, 2) with n >= 1.
        t: Curve parameter in [0, 1].

    Returns:
        The point on the curve, shape (2,).
    """
    points = np.asarray(bezier, dtype=np.float64)
    if len(points) == 0:
        raise ValueError("Cannot evaluate a bezier curve without control points.")
    while len(points) > 1:
        # (1 - t) * a + t * b hits the end points exactly at t = 0 and t = 1
        points = (1.0 - t) * points[:-1] + t * points[1:]
    return points[0]


def bezier_eval_many(bezier: npt.NDArray[np.float64], ts: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """
    Vectorized De Casteljau evaluation.

    Args:
        bezier: Control points, shape (n, 2).
        ts: Curve parameters, shape (m,).

    Returns:
        Points on the curve, shape (m, 2).
    """
    ts = np.asarray(ts, dtype=np.float64)[:, None, None]
    points = np.broadcast_to(np.asarray(bezier, dtype=np.float64), (ts.shape[0],) + np.shape(bezier))
    while points.shape[1] > 1:
        points = (1.0 - ts) * points[:, :-1] + ts * points[:, 1:]
    return points[:, 0]


def arc_length_lut(curve: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """
    Builds the arc-length lookup table of a bezier curve.

    The parameter step is halved until consecutive samples are no further apart than
    ARC_LENGTH_TOLERANCE (or the step reaches MIN_ARC_LENGTH_STEP). Entry i of the table
    holds the approximate length of the curve from t = 0 to t = i / (len(lut) - 1).
    """
    t_step = 1.0
    while True:
        t_step /= 2
        samples = bezier_eval_many(curve, np.linspace(0.0, 1.0, round(1 / t_step) + 1))
        distances = np.linalg.norm(np.diff(samples, axis=0), axis=1)
        longest = float(distances.max())
        if not math.isfinite(longest) or longest <= config.ARC_LENGTH_TOLERANCE:
            break
        if t_step / 2 < config.MIN_ARC_LENGTH_STEP:
            break
    distances = np.where(np.isfinite(distances), distances, 0.0)
    return np.concatenate(([0.0], np.cumsum(distances)))


def create_path_segment(curve: list[npt.NDArray[np.float64]] | npt.NDArray[np.float64]) -> PathSegment:
    """Creates a PathSegment from a bezier curve by adding an arc length LUT."""
    points = np.array(curve, dtype=np.float64).reshape(-1, 2)
    return PathSegment(curve=points, lut=arc_length_lut(points))


def _lut_bracket(lut: npt.NDArray[np.float64], target: float) -> tuple[int, int]:
    """Finds the two LUT indices whose lengths enclose target."""
    if len(lut) < 2:
        return 0, 0
    upper = int(np.searchsorted(lut, target, side="right"))
    upper = min(max(upper, 1), len(lut) - 1)
    return upper - 1, upper


def curve_t_at_fraction(lut: npt.NDArray[np.float64], fraction: float) -> float:
    """
    Converts a fraction of the total arc length into the curve parameter t.
    """
    if fraction <= 0.0:
        return 0.0
    if fraction >= 1.0:
        return 1.0

    target_len = fraction * lut[-1]
    down_idx, up_idx = _lut_bracket(lut, target_len)
    steps = max(len(lut) - 1, 1)
    down_t = down_idx / steps
    up_t = up_idx / steps
    down_len = lut[down_idx]
    up_len = lut[up_idx]

    if down_len == up_len:
        return down_t
    return lerp(down_t, up_t, (target_len - down_len) / (up_len - down_len))


def path_eval(
    path: Path,
    t: float,
    easing: Callable[[float], float],
    retime: RetimeFn,
) -> npt.NDArray[np.float64]:
    """
    Evaluates a point path (poly-bezier) for the given time t in [0, 1].

    The local time of the active segment is retimed (per cluster), eased, and then
    mapped through the arc-length LUT, so that the point moves at constant speed.
    """
    t *= len(path)
    curve_index = min(max(math.floor(t), 0), len(path) - 1)
    segment = path[curve_index]

    offset_time = t - curve_index
    offset_time = retime(offset_time, segment.retime)
    offset_time = easing(offset_time)

    return bezier_eval(segment.curve, curve_t_at_fraction(segment.lut, offset_time))

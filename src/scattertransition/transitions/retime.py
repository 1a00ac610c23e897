"""
Retime Presets
==============
Retime functions stretch, compress or offset the local animation time of a path
based on the cluster it belongs to. They are used to stagger the animation of
clusters, so that clusters move in sequence rather than all at once.

Every function maps (t in [0, 1], RetimeInfo) -> t in [0, 1].
"""
from __future__ import annotations

from scattertransition.transitions.spline_common import RetimeFn, RetimeInfo
from scattertransition.utils import clamp


def retime_identity(t: float, data: RetimeInfo) -> float:
    return t


def retime_legacy_time_offset(t: float, data: RetimeInfo) -> float:
    """Legacy retime function used when time_offset is enabled."""
    if not data.total:
        return t
    time_offset = data.index / data.total - 0.5
    if time_offset > 0:
        t = clamp((t - time_offset) / (1 - time_offset), 0.0, 1.0)
    elif time_offset < 0:
        t = clamp(t / (1 + time_offset), 0.0, 1.0)
    return t


def retime_equal_non_overlapping_cascade(t: float, data: RetimeInfo) -> float:
    """Animates every cluster in sequence, each in an equal slice of the time window."""
    t = t * data.total - data.index
    return clamp(t, 0.0, 1.0)


def retime_proportional_non_overlapping_cascade(t: float, data: RetimeInfo) -> float:
    """
    Animates every cluster in sequence with no overlapping animation.
    The duration of a cluster's slice is proportional to its point count.
    """
    cluster_points = [cluster.points for cluster in data.clusters]
    total_points = sum(cluster_points)
    if not total_points or not cluster_points[data.index]:
        return clamp(t, 0.0, 1.0)
    points_before = sum(cluster_points[:data.index])

    t = (t * total_points - points_before) / cluster_points[data.index]
    return clamp(t, 0.0, 1.0)


RETIME_VARIANTS: list[tuple[str, RetimeFn | None]] = [
    ("identity", None),
    ("cascade", retime_equal_non_overlapping_cascade),
    ("proportional cascade", retime_proportional_non_overlapping_cascade),
]

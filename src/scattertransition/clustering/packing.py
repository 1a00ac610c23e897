from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

import numpy as np

from scattertransition.transitions.errors import EmptyClusterError

if TYPE_CHECKING:
    import numpy.typing as npt

    from scattertransition.model.data import DataPoint, Dimension


def pack_points(
    data: Sequence[DataPoint],
    dimensions: Sequence[Dimension],
    dtype: type = np.float32,
) -> npt.NDArray:
    """
    Normalizes every point into [0, 1] per dimension and packs the result row-wise.

    Returns:
        Array of shape (n_points, n_dimensions).
    """
    packed = np.empty((len(data), len(dimensions)), dtype=dtype)
    for i, point in enumerate(data):
        for k, dim in enumerate(dimensions):
            packed[i, k] = dim.normalize(point[dim.name])
    return packed


def unique_dimensions(views) -> list[Dimension]:
    """All distinct dimensions of the given views, in order of appearance."""
    dimensions: list[Dimension] = []
    for view in views:
        for dim in (view.x, view.y):
            if not any(dim.eq(known) for known in dimensions):
                dimensions.append(dim)
    return dimensions


def check_partition(clusters: list[list[int]], n_points: int) -> None:
    """
    Verifies that clusters are non-empty and cover every index exactly once.

    Raises:
        EmptyClusterError: If a cluster has no points.
        ValueError: If the clusters are not a partition of range(n_points).
    """
    seen = np.zeros(n_points, dtype=np.int64)
    for index, cluster in enumerate(clusters):
        if not cluster:
            raise EmptyClusterError(f"Cluster {index} is empty.")
        seen[np.asarray(cluster, dtype=np.int64)] += 1
    if n_points and not np.all(seen == 1):
        raise ValueError("Clusters do not form a partition of the data points.")

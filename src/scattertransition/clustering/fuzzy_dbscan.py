"""
Fuzzy DBSCAN
============
Density-based clustering with fuzzy neighborhood and density thresholds.

Instead of a fixed radius eps and a fixed point count, a neighbor within eps_min
counts fully, a neighbor between eps_min and eps_max counts partially. Likewise
a point becomes core gradually as its (fuzzy) neighbor count rises from pts_min
to pts_max. Points that are not density-reachable from any core point are noise;
all noise is collected into one cluster at the end.

The kernels operate on packed float32 arrays (n_points, n_dimensions) and are
compiled with numba.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Sequence, TYPE_CHECKING

import numba as nb
import numpy as np

from scattertransition.clustering.packing import check_partition, pack_points

if TYPE_CHECKING:
    import numpy.typing as npt

    from scattertransition.model.data import DataPoint, Dimension

logger = logging.getLogger(__name__)

CATEGORY_CORE = 0
CATEGORY_BORDER = 1
CATEGORY_NOISE = 2


@dataclass
class FuzzyParams:
    eps_min: float = 0.1
    eps_max: float = 0.1
    pts_min: float = 1.0
    pts_max: float = 1.0

    def __post_init__(self) -> None:
        if self.eps_max < self.eps_min:
            raise ValueError(f"eps_max ({self.eps_max}) must not be smaller than eps_min ({self.eps_min}).")
        if self.pts_max < self.pts_min:
            raise ValueError(f"pts_max ({self.pts_max}) must not be smaller than pts_min ({self.pts_min}).")


@dataclass
class FuzzyClustering:
    """Raw result of the kernel, one entry per point."""
    labels: npt.NDArray[np.int64]  # cluster id, -1 for noise
    categories: npt.NDArray[np.int8]  # CATEGORY_CORE / CATEGORY_BORDER / CATEGORY_NOISE
    memberships: npt.NDArray[np.float64]  # soft label in [0, 1]

    @property
    def n_clusters(self) -> int:
        return int(self.labels.max()) + 1 if self.labels.size else 0

    def to_partition(self) -> list[list[int]]:
        """Clusters in order of discovery (indices ascending), the noise cluster last."""
        clusters = [np.flatnonzero(self.labels == cid).tolist() for cid in range(self.n_clusters)]
        noise = np.flatnonzero(self.labels < 0).tolist()
        if noise:
            clusters.append(noise)
        return clusters


# ---- JIT'd kernels ----

@nb.njit(cache=True)
def _distance(points: npt.NDArray[np.float32], i: int, j: int) -> float:
    total = 0.0
    for k in range(points.shape[1]):
        diff = np.float64(points[i, k]) - np.float64(points[j, k])
        total += diff * diff
    return math.sqrt(total)


@nb.njit(cache=True)
def _mu_distance(distance: float, eps_min: float, eps_max: float) -> float:
    """Fuzzy neighborhood membership of a neighbor at the given distance."""
    if distance <= eps_min:
        return 1.0
    if distance > eps_max:
        return 0.0
    return (eps_max - distance) / (eps_max - eps_min)


@nb.njit(cache=True)
def _mu_min_p(density: float, pts_min: float, pts_max: float) -> float:
    """Fuzzy core membership for a given fuzzy neighbor count."""
    if density >= pts_max:
        return 1.0
    if density < pts_min:
        return 0.0
    return (density - pts_min) / (pts_max - pts_min)


@nb.njit(cache=True)
def _core_labels(
    points: npt.NDArray[np.float32],
    eps_min: float,
    eps_max: float,
    pts_min: float,
    pts_max: float,
) -> npt.NDArray[np.float64]:
    """Core membership of every point (0 for non-core points)."""
    n = points.shape[0]
    density = np.ones(n, dtype=np.float64)
    for i in range(n):
        for j in range(i + 1, n):
            mu = _mu_distance(_distance(points, i, j), eps_min, eps_max)
            density[i] += mu
            density[j] += mu
    core = np.empty(n, dtype=np.float64)
    for i in range(n):
        core[i] = _mu_min_p(density[i], pts_min, pts_max)
    return core


@nb.njit(cache=True)
def fuzzy_dbscan_kernel(
    points: npt.NDArray[np.float32],
    eps_min: float,
    eps_max: float,
    pts_min: float,
    pts_max: float,
) -> tuple[npt.NDArray[np.int64], npt.NDArray[np.int8], npt.NDArray[np.float64]]:
    """
    Args:
        points: Packed, normalized points, shape (n_points, n_dimensions).
        eps_min, eps_max: Fuzzy neighborhood radius range.
        pts_min, pts_max: Fuzzy core density range.

    Returns:
        labels: Cluster id per point (-1 for noise).
        categories: Core / border / noise category per point.
        memberships: Soft cluster membership per point.
    """
    n = points.shape[0]
    labels = np.full(n, -1, dtype=np.int64)
    categories = np.full(n, CATEGORY_NOISE, dtype=np.int8)
    memberships = np.ones(n, dtype=np.float64)

    core = _core_labels(points, eps_min, eps_max, pts_min, pts_max)

    queue = np.empty(n, dtype=np.int64)
    queued = np.zeros(n, dtype=np.bool_)
    cluster_id = 0

    for seed in range(n):
        if labels[seed] >= 0 or core[seed] == 0.0:
            continue

        # Expand the cluster breadth-first from the seed
        queued[:] = False
        head = 0
        tail = 0
        queue[tail] = seed
        tail += 1
        queued[seed] = True

        while head < tail:
            p = queue[head]
            head += 1
            labels[p] = cluster_id
            if core[p] > 0.0:
                categories[p] = CATEGORY_CORE
                memberships[p] = core[p]
                for q in range(n):
                    if q == p or queued[q] or labels[q] >= 0:
                        continue
                    if _distance(points, p, q) <= eps_max:
                        queue[tail] = q
                        tail += 1
                        queued[q] = True
            else:
                categories[p] = CATEGORY_BORDER

        # Border points are members as far as their nearest core points reach
        for b_idx in range(tail):
            b = queue[b_idx]
            if categories[b] != CATEGORY_BORDER:
                continue
            label = np.inf
            for c_idx in range(tail):
                c = queue[c_idx]
                if categories[c] != CATEGORY_CORE:
                    continue
                mu = _mu_distance(_distance(points, b, c), eps_min, eps_max)
                if mu > 0.0:
                    label = min(label, core[c], mu)
            memberships[b] = label if label != np.inf else 0.0

        cluster_id += 1

    return labels, categories, memberships


def fuzzy_dbscan(packed: npt.NDArray[np.float32], params: FuzzyParams) -> FuzzyClustering:
    """Runs the kernel on already packed and normalized points."""
    points = np.ascontiguousarray(packed, dtype=np.float32)
    if points.ndim != 2:
        raise ValueError(f"Expected packed points of shape (n_points, n_dimensions), got {points.shape}.")
    if points.shape[0] == 0:
        return FuzzyClustering(
            labels=np.empty(0, dtype=np.int64),
            categories=np.empty(0, dtype=np.int8),
            memberships=np.empty(0, dtype=np.float64),
        )
    labels, categories, memberships = fuzzy_dbscan_kernel(
        points,
        float(params.eps_min),
        float(params.eps_max),
        float(params.pts_min),
        float(params.pts_max),
    )
    return FuzzyClustering(labels=labels, categories=categories, memberships=memberships)


def fuzzy_cluster(
    data: Sequence[DataPoint],
    dimensions: Sequence[Dimension],
    params: FuzzyParams,
) -> list[list[int]]:
    """
    Clusters data points with fuzzy DBSCAN in normalized dimension space.

    Returns:
        Lists of point indices; one list per cluster, noise collected in the last one.
    """
    if not data:
        return []

    result = fuzzy_dbscan(pack_points(data, dimensions), params)
    clusters = result.to_partition()
    check_partition(clusters, len(data))

    n_noise = int(np.count_nonzero(result.labels < 0))
    logger.info(f"Found {result.n_clusters} clusters, {n_noise} points in noise cluster.")
    return clusters

"""
Hierarchical Clustering
=======================
Simple agglomerative clustering with centroid linkage. It needs no compiled
kernels and serves as a fallback for the fuzzy DBSCAN clusterer.

Starting with every point in its own cluster, the two clusters with the closest
centroids are merged until the target condition holds.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np

from scattertransition.clustering.packing import check_partition, pack_points
from scattertransition.transitions.errors import EmptyClusterError

if TYPE_CHECKING:
    import numpy.typing as npt

    from scattertransition.model.data import DataPoint, Dimension

logger = logging.getLogger(__name__)


@dataclass
class ClusterTargetParams:
    """
    Attributes:
        target_count: Merge until there are at most this many clusters (None to skip).
        target_radius: Merge until at least half of all clusters have a mean distance to
                       their centroid of at most this radius (None to skip).
    """
    target_count: Optional[int] = None
    target_radius: Optional[float] = None


def finite_distance(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """
    Euclidean distance along the last axis, ignoring non-finite per-dimension distances.
    """
    diff = np.abs(a - b)
    squared = np.where(np.isfinite(diff), diff * diff, 0.0)
    return np.sqrt(squared.sum(axis=-1))


def cluster_mean(points: npt.NDArray[np.float64], cluster: Sequence[int]) -> npt.NDArray[np.float64]:
    if len(cluster) == 0:
        raise EmptyClusterError("Cannot compute the mean of an empty cluster.")
    return points[np.asarray(cluster, dtype=np.int64)].mean(axis=0)


def is_clustering_done(
    points: npt.NDArray[np.float64],
    clusters: list[list[int]],
    params: ClusterTargetParams,
) -> bool:
    if params.target_count and len(clusters) > params.target_count:
        return False

    if params.target_radius:
        passing = 0
        for cluster in clusters:
            mean = cluster_mean(points, cluster)
            mean_distance = finite_distance(points[np.asarray(cluster)], mean).mean()
            if mean_distance <= params.target_radius:
                passing += 1
        if passing < len(clusters) / 2:
            return False

    return True


def _pair_distances(centroids: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Distances between centroids i < j; every other entry is +inf."""
    distances = finite_distance(centroids[:, None, :], centroids[None, :, :])
    distances[np.tril_indices(len(centroids))] = np.inf
    return distances


def hierarchical_cluster(
    data: Sequence[DataPoint],
    dimensions: Sequence[Dimension],
    params: ClusterTargetParams,
) -> list[list[int]]:
    """
    Clusters data points by repeatedly merging the closest pair of clusters.

    Ties are broken by index order: the first pair (i < j, i major) wins.

    Returns:
        Lists of point indices; one list per cluster.
    """
    if not data:
        return []

    points = pack_points(data, dimensions, dtype=np.float64)
    clusters: list[list[int]] = [[i] for i in range(len(data))]
    centroids = points.copy()
    distances = _pair_distances(centroids)

    merges = 0
    while not is_clustering_done(points, clusters, params):
        if len(clusters) <= 1:
            break

        # argmin returns the first minimum in row-major (i-major) order
        i, j = np.unravel_index(int(np.argmin(distances)), distances.shape)
        clusters[i] = clusters[i] + clusters.pop(j)

        centroids = np.delete(centroids, j, axis=0)
        distances = np.delete(np.delete(distances, j, axis=0), j, axis=1)
        centroids[i] = cluster_mean(points, clusters[i])

        updated = finite_distance(centroids, centroids[i])
        distances[i, i + 1:] = updated[i + 1:]
        distances[:i, i] = updated[:i]
        merges += 1
        logger.debug(f"Merged clusters {i} and {j}, {len(clusters)} remaining")

    check_partition(clusters, len(data))
    logger.info(f"Hierarchical clustering finished after {merges} merges with {len(clusters)} clusters.")
    return clusters

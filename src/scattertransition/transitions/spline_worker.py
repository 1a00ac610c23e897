"""
Spline Path Construction
========================
The CPU-bound part of preparing a spline transition: clustering the data and
building a bezier path for every point.

Why is this file needed?
------------------------
1. Off-thread work: Everything in here runs inside the background preparation
   worker (see controller/workers.py). Its input arrives as plain data, so value
   objects (dimensions, views, clustering parameters) are rebuilt first.
2. Cluster-aware paths: Points of one cluster share tangents and bundling points,
   so their curves follow the cluster's centroid trajectory.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
import logging
from typing import Any, Mapping, Optional, Sequence, TYPE_CHECKING

import numpy as np

from scattertransition.clustering.fuzzy_dbscan import FuzzyParams, fuzzy_cluster
from scattertransition.clustering.hierarchical import ClusterTargetParams, hierarchical_cluster
from scattertransition.clustering.packing import unique_dimensions
from scattertransition.model.view import ScatterView
from scattertransition.transitions.errors import EmptyClusterError
from scattertransition.transitions.spline_common import (
    Path,
    PathGuide,
    PathSegmentGuide,
    RetimeClusterInfo,
    RetimeInfo,
    create_path_segment,
)

if TYPE_CHECKING:
    import numpy.typing as npt

    from scattertransition.model.data import DataPoint

logger = logging.getLogger(__name__)

ClusteringParams = FuzzyParams | ClusterTargetParams


@dataclass
class SplineBuildParams:
    """The subset of the spline parameters the worker needs."""
    clustering: Optional[ClusteringParams] = None
    loose_intermediates: bool = False
    bundling_strength: int = 0


@dataclass
class SplinePreparation:
    """Success payload of the worker."""
    cluster_guides: list[PathGuide]
    point_paths: dict[int, Path]
    clusters: list[list[int]]


def _normalized(v: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    length = float(np.hypot(v[0], v[1]))
    if length > 0:
        return v / length
    return np.zeros(2)


def clusters_to_polylines(
    data: Sequence[DataPoint],
    clusters: Sequence[Sequence[int]],
    views: Sequence[ScatterView],
) -> list[npt.NDArray[np.float64]]:
    """Creates a polyline for each cluster that approximates the motion of all of its points."""
    polylines = []
    for index, cluster in enumerate(clusters):
        if not cluster:
            raise EmptyClusterError(f"Cluster {index} is empty.")
        polyline = np.empty((len(views), 2), dtype=np.float64)
        for v, view in enumerate(views):
            polyline[v, 0] = sum(view.get_x(data[i]) for i in cluster) / len(cluster)
            polyline[v, 1] = sum(view.get_y(data[i]) for i in cluster) / len(cluster)
        polylines.append(polyline)
    return polylines


def polyline_to_cluster_guide(polyline: npt.NDArray[np.float64], bundling_strength: int = 0) -> PathGuide:
    """
    Creates a PathGuide from a polyline.

    Each inner vertex gets the normalized sum of its normalized incoming and outgoing
    directions as tangent, the end points get a zero tangent. Every segment gets
    bundling_strength copies of its midpoint as extra control points.
    """
    n = len(polyline)
    tangents = []
    for i in range(n):
        tangent = np.zeros(2)
        if 0 < i < n - 1:
            tangent_prev = _normalized(polyline[i] - polyline[i - 1])
            tangent_next = _normalized(polyline[i + 1] - polyline[i])
            tangent = _normalized(tangent_prev + tangent_next)
        tangents.append(tangent)

    guides = []
    for i in range(n - 1):
        midpoint = (polyline[i] + polyline[i + 1]) / 2
        guides.append(PathSegmentGuide(
            in_tangent=tangents[i],
            out_tangent=tangents[i + 1],
            bundling_points=[midpoint.copy() for _ in range(bundling_strength)],
        ))
    return guides


def cluster_guide_to_point_path(
    point: DataPoint,
    guide: PathGuide,
    views: Sequence[ScatterView],
    loose_intermediates: bool,
    retime: RetimeInfo,
) -> Path:
    """
    Creates the path of a single point from the PathGuide of its cluster.

    Returns:
        One PathSegment per pair of adjacent views, or a single segment through all
        views if loose_intermediates is set.
    """
    path: Path = []
    curve: list[npt.NDArray[np.float64]] = []

    for i in range(len(views) - 1):
        view = views[i]
        next_view = views[i + 1]
        segment_guide = guide[i]

        view_pos = np.array([view.get_x(point), view.get_y(point)])
        next_pos = np.array([next_view.get_x(point), next_view.get_y(point)])
        tangent_length = float(np.linalg.norm(next_pos - view_pos)) / 2

        if not loose_intermediates:
            curve = []

        curve.append(view_pos)
        curve.append(view_pos + segment_guide.in_tangent * tangent_length)
        curve.extend(segment_guide.bundling_points)
        curve.append(next_pos - segment_guide.out_tangent * tangent_length)
        curve.append(next_pos)

        if not loose_intermediates:
            path.append(create_path_segment(curve))

    if loose_intermediates:
        path.append(create_path_segment(curve))

    for segment in path:
        segment.retime = retime
    return path


def cluster_points(
    data: Sequence[DataPoint],
    views: Sequence[ScatterView],
    clustering: Optional[ClusteringParams],
) -> list[list[int]]:
    """Clusters the data in the space of all dimensions used by the views."""
    if clustering is None:
        # a cluster for every point
        return [[i] for i in range(len(data))]
    dimensions = unique_dimensions(views)
    if isinstance(clustering, ClusterTargetParams):
        return hierarchical_cluster(data, dimensions, clustering)
    return fuzzy_cluster(data, dimensions, clustering)


def init_spline(
    data: Sequence[DataPoint],
    views: Sequence[ScatterView],
    params: SplineBuildParams,
) -> SplinePreparation:
    """Clusters the data and builds every point's path."""
    clusters = cluster_points(data, views, params.clustering)
    polylines = clusters_to_polylines(data, clusters, views)
    cluster_guides = [polyline_to_cluster_guide(p, params.bundling_strength) for p in polylines]

    cluster_info = tuple(RetimeClusterInfo(points=len(cluster)) for cluster in clusters)

    point_paths: dict[int, Path] = {}
    for cluster_id, cluster in enumerate(clusters):
        retime = RetimeInfo(index=cluster_id, total=len(clusters), clusters=cluster_info)
        for item_id in cluster:
            point_paths[item_id] = cluster_guide_to_point_path(
                data[item_id],
                cluster_guides[cluster_id],
                views,
                params.loose_intermediates,
                retime,
            )

    logger.debug(f"Built paths for {len(point_paths)} points in {len(clusters)} clusters")
    return SplinePreparation(cluster_guides=cluster_guides, point_paths=point_paths, clusters=clusters)


# ==========================================
# REQUEST / RESPONSE (plain data)
# ==========================================

def build_request(
    data: Sequence[DataPoint],
    views: Sequence[ScatterView],
    params: SplineBuildParams,
) -> dict[str, Any]:
    """Serializes the worker input into plain data."""
    clustering = None
    if params.clustering is not None:
        method = "hierarchical" if isinstance(params.clustering, ClusterTargetParams) else "fuzzy"
        clustering = {"method": method, **asdict(params.clustering)}
    return {
        "data": [dict(point) for point in data],
        "views": [view.to_dict() for view in views],
        "params": {
            "clustering": clustering,
            "loose_intermediates": params.loose_intermediates,
            "bundling_strength": params.bundling_strength,
        },
    }


def _clustering_from_dict(data: Optional[Mapping[str, Any]]) -> Optional[ClusteringParams]:
    if data is None:
        return None
    fields = dict(data)
    method = fields.pop("method", "fuzzy")
    if method == "hierarchical":
        return ClusterTargetParams(**fields)
    if method == "fuzzy":
        return FuzzyParams(**fields)
    raise ValueError(f"Unknown clustering method '{method}'.")


def parse_request(request: Mapping[str, Any]) -> tuple[list[DataPoint], list[ScatterView], SplineBuildParams]:
    """
    Rebuilds the worker input from plain data.
    Having been sent over a channel, dimensions and views have to be recreated.
    """
    views = [ScatterView.from_dict(view) for view in request["views"]]
    raw = request.get("params") or {}
    params = SplineBuildParams(
        clustering=_clustering_from_dict(raw.get("clustering")),
        loose_intermediates=bool(raw.get("loose_intermediates", False)),
        bundling_strength=int(raw.get("bundling_strength") or 0),
    )
    return list(request["data"]), views, params

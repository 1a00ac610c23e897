"""
Spline Transition
=================
Moves every point along its own curved bezier path. Points are clustered first,
so that points of one cluster share tangents and (optionally) bundling points and
travel together along their cluster's centroid trajectory.

Why is this file needed?
------------------------
1. Preparation: Clustering and path construction are CPU-bound, so prepare()
   hands them to the background worker and returns a Future. The transition
   must not be queried before it is ready.
2. Evaluation: Each point's path is evaluated with per-cluster retiming, easing
   and arc-length reparameterization (see spline_common.path_eval).
3. Diagnostics: draw_debug() / plot_debug() expose all constructed curves.
"""
from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Mapping, Optional, Sequence, TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np

from scattertransition import config
from scattertransition.clustering.fuzzy_dbscan import FuzzyParams
from scattertransition.clustering.hierarchical import ClusterTargetParams
from scattertransition.controller.workers import submit_preparation
from scattertransition.model.params import (
    BoolParam,
    DerivedParam,
    EnumParam,
    GroupParam,
    NumberParam,
    Schema,
    resolve_params,
)
from scattertransition.transitions.base import ScatterTransition
from scattertransition.transitions.easing import EASING_VARIANTS, EaseFn, ease_quad, linear
from scattertransition.transitions.errors import (
    TransitionNotReady,
    UnknownPointInPath,
    WorkerPreparationFailure,
)
from scattertransition.transitions.retime import (
    RETIME_VARIANTS,
    retime_identity,
    retime_legacy_time_offset,
)
from scattertransition.transitions.spline_common import (
    Path,
    PathGuide,
    RetimeFn,
    bezier_eval_many,
    path_eval,
)
from scattertransition.transitions.spline_worker import (
    ClusteringParams,
    SplineBuildParams,
    SplinePreparation,
    build_request,
)

if TYPE_CHECKING:
    import numpy.typing as npt
    from matplotlib.axes import Axes

    from scattertransition.model.data import DataPoint
    from scattertransition.model.view import ScatterView

logger = logging.getLogger(__name__)


def _clustering_shown(params: Mapping[str, Any]) -> bool:
    return params.get("clustering") is not None


def _time_offset_shown(params: Mapping[str, Any]) -> bool:
    return _clustering_shown(params) and not params.get("retime")


def _retime_shown(params: Mapping[str, Any]) -> bool:
    return _clustering_shown(params) and not params.get("time_offset")


CLUSTERING_METHODS: list[tuple[str, str]] = [
    ("fuzzy", "fuzzy"),
    ("hierarchical", "hierarchical"),
]

SPLINE_PARAMS: Schema = {
    "clustering": GroupParam(
        nullable=True,
        contents={
            "eps_min": NumberParam(domain=(0.0, 1.0), default=0.1),
            "pts_min": NumberParam(domain=(0.0, 100.0), default=1.0),
            "eps_max": DerivedParam(derive=lambda scope: scope["eps_min"]),
            "pts_max": DerivedParam(derive=lambda scope: scope["pts_min"]),
            # hierarchical clustering only
            "target_count": NumberParam(domain=(1.0, 1000.0), default=10, round=True),
            "target_radius": NumberParam(domain=(0.0, 1.0), default=0.0),
        },
    ),
    "clustering_method": EnumParam(should_show=_clustering_shown, variants=CLUSTERING_METHODS, default=0),
    "loose_intermediates": BoolParam(default=False),
    "bundling_strength": NumberParam(should_show=_clustering_shown, domain=(0.0, 10.0), default=0, round=True),
    "ease": EnumParam(variants=EASING_VARIANTS, default=1),
    "time_offset": BoolParam(should_show=_time_offset_shown, default=False),
    "retime": EnumParam(should_show=_retime_shown, variants=RETIME_VARIANTS, default=0),
}


def _clustering_from_group(group: Optional[Mapping[str, Any]], method: str) -> Optional[ClusteringParams]:
    if group is None:
        return None
    if method == "hierarchical":
        return ClusterTargetParams(
            target_count=group.get("target_count") or None,
            target_radius=group.get("target_radius") or None,
        )
    return FuzzyParams(
        eps_min=group["eps_min"],
        eps_max=group["eps_max"],
        pts_min=group["pts_min"],
        pts_max=group["pts_max"],
    )


@dataclass
class SplineParams:
    """
    Attributes:
        data: The full data set. Required before prepare().
        clustering: FuzzyParams, ClusterTargetParams or None to disable clustering.
        loose_intermediates: If True, intermediate views are only approximated.
        bundling_strength: Number of midpoint control points pulling paths toward their cluster.
        ease: Inner easing function.
        time_offset: Legacy per-cluster time offset.
        retime: Retime function (takes precedence over time_offset).
    """
    data: Optional[Sequence[DataPoint]] = None
    clustering: Optional[ClusteringParams] = None
    loose_intermediates: bool = False
    bundling_strength: int = 0
    ease: EaseFn = field(default=ease_quad)
    time_offset: bool = False
    retime: Optional[RetimeFn] = None

    def __post_init__(self) -> None:
        self.bundling_strength = SPLINE_PARAMS["bundling_strength"].resolve(self.bundling_strength)

    @classmethod
    def resolve(cls, values: Optional[Mapping[str, Any]] = None) -> SplineParams:
        values = dict(values or {})
        clustering = values.get("clustering")
        preset = clustering if isinstance(clustering, (FuzzyParams, ClusterTargetParams)) else None
        if preset is not None:
            # already a parameter object, keep it as-is
            values["clustering"] = True

        resolved = resolve_params(SPLINE_PARAMS, values)
        if preset is None:
            preset = _clustering_from_group(resolved["clustering"], resolved["clustering_method"])

        return cls(
            data=resolved.get("data"),
            clustering=preset,
            loose_intermediates=resolved["loose_intermediates"],
            bundling_strength=int(resolved["bundling_strength"]),
            ease=resolved["ease"],
            time_offset=resolved["time_offset"],
            retime=resolved["retime"],
        )


class SplineTransition(ScatterTransition):
    """
    Moves points along cluster-guided bezier paths at constant speed.
    Needs to be prepared before use.
    """
    NAME = "Spline"
    requires_common_dimensions = False
    can_swap_dimensions = True
    PARAMS = SPLINE_PARAMS

    def __init__(
        self,
        views: Sequence[ScatterView],
        params: SplineParams | Mapping[str, Any] | None = None,
    ) -> None:
        if not isinstance(params, SplineParams):
            params = SplineParams.resolve(params)
        super().__init__(views, params)
        self._is_ready = False
        self._cluster_guides: list[PathGuide] = []
        self._point_paths: dict[int, Path] = {}
        self._point_index: dict[int, int] = {}
        self._data: list[DataPoint] = []

    @property
    def is_ready(self) -> bool:
        return self._is_ready

    @property
    def has_meaningful_intermediates(self) -> bool:
        return not self.params.loose_intermediates

    @property
    def cluster_guides(self) -> list[PathGuide]:
        return self._cluster_guides

    @property
    def point_paths(self) -> dict[int, Path]:
        return self._point_paths

    @property
    def easing(self) -> EaseFn:
        # Easing would make segments of different lengths move at different speeds
        if not self.params.loose_intermediates and len(self.views) > 2:
            return self.params.ease
        return linear

    @property
    def retime(self) -> RetimeFn:
        if self.params.retime is not None:
            return self.params.retime
        if self.params.time_offset:
            return retime_legacy_time_offset
        return retime_identity

    def prepare(self) -> Future:
        """
        Dispatches clustering and path construction to the background worker.

        Returns:
            A Future resolving to None once the transition is ready. It raises
            WorkerPreparationFailure if the worker reported an error.
        """
        data = self.params.data
        if data is None:
            raise ValueError("Spline transitions need the data set in their params before prepare().")
        data = list(data)

        build_params = SplineBuildParams(
            clustering=self.params.clustering,
            loose_intermediates=self.params.loose_intermediates,
            bundling_strength=self.params.bundling_strength,
        )
        logger.info(f"Preparing spline transition for {len(data)} points over {len(self.views)} views")
        worker_future = submit_preparation(build_request(data, self.views, build_params))

        result: Future = Future()

        def on_done(done: Future) -> None:
            try:
                ok, payload = done.result()
            except Exception as e:
                ok, payload = False, f"{type(e).__name__}: {e}"
            if not ok:
                logger.error(f"Spline preparation failed: {payload}")
                result.set_exception(WorkerPreparationFailure(payload))
                return
            self._apply_preparation(data, payload)
            result.set_result(None)

        worker_future.add_done_callback(on_done)
        return result

    def _apply_preparation(self, data: list[DataPoint], preparation: SplinePreparation) -> None:
        self._data = data
        self._point_index = {id(point): index for index, point in enumerate(data)}
        self._cluster_guides = preparation.cluster_guides
        self._point_paths = preparation.point_paths
        self._is_ready = True
        logger.debug(f"Spline transition ready with {len(preparation.clusters)} clusters")

    def _point_path(self, point: DataPoint) -> Path:
        index = self._point_index.get(id(point))
        if index is None:
            try:
                index = self._data.index(point)
            except ValueError:
                raise UnknownPointInPath(f"unknown point passed to spline transition: {point!r}") from None
        path = self._point_paths.get(index)
        if path is None:
            raise UnknownPointInPath(f"no path was built for point {index}")
        return path

    def get_point_pos(self, t: float, point: DataPoint) -> npt.NDArray[np.float64]:
        if not self._is_ready:
            raise TransitionNotReady("Spline transition was queried before prepare() finished.")
        return path_eval(self._point_path(point), t, self.easing, self.retime)

    def get_x(self, t: float, point: DataPoint) -> float:
        return float(self.get_point_pos(t, point)[0])

    def get_y(self, t: float, point: DataPoint) -> float:
        return float(self.get_point_pos(t, point)[1])

    def get_position(self, t: float, point: DataPoint) -> tuple[float, float]:
        x, y = self.get_point_pos(t, point)
        return float(x), float(y)

    # ==========================================
    # DEBUG
    # ==========================================

    def draw_debug(
        self,
        sink: Callable[[npt.NDArray[np.float64]], Any],
        map_position: Callable[[npt.NDArray[np.float64]], Sequence[float]],
    ) -> None:
        """
        Enumerates all bezier curves, sampled at DEBUG_CURVE_SAMPLES steps.

        Args:
            sink: Receives one (DEBUG_CURVE_SAMPLES + 1, 2) array per curve.
            map_position: Maps a normalized position to the sink's coordinates.
        """
        ts = np.linspace(0.0, 1.0, config.DEBUG_CURVE_SAMPLES + 1)
        for path in self._point_paths.values():
            for segment in path:
                samples = bezier_eval_many(segment.curve, ts)
                sink(np.array([map_position(p) for p in samples], dtype=np.float64))

    def plot_debug(self, ax: Optional[Axes] = None) -> Axes:
        """Plots all point paths in normalized view space."""
        if ax is None:
            _, ax = plt.subplots(figsize=(6, 6))

        def sink(points: npt.NDArray[np.float64]) -> None:
            ax.plot(points[:, 0], points[:, 1], color="tab:blue", alpha=0.3, linewidth=0.8)

        self.draw_debug(sink, lambda p: p)
        ax.set_xlim(0.0, 1.0)
        ax.set_ylim(0.0, 1.0)
        ax.set_aspect("equal")
        ax.set_title(f"Spline paths ({len(self._point_paths)} points)")
        return ax

"""
Transition Builder
==================
Assembles a transition from a start view and a sequence of target views.

Why is this file needed?
------------------------
1. Convenience: Views can be given by dimension names; the dimensions are
   created from the data set on the fly.
2. Data injection: Spline transitions need the full data set in their params
   before prepare(). The builder supplies it.
3. View snapping: exact_view_at() / closest_view() tell which view a transition
   shows at a given time, e.g. to label axes.
4. Path transforms: A named transform from view_paths can insert intermediate
   views. Transitions that need a shared dimension between adjacent views always
   get manhattan corners.
"""
from __future__ import annotations

from concurrent.futures import Future
import dataclasses
import logging
import math
from typing import Any, Optional, Sequence

from scattertransition import config
from scattertransition.model.data import DataPoint, Dimension
from scattertransition.model.view import ScatterView
from scattertransition.model.view_paths import PATH_TRANSFORMS, manhattan
from scattertransition.transitions.base import ScatterTransition, TransitionType
from scattertransition.transitions.spline import SplineParams, SplineTransition

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class TransitionBuilder:
    """
    Collects the views of a transition path.

    Example:
        builder = TransitionBuilder(SplineTransition, {"clustering": {}}, data, start_view)
        future = builder.to_x("b").to_y("c").prepare()
    """

    def __init__(
        self,
        transition_type: TransitionType,
        params: Any,
        data: Sequence[DataPoint],
        start_view: ScatterView,
        path_transform: str = "straight",
        dimensions: Optional[Sequence[Dimension]] = None,
    ):
        if path_transform not in PATH_TRANSFORMS:
            raise ValueError(f"Unknown path transform '{path_transform}'. Expected one of {list(PATH_TRANSFORMS)}.")
        self.transition_type = transition_type
        self.params = params
        self.data = list(data)
        self.views: list[ScatterView] = [start_view]
        self.path_transform = path_transform
        self.dimensions = list(dimensions) if dimensions is not None else None

    @property
    def current_view(self) -> ScatterView:
        return self.views[-1]

    def dimension(self, name: str, padding: float = 0.0) -> Dimension:
        """Creates a dimension spanning the data's extent."""
        return Dimension.from_data(name, self.data, padding)

    def to_view(self, view: ScatterView | str, y_name: Optional[str] = None, padding: float = 0.0) -> TransitionBuilder:
        """Appends a view, given either as ScatterView or as a pair of dimension names."""
        if not isinstance(view, ScatterView):
            if y_name is None:
                raise ValueError("A view given by name needs both an x and a y dimension name.")
            view = ScatterView(self.dimension(view, padding), self.dimension(y_name, padding))
        self.views.append(view)
        return self

    def to_x(self, name: str, padding: float = 0.0) -> TransitionBuilder:
        """Appends a view that swaps out the x dimension."""
        return self.to_view(ScatterView(self.dimension(name, padding), self.current_view.y))

    def to_y(self, name: str, padding: float = 0.0) -> TransitionBuilder:
        """Appends a view that swaps out the y dimension."""
        return self.to_view(ScatterView(self.current_view.x, self.dimension(name, padding)))

    def to_views(self, views: Sequence[ScatterView]) -> TransitionBuilder:
        self.views.extend(views)
        return self

    def _params(self) -> Any:
        if self.transition_type is not SplineTransition:
            return self.params
        if isinstance(self.params, SplineParams):
            return dataclasses.replace(self.params, data=self.data)
        values = dict(self.params or {})
        values["data"] = self.data
        return values

    def _path_dimensions(self) -> list[Dimension]:
        if self.dimensions is not None:
            return self.dimensions
        # matrix order follows the first appearance of each dimension
        names: list[str] = []
        dimensions: list[Dimension] = []
        for view in self.views:
            for dim in (view.x, view.y):
                if dim.name not in names:
                    names.append(dim.name)
                    dimensions.append(dim)
        return dimensions

    def path(self) -> list[ScatterView]:
        """The collected views after the path transforms."""
        dimensions = self._path_dimensions()
        views = PATH_TRANSFORMS[self.path_transform](self.views, dimensions)
        if self.transition_type.requires_common_dimensions:
            views = manhattan(views, dimensions)
        return views

    def build(self) -> ScatterTransition:
        """
        Transforms the view path, validates it and creates the transition.

        Raises:
            ValueError: If no target view was added.
            IncompatibleViewTransition: If adjacent views cannot be chained with the transition type.
        """
        start, *targets = self.path()
        transition = start.transition_to(self.transition_type, self._params(), *targets)
        logger.info(f"Built {self.transition_type.__name__} over {len(transition.views)} views ({self.path_transform} path)")
        return transition

    def prepare(self) -> Future:
        """Builds the transition and prepares it. The future resolves to the transition."""
        transition = self.build()
        result: Future = Future()

        def on_done(done: Future) -> None:
            error = done.exception()
            if error is not None:
                result.set_exception(error)
            else:
                result.set_result(transition)

        transition.prepare().add_done_callback(on_done)
        return result


def exact_view_at(transition: ScatterTransition, t: float) -> Optional[ScatterView]:
    """
    Returns the view the transition shows exactly at time t, or None in between views.
    Without meaningful intermediates, only the first and the last view count.
    """
    tolerance = config.VIEW_SNAP_TOLERANCE
    if transition.has_meaningful_intermediates:
        view_time = t * (len(transition.views) - 1)
        closest = _round_half_up(view_time)
        if abs(view_time - closest) < tolerance and 0 <= closest < len(transition.views):
            return transition.views[closest]
        return None

    closest = _round_half_up(t)
    if abs(t - closest) < tolerance and closest in (0, 1):
        return transition.views[0] if closest == 0 else transition.views[-1]
    return None


def closest_view(transition: ScatterTransition, t: float) -> ScatterView:
    """Returns the path view closest to time t."""
    view_time = min(max(t, 0.0), 1.0) * (len(transition.views) - 1)
    return transition.views[_round_half_up(view_time)]

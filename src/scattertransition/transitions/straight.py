from __future__ import annotations

import math
from typing import TYPE_CHECKING

from scattertransition.transitions.base import ScatterTransition
from scattertransition.utils import lerp

if TYPE_CHECKING:
    from scattertransition.model.data import DataPoint
    from scattertransition.model.view import ScatterView


class StraightTransition(ScatterTransition):
    """
    Moves every point on a straight line from one view to the next.
    """
    NAME = "Straight"
    requires_common_dimensions = False
    can_swap_dimensions = True
    PARAMS = {}

    def _view_pair(self, t: float) -> tuple[ScatterView, ScatterView, float]:
        t *= len(self.views) - 1
        start_index = min(max(math.floor(t), 0), len(self.views) - 1)
        end_index = min(start_index + 1, len(self.views) - 1)
        return self.views[start_index], self.views[end_index], t - start_index

    def get_x(self, t: float, point: DataPoint) -> float:
        start_view, end_view, frac = self._view_pair(t)
        return lerp(start_view.get_x(point), end_view.get_x(point), frac)

    def get_y(self, t: float, point: DataPoint) -> float:
        start_view, end_view, frac = self._view_pair(t)
        return lerp(start_view.get_y(point), end_view.get_y(point), frac)

"""
Scatter Views
=============
A view of two data dimensions as a scatter plot.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Mapping, TYPE_CHECKING

from scattertransition.model.data import DataPoint, Dimension
from scattertransition.transitions.errors import IncompatibleViewTransition

if TYPE_CHECKING:
    from scattertransition.transitions.base import ScatterTransition, TransitionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScatterView:
    """Represents a view of two data dimensions as a scatter plot."""
    x: Dimension
    y: Dimension

    def get_x(self, point: DataPoint) -> float:
        """Returns the normalized X position of a point (in 0..1)."""
        return self.x.normalize(point[self.x.name])

    def get_y(self, point: DataPoint) -> float:
        """Returns the normalized Y position of a point (in 0..1)."""
        return self.y.normalize(point[self.y.name])

    def __str__(self) -> str:
        return f"ScatterView(x: {self.x.name}, y: {self.y.name})"

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x.to_dict(), "y": self.y.to_dict()}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> ScatterView:
        return ScatterView(Dimension.from_dict(data["x"]), Dimension.from_dict(data["y"]))

    def validate_transition_to(self, view: ScatterView, with_type: TransitionType) -> None:
        """
        Checks whether this view can be transitioned to the given view with the given transition.

        Raises:
            IncompatibleViewTransition: If the transition type forbids this pair of views.
        """
        name = with_type.__name__
        if with_type.requires_common_dimensions:
            if not (self.x.eq(view.x) or self.x.eq(view.y) or self.y.eq(view.x) or self.y.eq(view.y)):
                logger.warning(f"{name}: {self} and {view} share no dimension")
                raise IncompatibleViewTransition(self, view, name, "no common dimensions")
        if not with_type.can_swap_dimensions:
            if self.x.eq(view.y) or self.y.eq(view.x):
                logger.warning(f"{name}: {self} and {view} swap dimensions")
                raise IncompatibleViewTransition(self, view, name, "swapping is not supported")

    def transition_to(self, with_type: TransitionType, params: Any, *views: ScatterView) -> ScatterTransition:
        """
        Transitions this view with the given transition type and parameters to the last view
        across all intermediate views.

        Args:
            with_type: The transition type.
            params: Parameters for the transition.
            *views: Intermediate views and a final view. The final view is required.
        """
        if not views:
            raise ValueError("cannot transition to nothing")
        transition_views = [self, *views]
        for current, following in zip(transition_views[:-1], transition_views[1:]):
            current.validate_transition_to(following, with_type)
        return with_type(transition_views, params)

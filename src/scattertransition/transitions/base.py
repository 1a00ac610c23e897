"""
Transition Contract
===================
The interface every transition strategy implements.

A transition type (the class) describes which view pairs it can chain
(requires_common_dimensions, can_swap_dimensions) and which parameters it takes
(PARAMS). A transition instance animates a fixed list of views.

The t parameter in get_x and get_y corresponds to the current view index,
normalized to 0..1 (e.g. for [view1, view2, view3, view4], 1/3 corresponds
exactly to view2).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Any, ClassVar, Sequence, TYPE_CHECKING

from scattertransition.model.params import Schema, describe_schema, visible_params

if TYPE_CHECKING:
    from scattertransition.model.data import DataPoint
    from scattertransition.model.view import ScatterView


def completed_future() -> Future:
    """A future that has already resolved to None."""
    future: Future = Future()
    future.set_result(None)
    return future


class ScatterTransition(ABC):
    """
    Abstract base class for a single method of transitioning between scatter plot views.
    """
    NAME: ClassVar[str] = "Transition"
    # If True, adjacent views must share at least one dimension.
    requires_common_dimensions: ClassVar[bool] = False
    # If True, adjacent views may swap dimensions (x, y -> y, x).
    can_swap_dimensions: ClassVar[bool] = True
    PARAMS: ClassVar[Schema] = {}

    def __init__(self, views: Sequence[ScatterView], params: Any = None) -> None:
        if len(views) < 2:
            raise ValueError(f"{type(self).__name__} needs at least two views, got {len(views)}.")
        self.views: list[ScatterView] = list(views)
        self.params = params

    @property
    def is_ready(self) -> bool:
        """If False, the transition still needs to be prepared."""
        return True

    @property
    def has_meaningful_intermediates(self) -> bool:
        """
        True if t = i / (len(views) - 1) shows views[i] exactly.
        Otherwise, only t = 0 and t = 1 are guaranteed to show a view.
        """
        return True

    def prepare(self) -> Future:
        """Prepares the transition. Returns a future that resolves once it is ready."""
        return completed_future()

    @abstractmethod
    def get_x(self, t: float, point: DataPoint) -> float:
        """Returns the X position of a point for time t."""
        pass

    @abstractmethod
    def get_y(self, t: float, point: DataPoint) -> float:
        """Returns the Y position of a point for time t."""
        pass

    def get_position(self, t: float, point: DataPoint) -> tuple[float, float]:
        return self.get_x(t, point), self.get_y(t, point)

    @classmethod
    def describe_params(cls) -> dict[str, dict[str, Any]]:
        return describe_schema(cls.PARAMS)

    @classmethod
    def visible_params(cls, params: dict[str, Any]) -> list[str]:
        return visible_params(cls.PARAMS, params)


TransitionType = type[ScatterTransition]

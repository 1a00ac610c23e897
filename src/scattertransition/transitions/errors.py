"""
Transition Errors
=================
Every error raised by the transition engine derives from ScatterTransitionError,
so callers can catch the whole family at once.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scattertransition.model.view import ScatterView


class ScatterTransitionError(Exception):
    """Base class for transition engine errors."""


class IncompatibleViewTransition(ScatterTransitionError, ValueError):
    """Two adjacent views cannot be chained with the requested transition type."""

    def __init__(self, from_view: ScatterView, to_view: ScatterView, transition_name: str, reason: str):
        self.from_view = from_view
        self.to_view = to_view
        self.transition_name = transition_name
        self.reason = reason
        super().__init__(
            f"cannot transition between view {from_view} and {to_view} with {transition_name}: {reason}"
        )


TransitionIncompatibleViews = IncompatibleViewTransition


class UnknownPointInPath(ScatterTransitionError, KeyError):
    """A queried point was not part of the data supplied during preparation."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown point passed to spline transition"


class EmptyClusterError(ScatterTransitionError, ValueError):
    """A cluster without points reached code that needs its mean."""


class WorkerPreparationFailure(ScatterTransitionError, RuntimeError):
    """The background preparation task reported an error."""


class TransitionNotReady(ScatterTransitionError, RuntimeError):
    """A transition was queried before its preparation finished."""

"""
Command-Line Demo
=================
Builds a random data set, runs the transition strategies over a three-view path
and logs sample point positions.

Why is this file needed?
------------------------
It acts as the smoke test and usage example of the engine. It:
1. Sets up logging.
2. Creates dimensions and views from generated data.
3. Builds and prepares each requested transition with the TransitionBuilder.
4. Optionally shows the spline debug plot (matplotlib).

Usage:
    $ python -m scattertransition --strategy spline --plot
"""
import argparse
import logging
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from scattertransition import config
from scattertransition.builder import TransitionBuilder, exact_view_at
from scattertransition.controller.workers import shutdown_executor
from scattertransition.logging_config import setup_logging
from scattertransition.model.data import DataPoint, Dimension
from scattertransition.model.view import ScatterView
from scattertransition.transitions.base import TransitionType
from scattertransition.transitions.rotation import RotationTransition
from scattertransition.transitions.spline import SplineTransition
from scattertransition.transitions.straight import StraightTransition

logger = logging.getLogger(__name__)

STRATEGIES: dict[str, tuple[TransitionType, dict]] = {
    "straight": (StraightTransition, {}),
    "rotation": (RotationTransition, {"perspective": 1.0}),
    "spline": (SplineTransition, {"clustering": {"eps_min": 0.1, "pts_min": 3}, "bundling_strength": 2}),
}

SAMPLE_TIMES = (0.0, 0.25, 0.5, 0.75, 1.0)


def generate_data(n_points: int, seed: Optional[int] = None) -> list[DataPoint]:
    """Three gaussian blobs in four correlated dimensions."""
    rng = np.random.default_rng(seed)
    centers = rng.uniform(0.0, 10.0, size=(3, 4))
    labels = rng.integers(0, len(centers), size=n_points)
    values = centers[labels] + rng.normal(0.0, 0.8, size=(n_points, 4))
    return [dict(zip("abcd", (float(v) for v in row))) for row in values]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="scattertransition", description=__doc__.split("\n\n")[0])
    parser.add_argument("--points", type=int, default=200, help="number of generated data points")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument(
        "--strategy",
        choices=[*STRATEGIES, "all"],
        default="all",
        help="transition strategy to run",
    )
    parser.add_argument("--plot", action="store_true", help="show the spline debug plot")
    parser.add_argument("--verbose", "-v", action="store_true", help="log debug messages")
    return parser.parse_args(argv)


def run_strategy(name: str, data: list[DataPoint], start_view: ScatterView, plot: bool) -> None:
    transition_type, params = STRATEGIES[name]
    builder = TransitionBuilder(transition_type, params, data, start_view)
    transition = builder.to_y("c", padding=0.1).to_x("d", padding=0.1).prepare().result()

    point = data[0]
    for t in SAMPLE_TIMES:
        x, y = transition.get_position(t, point)
        view = exact_view_at(transition, t)
        logger.info(f"[{name}] t={t:.2f} -> ({x:.3f}, {y:.3f}) {view or ''}")

    if plot and isinstance(transition, SplineTransition):
        transition.plot_debug()
        plt.show()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    level = logging.DEBUG if args.verbose else config.LOG_LEVEL
    setup_logging(level=level)

    data = generate_data(args.points, args.seed)
    start_view = ScatterView(
        Dimension.from_data("a", data, padding=0.1),
        Dimension.from_data("b", data, padding=0.1),
    )

    names = list(STRATEGIES) if args.strategy == "all" else [args.strategy]
    try:
        for name in names:
            run_strategy(name, data, start_view, args.plot)
    finally:
        shutdown_executor()


if __name__ == "__main__":
    main()

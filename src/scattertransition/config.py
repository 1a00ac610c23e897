"""
Configuration & Global Constants
================================
This module serves as the central registry for the engine's tuning constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (arc-length tolerance, sampling
   resolution, ...) scattered throughout the transitions.
2. Deployment: A few values can be overridden through environment variables,
   so an embedding application can tune them without code changes.

Exports:
    ARC_LENGTH_TOLERANCE (float): Max. distance between arc-length samples (normalized units).
    MIN_ARC_LENGTH_STEP (float): Lower bound for the arc-length parameter step.
    DEBUG_CURVE_SAMPLES (int): Number of steps used when sampling curves for debugging.
    PERSPECTIVE_BUMP_COEFFICIENT (float): Scale of the non-staged perspective bump curve.
    VIEW_SNAP_TOLERANCE (float): Time tolerance for snapping to an exact view.
    PREPARE_WORKERS (int): Number of threads preparing transitions in the background.
    LOG_LEVEL (str): Log level used by the command-line demo.
"""
import logging
import os

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return max(1, int(raw))
    except ValueError:
        logger.warning(f"Ignoring invalid value for {name}: {raw!r}")
        return default


# Global Constants
ARC_LENGTH_TOLERANCE: float = 0.01
MIN_ARC_LENGTH_STEP: float = 2.0 ** -12
DEBUG_CURVE_SAMPLES: int = 50
PERSPECTIVE_BUMP_COEFFICIENT: float = 2.41
VIEW_SNAP_TOLERANCE: float = 1e-2

PREPARE_WORKERS: int = _env_int("SCATTERTRANSITION_PREPARE_WORKERS", 1)
LOG_LEVEL: str = os.environ.get("SCATTERTRANSITION_LOG_LEVEL", "INFO").upper()

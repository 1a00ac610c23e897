"""
Background Workers (Threading)
==============================
This module runs long-running transition preparation off the caller's thread.

Why is this file needed?
------------------------
1. Responsiveness: Clustering and path construction for the spline transition
   are CPU-bound. Running them on the rendering thread would freeze animations.
2. Message passing: A request (plain data) goes to the worker, a response
   (True, payload) or (False, message) comes back through a Future.

Classes:
    SplinePreparationWorker: Prepares the paths of a spline transition.
"""
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging
import threading
import time
from typing import Any, Mapping, Optional

from scattertransition import config
from scattertransition.transitions.spline_worker import SplinePreparation, init_spline, parse_request

logger = logging.getLogger(__name__)

WorkerResponse = tuple[bool, Any]

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def get_executor() -> ThreadPoolExecutor:
    """The shared executor preparing transitions (created on first use)."""
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=config.PREPARE_WORKERS,
                thread_name_prefix="scattertransition-prepare",
            )
        return _executor


def shutdown_executor(wait: bool = True) -> None:
    """Stops the shared executor. A new one is created on the next submission."""
    global _executor
    with _executor_lock:
        if _executor is not None:
            _executor.shutdown(wait=wait)
            _executor = None


class SplinePreparationWorker:
    """
    Handles one request/response exchange.
    The request is plain data, see spline_worker.build_request().
    """

    def __init__(self, request: Mapping[str, Any]):
        self.request = request

    def run(self) -> WorkerResponse:
        try:
            logger.info("Starting spline preparation in background thread...")
            started = time.perf_counter()

            data, views, params = parse_request(self.request)
            result: SplinePreparation = init_spline(data, views, params)

            logger.info(
                f"Spline preparation finished in {time.perf_counter() - started:.3f} s "
                f"({len(result.point_paths)} points, {len(result.clusters)} clusters)."
            )
            return True, result

        except Exception as e:
            logger.error(f"Error in SplinePreparationWorker: {e}")
            return False, f"{type(e).__name__}: {e}"


def submit_preparation(request: Mapping[str, Any]) -> Future:
    """Dispatches a request to the background worker. The future resolves to a WorkerResponse."""
    worker = SplinePreparationWorker(request)
    return get_executor().submit(worker.run)

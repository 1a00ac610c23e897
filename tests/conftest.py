"""Pytest configuration and shared fixtures."""
import logging

import matplotlib
import pytest

from scattertransition.model.data import Dimension
from scattertransition.model.view import ScatterView

matplotlib.use("Agg")


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Removes handlers installed by setup_logging() during a test."""
    yield
    logger = logging.getLogger("scattertransition")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def data():
    """Two tight groups of two points each, all dimensions in [0, 10]."""
    return [
        {"a": 0.0, "b": 0.0, "c": 10.0},
        {"a": 0.5, "b": 0.5, "c": 9.5},
        {"a": 9.5, "b": 9.5, "c": 0.5},
        {"a": 10.0, "b": 10.0, "c": 0.0},
    ]


@pytest.fixture
def dims():
    return {name: Dimension(name, (0.0, 10.0)) for name in "abc"}


@pytest.fixture
def view_ab(dims):
    return ScatterView(dims["a"], dims["b"])


@pytest.fixture
def view_ac(dims):
    return ScatterView(dims["a"], dims["c"])


@pytest.fixture
def view_bc(dims):
    return ScatterView(dims["b"], dims["c"])


@pytest.fixture
def view_cb(dims):
    return ScatterView(dims["c"], dims["b"])

"""Shared fixtures and command line options of the test suite."""

import matplotlib.pyplot as plt
import numpy as np
import pytest

# figures must never open a window during tests
plt.switch_backend("agg")


@pytest.fixture(autouse=True)
def _numerical_errors_and_figures():
    """Turn floating point problems into errors and close figures afterwards."""
    previous = np.seterr(all="raise", under="ignore")
    yield
    np.seterr(**previous)
    plt.close("all")


@pytest.fixture
def rng():
    """:class:`numpy.random.Generator` with a fixed seed"""
    return np.random.default_rng(0)


def pytest_addoption(parser):
    parser.addoption(
        "--runslow", action="store_true", help="include tests marked as `slow`"
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: test takes long to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless `--runslow` is given."""
    if config.getoption("--runslow"):
        return
    skip = pytest.mark.skip(reason="slow test, use --runslow to run it")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)

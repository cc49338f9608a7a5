"""
Configuration for pytest to set up the proper import paths and shared fixtures.
"""

import sys
from pathlib import Path

import pytest


# Add the parent directory to Python path so we can import iterable, utils, app, etc.
parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir))

# Import after path setup
from utils import clear_performance_metrics


class CallTracker:
    """Pass-through mapper recording every element it sees"""

    def __init__(self):
        self.seen = []

    def __call__(self, x):
        self.seen.append(x)
        return x

    @property
    def calls(self):
        return len(self.seen)


@pytest.fixture
def tracker():
    """Fresh pass-through mapper for counting pulls."""
    return CallTracker()


@pytest.fixture(autouse=True)
def reset_metrics():
    """Each test starts with an empty performance log."""
    clear_performance_metrics()
    yield
    clear_performance_metrics()

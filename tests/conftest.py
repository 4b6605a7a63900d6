import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from underbar.scheduler import ManualClock, Scheduler, set_default_scheduler


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    sched = Scheduler(clock=clock)
    yield sched
    sched.close()


@pytest.fixture
def default_scheduler(scheduler):
    """Install the manual-clock scheduler as the library default for one test."""
    previous = set_default_scheduler(scheduler)
    yield scheduler
    set_default_scheduler(previous)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sample_collections():
    return [
        [],
        [0],
        [1, 2, 3],
        [0, None, "", False],
        (4, 5, 6),
        "abc",
        {},
        {"a": 1, "b": 0, "c": 3},
        {"x": None},
    ]

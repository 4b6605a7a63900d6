"""
underbar - functional helpers for sequences and mappings.

Collection operations work on any sequence, mapping or Traversable and
return new lists. Decorators (once, memoize, delay, throttle) wrap any
callable; delay and throttle run deferred calls through a cooperative
Scheduler.
"""

from underbar.arrays import difference, flatten, intersection, shuffle, uniq, unzip, zip
from underbar.chain import Chain, chain
from underbar.decorators import (
    Memoized,
    Once,
    Throttled,
    delay,
    memoize,
    once,
    throttle,
)
from underbar.exceptions import (
    EmptyReductionError,
    InvalidCollectionError,
    SchedulingError,
    UnderbarError,
)
from underbar.iteration import Traversable, call_iterator, each, identity, traverse
from underbar.models import LoggingConfig, SchedulerStats, TimerStatus, WaitSpec
from underbar.objects import defaults, extend
from underbar.operations import (
    contains,
    every,
    filter,
    first,
    index_of,
    invoke,
    last,
    map,
    pluck,
    reduce,
    reject,
    some,
    sort_by,
)
from underbar.scheduler import (
    ManualClock,
    MonotonicClock,
    Scheduler,
    Timer,
    get_default_scheduler,
    set_default_scheduler,
)
from underbar.types import ABSENT, NOT_FOUND
from underbar.utils import setup_logging

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
    "NOT_FOUND",
    "Chain",
    "EmptyReductionError",
    "InvalidCollectionError",
    "LoggingConfig",
    "ManualClock",
    "Memoized",
    "MonotonicClock",
    "Once",
    "Scheduler",
    "SchedulerStats",
    "SchedulingError",
    "Throttled",
    "Timer",
    "TimerStatus",
    "Traversable",
    "UnderbarError",
    "WaitSpec",
    "call_iterator",
    "chain",
    "contains",
    "defaults",
    "delay",
    "difference",
    "each",
    "every",
    "extend",
    "filter",
    "first",
    "flatten",
    "get_default_scheduler",
    "identity",
    "index_of",
    "intersection",
    "invoke",
    "last",
    "map",
    "memoize",
    "once",
    "pluck",
    "reduce",
    "reject",
    "set_default_scheduler",
    "setup_logging",
    "shuffle",
    "some",
    "sort_by",
    "throttle",
    "traverse",
    "uniq",
    "unzip",
    "zip",
]

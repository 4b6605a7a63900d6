"""
Function decorators that change how a function is invoked.

``once`` and ``memoize`` remember results, ``delay`` defers a call through a
Scheduler, and ``throttle`` rate-limits calls to one per window. Each
wrapper is an object owning its state record, so the state can be looked at
(``wrapper.state``, ``wrapper.cache``, ``wrapper.window``) and lives exactly
as long as the wrapper. Wrappers bind like functions when used on methods,
so the instance is forwarded as the first argument.
"""

import functools
import logging
import types
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import ValidationError

from underbar.exceptions import SchedulingError
from underbar.models import WaitSpec
from underbar.scheduler import Scheduler, Timer, get_default_scheduler
from underbar.utils import serialize_arguments

logger = logging.getLogger(__name__)


class _Wrapper:
    """Callable object standing in for a wrapped function."""

    def __init__(self, fn: Callable):
        if not callable(fn):
            raise TypeError(f"Expected a callable, got {type(fn).__name__}")
        functools.update_wrapper(self, fn)
        self.fn = fn

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return types.MethodType(self, instance)

    @property
    def _name(self) -> str:
        return getattr(self.fn, '__name__', repr(self.fn))


@dataclass
class InvocationState:
    """Whether the wrapped function ran, and what it returned."""
    called: bool = False
    result: Any = None


class Once(_Wrapper):
    """Runs the wrapped function on the first call only."""

    def __init__(self, fn: Callable):
        super().__init__(fn)
        self.state = InvocationState()

    def __call__(self, *args, **kwargs):
        if not self.state.called:
            # flag flips only after a successful call, so a raising call can be retried
            self.state.result = self.fn(*args, **kwargs)
            self.state.called = True
        return self.state.result


def once(fn: Callable) -> Once:
    """Return a wrapper calling ``fn`` at most once; later calls return the first result."""
    return Once(fn)


@dataclass
class MemoCache:
    """Results keyed by serialized argument list. Never evicted."""
    entries: Dict[str, Any] = field(default_factory=dict)
    hits: int = 0
    misses: int = 0


class Memoized(_Wrapper):
    """Caches results per distinct serialized argument list."""

    def __init__(self, fn: Callable):
        super().__init__(fn)
        self.memo = MemoCache()

    @property
    def cache(self):
        return types.MappingProxyType(self.memo.entries)

    def __call__(self, *args, **kwargs):
        key = serialize_arguments(args, kwargs)
        entries = self.memo.entries
        if key in entries:
            self.memo.hits += 1
            logger.debug(f"memoize hit for {self._name}{key}")
            return entries[key]

        self.memo.misses += 1
        logger.debug(f"memoize miss for {self._name}{key}")
        result = self.fn(*args, **kwargs)
        entries[key] = result
        return result


def memoize(fn: Callable) -> Memoized:
    """Return a wrapper caching ``fn``'s result for each argument list.

    Argument lists are compared by their JSON serialization, so lists that
    serialize identically share a result (``f([1, 2])`` and ``f((1, 2))``
    for instance). The cache grows without bound.
    """
    return Memoized(fn)


def delay(fn: Callable, wait, *args, scheduler: Optional[Scheduler] = None, **kwargs) -> Timer:
    """Call ``fn(*args, **kwargs)`` once, ``wait`` milliseconds from now.

    Returns the Timer immediately; cancel it to stop the call. The call runs
    when the scheduler (the default one unless ``scheduler`` is given) is
    driven past the deadline.
    """
    scheduler = scheduler or get_default_scheduler()
    return scheduler.call_later(wait, fn, *args, **kwargs)


@dataclass
class ThrottleWindow:
    """Rate-limit window of a throttled function."""
    last_invoked: Optional[float] = None
    pending_args: Optional[Tuple[Any, ...]] = None
    pending_kwargs: Optional[Dict[str, Any]] = None
    timer: Optional[Timer] = None
    generation: int = 0
    result: Any = None


class Throttled(_Wrapper):
    """Invokes the wrapped function at most once per ``wait`` ms.

    The first call of a window runs immediately (leading edge). Calls made
    while the window is open are suppressed; if there were any, one trailing
    call runs with the most recent arguments when the window closes, and
    that call opens the next window.
    """

    def __init__(self, fn: Callable, wait, scheduler: Optional[Scheduler] = None):
        super().__init__(fn)
        try:
            self.wait = WaitSpec(wait=wait).wait
        except ValidationError as e:
            raise SchedulingError(f"Invalid throttle wait {wait!r}: {e.errors()[0]['msg']}") from e
        self.scheduler = scheduler or get_default_scheduler()
        self.window = ThrottleWindow()

    def __call__(self, *args, **kwargs):
        window = self.window
        now = self.scheduler.now()

        if window.last_invoked is None or now - window.last_invoked >= self.wait:
            if window.timer is not None:
                window.timer.cancel()
                window.timer = None
                window.generation += 1
            window.pending_args = window.pending_kwargs = None
            return self._invoke(now, args, kwargs)

        window.pending_args, window.pending_kwargs = args, kwargs
        if window.timer is None:
            remaining = window.last_invoked + self.wait - now
            window.timer = self.scheduler.call_later(
                remaining, self._trailing, window, window.generation
            )
            logger.debug(f"throttle suppressed {self._name}, trailing call in {remaining:.3f}ms")
        else:
            logger.debug(f"throttle suppressed {self._name}")
        return window.result

    def _trailing(self, window: ThrottleWindow, generation: int):
        # a due timer cannot be cancelled, so stale ones land here and are ignored
        if window is not self.window or window.generation != generation:
            return
        window.timer = None
        window.generation += 1
        if window.pending_args is None:
            return
        args, kwargs = window.pending_args, window.pending_kwargs
        window.pending_args = window.pending_kwargs = None
        self._invoke(self.scheduler.now(), args, kwargs)

    def _invoke(self, now: float, args, kwargs):
        self.window.last_invoked = now
        self.window.result = self.fn(*args, **kwargs)
        return self.window.result

    def cancel(self) -> None:
        """Drop any pending trailing call and start over with a fresh window."""
        if self.window.timer is not None:
            self.window.timer.cancel()
        self.window = ThrottleWindow()


def throttle(fn: Callable, wait, scheduler: Optional[Scheduler] = None) -> Throttled:
    """Return a wrapper running ``fn`` at most once every ``wait`` milliseconds.

    Leading call immediately, at most one trailing call with the latest
    arguments. The wrapper returns the result of the last actual invocation.
    """
    return Throttled(fn, wait, scheduler)

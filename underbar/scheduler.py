"""
Cooperative timer scheduler used by delay and throttle.

Timers sit in a deadline-ordered heap and run on the thread that drives the
scheduler (``run_pending``, ``advance``, ``run`` or ``drain``); nothing runs
in the background. Equal deadlines fire in the order they were scheduled.
All times are milliseconds.
"""

import asyncio
import heapq
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from underbar.exceptions import SchedulingError
from underbar.models import SchedulerStats, TimerStatus, WaitSpec

logger = logging.getLogger(__name__)


class MonotonicClock:
    """Wall-independent clock backed by time.monotonic."""

    def now(self) -> float:
        return time.monotonic() * 1000.0


class ManualClock:
    """Clock that only moves when told to; used for deterministic timing."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, ms: float) -> float:
        if ms < 0:
            raise SchedulingError(f"Clock cannot move backwards (advance by {ms})")
        self._now += ms
        return self._now

    def set(self, ms: float) -> float:
        if ms < self._now:
            raise SchedulingError(f"Clock cannot move backwards (from {self._now} to {ms})")
        self._now = float(ms)
        return self._now


class Timer:
    """Handle for one scheduled call."""

    def __init__(self, scheduler: "Scheduler", timer_id: int, deadline: float,
                 callback: Callable, args: Tuple[Any, ...], kwargs: Dict[str, Any]):
        self.id = timer_id
        self.deadline = deadline
        self.status = TimerStatus.PENDING
        self.result = None
        self._scheduler = scheduler
        self._callback = callback
        self._args = args
        self._kwargs = kwargs

    @property
    def cancelled(self) -> bool:
        return self.status == TimerStatus.CANCELLED

    @property
    def fired(self) -> bool:
        return self.status in (TimerStatus.FIRED, TimerStatus.FAILED)

    def cancel(self) -> bool:
        """Stop the call from happening. Returns True if this prevented it.

        Once the deadline has passed the timer counts as fired, even when the
        scheduler has not got round to running it yet, and cancel is a no-op.
        """
        if self.status != TimerStatus.PENDING:
            return False
        if self._scheduler.now() >= self.deadline:
            return False
        self._discard()
        return True

    def _discard(self):
        self.status = TimerStatus.CANCELLED
        self._callback = None
        self._args = ()
        self._kwargs = {}
        self._scheduler._record_cancel(self)

    def _fire(self):
        callback, args, kwargs = self._callback, self._args, self._kwargs
        self._callback = None
        try:
            self.result = callback(*args, **kwargs)
        except Exception:
            self.status = TimerStatus.FAILED
            raise
        self.status = TimerStatus.FIRED
        return self.result

    def __repr__(self):
        return f"Timer(id={self.id}, deadline={self.deadline:.3f}, status={self.status.value})"


class Scheduler:
    """Deadline-ordered queue of timers drained on the calling thread."""

    def __init__(self, clock=None):
        self.clock = clock or MonotonicClock()
        self._queue: List[Tuple[float, int, Timer]] = []
        self._next_id = 0
        self._closed = False
        self.stats = {
            'total_scheduled': 0,
            'total_fired': 0,
            'total_cancelled': 0,
            'total_failed': 0,
        }

    def now(self) -> float:
        return self.clock.now()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if timer.status == TimerStatus.PENDING)

    def call_later(self, wait, callback: Callable, *args, **kwargs) -> Timer:
        """Schedule ``callback(*args, **kwargs)`` to run ``wait`` ms from now.

        Raises SchedulingError right away for a negative or non-finite wait,
        a non-callable callback, or a closed scheduler.
        """
        if self._closed:
            raise SchedulingError("Scheduler is closed")
        if not callable(callback):
            raise SchedulingError(f"Callback must be callable, got {type(callback).__name__}")
        try:
            spec = WaitSpec(wait=wait)
        except ValidationError as e:
            raise SchedulingError(f"Invalid wait {wait!r}: {e.errors()[0]['msg']}") from e

        timer_id = self._next_id
        self._next_id += 1
        timer = Timer(self, timer_id, self.now() + spec.wait, callback, args, kwargs)
        heapq.heappush(self._queue, (timer.deadline, timer_id, timer))
        self.stats['total_scheduled'] += 1
        logger.debug(f"Scheduled timer {timer_id} for {timer.deadline:.3f}ms")
        return timer

    def next_deadline(self) -> Optional[float]:
        """Deadline of the earliest pending timer, or None when idle."""
        while self._queue and self._queue[0][2].status != TimerStatus.PENDING:
            heapq.heappop(self._queue)
        return self._queue[0][0] if self._queue else None

    def run_pending(self) -> int:
        """Fire every timer that is due now, in deadline order.

        Timers scheduled by the callbacks themselves wait for the next call,
        even with a zero wait. If a callback raises, the error propagates and
        the remaining timers stay queued.
        """
        now = self.now()
        barrier = self._next_id
        fired = 0
        while self.next_deadline() is not None:
            deadline, timer_id, timer = self._queue[0]
            if deadline > now or timer_id >= barrier:
                break
            heapq.heappop(self._queue)
            self._fire(timer)
            fired += 1
        return fired

    def _fire(self, timer: Timer):
        logger.debug(f"Firing timer {timer.id}")
        try:
            timer._fire()
        except Exception as e:
            self.stats['total_failed'] += 1
            logger.error(f"Timer {timer.id} failed: {e}")
            raise
        self.stats['total_fired'] += 1

    def _record_cancel(self, timer: Timer):
        self.stats['total_cancelled'] += 1
        logger.debug(f"Cancelled timer {timer.id}")

    def advance(self, ms: float) -> int:
        """Move a ManualClock forward by ``ms``, firing timers on the way.

        The clock stops at each due deadline so callbacks see their own
        deadline as the current time.
        """
        if not isinstance(self.clock, ManualClock):
            raise SchedulingError("advance() requires a ManualClock")
        try:
            step = WaitSpec(wait=ms).wait
        except ValidationError as e:
            raise SchedulingError(f"Invalid advance {ms!r}: {e.errors()[0]['msg']}") from e

        target = self.clock.now() + step
        fired = 0
        while True:
            deadline = self.next_deadline()
            if deadline is None or deadline > target:
                break
            if deadline > self.clock.now():
                self.clock.set(deadline)
            fired += self.run_pending()
        self.clock.set(target)
        return fired

    def _time_left(self, deadline: float, stop_at: Optional[float]) -> Optional[float]:
        """Milliseconds to wait for ``deadline``; None when past ``stop_at``."""
        if stop_at is not None and deadline > stop_at:
            return None
        if isinstance(self.clock, ManualClock):
            if deadline > self.clock.now():
                self.clock.set(deadline)
            return 0.0
        return max(0.0, deadline - self.now())

    def run(self, timeout: Optional[float] = None) -> int:
        """Block until the queue is empty (or ``timeout`` ms pass), firing timers.

        With a ManualClock the clock jumps straight to each deadline.
        """
        stop_at = None if timeout is None else self.now() + timeout
        fired = 0
        while True:
            deadline = self.next_deadline()
            if deadline is None:
                break
            delay = self._time_left(deadline, stop_at)
            if delay is None:
                break
            if delay > 0:
                time.sleep(delay / 1000.0)
            fired += self.run_pending()
        return fired

    async def drain(self, timeout: Optional[float] = None) -> int:
        """Cooperative version of run(): waits with asyncio.sleep."""
        stop_at = None if timeout is None else self.now() + timeout
        fired = 0
        while True:
            deadline = self.next_deadline()
            if deadline is None:
                break
            delay = self._time_left(deadline, stop_at)
            if delay is None:
                break
            await asyncio.sleep(delay / 1000.0)
            fired += self.run_pending()
        return fired

    def close(self) -> int:
        """Stop accepting timers and cancel everything still queued."""
        if self._closed:
            return 0
        self._closed = True
        cancelled = 0
        for _, _, timer in self._queue:
            if timer.status == TimerStatus.PENDING:
                timer._discard()
                cancelled += 1
        self._queue.clear()
        logger.info(f"Scheduler closed, {cancelled} pending timers cancelled")
        return cancelled

    def get_stats(self) -> SchedulerStats:
        return SchedulerStats(**self.stats, pending=self.pending, now=self.now())


_default_scheduler: Optional[Scheduler] = None


def get_default_scheduler() -> Scheduler:
    """Scheduler used by delay and throttle when none is passed."""
    global _default_scheduler
    if _default_scheduler is None or _default_scheduler.closed:
        _default_scheduler = Scheduler()
    return _default_scheduler


def set_default_scheduler(scheduler: Optional[Scheduler]) -> Optional[Scheduler]:
    """Replace the default scheduler; returns the previous one."""
    global _default_scheduler
    previous = _default_scheduler
    _default_scheduler = scheduler
    return previous

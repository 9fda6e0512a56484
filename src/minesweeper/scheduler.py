"""
Cooperative scheduling for game timers and the guided demo.

Everything runs on one thread. A Clock holds scheduled callbacks and
runs them in due order when time is advanced, either by tests or by a
RealtimeDriver that follows the wall clock.
"""
import heapq
import itertools
import time
from typing import Callable, List, Optional, Set

Callback = Callable[[], None]


# ============================================================================
# Scheduled Task
# ============================================================================

class ScheduledTask:
    """Handle to one pending callback."""

    def __init__(self, due_ms: int, sequence: int, callback: Callback) -> None:
        self.due_ms = due_ms
        self._sequence = sequence
        self._callback = callback
        self._cancelled = False
        self._done = False

    def __lt__(self, other: "ScheduledTask") -> bool:
        return (self.due_ms, self._sequence) < (other.due_ms, other._sequence)

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call repeatedly."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    @property
    def pending(self) -> bool:
        return not (self._cancelled or self._done)

    def _run(self) -> None:
        self._done = True
        self._callback()


# ============================================================================
# Clock
# ============================================================================

class Clock:
    """
    Virtual millisecond clock.

    Callbacks scheduled for the same instant run in the order they were
    scheduled. Callbacks may schedule further callbacks; those run in the
    same advance() call if they fall inside the advanced window.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms
        self._queue: List[ScheduledTask] = []
        self._sequence = itertools.count()

    @property
    def now_ms(self) -> int:
        """Current virtual time."""
        return self._now

    def call_later(self, delay_ms: int, callback: Callback) -> ScheduledTask:
        """
        Schedule a callback delay_ms from now.

        Raises:
            ValueError: If delay_ms is negative.
        """
        if delay_ms < 0:
            raise ValueError("Delay cannot be negative")
        task = ScheduledTask(self._now + delay_ms, next(self._sequence), callback)
        heapq.heappush(self._queue, task)
        return task

    def next_due(self) -> Optional[int]:
        """Due time of the earliest live task, or None when idle."""
        self._drop_cancelled()
        if not self._queue:
            return None
        return self._queue[0].due_ms

    @property
    def pending_count(self) -> int:
        """Number of live tasks."""
        return sum(1 for task in self._queue if task.pending)

    def advance(self, delta_ms: int) -> int:
        """
        Move time forward and run every callback that falls due.

        Returns:
            Number of callbacks run.
        """
        if delta_ms < 0:
            raise ValueError("Cannot move the clock backwards")
        target = self._now + delta_ms
        ran = 0
        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0].due_ms > target:
                break
            task = heapq.heappop(self._queue)
            self._now = task.due_ms
            task._run()
            ran += 1
        self._now = target
        return ran

    def run_until_idle(self, limit_ms: int = 60_000) -> int:
        """Advance until no task is pending or limit_ms has passed."""
        deadline = self._now + limit_ms
        ran = 0
        while True:
            due = self.next_due()
            if due is None or due > deadline:
                break
            ran += self.advance(due - self._now)
        return ran

    def _drop_cancelled(self) -> None:
        while self._queue and not self._queue[0].pending:
            heapq.heappop(self._queue)


# ============================================================================
# Task Group
# ============================================================================

class TaskGroup:
    """
    All outstanding tasks of one owner, cancelled together.

    A session and a demo each own one group; tearing the owner down is a
    single cancel_all() call.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._tasks: Set[ScheduledTask] = set()

    def call_later(self, delay_ms: int, callback: Callback) -> ScheduledTask:
        """Schedule a callback and track its handle."""
        task: Optional[ScheduledTask] = None

        def run() -> None:
            self._tasks.discard(task)
            callback()

        task = self._clock.call_later(delay_ms, run)
        self._tasks.add(task)
        return task

    def cancel(self, task: Optional[ScheduledTask]) -> None:
        """Cancel one tracked task."""
        if task is None:
            return
        task.cancel()
        self._tasks.discard(task)

    def cancel_all(self) -> int:
        """
        Cancel every tracked task.

        Returns:
            Number of tasks that were still pending.
        """
        cancelled = 0
        for task in self._tasks:
            if task.pending:
                cancelled += 1
            task.cancel()
        self._tasks.clear()
        return cancelled

    def __len__(self) -> int:
        return sum(1 for task in self._tasks if task.pending)


# ============================================================================
# Real-time Driver
# ============================================================================

class RealtimeDriver:
    """
    Advances a Clock in step with the wall clock.

    Used by the terminal front end; tests drive the Clock directly.
    """

    def __init__(
        self,
        clock: Clock,
        speed: float = 1.0,
        time_fn: Callable[[], float] = time.monotonic,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        if speed <= 0:
            raise ValueError("Speed must be positive")
        self.clock = clock
        self.speed = speed
        self._time_fn = time_fn
        self._sleep_fn = sleep_fn
        self._last = time_fn()
        self._carry_ms = 0.0

    def sync(self) -> int:
        """Catch the clock up with elapsed wall time."""
        now = self._time_fn()
        self._carry_ms += (now - self._last) * 1000.0 * self.speed
        self._last = now
        step = int(self._carry_ms)
        self._carry_ms -= step
        return self.clock.advance(step)

    def run_while(
        self, condition: Callable[[], bool], poll_seconds: float = 0.05
    ) -> None:
        """Keep the clock running until condition() turns false."""
        while condition():
            self.sync()
            if not condition():
                break
            self._sleep_fn(poll_seconds)

    def run_for(self, duration_ms: int, poll_seconds: float = 0.05) -> None:
        """Keep the clock running for duration_ms of virtual time."""
        deadline = self.clock.now_ms + duration_ms
        self.run_while(lambda: self.clock.now_ms < deadline, poll_seconds)

import logging
import time
from typing import Callable, List

logger = logging.getLogger(__name__)


class TickHandle:
    """Cancelable handle for one repeating tick schedule."""

    def __init__(self, callback: Callable[[], None], interval_ms: int, name: str = '') -> None:
        self.callback = callback
        self.interval_ms = interval_ms
        self.name = name
        self.cancelled = False
        self.due_ms = 0

    def cancel(self) -> None:
        self.cancelled = True


class SocketIOScheduler:
    """Runs each schedule as a Socket.IO background task paced by ``socketio.sleep``.

    ``socketio.sleep`` cooperates with eventlet/gevent when those async modes are
    in use and falls back to ``time.sleep`` in threading mode.
    """

    def __init__(self, socketio, clock: Callable[[], float] = time.monotonic) -> None:
        self._socketio = socketio
        self._clock = clock

    def now(self) -> float:
        return self._clock()

    def schedule_repeating(self, callback: Callable[[], None], interval_ms: int, name: str = '') -> TickHandle:
        handle = TickHandle(callback, interval_ms, name)
        self._socketio.start_background_task(self._worker, handle)
        return handle

    def _worker(self, handle: TickHandle) -> None:
        delay = handle.interval_ms / 1000.0
        logger.debug(f"[tick-task] name={handle.name} interval={handle.interval_ms}ms started")
        while not handle.cancelled:
            self._socketio.sleep(delay)
            if handle.cancelled:
                break
            handle.callback()
        logger.debug(f"[tick-task] name={handle.name} finished")


class ManualScheduler:
    """Deterministic scheduler: ticks fire only when ``advance`` is called.

    Used when the app runs with ``TESTING`` so countdowns can be driven
    synchronously, one simulated millisecond at a time.
    """

    def __init__(self) -> None:
        self._now_ms = 0
        self._tasks: List[TickHandle] = []

    def now(self) -> float:
        return self._now_ms / 1000.0

    @property
    def active_tasks(self) -> List[TickHandle]:
        return [t for t in self._tasks if not t.cancelled]

    def schedule_repeating(self, callback: Callable[[], None], interval_ms: int, name: str = '') -> TickHandle:
        handle = TickHandle(callback, interval_ms, name)
        handle.due_ms = self._now_ms + interval_ms
        self._tasks.append(handle)
        return handle

    def advance(self, ms: int) -> None:
        """Move simulated time forward, firing every tick that falls due on the way."""
        target = self._now_ms + ms
        while True:
            due = [t for t in self.active_tasks if t.due_ms <= target]
            if not due:
                break
            task = min(due, key=lambda t: t.due_ms)
            self._now_ms = task.due_ms
            task.due_ms += task.interval_ms
            task.callback()
        self._now_ms = target
        self._tasks = self.active_tasks

    def run_until_idle(self, limit_ms: int = 3_600_000) -> int:
        """Advance until no schedule is left running. Returns simulated ms elapsed."""
        start = self._now_ms
        while self.active_tasks and self._now_ms - start < limit_ms:
            step = min(t.due_ms for t in self.active_tasks) - self._now_ms
            self.advance(max(step, 0))
        return self._now_ms - start

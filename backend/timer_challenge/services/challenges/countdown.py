"""Countdown engine for a single timer challenge.

Phases::

    idle --start--> running --stop--> stopped --reset--> idle
                       |
                       +--(remaining hits 0)--> expired --reset--> idle

Every change of the remaining value goes through ``_set_time_remaining``,
which re-checks expiry, so a countdown can never sit at zero while its
schedule is still alive.
"""

import logging
import re
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .errors import ChallengeStateError
from .result import ResultModal
from .scoring import total_ms

logger = logging.getLogger(__name__)

IDLE = 'idle'
RUNNING = 'running'
STOPPED = 'stopped'
EXPIRED = 'expired'

TICK_MODES = ('fixed', 'elapsed')


def slugify(title: str) -> str:
    return re.sub(r'[^a-z0-9]+', '-', title.lower()).strip('-') or 'challenge'


def _format_seconds(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass(frozen=True)
class ChallengeConfig:
    title: str
    target_time: float
    key: str = field(default='')

    def __post_init__(self):
        if not self.target_time > 0:
            raise ValueError(f'target_time must be positive, got {self.target_time!r}')
        if not self.key:
            object.__setattr__(self, 'key', slugify(self.title))

    @property
    def total_ms(self) -> int:
        return total_ms(self.target_time)

    @property
    def target_label(self) -> str:
        return f"{_format_seconds(self.target_time)} second{'s' if self.target_time > 1 else ''}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'title': self.title,
            'target_time': self.target_time,
            'target_label': self.target_label,
        }


class TimerChallenge:
    def __init__(self, config: ChallengeConfig, scheduler, surface,
                 tick_interval_ms: int = 10, tick_mode: str = 'fixed', heartbeat_sec: int = 0,
                 on_change: Optional[Callable[['TimerChallenge'], None]] = None) -> None:
        if tick_mode not in TICK_MODES:
            raise ValueError(f'tick_mode must be one of {TICK_MODES}, got {tick_mode!r}')
        if tick_interval_ms <= 0:
            raise ValueError('tick_interval_ms must be positive')
        self.config = config
        self.tick_interval_ms = tick_interval_ms
        self.tick_mode = tick_mode
        self._scheduler = scheduler
        self._on_change = on_change
        self._heartbeat_every = (heartbeat_sec * 1000) // tick_interval_ms if heartbeat_sec > 0 else 0
        # Scheduler ticks may arrive on a background thread
        self._lock = threading.RLock()
        self._timer = None
        # bumped on every schedule start and cancel; ticks carry the value they were scheduled with
        self._generation = 0
        self._phase = IDLE
        self._time_remaining = config.total_ms
        self._ticks = 0
        self._last_tick_at = 0.0
        self._carry_ms = 0.0

        self._dialog = ResultModal(
            surface,
            config.target_time,
            remaining_time=lambda: self._time_remaining,
            on_reset=self.reset,
        )
        self._dialog_handle = self._dialog.handle

    @property
    def key(self) -> str:
        return self.config.key

    @property
    def phase(self) -> str:
        return self._phase

    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def timer_is_active(self) -> bool:
        return 0 < self._time_remaining < self.config.total_ms

    @property
    def result_open(self) -> bool:
        return self._dialog.visible

    @property
    def button_label(self) -> str:
        return f"{'Stop' if self.timer_is_active else 'Start'} Challenge"

    @property
    def status_text(self) -> str:
        return 'Time is running...' if self.timer_is_active else 'Timer inactive'

    @property
    def action(self) -> str:
        return 'stop' if self.timer_is_active else 'start'

    def start(self) -> bool:
        """Begin the countdown. Returns False if a schedule is already running."""
        with self._lock:
            if self._phase == RUNNING:
                logger.info(f"[timer-skip] challenge={self.key} already running")
                return False
            if self._phase != IDLE:
                raise ChallengeStateError(f"cannot start challenge '{self.key}' while {self._phase}")
            self._phase = RUNNING
            self._ticks = 0
            self._carry_ms = 0.0
            self._last_tick_at = self._scheduler.now()
            self._generation += 1
            generation = self._generation
            self._timer = self._scheduler.schedule_repeating(
                lambda: self.tick(generation), self.tick_interval_ms, name=self.key
            )
            logger.info(
                f"[timer-start] challenge={self.key} target={self.config.target_time}s mode={self.tick_mode}"
            )
        self._notify()
        return True

    def stop(self) -> None:
        with self._lock:
            if self._phase != RUNNING:
                raise ChallengeStateError(f"cannot stop challenge '{self.key}' while {self._phase}")
            self._clear_timer()
            self._phase = STOPPED
            logger.info(f"[timer-stop] challenge={self.key} remaining={self._time_remaining}ms")
            self._dialog_handle.open()
        self._notify()

    def reset(self) -> None:
        with self._lock:
            if self._phase not in (STOPPED, EXPIRED):
                raise ChallengeStateError(f"cannot reset challenge '{self.key}' while {self._phase}")
            self._dialog.close()
            self._phase = IDLE
            self._set_time_remaining(self.config.total_ms)
            logger.info(f"[timer-reset] challenge={self.key}")
        self._notify()

    def dismiss_result(self) -> None:
        """Confirm on the result modal; resets the countdown through the modal."""
        self._dialog.dismiss()

    def tick(self, generation: Optional[int] = None) -> None:
        """Apply one decrement. ``generation`` identifies the schedule that fired;
        ticks from a schedule other than the current one are dropped."""
        with self._lock:
            if self._phase != RUNNING:
                return
            if generation is not None and generation != self._generation:
                # late tick from a schedule cancelled in the meantime
                return
            self._ticks += 1
            if self._heartbeat_every and self._ticks % self._heartbeat_every == 0:
                logger.info(f"[timer-heartbeat] challenge={self.key} remaining={self._time_remaining}ms")
            before = (self._phase, self.timer_is_active)
            self._set_time_remaining(self._time_remaining - self._step())
            changed = before != (self._phase, self.timer_is_active)
        if changed:
            self._notify()

    def close(self) -> None:
        """Tear down: cancel any running schedule. Used when the owning session ends."""
        with self._lock:
            self._clear_timer()

    def to_dict(self) -> Dict[str, Any]:
        data = self.config.to_dict()
        data.update({
            'phase': self._phase,
            'time_remaining': self._time_remaining,
            'timer_is_active': self.timer_is_active,
            'button_label': self.button_label,
            'status_text': self.status_text,
            'action': self.action,
            'result_open': self.result_open,
        })
        return data

    def _step(self) -> int:
        if self.tick_mode == 'fixed':
            return self.tick_interval_ms
        now = self._scheduler.now()
        elapsed = round((now - self._last_tick_at) * 1000.0 + self._carry_ms, 6)
        self._last_tick_at = now
        steps = int(elapsed // self.tick_interval_ms)
        self._carry_ms = elapsed - steps * self.tick_interval_ms
        return steps * self.tick_interval_ms

    def _set_time_remaining(self, value: int) -> None:
        self._time_remaining = max(0, min(self.config.total_ms, value))
        self._recompute()

    def _recompute(self) -> None:
        if self._time_remaining <= 0 and self._phase == RUNNING:
            self._clear_timer()
            self._phase = EXPIRED
            logger.info(f"[timer-expire] challenge={self.key}")
            self._dialog_handle.open()

    def _clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            self._generation += 1

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

"""Hold the completion result on screen, then trigger a reset."""

from __future__ import annotations

from typing import Callable

from regkiosk.channels import Scheduler, TimerHandle
from regkiosk.config import COMPLETION_DELAY_S


class CompletionTimer:
    """A single-shot, per-session reset timer."""

    def __init__(self, schedule: Scheduler, duration: float = COMPLETION_DELAY_S) -> None:
        self._schedule = schedule
        self.duration = duration
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def start(self, on_elapsed: Callable[[], None], duration: float | None = None) -> None:
        self.cancel()
        delay = self.duration if duration is None else duration

        def fire() -> None:
            self._handle = None
            on_elapsed()

        self._handle = self._schedule(delay, fire)

    def cancel(self) -> None:
        if self._handle is None:
            return
        self._handle.stop()
        self._handle = None

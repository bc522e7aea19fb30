"""Exclusive focus ownership for the two scanner capture fields."""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Protocol

from regkiosk.config import REFOCUS_DELAY_S
from regkiosk.models import Channel

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def stop(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


class CaptureSurface(Protocol):
    """The widget layer that actually holds keyboard focus."""

    def focus_channel(self, channel: Channel) -> None: ...

    def clear_channel(self, channel: Channel) -> None: ...


class InputChannelManager:
    """Tracks which capture channel owns focus and takes it back after a blur.

    Only this class decides which channel is active. A blur of the active
    channel schedules a re-focus after ``refocus_delay`` seconds; the pending
    re-focus is a no-op if ownership moved in the meantime.
    """

    def __init__(
        self,
        surface: CaptureSurface,
        schedule: Scheduler,
        refocus_delay: float = REFOCUS_DELAY_S,
    ) -> None:
        self._surface = surface
        self._schedule = schedule
        self._refocus_delay = refocus_delay
        self._active: Channel | None = None
        self._buffers: dict[Channel, str] = {channel: "" for channel in Channel}
        self._listeners: list[Callable[[Channel, str], None]] = []

    @property
    def active(self) -> Channel | None:
        return self._active

    def buffer(self, channel: Channel) -> str:
        return self._buffers[channel]

    def subscribe(self, listener: Callable[[Channel, str], None]) -> None:
        self._listeners.append(listener)

    def activate(self, channel: Channel) -> None:
        """Make ``channel`` the sole focus owner. Buffers are left untouched."""
        if self._active is not channel:
            logger.debug("focus owner %s -> %s", self._active, channel)
        self._active = channel
        self._surface.focus_channel(channel)

    def release(self) -> None:
        """Leave no channel owning focus (capture surface hidden)."""
        self._active = None

    def clear(self, channel: Channel) -> None:
        self._buffers[channel] = ""
        self._surface.clear_channel(channel)

    def on_blur(self, channel: Channel) -> None:
        if channel is not self._active:
            return
        self._schedule(self._refocus_delay, partial(self._refocus, channel))

    def on_input(self, channel: Channel, text: str) -> None:
        self._buffers[channel] = text
        for listener in self._listeners:
            listener(channel, text)

    def _refocus(self, channel: Channel) -> None:
        # Superseded if another channel was activated (or focus released) first.
        if self._active is not channel:
            return
        self._surface.focus_channel(channel)

# tests/conftest.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import pytest

from regkiosk.channels import InputChannelManager
from regkiosk.completion import CompletionTimer
from regkiosk.models import Channel, SubmissionOutcome, SubmissionRequest
from regkiosk.session import SessionStateMachine


@dataclass
class FakeTimer:
    delay: float
    callback: Callable[[], None]
    stopped: bool = False
    fired: bool = False

    def stop(self) -> None:
        self.stopped = True


class FakeScheduler:
    """Collects timers instead of running them; tests fire them explicitly."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.stopped and not t.fired]

    def fire_all(self) -> None:
        for timer in self.pending:
            timer.fired = True
            timer.callback()


class FakeSurface:
    def __init__(self) -> None:
        self.focus_calls: list[Channel] = []
        self.clear_calls: list[Channel] = []

    def focus_channel(self, channel: Channel) -> None:
        self.focus_calls.append(channel)

    def clear_channel(self, channel: Channel) -> None:
        self.clear_calls.append(channel)


class FakeGateway:
    """Returns queued outcomes in order and records every request."""

    def __init__(self, *outcomes: SubmissionOutcome) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[SubmissionRequest] = []
        self.closed = False

    async def submit(self, request: SubmissionRequest) -> SubmissionOutcome:
        self.requests.append(request)
        return self.outcomes.pop(0)

    async def aclose(self) -> None:
        self.closed = True


class Spawner:
    """Stands in for the UI worker pool: keeps spawned work until drained."""

    def __init__(self) -> None:
        self.pending: list[Awaitable[None]] = []

    def __call__(self, work: Awaitable[None]) -> None:
        self.pending.append(work)

    async def drain(self) -> None:
        while self.pending:
            await self.pending.pop(0)


@dataclass
class SessionRig:
    machine: SessionStateMachine
    channels: InputChannelManager
    surface: FakeSurface
    scheduler: FakeScheduler
    gateway: FakeGateway
    spawner: Spawner
    duplicate_prompts: list[str] = field(default_factory=list)
    outcomes: list[tuple[SubmissionRequest, SubmissionOutcome]] = field(default_factory=list)

    def scan_qr(self, text: str) -> None:
        self.channels.on_input(Channel.QR, text)

    def type_queue(self, text: str) -> None:
        # Scanners deliver one keystroke at a time.
        for idx in range(1, len(text) + 1):
            self.channels.on_input(Channel.QUEUE, text[:idx])


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def make_session(scheduler: FakeScheduler, surface: FakeSurface):
    def factory(*outcomes: SubmissionOutcome) -> SessionRig:
        gateway = FakeGateway(*outcomes)
        spawner = Spawner()
        channels = InputChannelManager(surface, scheduler, refocus_delay=0.1)
        prompts: list[str] = []
        recorded: list[tuple[SubmissionRequest, SubmissionOutcome]] = []
        machine = SessionStateMachine(
            gateway,
            channels,
            CompletionTimer(scheduler, 5.0),
            spawner,
            on_duplicate=prompts.append,
            on_outcome=lambda req, out: recorded.append((req, out)),
        )
        machine.start()
        return SessionRig(machine, channels, surface, scheduler, gateway, spawner, prompts, recorded)

    return factory


@pytest.fixture
def blocking_gateway():
    """A gateway whose submit waits until the test releases it."""

    class BlockingGateway(FakeGateway):
        def __init__(self, *outcomes: SubmissionOutcome) -> None:
            super().__init__(*outcomes)
            self.release = asyncio.Event()

        async def submit(self, request: SubmissionRequest) -> SubmissionOutcome:
            self.requests.append(request)
            await self.release.wait()
            return self.outcomes.pop(0)

    return BlockingGateway


@pytest.fixture
def fake_gateway():
    return FakeGateway

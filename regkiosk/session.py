"""Scan-driven registration session.

A session runs QR scan -> queue number -> submit, optionally detours through
the duplicate-name confirmation, and ends in a reset back to scanning:

    SCANNING --QR terminated, decodes--> AWAITING_QUEUE_NUMBER
    SCANNING --QR terminated, invalid--> INPUT_ERROR --> SCANNING
    AWAITING_QUEUE_NUMBER --3 chars--> SUBMITTING
    SUBMITTING --Success--> COMPLETE --timer/done--> SCANNING
    SUBMITTING --DuplicateName--> DUPLICATE_CONFIRM_PENDING
    SUBMITTING --Failure--> SCANNING
    DUPLICATE_CONFIRM_PENDING --yes--> SUBMITTING (dupCheck=true)
    DUPLICATE_CONFIRM_PENDING --no/dismiss--> SCANNING

All methods run on the UI event loop. The only suspension point is the
gateway call, which is handed to ``spawn`` so input keeps being processed
while it is outstanding; input is ignored outside the states that accept it.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from regkiosk.channels import InputChannelManager
from regkiosk.completion import CompletionTimer
from regkiosk.constant import (
    TEXT_DUPLICATE_NAME,
    TEXT_GENERIC_FAILURE,
    TEXT_QR_INVALID,
    TEXT_QR_READING,
    TEXT_SUBMITTING,
)
from regkiosk.gateway import RegistrationGateway
from regkiosk.models import (
    Banner,
    Channel,
    DuplicateName,
    MessageLevel,
    RegistrationDraft,
    SessionState,
    SubmissionOutcome,
    SubmissionRequest,
    Success,
)
from regkiosk.scan_codec import DecodeError, decode_qr, is_payload_terminated, is_queue_number_complete

logger = logging.getLogger(__name__)

Spawner = Callable[[Awaitable[None]], object]
OutcomeHook = Callable[[SubmissionRequest, SubmissionOutcome], None]

# States in which one capture channel must own focus.
CAPTURE_STATES = frozenset({SessionState.SCANNING, SessionState.AWAITING_QUEUE_NUMBER})


class SessionStateMachine:
    """Owns the single active ``SessionState`` and all session-scoped data."""

    def __init__(
        self,
        gateway: RegistrationGateway,
        channels: InputChannelManager,
        completion_timer: CompletionTimer,
        spawn: Spawner,
        *,
        on_update: Callable[[], None] | None = None,
        on_duplicate: Callable[[str], None] | None = None,
        on_outcome: OutcomeHook | None = None,
    ) -> None:
        self.gateway = gateway
        self.channels = channels
        self.completion_timer = completion_timer
        self._spawn = spawn
        self._on_update = on_update
        self._on_duplicate = on_duplicate
        self._on_outcome = on_outcome

        self.state = SessionState.SCANNING
        self.draft: RegistrationDraft | None = None
        self.queue_number = ""
        self.banner: Banner | None = None
        self.room_id = ""
        self.duplicate_message = ""
        self.last_request: SubmissionRequest | None = None
        self._in_flight = False

        channels.subscribe(self.handle_input)

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def start(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Clear every session-scoped value and return to scanning."""
        if self.state is SessionState.SUBMITTING:
            logger.warning("reset ignored while a submission is outstanding")
            return
        self.completion_timer.cancel()
        self.banner = None
        self._discard_session()
        self._scan_ready()

    def handle_input(self, channel: Channel, text: str) -> None:
        if channel is Channel.QR and self.state is SessionState.SCANNING:
            self._on_qr_buffer(text)
        elif channel is Channel.QUEUE and self.state is SessionState.AWAITING_QUEUE_NUMBER:
            self._on_queue_buffer(text)

    def resolve_duplicate(self, confirmed: bool) -> None:
        """Relay the operator's answer to the duplicate-name prompt."""
        if self.state is not SessionState.DUPLICATE_CONFIRM_PENDING:
            return
        if confirmed:
            logger.info("duplicate confirmed, resubmitting with override")
            self._submit(duplicate_override=True)
            return
        logger.info("duplicate declined, discarding session")
        self.banner = None
        self._discard_session()
        self._scan_ready()

    def _on_qr_buffer(self, text: str) -> None:
        if not is_payload_terminated(text):
            return
        try:
            draft = decode_qr(text)
        except DecodeError as exc:
            logger.warning("QR decode failed: %s", exc)
            self.banner = Banner(TEXT_QR_INVALID, MessageLevel.ERROR)
            self._enter(SessionState.INPUT_ERROR)
            self.channels.clear(Channel.QR)
            self._scan_ready()
            return

        self.draft = draft
        self.banner = Banner(TEXT_QR_READING, MessageLevel.INFO)
        self.channels.clear(Channel.QUEUE)
        self._enter(SessionState.AWAITING_QUEUE_NUMBER)
        self.channels.activate(Channel.QUEUE)

    def _on_queue_buffer(self, text: str) -> None:
        if not is_queue_number_complete(text):
            return
        self.queue_number = text
        self._submit(duplicate_override=False)

    def _submit(self, duplicate_override: bool) -> None:
        if self.draft is None:
            raise RuntimeError("cannot submit without a registration draft")
        if self._in_flight:
            # Refused before any transition, so the current state keeps its exits.
            logger.error("submission for %r refused: another request is in flight", self.draft.group_name)
            return
        self._in_flight = True
        request = SubmissionRequest.from_draft(self.draft, self.queue_number, duplicate_override)
        self.last_request = request
        self.channels.release()
        self.banner = Banner(TEXT_SUBMITTING, MessageLevel.INFO)
        self._enter(SessionState.SUBMITTING)
        self._spawn(self._run_submission(request))

    async def _run_submission(self, request: SubmissionRequest) -> None:
        try:
            outcome = await self.gateway.submit(request)
        finally:
            self._in_flight = False

        if self._on_outcome is not None:
            self._on_outcome(request, outcome)
        self._resolve(request, outcome)

    def _resolve(self, request: SubmissionRequest, outcome: SubmissionOutcome) -> None:
        if isinstance(outcome, Success):
            self.room_id = outcome.room_id
            self.banner = Banner(outcome.message, MessageLevel.SUCCESS)
            self._enter(SessionState.COMPLETE)
            self.completion_timer.start(self._on_completion_elapsed)
            return

        # The override retry gets one chance; a second collision is a plain failure.
        if isinstance(outcome, DuplicateName) and not request.duplicate_override:
            self.duplicate_message = outcome.message
            self.banner = Banner(TEXT_DUPLICATE_NAME, MessageLevel.WARNING)
            self._enter(SessionState.DUPLICATE_CONFIRM_PENDING)
            if self._on_duplicate is not None:
                self._on_duplicate(outcome.message)
            return

        logger.warning("registration failed for %r: %s", request.group_name, outcome.message)
        self.banner = Banner(outcome.message or TEXT_GENERIC_FAILURE, MessageLevel.ERROR)
        self._discard_session()
        self._scan_ready()

    def _on_completion_elapsed(self) -> None:
        if self.state is SessionState.COMPLETE:
            self.reset()

    def _discard_session(self) -> None:
        self.draft = None
        self.queue_number = ""
        self.room_id = ""
        self.duplicate_message = ""
        self.channels.clear(Channel.QR)
        self.channels.clear(Channel.QUEUE)

    def _scan_ready(self) -> None:
        self._enter(SessionState.SCANNING)
        self.channels.activate(Channel.QR)

    def _enter(self, state: SessionState) -> None:
        if state is not self.state:
            logger.info("session %s -> %s", self.state.value, state.value)
        self.state = state
        if state not in CAPTURE_STATES:
            self.channels.release()
        if self._on_update is not None:
            self._on_update()

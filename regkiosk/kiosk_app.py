"""Main Textual app class."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Awaitable

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.widgets import Button, ContentSwitcher, Header, Input, LoadingIndicator, Static

from regkiosk.channels import InputChannelManager
from regkiosk.completion import CompletionTimer
from regkiosk.config import COMPLETION_DELAY_S, QUEUE_NUMBER_LENGTH, REFOCUS_DELAY_S
from regkiosk.constant import PROMPT_BY_VIEW
from regkiosk.duplicate_modal import DuplicateNameModal
from regkiosk.gateway import RegistrationGateway
from regkiosk.models import Channel, SessionState, SubmissionOutcome, SubmissionRequest
from regkiosk.persistence import bootstrap_schema, recent_submissions, record_submission
from regkiosk.rendering import format_banner, format_summary
from regkiosk.session import SessionStateMachine

logger = logging.getLogger(__name__)

VIEW_BY_STATE: dict[SessionState, str] = {
    SessionState.SCANNING: "scan-view",
    SessionState.INPUT_ERROR: "scan-view",
    SessionState.AWAITING_QUEUE_NUMBER: "queue-view",
    SessionState.SUBMITTING: "summary-view",
    SessionState.DUPLICATE_CONFIRM_PENDING: "summary-view",
    SessionState.COMPLETE: "summary-view",
}


class RegistrationKioskApp(App):
    """An unattended terminal that registers a player group from two scans."""

    TITLE = "QR Group Registration"
    SUB_TITLE = "Scan QR, then queue ticket"

    CSS = """
    Screen {
        layout: vertical;
        align: center middle;
    }

    #banner {
        height: auto;
        margin: 1 2;
    }

    #views {
        height: 1fr;
        border: round $primary;
        padding: 1 2;
    }

    .view {
        align: center middle;
    }

    .prompt {
        text-align: center;
        margin-top: 1;
        width: 100%;
    }

    #qr-input {
        width: 1;
        height: 1;
        border: none;
        padding: 0;
        background: $background;
        color: $background;
    }

    #queue-input {
        width: 24;
    }

    #summary {
        width: auto;
        margin-bottom: 1;
    }

    #submit-spinner {
        height: 3;
    }
    """

    BINDINGS = [
        Binding("ctrl+r", "reset_session", "Reset", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        gateway: RegistrationGateway | None = None,
        *,
        completion_delay: float = COMPLETION_DELAY_S,
        refocus_delay: float = REFOCUS_DELAY_S,
        db_path: str | Path | None = None,
        journal: bool = True,
    ) -> None:
        super().__init__()
        self.gateway = gateway or RegistrationGateway()
        self.db_path = db_path
        self.journal = journal
        self.channels = InputChannelManager(self, self.set_timer, refocus_delay=refocus_delay)
        self.session = SessionStateMachine(
            self.gateway,
            self.channels,
            CompletionTimer(self.set_timer, completion_delay),
            spawn=self._spawn_submission,
            on_update=self._refresh_all,
            on_duplicate=self._open_duplicate_prompt,
            on_outcome=self._record_outcome,
        )

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="banner")
        with ContentSwitcher(initial="scan-view", id="views"):
            with Vertical(id="scan-view", classes="view"):
                yield LoadingIndicator(id="scan-spinner")
                yield Input(id="qr-input", compact=True)
                yield Static(PROMPT_BY_VIEW["scan-view"], classes="prompt")
            with Vertical(id="queue-view", classes="view"):
                yield Input(
                    id="queue-input",
                    placeholder="Enter the 3-digit number",
                    restrict=r"[0-9]*",
                    max_length=QUEUE_NUMBER_LENGTH,
                )
                yield Static(PROMPT_BY_VIEW["queue-view"], classes="prompt")
            with Vertical(id="summary-view", classes="view"):
                yield Static(id="summary")
                yield LoadingIndicator(id="submit-spinner")
                yield Button("Done", id="done-button", variant="success")

    def on_mount(self) -> None:
        if self.journal:
            try:
                bootstrap_schema(self.db_path)
                last = recent_submissions(limit=1, db_path=self.db_path)
            except (sqlite3.Error, OSError):
                logger.exception("submission journal unavailable, continuing without it")
                self.journal = False
            else:
                if last:
                    logger.info(
                        "journal ready, last submission #%d %s group=%r queue=%s at %s",
                        last[0].id,
                        last[0].outcome,
                        last[0].group_name,
                        last[0].queue_number,
                        last[0].created_at,
                    )
                else:
                    logger.info("journal ready, no submissions recorded yet")
        self.session.start()

    async def on_unmount(self) -> None:
        await self.gateway.aclose()

    # Capture surface used by InputChannelManager.

    def focus_channel(self, channel: Channel) -> None:
        try:
            self._channel_input(channel).focus()
        except NoMatches:
            return

    def clear_channel(self, channel: Channel) -> None:
        try:
            self._channel_input(channel).value = ""
        except NoMatches:
            return

    def on_input_changed(self, event: Input.Changed) -> None:
        channel = self._channel_for(event.input)
        if channel is not None:
            self.channels.on_input(channel, event.value)

    def on_input_blurred(self, event: Input.Blurred) -> None:
        channel = self._channel_for(event.input)
        if channel is not None:
            self.channels.on_blur(channel)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "done-button":
            self.session.reset()

    def action_reset_session(self) -> None:
        # An open prompt is answered "no" so the decline path does the reset.
        if isinstance(self.screen, DuplicateNameModal):
            self.screen.dismiss(False)
            return
        self.session.reset()

    def _channel_input(self, channel: Channel) -> Input:
        return self.query_one(f"#{channel.value}-input", Input)

    def _channel_for(self, widget: Input) -> Channel | None:
        if widget.id == "qr-input":
            return Channel.QR
        if widget.id == "queue-input":
            return Channel.QUEUE
        return None

    def _spawn_submission(self, work: Awaitable[None]) -> None:
        self.run_worker(work, name="submission", group="submission", exit_on_error=False)

    def _open_duplicate_prompt(self, message: str) -> None:
        self.push_screen(
            DuplicateNameModal(message),
            callback=lambda confirmed: self.session.resolve_duplicate(bool(confirmed)),
        )

    def _record_outcome(self, request: SubmissionRequest, outcome: SubmissionOutcome) -> None:
        if not self.journal:
            return
        try:
            record_submission(request, outcome, self.db_path)
        except (sqlite3.Error, OSError):
            logger.exception("failed to journal submission for %r", request.group_name)

    def _refresh_all(self) -> None:
        try:
            banner = self.query_one("#banner", Static)
            switcher = self.query_one("#views", ContentSwitcher)
        except NoMatches:
            return

        session = self.session
        shown_room = session.room_id if session.state is SessionState.COMPLETE else ""
        banner.update(format_banner(session.banner, shown_room))
        banner.display = session.banner is not None

        view = VIEW_BY_STATE[session.state]
        switcher.current = view
        if view == "summary-view":
            self._refresh_summary()

    def _refresh_summary(self) -> None:
        session = self.session
        self.query_one("#summary", Static).update(format_summary(session.draft, session.room_id))
        self.query_one("#submit-spinner", LoadingIndicator).display = session.state is SessionState.SUBMITTING
        self.query_one("#done-button", Button).display = session.state is SessionState.COMPLETE

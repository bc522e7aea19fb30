"""Duplicate group-name confirmation modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from regkiosk.constant import TEXT_DUPLICATE_NAME


class DuplicateNameModal(ModalScreen[bool]):
    """Ask the operator whether a colliding group name is a returning group.

    Dismisses with ``True`` to resubmit with the override flag, ``False`` to
    abandon the session.
    """

    BINDINGS = [
        ("y", "confirm", "Yes"),
        ("n", "decline", "No"),
        ("escape", "decline", "Close"),
    ]

    CSS = """
    DuplicateNameModal {
        align: center middle;
        background: $background 60%;
    }

    #duplicate-dialog {
        width: 64;
        height: auto;
        border: round $warning;
        background: $panel;
        padding: 1 2;
    }

    #duplicate-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #duplicate-body {
        color: white;
        margin-bottom: 1;
    }

    #duplicate-detail {
        color: #dddddd;
        margin-bottom: 1;
    }

    #duplicate-actions {
        height: auto;
        align: right middle;
    }

    #duplicate-actions Button {
        margin-left: 2;
    }
    """

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Container(id="duplicate-dialog"):
            yield Static("Duplicate group name", id="duplicate-title")
            yield Static(TEXT_DUPLICATE_NAME, id="duplicate-body")
            yield Static(self.message, id="duplicate-detail")
            with Horizontal(id="duplicate-actions"):
                yield Button("Yes", id="duplicate-yes", variant="primary")
                yield Button("No", id="duplicate-no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(event.button.id == "duplicate-yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_decline(self) -> None:
        self.dismiss(False)

"""Editable operator-facing text and banner styling."""

from __future__ import annotations

from regkiosk.models import MessageLevel

TEXT_QR_READING = "Reading QR code..."
TEXT_QR_INVALID = "The QR code content is not valid."
TEXT_SUBMITTING = "Registering group..."
TEXT_GENERIC_FAILURE = "An error occurred while registering. Please try again."
TEXT_DUPLICATE_NAME = (
    "A group with the same name already exists. If this group has played before, "
    "choose Yes. If not, choose No and scan again with a new group name."
)

PROMPT_BY_VIEW: dict[str, str] = {
    "scan-view": "Please scan the QR code...",
    "queue-view": "Please scan the 3-digit barcode...",
}

BANNER_STYLE_BY_LEVEL: dict[MessageLevel, str] = {
    MessageLevel.INFO: "bold #ffffff on #2f6db5",
    MessageLevel.SUCCESS: "bold #0b1f0f on #5fbf72",
    MessageLevel.WARNING: "bold #1f1600 on #e0b040",
    MessageLevel.ERROR: "bold #ffffff on #b23a48",
}

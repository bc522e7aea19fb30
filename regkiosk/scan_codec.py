"""Parsing of raw scanner text into registration data."""

from __future__ import annotations

import json

from regkiosk.config import MAX_DIFFICULTY, QR_TERMINAL_MARKER, QUEUE_NUMBER_LENGTH
from regkiosk.models import RegistrationDraft

INVALID_PAYLOAD = "InvalidPayload"


class DecodeError(ValueError):
    """Raised when a QR payload cannot be turned into a complete draft."""

    def __init__(self, detail: str, reason: str = INVALID_PAYLOAD) -> None:
        super().__init__(f"{reason}: {detail}")
        self.reason = reason
        self.detail = detail


def is_payload_terminated(buffer: str) -> bool:
    """Whether the QR buffer ends with the closing payload delimiter."""
    return buffer.endswith(QR_TERMINAL_MARKER)


def is_queue_number_complete(buffer: str) -> bool:
    """True exactly when the buffer holds a full queue number.

    Digit validity is enforced by the capture field, not here.
    """
    return len(buffer) == QUEUE_NUMBER_LENGTH


def _optional_int(payload: dict, key: str, low: int, high: int | None) -> int:
    value = payload.get(key)
    if value is None:
        return 1
    # bool is an int subclass; a true/false flag is not a count.
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{key} must be an integer, got {value!r}")
    if value < low or (high is not None and value > high):
        raise DecodeError(f"{key} out of range: {value}")
    return value


def decode_qr(raw: str) -> RegistrationDraft:
    """Parse a scanned QR payload into a draft or raise ``DecodeError``.

    The payload is JSON of the shape ``{"groupName": str, "members"?: int,
    "difficulty"?: int}``. Extra keys are ignored; missing numeric fields
    default to 1. Nothing is returned unless every field validates.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"not valid JSON ({exc})") from exc

    if not isinstance(payload, dict):
        raise DecodeError("payload is not an object")

    group_name = payload.get("groupName")
    if not isinstance(group_name, str) or not group_name.strip():
        raise DecodeError("groupName is missing or empty")

    return RegistrationDraft(
        group_name=group_name,
        member_count=_optional_int(payload, "members", 1, None),
        difficulty_level=_optional_int(payload, "difficulty", 1, MAX_DIFFICULTY),
    )

"""Domain models for the registration kiosk."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SessionState(str, Enum):
    SCANNING = "scanning"
    AWAITING_QUEUE_NUMBER = "awaiting_queue_number"
    SUBMITTING = "submitting"
    DUPLICATE_CONFIRM_PENDING = "duplicate_confirm_pending"
    COMPLETE = "complete"
    INPUT_ERROR = "input_error"


class Channel(str, Enum):
    """A virtual capture field receiving scanner keystrokes."""

    QR = "qr"
    QUEUE = "queue"


class MessageLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Banner:
    """An operator-facing message with a severity."""

    text: str
    level: MessageLevel


@dataclass(frozen=True)
class RegistrationDraft:
    """Group data decoded from a QR payload."""

    group_name: str
    member_count: int = 1
    difficulty_level: int = 1


@dataclass(frozen=True)
class SubmissionRequest:
    """A draft combined with its queue number, ready for the backend."""

    group_name: str
    member_count: int
    difficulty_level: int
    queue_number: str
    duplicate_override: bool = False

    @classmethod
    def from_draft(
        cls, draft: RegistrationDraft, queue_number: str, duplicate_override: bool = False
    ) -> SubmissionRequest:
        return cls(
            group_name=draft.group_name,
            member_count=draft.member_count,
            difficulty_level=draft.difficulty_level,
            queue_number=queue_number,
            duplicate_override=duplicate_override,
        )

    def to_payload(self) -> dict[str, object]:
        """Render the wire body expected by the registration endpoint."""
        return {
            "GroupName": self.group_name,
            "playerCount": self.member_count,
            "difficulty": self.difficulty_level,
            "queueNumber": self.queue_number,
            "dupCheck": self.duplicate_override,
        }


@dataclass(frozen=True)
class Success:
    room_id: str
    message: str = ""


@dataclass(frozen=True)
class DuplicateName:
    message: str


@dataclass(frozen=True)
class Failure:
    message: str


SubmissionOutcome = Success | DuplicateName | Failure

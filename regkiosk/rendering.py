"""Rendering helpers for banners and the completion summary."""

from __future__ import annotations

from rich.text import Text

from regkiosk.constant import BANNER_STYLE_BY_LEVEL
from regkiosk.models import Banner, RegistrationDraft


def format_banner(banner: Banner | None, room_id: str = "") -> Text:
    """Render the message banner, with the room id appended once known."""
    text = Text()
    if banner is None:
        return text
    text.append(f" {banner.level.value.upper()} ", style=BANNER_STYLE_BY_LEVEL[banner.level])
    text.append(f" {banner.text}")
    if room_id:
        text.append(f"  Room ID: {room_id}", style="bold")
    return text


def format_summary(draft: RegistrationDraft | None, room_id: str) -> Text:
    """Render the registered group's details for the completion view."""
    text = Text()
    if draft is None:
        return text
    rows = [
        ("Group name", draft.group_name),
        ("Members", str(draft.member_count)),
        ("Difficulty", str(draft.difficulty_level)),
        ("Room ID", room_id),
    ]
    for idx, (label, value) in enumerate(rows):
        if idx > 0:
            text.append("\n")
        text.append(f"{label}: ", style="bold")
        text.append(value)
    return text

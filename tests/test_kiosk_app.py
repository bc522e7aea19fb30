# tests/test_kiosk_app.py
from __future__ import annotations

import logging

import pytest
from textual.widgets import Button, Input

from regkiosk.duplicate_modal import DuplicateNameModal
from regkiosk.kiosk_app import RegistrationKioskApp
from regkiosk.models import Channel, DuplicateName, SessionState, SubmissionRequest, Success
from regkiosk.persistence import bootstrap_schema, recent_submissions, record_submission

ALPHA_QR = '{"groupName":"Alpha","members":4,"difficulty":2}'


async def settle(app, pilot) -> None:
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


@pytest.mark.asyncio
async def test_scan_flow_completes_and_resets(tmp_path, fake_gateway):
    gateway = fake_gateway(Success(room_id="R42", message="OK"))
    db_path = tmp_path / "journal.db"
    app = RegistrationKioskApp(gateway, completion_delay=0.2, db_path=db_path)

    async with app.run_test() as pilot:
        await pilot.pause()
        assert app.session.state is SessionState.SCANNING
        assert app.channels.active is Channel.QR
        assert app.focused is app.query_one("#qr-input", Input)

        app.query_one("#qr-input", Input).value = ALPHA_QR
        await pilot.pause()
        assert app.session.state is SessionState.AWAITING_QUEUE_NUMBER
        await pilot.pause()
        assert app.focused is app.query_one("#queue-input", Input)

        await pilot.press("0", "0", "7")
        await settle(app, pilot)

        assert gateway.requests[0].queue_number == "007"
        assert app.session.state is SessionState.COMPLETE
        assert app.session.room_id == "R42"
        assert app.query_one("#done-button", Button).display

        await pilot.pause(0.5)
        assert app.session.state is SessionState.SCANNING
        assert app.session.draft is None
        assert app.query_one("#queue-input", Input).value == ""

    assert gateway.closed
    rows = recent_submissions(db_path=db_path)
    assert [row.room_id for row in rows] == ["R42"]


@pytest.mark.asyncio
async def test_queue_channel_rejects_non_digits(tmp_path, fake_gateway):
    gateway = fake_gateway(Success(room_id="R1", message="OK"))
    app = RegistrationKioskApp(gateway, db_path=tmp_path / "journal.db")

    async with app.run_test() as pilot:
        await pilot.pause()
        app.query_one("#qr-input", Input).value = ALPHA_QR
        await pilot.pause()
        await pilot.pause()

        await pilot.press("a", "1", "x", "2")
        await pilot.pause()
        assert app.query_one("#queue-input", Input).value == "12"
        assert app.session.state is SessionState.AWAITING_QUEUE_NUMBER
        assert gateway.requests == []


@pytest.mark.asyncio
async def test_duplicate_prompt_confirm_resubmits(tmp_path, fake_gateway):
    gateway = fake_gateway(DuplicateName("dupCheck failed: Alpha"), Success(room_id="R7", message="OK"))
    app = RegistrationKioskApp(gateway, completion_delay=30, db_path=tmp_path / "journal.db")

    async with app.run_test() as pilot:
        await pilot.pause()
        app.query_one("#qr-input", Input).value = ALPHA_QR
        await pilot.pause()
        await pilot.pause()
        await pilot.press("0", "0", "7")
        await settle(app, pilot)

        assert app.session.state is SessionState.DUPLICATE_CONFIRM_PENDING
        assert isinstance(app.screen, DuplicateNameModal)

        await pilot.press("y")
        await settle(app, pilot)

        assert not isinstance(app.screen, DuplicateNameModal)
        assert [req.duplicate_override for req in gateway.requests] == [False, True]
        assert app.session.state is SessionState.COMPLETE

        await pilot.click("#done-button")
        await pilot.pause()
        assert app.session.state is SessionState.SCANNING


@pytest.mark.asyncio
async def test_duplicate_prompt_decline_returns_to_scanning(tmp_path, fake_gateway):
    gateway = fake_gateway(DuplicateName("dupCheck failed: Alpha"))
    app = RegistrationKioskApp(gateway, db_path=tmp_path / "journal.db")

    async with app.run_test() as pilot:
        await pilot.pause()
        app.query_one("#qr-input", Input).value = ALPHA_QR
        await pilot.pause()
        await pilot.pause()
        await pilot.press("1", "2", "3")
        await settle(app, pilot)
        assert isinstance(app.screen, DuplicateNameModal)

        await pilot.press("escape")
        await pilot.pause()
        await pilot.pause()

        assert app.session.state is SessionState.SCANNING
        assert app.session.draft is None
        assert app.channels.active is Channel.QR
        assert len(gateway.requests) == 1


@pytest.mark.asyncio
async def test_reset_key_with_prompt_open_declines_it(tmp_path, fake_gateway):
    gateway = fake_gateway(DuplicateName("dupCheck failed: Alpha"), Success(room_id="R7", message="OK"))
    app = RegistrationKioskApp(gateway, db_path=tmp_path / "journal.db")

    async with app.run_test() as pilot:
        await pilot.pause()
        app.query_one("#qr-input", Input).value = ALPHA_QR
        await pilot.pause()
        await pilot.pause()
        await pilot.press("0", "0", "7")
        await settle(app, pilot)
        assert isinstance(app.screen, DuplicateNameModal)

        await pilot.press("ctrl+r")
        await pilot.pause()
        await pilot.pause()

        assert not isinstance(app.screen, DuplicateNameModal)
        assert app.session.state is SessionState.SCANNING
        assert app.session.draft is None
        assert app.session.queue_number == ""
        assert app.channels.active is Channel.QR

        # With the prompt gone, a stray "y" cannot resubmit anything.
        await pilot.press("y")
        await settle(app, pilot)
        assert len(gateway.requests) == 1
        assert app.session.state is SessionState.SCANNING


@pytest.mark.asyncio
async def test_mount_reports_last_journaled_submission(tmp_path, fake_gateway, caplog):
    db_path = tmp_path / "journal.db"
    bootstrap_schema(db_path)
    record_submission(SubmissionRequest("Alpha", 4, 2, "007"), Success(room_id="R42", message="OK"), db_path)
    app = RegistrationKioskApp(fake_gateway(), db_path=db_path)

    with caplog.at_level(logging.INFO, logger="regkiosk.kiosk_app"):
        async with app.run_test() as pilot:
            await pilot.pause()

    assert any(
        "journal ready, last submission" in record.getMessage() and "'Alpha'" in record.getMessage()
        for record in caplog.records
    )

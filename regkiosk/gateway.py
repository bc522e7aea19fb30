"""HTTP boundary to the registration backend."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from regkiosk.config import (
    BACKEND_BASE_URL,
    DUPLICATE_ERROR_CODE,
    DUPLICATE_MARKER,
    REGISTRATION_PATH,
    REQUEST_TIMEOUT_S,
)
from regkiosk.constant import TEXT_GENERIC_FAILURE
from regkiosk.models import DuplicateName, Failure, SubmissionOutcome, SubmissionRequest, Success

logger = logging.getLogger(__name__)


def is_duplicate_response(body: dict[str, Any]) -> bool:
    """Decide whether a failure body reports a group-name collision.

    A structured indicator wins when present; otherwise the legacy
    substring marker in the message decides.
    """
    if body.get("duplicate") is True or body.get("errorCode") == DUPLICATE_ERROR_CODE:
        return True
    message = body.get("message")
    return isinstance(message, str) and DUPLICATE_MARKER in message


def interpret_response(body: Any) -> SubmissionOutcome:
    """Map a decoded backend body to an outcome."""
    if not isinstance(body, dict) or not isinstance(body.get("success"), bool):
        return Failure(TEXT_GENERIC_FAILURE)

    message = body.get("message")
    message = message if isinstance(message, str) else ""

    if body["success"]:
        room_id = body.get("roomId")
        if room_id is None or room_id == "":
            return Failure(TEXT_GENERIC_FAILURE)
        return Success(room_id=str(room_id), message=message)

    if is_duplicate_response(body):
        return DuplicateName(message)
    return Failure(message or TEXT_GENERIC_FAILURE)


class RegistrationGateway:
    """Submits registrations and reports a typed outcome. Never raises."""

    def __init__(
        self,
        base_url: str = BACKEND_BASE_URL,
        *,
        timeout: float = REQUEST_TIMEOUT_S,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        # One client for the process so the connection survives session resets.
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def submit(self, request: SubmissionRequest) -> SubmissionOutcome:
        payload = request.to_payload()
        logger.info(
            "submit group=%r queue=%s dupCheck=%s",
            request.group_name,
            request.queue_number,
            request.duplicate_override,
        )
        try:
            resp = await self._get_client().post(REGISTRATION_PATH, json=payload)
        except httpx.HTTPError as exc:
            logger.error("registration transport error: %s", exc)
            return Failure(TEXT_GENERIC_FAILURE)

        if not resp.is_success:
            logger.error("registration http_non_2xx status=%s", resp.status_code)
            return Failure(TEXT_GENERIC_FAILURE)

        try:
            body = resp.json()
        except ValueError as exc:
            logger.error("registration response is not JSON: %s", exc)
            return Failure(TEXT_GENERIC_FAILURE)

        outcome = interpret_response(body)
        logger.info("registration outcome=%s", type(outcome).__name__)
        return outcome

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

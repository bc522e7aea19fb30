"""Runtime configuration defaults for the registration kiosk."""

from __future__ import annotations

import os

BACKEND_BASE_URL = os.getenv("REGKIOSK_BACKEND_URL", "http://localhost:8080")
REGISTRATION_PATH = "/api/adminui/regChallenge/auto"
REQUEST_TIMEOUT_S = float(os.getenv("REGKIOSK_REQUEST_TIMEOUT", "10.0"))

# Seconds the completion result stays on screen before the session resets.
COMPLETION_DELAY_S = float(os.getenv("REGKIOSK_COMPLETION_DELAY", "5.0"))
REFOCUS_DELAY_S = 0.1

QR_TERMINAL_MARKER = "}"
QUEUE_NUMBER_LENGTH = 3
DUPLICATE_MARKER = "dupCheck"
DUPLICATE_ERROR_CODE = "DUPLICATE_NAME"
MAX_DIFFICULTY = 4

DB_PATH = os.getenv("REGKIOSK_DB_PATH", "data/regkiosk.db")
LOG_DIR = os.getenv("REGKIOSK_LOG_DIR", "logs")

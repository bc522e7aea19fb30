"""Logging setup for the kiosk process."""

from __future__ import annotations

import logging
import os
from datetime import datetime

from regkiosk.config import LOG_DIR


def setup_logging(log_dir: str = LOG_DIR, level: int = logging.INFO) -> logging.Logger:
    """Configure file logging; the terminal itself belongs to the TUI."""
    os.makedirs(log_dir, exist_ok=True)

    log_file = os.path.join(log_dir, f'regkiosk_{datetime.now().strftime("%Y%m%d")}.log')

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(log_file, encoding="utf-8")],
    )

    return logging.getLogger("regkiosk")

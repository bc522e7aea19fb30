"""Entry point for the registration kiosk Textual app."""

from __future__ import annotations

from regkiosk.kiosk_app import RegistrationKioskApp
from regkiosk.logging_config import setup_logging


def main() -> None:
    """Run the Textual application."""
    logger = setup_logging()
    logger.info("starting registration kiosk")
    RegistrationKioskApp().run()
    logger.info("registration kiosk stopped")


if __name__ == "__main__":
    main()

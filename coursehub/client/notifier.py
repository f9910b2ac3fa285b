"""
Transient user notifications.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Writes notifications to the log instead of a UI toast."""

    def error(self, message: str) -> None:
        logger.error(message)

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_TOAST_SECONDS = 3.0


@dataclass(frozen=True)
class Notification:
    title: str
    message: str
    duration: float = DEFAULT_TOAST_SECONDS


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None:
        ...


class LogNotifier:
    """Shows notifications as log lines; nothing to dismiss."""

    def notify(self, notification: Notification) -> None:
        logger.info(f"{notification.title}: {notification.message}")

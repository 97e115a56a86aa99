"""In-process notification channel for user-facing messages."""
import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional

from gaia.client.config import client_settings

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = ("success", "error", "warning", "info")


@dataclass
class Notification:
    id: int
    message: str
    type: str = "info"
    duration: int = 5000


class NotificationCenter:
    """Queue of notifications waiting to be shown or dismissed."""

    def __init__(self):
        self.notifications: List[Notification] = []
        self._ids = itertools.count(1)

    def add(self, message: str, type: str = "info", duration: Optional[int] = None) -> int:
        if type not in NOTIFICATION_TYPES:
            raise ValueError(f"Unknown notification type: {type}")
        notification = Notification(
            id=next(self._ids),
            message=message,
            type=type,
            duration=client_settings.NOTIFICATION_DURATION_MS if duration is None else duration,
        )
        self.notifications.append(notification)
        log = logger.error if type == "error" else logger.info
        log(f"[{type}] {message}")
        return notification.id

    def remove(self, notification_id: int) -> None:
        self.notifications = [n for n in self.notifications if n.id != notification_id]

    def clear(self) -> None:
        self.notifications = []

    def success(self, message: str, duration: Optional[int] = None) -> int:
        return self.add(message, "success", duration)

    def error(self, message: str, duration: Optional[int] = None) -> int:
        return self.add(message, "error", duration)

    def warning(self, message: str, duration: Optional[int] = None) -> int:
        return self.add(message, "warning", duration)

    def info(self, message: str, duration: Optional[int] = None) -> int:
        return self.add(message, "info", duration)

    @property
    def latest(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

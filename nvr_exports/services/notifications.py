"""Notification surface for user-facing messages."""

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Severity
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationSink(Protocol):
    def notify(self, message: str, severity: Severity) -> None: ...


class LoggingNotificationSink:
    """Writes notifications to a logger instead of a screen."""

    _levels = {
        Severity.INFO: logging.INFO,
        Severity.SUCCESS: logging.INFO,
        Severity.WARNING: logging.WARNING,
        Severity.ERROR: logging.WARNING,
    }

    def __init__(self, name: str = "nvr_exports.toast"):
        self._logger = logging.getLogger(name)

    def notify(self, message: str, severity: Severity) -> None:
        self._logger.log(self._levels[severity], "[%s] %s", severity.value, message)


class NotificationCenter:
    """Keeps recent notifications and forwards them to subscribers."""

    def __init__(self, max_history: int = 50):
        self.history: deque[Notification] = deque(maxlen=max_history)
        self._subscribers: list[Callable[[Notification], None]] = []

    def subscribe(self, callback: Callable[[Notification], None]):
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[Notification], None]):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def notify(self, message: str, severity: Severity) -> None:
        notification = Notification(message=message, severity=severity)
        self.history.append(notification)

        failed = []
        for callback in self._subscribers:
            try:
                callback(notification)
            except Exception as e:
                logger.warning("Failed to deliver notification: %s", e)
                failed.append(callback)

        for callback in failed:
            self.unsubscribe(callback)

    @property
    def latest(self) -> Notification | None:
        return self.history[-1] if self.history else None

"""
User notifications for swap outcomes.

NotificationCenter models a single toast: a new notification replaces the
current one, and each dismisses itself after a fixed duration.
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List, Optional

from .constants import NOTIFICATION_DURATION_SEC
from .utils import get_logger

logger = get_logger(__name__)


class Severity(str, Enum):
    """Notification severity."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    """A message shown to the user."""

    message: str
    severity: Severity
    created_at: float = field(default_factory=time.time)


class NotificationCenter:
    """
    In-memory notification sink with auto-dismiss.

    Attributes:
        duration: Seconds before the current notification dismisses itself
        current: The visible notification, if any
    """

    def __init__(
        self, duration: float = NOTIFICATION_DURATION_SEC, history_size: int = 50
    ):
        self.duration = duration
        self.current: Optional[Notification] = None
        self._history: Deque[Notification] = deque(maxlen=history_size)
        self._dismiss_handle: Optional[asyncio.TimerHandle] = None

    @property
    def history(self) -> List[Notification]:
        """Notifications shown so far, oldest first."""
        return list(self._history)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        """Show a notification, replacing the visible one."""
        notification = Notification(message=message, severity=Severity(severity))
        self._cancel_timer()
        self.current = notification
        self._history.append(notification)
        logger.debug(f"Notification [{notification.severity.value}]: {message}")

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (synchronous caller): stays visible until dismissed.
            return
        self._dismiss_handle = loop.call_later(
            self.duration, self._expire, notification
        )

    def dismiss(self) -> None:
        """Hide the visible notification now."""
        self._cancel_timer()
        self.current = None

    def _expire(self, notification: Notification) -> None:
        # A newer notification owns its own timer
        if self.current is notification:
            self.current = None
        self._dismiss_handle = None

    def _cancel_timer(self) -> None:
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()
            self._dismiss_handle = None


class LoggingNotificationSink(NotificationCenter):
    """Notification center for headless runs; also writes to the log."""

    def __init__(
        self,
        duration: float = NOTIFICATION_DURATION_SEC,
        logger_name: str = "pair_swap.notifications",
    ):
        super().__init__(duration=duration)
        self._logger = logging.getLogger(logger_name)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        super().notify(message, severity)
        if self.current.severity is Severity.ERROR:
            self._logger.error(message)
        else:
            self._logger.info(message)

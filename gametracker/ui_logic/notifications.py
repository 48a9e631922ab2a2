"""
Confirmation prompts and transient notifications.

Both are plain state holders: the UI asks them what to show on each render.
Notifications expire by timestamp instead of timers, so dismissing or
expiring one leaves nothing behind.
"""

from dataclasses import dataclass
from enum import Enum
from itertools import count
from typing import Callable, List, Optional
import logging
import time

logger = logging.getLogger(__name__)


class Severity(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    id: int
    message: str
    severity: Severity
    expires_at: float


class NotificationCenter:
    """Queue of auto-dismissing notifications."""

    def __init__(self, duration_seconds: float = 3.0, clock: Callable[[], float] = time.monotonic):
        self.duration_seconds = duration_seconds
        self._clock = clock
        self._items: List[Notification] = []
        self._ids = count(1)

    def notify(self, message: str, severity: Severity = Severity.SUCCESS) -> Notification:
        notification = Notification(
            id=next(self._ids),
            message=message,
            severity=severity,
            expires_at=self._clock() + self.duration_seconds,
        )
        self._items.append(notification)
        if severity == Severity.ERROR:
            logger.info(f"Notice (error): {message}")
        else:
            logger.debug(f"Notice: {message}")
        return notification

    def active(self) -> List[Notification]:
        """Return live notifications, dropping the expired ones."""
        now = self._clock()
        self._items = [n for n in self._items if n.expires_at > now]
        return list(self._items)

    def dismiss(self, notification_id: int) -> None:
        self._items = [n for n in self._items if n.id != notification_id]

    def clear(self) -> None:
        self._items = []


class ConfirmationPrompt:
    """A yes/no prompt guarding a destructive action.

    The callback runs only on an affirmative answer and at most once; the
    prompt is dismissed by either answer.
    """

    def __init__(self):
        self.message: Optional[str] = None
        self._on_confirm: Optional[Callable[[], None]] = None

    @property
    def is_open(self) -> bool:
        return self._on_confirm is not None

    def request(self, message: str, on_confirm: Callable[[], None]) -> None:
        """Open the prompt, replacing any pending one."""
        self.message = message
        self._on_confirm = on_confirm

    def respond(self, confirmed: bool) -> bool:
        """Answer the prompt.

        Returns:
            True when the confirm callback ran
        """
        callback = self._on_confirm
        self.message = None
        self._on_confirm = None
        if callback is None or not confirmed:
            return False
        callback()
        return True

"""Process-wide toast notifications.

Both page components report outcomes through ``notify(kind, message)``.
The web layer drains the queue on the next render, so a toast raised
before a redirect still shows on the page the user lands on.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    message: str


class Notifier(Protocol):
    def notify(self, kind: NotificationKind, message: str) -> None: ...


class ToastQueue:
    """In-memory notifier; keeps the most recent ``maxlen`` toasts."""

    def __init__(self, maxlen: int = 20) -> None:
        self._items: deque[Notification] = deque(maxlen=maxlen)

    def notify(self, kind: NotificationKind, message: str) -> None:
        kind = NotificationKind(kind)
        logger.debug("toast %s: %s", kind.value, message)
        self._items.append(Notification(kind=kind, message=message))

    def success(self, message: str) -> None:
        self.notify(NotificationKind.SUCCESS, message)

    def error(self, message: str) -> None:
        self.notify(NotificationKind.ERROR, message)

    def peek(self) -> list[Notification]:
        return list(self._items)

    def drain(self) -> list[Notification]:
        items = list(self._items)
        self._items.clear()
        return items

    def __len__(self) -> int:
        return len(self._items)

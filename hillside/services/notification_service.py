"""
The Hillside Echo Client - Notification Service
===============================================
User-facing feedback (what the browser shows as toasts and result modals).
Notices are kept in memory for the current view and mirrored to the log.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone

from hillside.core.logging import get_logger

logger = get_logger("notification_service")

GENERIC_FAILURE = "Something went wrong. Please try again."


class NoticeLevel(str, enum.Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True)
class Notice:
    level: NoticeLevel
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationCenter:
    """Collects notices raised by views; the UI layer reads them."""

    def __init__(self, max_items: int = 50):
        self._items: list[Notice] = []
        self._max_items = max_items

    def _push(self, level: NoticeLevel, message: str) -> Notice:
        notice = Notice(level=level, message=message)
        self._items.append(notice)
        if len(self._items) > self._max_items:
            self._items = self._items[-self._max_items :]
        log = logger.warning if level in {NoticeLevel.WARNING, NoticeLevel.ERROR} else logger.info
        log("notice", level=level.value, message=message)
        return notice

    def success(self, message: str) -> Notice:
        return self._push(NoticeLevel.SUCCESS, message)

    def info(self, message: str) -> Notice:
        return self._push(NoticeLevel.INFO, message)

    def warning(self, message: str) -> Notice:
        return self._push(NoticeLevel.WARNING, message)

    def error(self, message: str = GENERIC_FAILURE) -> Notice:
        return self._push(NoticeLevel.ERROR, message)

    @property
    def items(self) -> list[Notice]:
        return list(self._items)

    @property
    def last(self) -> Notice | None:
        return self._items[-1] if self._items else None

"""Notices — transient user-visible notifications (toasts) raised by the store.

Invariants:
    - The board holds at most `capacity` notices; the oldest fall off first
    - drain() returns notices oldest-first and empties the board
    - Pushing a notice never raises for well-formed input

Design Decisions:
    - In-memory deque, no IO: rendering is a UI concern outside the core
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

from worksync.core.domain_types import NoticeLevel


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    title: str
    message: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "title": self.title,
            "message": self.message,
            "createdAt": self.created_at.isoformat(),
        }


class NoticeBoard:
    """Bounded queue of pending notices."""

    def __init__(self, capacity: int = 20):
        self._notices: deque[Notice] = deque(maxlen=capacity)

    def push(self, level: NoticeLevel, title: str, message: str = "") -> Notice:
        notice = Notice(level=level, title=title, message=message)
        self._notices.append(notice)
        return notice

    def success(self, title: str, message: str = "") -> Notice:
        return self.push(NoticeLevel.SUCCESS, title, message)

    def error(self, title: str, message: str = "") -> Notice:
        return self.push(NoticeLevel.ERROR, title, message)

    def pending(self) -> list[Notice]:
        return list(self._notices)

    def drain(self) -> list[Notice]:
        notices = list(self._notices)
        self._notices.clear()
        return notices

    def __len__(self) -> int:
        return len(self._notices)

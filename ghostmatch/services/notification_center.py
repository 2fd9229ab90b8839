from __future__ import annotations

from typing import Iterable, Optional

from ghostmatch.schemas import Notification


class NotificationCenter:
    """Event log of notifications, newest insertion first.

    Ordering is by insertion, never by timestamp: callers stamp notifications
    with the current time so the two agree in practice.
    """

    def __init__(self, notifications: Optional[Iterable[Notification]] = None) -> None:
        self._items: list[Notification] = list(notifications or [])

    def add_notification(self, notification: Notification) -> None:
        self._items.insert(0, notification)

    def mark_all_read(self) -> int:
        """Flag every notification read; returns how many changed."""
        changed = 0
        for index, notification in enumerate(self._items):
            if not notification.read:
                self._items[index] = notification.model_copy(update={"read": True})
                changed += 1
        return changed

    def get_notifications(self) -> list[Notification]:
        return list(self._items)

    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def __len__(self) -> int:
        return len(self._items)

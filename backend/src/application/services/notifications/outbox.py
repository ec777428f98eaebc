"""
Notification Outbox
Collects notification requests until the surrounding transaction commits
"""
from typing import List

from .interfaces import INotificationDispatcher, NotificationRequest


class NotificationOutbox(INotificationDispatcher):
    """In-memory dispatcher drained by the caller after commit"""

    def __init__(self):
        self._pending: List[NotificationRequest] = []

    def dispatch(self, request: NotificationRequest) -> None:
        self._pending.append(request)

    def drain(self) -> List[NotificationRequest]:
        pending, self._pending = self._pending, []
        return pending

    def __len__(self) -> int:
        return len(self._pending)

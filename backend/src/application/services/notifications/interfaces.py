"""
Notification Service Interfaces
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from domain.entities import Notification
from domain.enums import NotificationType


@dataclass(frozen=True)
class NotificationRequest:
    """A notification that should reach one user"""
    recipient_id: UUID
    type: NotificationType
    title: str
    message: str
    sender_id: Optional[UUID] = None
    data: Dict[str, Any] = field(default_factory=dict)


class INotificationDispatcher(ABC):
    """
    Fire-and-forget notification sink

    dispatch() must return quickly and never raise because of delivery
    problems; the calling operation has already succeeded.
    """

    @abstractmethod
    def dispatch(self, request: NotificationRequest) -> None:
        pass


class INotificationDelivery(ABC):
    """Persists a notification and pushes it to connected clients"""

    @abstractmethod
    async def deliver(self, request: NotificationRequest) -> Optional[Notification]:
        """Returns the stored notification, or None when delivery gave up"""
        pass


class INotificationService(ABC):
    """Read side of a user's notifications"""

    @abstractmethod
    async def list_notifications(
        self,
        user_id: UUID,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Notification], int]:
        pass

    @abstractmethod
    async def unread_count(self, user_id: UUID) -> int:
        pass

    @abstractmethod
    async def mark_read(self, user_id: UUID, notification_id: UUID) -> Notification:
        pass

    @abstractmethod
    async def mark_all_read(self, user_id: UUID) -> int:
        pass

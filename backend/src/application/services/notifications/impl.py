"""
Notification Service Implementation
"""
from datetime import datetime, timezone
from typing import List, Tuple
from uuid import UUID

from loguru import logger

from application.repositories.interfaces import INotificationRepository
from core.exceptions import AuthorizationException, ResourceNotFoundException
from domain.entities import Notification
from .interfaces import INotificationService


class NotificationService(INotificationService):
    """Lists and acknowledges a user's notifications"""

    def __init__(self, notification_repository: INotificationRepository):
        self.notification_repo = notification_repository

    async def list_notifications(
        self,
        user_id: UUID,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Notification], int]:
        offset = (page - 1) * limit
        return await self.notification_repo.list_for_recipient(
            user_id, unread_only=unread_only, limit=limit, offset=offset
        )

    async def unread_count(self, user_id: UUID) -> int:
        return await self.notification_repo.count_unread(user_id)

    async def mark_read(self, user_id: UUID, notification_id: UUID) -> Notification:
        notification = await self.notification_repo.get_by_id(notification_id)
        if notification is None:
            raise ResourceNotFoundException("Notification", str(notification_id))
        if notification.recipient_id != user_id:
            raise AuthorizationException("Not authorized to access this notification")
        if notification.read:
            return notification

        updated = await self.notification_repo.mark_read(notification_id, datetime.now(timezone.utc))
        return updated or notification

    async def mark_all_read(self, user_id: UUID) -> int:
        changed = await self.notification_repo.mark_all_read(user_id, datetime.now(timezone.utc))
        logger.info(f"Marked {changed} notification(s) read for user {user_id}")
        return changed

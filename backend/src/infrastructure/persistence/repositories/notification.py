"""
Notification Repository Implementation
"""
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Notification
from domain.enums import NotificationType
from application.repositories.interfaces import INotificationRepository
from infrastructure.persistence.models.notification import NotificationModel
from core.exceptions import RepositoryException
from ._time import as_utc, utcnow


class SQLAlchemyNotificationRepository(INotificationRepository):
    """SQLAlchemy implementation of notification repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, notification: Notification) -> Notification:
        try:
            model = self._to_model(notification)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to create notification for {notification.recipient_id}: {str(e)}")
            raise RepositoryException(f"Failed to create notification: {str(e)}")

    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        try:
            result = await self.session.execute(
                select(NotificationModel)
                .where(NotificationModel.id == notification_id)
                .execution_options(populate_existing=True)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get notification {notification_id}: {str(e)}")
            raise RepositoryException(f"Failed to get notification: {str(e)}")

    async def list_for_recipient(
        self,
        recipient_id: UUID,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Notification], int]:
        try:
            conditions = [NotificationModel.recipient_id == recipient_id]
            if unread_only:
                conditions.append(NotificationModel.read.is_(False))

            result = await self.session.execute(
                select(NotificationModel)
                .where(*conditions)
                .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
                .limit(limit)
                .offset(offset)
            )
            models = result.scalars().all()
            total = (
                await self.session.execute(
                    select(func.count()).select_from(NotificationModel).where(*conditions)
                )
            ).scalar_one()

            return [self._to_entity(model) for model in models], total

        except Exception as e:
            logger.error(f"Failed to list notifications for {recipient_id}: {str(e)}")
            raise RepositoryException(f"Failed to list notifications: {str(e)}")

    async def count_unread(self, recipient_id: UUID) -> int:
        try:
            result = await self.session.execute(
                select(func.count())
                .select_from(NotificationModel)
                .where(
                    NotificationModel.recipient_id == recipient_id,
                    NotificationModel.read.is_(False),
                )
            )
            return result.scalar_one()

        except Exception as e:
            logger.error(f"Failed to count unread notifications for {recipient_id}: {str(e)}")
            raise RepositoryException(f"Failed to count notifications: {str(e)}")

    async def mark_read(self, notification_id: UUID, read_at: datetime) -> Optional[Notification]:
        try:
            await self.session.execute(
                update(NotificationModel)
                .where(
                    NotificationModel.id == notification_id,
                    NotificationModel.read.is_(False),
                )
                .values(read=True, read_at=read_at)
                .execution_options(synchronize_session=False)
            )
        except Exception as e:
            logger.error(f"Failed to mark notification {notification_id} read: {str(e)}")
            raise RepositoryException(f"Failed to mark notification read: {str(e)}")

        return await self.get_by_id(notification_id)

    async def mark_all_read(self, recipient_id: UUID, read_at: datetime) -> int:
        try:
            result = await self.session.execute(
                update(NotificationModel)
                .where(
                    NotificationModel.recipient_id == recipient_id,
                    NotificationModel.read.is_(False),
                )
                .values(read=True, read_at=read_at)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

        except Exception as e:
            logger.error(f"Failed to mark notifications read for {recipient_id}: {str(e)}")
            raise RepositoryException(f"Failed to mark notifications read: {str(e)}")

    def _to_entity(self, model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            sender_id=model.sender_id,
            data=dict(model.data or {}),
            read=bool(model.read),
            read_at=as_utc(model.read_at),
            created_at=as_utc(model.created_at),
        )

    def _to_model(self, entity: Notification) -> NotificationModel:
        return NotificationModel(
            id=entity.id,
            recipient_id=entity.recipient_id,
            sender_id=entity.sender_id,
            type=entity.type.value,
            title=entity.title,
            message=entity.message,
            data=dict(entity.data),
            read=entity.read,
            read_at=entity.read_at,
            created_at=entity.created_at or utcnow(),
        )


NotificationRepository = SQLAlchemyNotificationRepository

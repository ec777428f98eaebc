"""
Notification Delivery Service
Stores a notification in its own transaction, then pushes it to the
recipient's open sockets.
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, AsyncContextManager, Callable, Dict, Optional
from uuid import uuid4

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from application.repositories.interfaces import INotificationRepository
from application.services.notifications import INotificationDelivery, NotificationRequest
from application.services.realtime import IConnectionRegistry
from domain.entities import Notification
from infrastructure.persistence.repositories.notification import SQLAlchemyNotificationRepository


NOTIFICATION_EVENT = "notification"

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]
RepositoryFactory = Callable[[AsyncSession], INotificationRepository]


def notification_payload(notification: Notification) -> Dict[str, Any]:
    """JSON-safe representation pushed over the socket"""
    return {
        "id": str(notification.id),
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "sender_id": str(notification.sender_id) if notification.sender_id else None,
        "data": notification.data,
        "read": notification.read,
        "created_at": notification.created_at.isoformat() if notification.created_at else None,
    }


class NotificationDeliveryService(INotificationDelivery):
    """Persist with retry, then emit; never raises"""

    def __init__(
        self,
        session_scope: SessionScope,
        registry: IConnectionRegistry,
        max_retries: int = 3,
        retry_base_seconds: float = 0.5,
        repository_factory: RepositoryFactory = SQLAlchemyNotificationRepository,
    ):
        self.session_scope = session_scope
        self.registry = registry
        self.max_retries = max(1, max_retries)
        self.retry_base_seconds = retry_base_seconds
        self.repository_factory = repository_factory

    async def deliver(self, request: NotificationRequest) -> Optional[Notification]:
        stored = await self._store(request)
        if stored is None:
            return None

        try:
            await self.registry.send_to_user(stored.recipient_id, NOTIFICATION_EVENT, notification_payload(stored))
        except Exception:
            # Stored already; the client will see it on its next fetch
            logger.exception(f"Realtime push failed for notification {stored.id}")
        return stored

    async def _store(self, request: NotificationRequest) -> Optional[Notification]:
        notification = Notification(
            id=uuid4(),
            recipient_id=request.recipient_id,
            type=request.type,
            title=request.title,
            message=request.message,
            sender_id=request.sender_id,
            data=dict(request.data),
            created_at=datetime.now(timezone.utc),
        )

        for attempt in range(1, self.max_retries + 1):
            try:
                async with self.session_scope() as session:
                    repo = self.repository_factory(session)
                    return await repo.create(notification)
            except Exception as e:
                if attempt == self.max_retries:
                    logger.error(
                        f"Giving up on {request.type.value} notification for {request.recipient_id} "
                        f"after {attempt} attempt(s): {e}"
                    )
                    return None
                delay = self.retry_base_seconds * (2 ** (attempt - 1))
                logger.warning(f"Notification store attempt {attempt} failed ({e}); retrying in {delay:.2f}s")
                await asyncio.sleep(delay)
        return None

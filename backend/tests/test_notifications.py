"""
Notification delivery, dispatch and read-side tests
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import BackgroundTasks

from application.services.notifications import NotificationRequest
from application.services.notifications.impl import NotificationService
from application.services.notifications.outbox import NotificationOutbox
from core.exceptions import AuthorizationException, ResourceNotFoundException
from domain.entities import Notification
from domain.enums import NotificationType
from infrastructure.notifications import (
    BackgroundTaskNotificationDispatcher,
    NotificationDeliveryService,
    notification_payload,
)
from infrastructure.notifications.delivery import NOTIFICATION_EVENT


def request_for(recipient_id=None, **kwargs) -> NotificationRequest:
    return NotificationRequest(
        recipient_id=recipient_id or uuid4(),
        type=kwargs.pop("type", NotificationType.MATCH_ACCEPTED),
        title="Match accepted",
        message="Dana accepted the match.",
        data={"match_id": "m-1"},
        **kwargs,
    )


@asynccontextmanager
async def null_scope():
    yield None


class FlakyRepository:
    """Fails the first `failures` creates, then stores"""

    def __init__(self, failures: int):
        self.failures = failures
        self.attempts = 0
        self.stored = []

    def __call__(self, session):
        return self

    async def create(self, notification):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise RuntimeError("database unavailable")
        self.stored.append(notification)
        return notification


class TestNotificationDelivery:
    @pytest.mark.asyncio
    async def test_stores_then_pushes_to_recipient_room(self):
        repo = FlakyRepository(failures=0)
        registry = AsyncMock()
        delivery = NotificationDeliveryService(null_scope, registry, repository_factory=repo)
        request = request_for()

        stored = await delivery.deliver(request)

        assert stored is repo.stored[0]
        assert stored.recipient_id == request.recipient_id
        assert stored.read is False
        registry.send_to_user.assert_awaited_once_with(
            request.recipient_id, NOTIFICATION_EVENT, notification_payload(stored)
        )

    @pytest.mark.asyncio
    async def test_retries_with_backoff(self, monkeypatch):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr("infrastructure.notifications.delivery.asyncio.sleep", fake_sleep)
        repo = FlakyRepository(failures=2)
        delivery = NotificationDeliveryService(
            null_scope, AsyncMock(), max_retries=3, retry_base_seconds=0.5, repository_factory=repo
        )

        stored = await delivery.deliver(request_for())

        assert stored is not None
        assert repo.attempts == 3
        assert delays == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_gives_up_without_raising(self, monkeypatch):
        monkeypatch.setattr("infrastructure.notifications.delivery.asyncio.sleep", AsyncMock())
        repo = FlakyRepository(failures=10)
        registry = AsyncMock()
        delivery = NotificationDeliveryService(null_scope, registry, max_retries=3, repository_factory=repo)

        assert await delivery.deliver(request_for()) is None
        assert repo.attempts == 3
        registry.send_to_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_push_failure_keeps_stored_notification(self):
        repo = FlakyRepository(failures=0)
        registry = AsyncMock()
        registry.send_to_user.side_effect = ConnectionError("socket gone")
        delivery = NotificationDeliveryService(null_scope, registry, repository_factory=repo)

        stored = await delivery.deliver(request_for())
        assert stored is not None
        assert len(repo.stored) == 1

    @pytest.mark.asyncio
    async def test_persists_through_real_session(self, session_factory, candidate):
        from infrastructure.persistence.repositories.notification import SQLAlchemyNotificationRepository
        from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository

        async with session_factory() as session:
            await SQLAlchemyUserRepository(session).create(candidate)
            await session.commit()

        @asynccontextmanager
        async def scope():
            async with session_factory() as session:
                yield session
                await session.commit()

        delivery = NotificationDeliveryService(scope, AsyncMock())
        await delivery.deliver(request_for(candidate.id))

        async with session_factory() as session:
            repo = SQLAlchemyNotificationRepository(session)
            assert await repo.count_unread(candidate.id) == 1


def test_payload_is_json_safe():
    notification = Notification(
        id=uuid4(),
        recipient_id=uuid4(),
        type=NotificationType.MATCH_CREATED,
        title="New match",
        message="hello",
        sender_id=uuid4(),
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    payload = notification_payload(notification)
    assert payload["type"] == "match_created"
    assert payload["sender_id"] == str(notification.sender_id)
    assert payload["created_at"] == "2026-01-01T00:00:00+00:00"


def test_background_dispatcher_defers_delivery():
    tasks = BackgroundTasks()
    delivery = AsyncMock()
    dispatcher = BackgroundTaskNotificationDispatcher(tasks, delivery)
    request = request_for()

    dispatcher.dispatch(request)

    assert len(tasks.tasks) == 1
    assert tasks.tasks[0].args == (request,)
    delivery.deliver.assert_not_called()


def test_outbox_drains_once():
    outbox = NotificationOutbox()
    outbox.dispatch(request_for())
    outbox.dispatch(request_for())

    assert len(outbox) == 2
    assert len(outbox.drain()) == 2
    assert outbox.drain() == []


class TestNotificationService:
    async def _seed(self, notification_repo, recipient_id):
        notification = Notification(
            id=uuid4(),
            recipient_id=recipient_id,
            type=NotificationType.MATCH_CREATED,
            title="New match",
            message="hello",
            created_at=datetime.now(timezone.utc),
        )
        return await notification_repo.create(notification)

    @pytest.mark.asyncio
    async def test_mark_read_own_notification(self, notification_repo):
        user_id = uuid4()
        seeded = await self._seed(notification_repo, user_id)
        service = NotificationService(notification_repo)

        read = await service.mark_read(user_id, seeded.id)
        assert read.read is True
        assert await service.unread_count(user_id) == 0

    @pytest.mark.asyncio
    async def test_mark_read_someone_elses(self, notification_repo):
        seeded = await self._seed(notification_repo, uuid4())
        with pytest.raises(AuthorizationException):
            await NotificationService(notification_repo).mark_read(uuid4(), seeded.id)

    @pytest.mark.asyncio
    async def test_mark_read_missing(self, notification_repo):
        with pytest.raises(ResourceNotFoundException):
            await NotificationService(notification_repo).mark_read(uuid4(), uuid4())

    @pytest.mark.asyncio
    async def test_list_and_mark_all(self, notification_repo):
        user_id = uuid4()
        for _ in range(3):
            await self._seed(notification_repo, user_id)
        service = NotificationService(notification_repo)

        items, total = await service.list_notifications(user_id, page=1, limit=2)
        assert total == 3 and len(items) == 2

        assert await service.mark_all_read(user_id) == 3
        unread, unread_total = await service.list_notifications(user_id, unread_only=True)
        assert (unread, unread_total) == ([], 0)

"""
Match Expiry Sweeper - Background worker expiring overdue pending matches

Each pass runs in its own transaction; notifications are delivered only
after that transaction commits, so a match that failed to expire is never
announced as expired.
"""
import asyncio
from datetime import datetime, timezone
from typing import AsyncContextManager, Callable, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from application.services.notifications import INotificationDelivery, INotificationDispatcher
from application.services.notifications.outbox import NotificationOutbox
from .interfaces import IMatchService


SessionScope = Callable[[], AsyncContextManager[AsyncSession]]
ServiceFactory = Callable[[AsyncSession, INotificationDispatcher], IMatchService]


class MatchExpirySweeper:
    """Periodic pending -> expired transition"""

    def __init__(
        self,
        session_scope: SessionScope,
        service_factory: ServiceFactory,
        delivery: INotificationDelivery,
        interval_seconds: int = 60,
        batch_size: int = 200,
    ):
        """
        Initialize sweeper

        Args:
            session_scope: Opens a session that commits on clean exit
            service_factory: Builds a match service bound to that session
            delivery: Persists and pushes notifications after commit
            interval_seconds: Seconds between passes
            batch_size: Maximum matches expired per pass
        """
        self.session_scope = session_scope
        self.service_factory = service_factory
        self.delivery = delivery
        self.interval_seconds = interval_seconds
        self.batch_size = batch_size
        self.running = False

    async def start(self):
        """Run passes until stopped"""
        self.running = True
        logger.info(f"Match expiry sweeper started (interval={self.interval_seconds}s, batch={self.batch_size})")

        try:
            while self.running:
                try:
                    await self.run_once()
                except Exception as e:
                    logger.exception(f"Match expiry pass failed: {e}")
                await asyncio.sleep(self.interval_seconds)
        finally:
            logger.info("Match expiry sweeper stopped")

    async def stop(self):
        logger.info("Stopping match expiry sweeper...")
        self.running = False

    async def run_once(self, now: Optional[datetime] = None) -> int:
        """One sweep; returns the number of matches expired"""
        now = now or datetime.now(timezone.utc)
        outbox = NotificationOutbox()

        async with self.session_scope() as session:
            service = self.service_factory(session, outbox)
            expired = await service.expire_due_matches(now, limit=self.batch_size)

        for request in outbox.drain():
            await self.delivery.deliver(request)

        return len(expired)

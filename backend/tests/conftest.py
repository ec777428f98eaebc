"""
Shared test fixtures

Settings are read at import time, so the environment is prepared before any
application module is imported.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_JSON_FORMAT", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("MATCH_EXPIRY_SWEEP_ENABLED", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from application.repositories.interfaces import (
    IJobRepository,
    IMatchRepository,
    INotificationRepository,
    IUserRepository,
    MatchQuery,
)
from application.services.notifications import INotificationDispatcher, NotificationRequest
from core.database import Base
from core.exceptions import DuplicateResourceException
from domain.entities import Job, Match, Notification, User
from domain.enums import EducationLevel, MatchSort, MatchStatus, UserRole
from domain.value_objects import Email


# In-memory repositories

class InMemoryUserRepository(IUserRepository):
    def __init__(self):
        self.users: Dict[UUID, User] = {}

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        return self.users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email.value == email.strip().lower()), None)

    async def create(self, user: User) -> User:
        if await self.exists_by_email(user.email.value):
            raise DuplicateResourceException("User", "email", user.email.value)
        self.users[user.id] = user
        return user

    async def update(self, user: User) -> User:
        self.users[user.id] = user
        return user

    async def exists_by_email(self, email: str) -> bool:
        return await self.get_by_email(email) is not None


class InMemoryJobRepository(IJobRepository):
    def __init__(self):
        self.jobs: Dict[UUID, Job] = {}

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        return self.jobs.get(job_id)

    async def create(self, job: Job) -> Job:
        self.jobs[job.id] = job
        return job

    async def list(self, employer_id=None, limit=20, offset=0) -> Tuple[List[Job], int]:
        jobs = [j for j in self.jobs.values() if employer_id is None or j.employer_id == employer_id]
        jobs.sort(key=lambda j: j.created_at, reverse=True)
        return jobs[offset:offset + limit], len(jobs)


class InMemoryMatchRepository(IMatchRepository):
    def __init__(self):
        self.matches: Dict[UUID, Match] = {}

    async def get_by_id(self, match_id: UUID) -> Optional[Match]:
        return self.matches.get(match_id)

    async def create(self, match: Match) -> Match:
        for existing in self.matches.values():
            if (existing.job_id, existing.candidate_id) == (match.job_id, match.candidate_id):
                raise DuplicateResourceException(
                    "Match", "job_id,candidate_id", f"{match.job_id},{match.candidate_id}"
                )
        self.matches[match.id] = match
        return match

    async def update(self, match: Match) -> Match:
        self.matches[match.id] = match
        return match

    async def delete(self, match_id: UUID) -> bool:
        return self.matches.pop(match_id, None) is not None

    async def list_for_participant(self, query: MatchQuery) -> Tuple[List[Match], int]:
        rows = [m for m in self.matches.values() if m.is_party(query.participant_id)]
        if query.status is not None:
            rows = [m for m in rows if m.status is query.status]
        if query.type:
            rows = [m for m in rows if m.type == query.type]
        if query.sort is MatchSort.OLDEST:
            rows.sort(key=lambda m: m.created_at)
        elif query.sort is MatchSort.SCORE:
            rows.sort(key=lambda m: float(m.score), reverse=True)
        else:
            rows.sort(key=lambda m: m.created_at, reverse=True)
        return rows[query.offset:query.offset + query.limit], len(rows)

    async def find_due_for_expiry(self, now: datetime, limit: int = 100) -> List[Match]:
        return [m for m in self.matches.values() if m.is_due_for_expiry(now)][:limit]

    async def mark_expired(self, match_id: UUID, now: datetime) -> Optional[Match]:
        match = self.matches.get(match_id)
        if match is None or not match.is_due_for_expiry(now):
            return None
        expired = match.expire(now)
        self.matches[match_id] = expired
        return expired

    async def transition(self, match_id: UUID, target: MatchStatus, now: datetime) -> Optional[Match]:
        match = self.matches.get(match_id)
        if match is None or match.status is not MatchStatus.PENDING or match.is_due_for_expiry(now):
            return None
        answered = replace(match, status=target, expires_at=None, updated_at=now)
        self.matches[match_id] = answered
        return answered


class InMemoryNotificationRepository(INotificationRepository):
    def __init__(self):
        self.notifications: Dict[UUID, Notification] = {}

    async def create(self, notification: Notification) -> Notification:
        self.notifications[notification.id] = notification
        return notification

    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        return self.notifications.get(notification_id)

    async def list_for_recipient(self, recipient_id, unread_only=False, limit=20, offset=0):
        rows = [n for n in self.notifications.values() if n.recipient_id == recipient_id]
        if unread_only:
            rows = [n for n in rows if not n.read]
        rows.sort(key=lambda n: n.created_at, reverse=True)
        return rows[offset:offset + limit], len(rows)

    async def count_unread(self, recipient_id: UUID) -> int:
        return sum(1 for n in self.notifications.values() if n.recipient_id == recipient_id and not n.read)

    async def mark_read(self, notification_id: UUID, read_at: datetime) -> Optional[Notification]:
        notification = self.notifications.get(notification_id)
        if notification is None:
            return None
        updated = replace(notification, read=True, read_at=read_at)
        self.notifications[notification_id] = updated
        return updated

    async def mark_all_read(self, recipient_id: UUID, read_at: datetime) -> int:
        unread = [n for n in self.notifications.values() if n.recipient_id == recipient_id and not n.read]
        for n in unread:
            await self.mark_read(n.id, read_at)
        return len(unread)


class RecordingDispatcher(INotificationDispatcher):
    def __init__(self):
        self.requests: List[NotificationRequest] = []

    def dispatch(self, request: NotificationRequest) -> None:
        self.requests.append(request)


# Entity factories

def make_user(
    role: UserRole = UserRole.CANDIDATE,
    email: Optional[str] = None,
    full_name: str = "Test User",
    **kwargs,
) -> User:
    now = datetime.now(timezone.utc)
    return User(
        id=kwargs.pop("id", uuid4()),
        email=Email(email or f"user-{uuid4().hex[:8]}@acme.io"),
        password_hash=kwargs.pop("password_hash", "not-a-real-hash"),
        full_name=full_name,
        role=role,
        created_at=now,
        updated_at=now,
        **kwargs,
    )


def make_job(employer: User, description: str = "Python developer with Django and PostgreSQL", **kwargs) -> Job:
    now = datetime.now(timezone.utc)
    return Job(
        id=kwargs.pop("id", uuid4()),
        employer_id=employer.id,
        title=kwargs.pop("title", "Backend Engineer"),
        company=kwargs.pop("company", "Acme"),
        description=description,
        created_at=kwargs.pop("created_at", now),
        updated_at=now,
        **kwargs,
    )


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def job_repo():
    return InMemoryJobRepository()


@pytest.fixture
def match_repo():
    return InMemoryMatchRepository()


@pytest.fixture
def notification_repo():
    return InMemoryNotificationRepository()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def employer():
    return make_user(UserRole.EMPLOYER, email="hr@acme.io", full_name="Acme HR")


@pytest.fixture
def candidate():
    return make_user(
        UserRole.CANDIDATE,
        email="dev@acme.io",
        full_name="Dana Dev",
        cv_text="Experienced Python developer. Django, PostgreSQL, Docker.",
        skills=["Python", "Django", "Docker"],
        experience_years=4,
        education_level=EducationLevel.BACHELOR,
        location="Berlin",
    )


# SQLite-backed persistence

@pytest_asyncio.fixture
async def session_factory():
    import infrastructure.persistence.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session

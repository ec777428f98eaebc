"""
Repository Interfaces (Abstract Base Classes)
Define contracts for data access without implementation details
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, List, Tuple
from uuid import UUID

from domain.entities import User, Job, Match, Notification
from domain.enums import MatchSort, MatchStatus


class IUserRepository(ABC):
    """User repository interface"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check if user exists by email"""
        pass


class IJobRepository(ABC):
    """Job repository interface"""

    @abstractmethod
    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID"""
        pass

    @abstractmethod
    async def create(self, job: Job) -> Job:
        """Create new job"""
        pass

    @abstractmethod
    async def list(
        self,
        employer_id: Optional[UUID] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Job], int]:
        """List jobs, newest first, with the total ignoring pagination"""
        pass


@dataclass
class MatchQuery:
    """Filters for listing matches visible to one user"""
    participant_id: UUID
    status: Optional[MatchStatus] = None
    type: Optional[str] = None
    sort: MatchSort = MatchSort.NEWEST
    limit: int = 10
    offset: int = 0


class IMatchRepository(ABC):
    """Match repository interface"""

    @abstractmethod
    async def get_by_id(self, match_id: UUID) -> Optional[Match]:
        """Get match by ID"""
        pass

    @abstractmethod
    async def create(self, match: Match) -> Match:
        """
        Insert a new match.

        Raises:
            DuplicateResourceException: a match already exists for (job, candidate)
        """
        pass

    @abstractmethod
    async def update(self, match: Match) -> Match:
        """Persist the mutable fields of an existing match"""
        pass

    @abstractmethod
    async def delete(self, match_id: UUID) -> bool:
        """Delete match"""
        pass

    @abstractmethod
    async def list_for_participant(self, query: MatchQuery) -> Tuple[List[Match], int]:
        """Page of matches where the user is candidate or employer, plus the total count"""
        pass

    @abstractmethod
    async def find_due_for_expiry(self, now: datetime, limit: int = 100) -> List[Match]:
        """Pending matches whose expires_at has passed"""
        pass

    @abstractmethod
    async def mark_expired(self, match_id: UUID, now: datetime) -> Optional[Match]:
        """
        Move one match from pending to expired.

        Conditional on the row still being pending and overdue, so concurrent
        sweeps expire a match at most once. Returns None when nothing changed.
        """
        pass

    @abstractmethod
    async def transition(self, match_id: UUID, target: MatchStatus, now: datetime) -> Optional[Match]:
        """
        Move one match from pending to accepted or rejected.

        Conditional on the row still being pending and not past expires_at.
        Returns None when nothing changed.
        """
        pass


class INotificationRepository(ABC):
    """Notification repository interface"""

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        """Create notification"""
        pass

    @abstractmethod
    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        """Get notification by ID"""
        pass

    @abstractmethod
    async def list_for_recipient(
        self,
        recipient_id: UUID,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Notification], int]:
        """Page of a user's notifications, newest first, plus the total count"""
        pass

    @abstractmethod
    async def count_unread(self, recipient_id: UUID) -> int:
        """Number of unread notifications"""
        pass

    @abstractmethod
    async def mark_read(self, notification_id: UUID, read_at: datetime) -> Optional[Notification]:
        """Mark one notification read"""
        pass

    @abstractmethod
    async def mark_all_read(self, recipient_id: UUID, read_at: datetime) -> int:
        """Mark every unread notification of a user read; returns rows changed"""
        pass

"""
Match Service Interface
Orchestrates entity lookup, scoring and persistence of matches
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from domain.entities import Job, Match, User
from domain.enums import MatchSort, MatchStatus
from domain.value_objects import MatchFactors


class IMatchService(ABC):
    """Match orchestration interface"""

    @abstractmethod
    async def create_match(
        self,
        requester: User,
        job_id: UUID,
        candidate_id: UUID,
        match_type: str,
        message: Optional[str] = None,
        match_factors: Optional[MatchFactors] = None,
        auto_factors: bool = False,
        expires_at: Optional[datetime] = None,
    ) -> Match:
        """
        Create a pending match between a job and a candidate

        Raises:
            ValidationException: missing type or expiry in the past
            ResourceNotFoundException: job or candidate does not exist
            AuthorizationException: requester does not own the job
            DuplicateResourceException: the pair is already matched
        """
        pass

    @abstractmethod
    async def list_matches(
        self,
        requester: User,
        status: Optional[MatchStatus] = None,
        match_type: Optional[str] = None,
        sort: MatchSort = MatchSort.NEWEST,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Match], int]:
        """Page of the requester's matches and the total ignoring pagination"""
        pass

    @abstractmethod
    async def get_match(self, requester: User, match_id: UUID) -> Match:
        pass

    @abstractmethod
    async def update_match(
        self,
        requester: User,
        match_id: UUID,
        match_type: Optional[str] = None,
        message: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> Match:
        pass

    @abstractmethod
    async def delete_match(self, requester: User, match_id: UUID) -> None:
        pass

    @abstractmethod
    async def accept_match(self, requester: User, match_id: UUID) -> Match:
        pass

    @abstractmethod
    async def reject_match(self, requester: User, match_id: UUID) -> Match:
        pass

    @abstractmethod
    async def mark_viewed(self, requester: User, match_id: UUID) -> Match:
        pass

    @abstractmethod
    async def expire_due_matches(self, now: datetime, limit: int = 100) -> List[Match]:
        """Transition overdue pending matches to expired; returns the ones changed"""
        pass

    @abstractmethod
    def calculate_factors(self, candidate: User, job: Job) -> MatchFactors:
        """Derive the weighted-factor breakdown from structured profile data"""
        pass

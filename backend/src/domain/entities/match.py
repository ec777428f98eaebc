"""
Match Domain Entity
A job-candidate pairing with a relevance score and a lifecycle status.

Transitions never mutate in place: each returns a new snapshot so the
state machine can be exercised without a database.

    pending --accept--> accepted  (only before expires_at)
    pending --reject--> rejected  (only before expires_at)
    pending --expire--> expired   (only once expires_at has passed)
"""
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from core.exceptions import InvalidStateTransitionException, ValidationException
from ..enums import MatchStatus
from ..value_objects import MatchFactors, MatchScore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; treat them as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class Match:
    """Match domain entity - immutable snapshot"""

    id: UUID
    job_id: UUID
    candidate_id: UUID
    employer_id: UUID
    score: MatchScore
    type: str
    status: MatchStatus = MatchStatus.PENDING
    message: Optional[str] = None
    match_factors: Optional[MatchFactors] = None
    viewed_by_employer: bool = False
    viewed_by_candidate: bool = False
    expires_at: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Parties

    def is_party(self, user_id: UUID) -> bool:
        return user_id in (self.candidate_id, self.employer_id)

    def other_party(self, user_id: UUID) -> UUID:
        """The counterpart of user_id on this match"""
        if user_id == self.candidate_id:
            return self.employer_id
        if user_id == self.employer_id:
            return self.candidate_id
        raise ValueError(f"User {user_id} is not a party to match {self.id}")

    # Status transitions

    def accept(self, now: Optional[datetime] = None) -> "Match":
        return self._answer(MatchStatus.ACCEPTED, now)

    def reject(self, now: Optional[datetime] = None) -> "Match":
        return self._answer(MatchStatus.REJECTED, now)

    def expire(self, now: Optional[datetime] = None) -> "Match":
        if not self.is_due_for_expiry(now):
            raise InvalidStateTransitionException("Match", self.status.value, MatchStatus.EXPIRED.value)
        return self._transition(MatchStatus.EXPIRED)

    def is_due_for_expiry(self, now: Optional[datetime] = None) -> bool:
        if self.status is not MatchStatus.PENDING or self.expires_at is None:
            return False
        return _as_aware(self.expires_at) <= (now or _utcnow())

    def _answer(self, target: MatchStatus, now: Optional[datetime]) -> "Match":
        # Past its deadline a pending match is expired, swept or not
        if self.is_due_for_expiry(now):
            raise InvalidStateTransitionException("Match", MatchStatus.EXPIRED.value, target.value)
        return self._transition(target)

    def _transition(self, target: MatchStatus) -> "Match":
        if self.status is target:
            return self
        if self.status.is_terminal:
            raise InvalidStateTransitionException("Match", self.status.value, target.value)
        # expires_at only applies while pending
        return replace(self, status=target, expires_at=None, updated_at=_utcnow())

    # Views

    def mark_viewed_by(self, user_id: UUID) -> "Match":
        if user_id == self.employer_id:
            if self.viewed_by_employer:
                return self
            return replace(self, viewed_by_employer=True, updated_at=_utcnow())
        if user_id == self.candidate_id:
            if self.viewed_by_candidate:
                return self
            return replace(self, viewed_by_candidate=True, updated_at=_utcnow())
        raise ValueError(f"User {user_id} is not a party to match {self.id}")

    # Editable fields

    def with_changes(
        self,
        type: Optional[str] = None,
        message: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> "Match":
        changes = {}
        if type is not None:
            if not type.strip():
                raise ValidationException("type", "must not be empty")
            changes["type"] = type.strip()
        if message is not None:
            changes["message"] = message
        if expires_at is not None:
            if self.status is not MatchStatus.PENDING:
                raise ValidationException("expires_at", "can only be set on a pending match")
            changes["expires_at"] = expires_at
        if not changes:
            return self
        return replace(self, updated_at=_utcnow(), **changes)

    def __str__(self) -> str:
        return f"Match(job={self.job_id}, candidate={self.candidate_id}, {self.status.value}, {self.score})"

"""
Match Service Implementation
Concrete implementation of IMatchService
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from loguru import logger

from application.repositories.interfaces import (
    IJobRepository,
    IMatchRepository,
    IUserRepository,
    MatchQuery,
)
from application.services.notifications import INotificationDispatcher, NotificationRequest
from application.services.similarity import ISimilarityService
from core.exceptions import (
    AuthorizationException,
    InvalidStateTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.entities import Job, Match, User
from domain.enums import MatchSort, MatchStatus, NotificationType
from domain.value_objects import MatchFactors
from .interfaces import IMatchService


DEFAULT_TTL_HOURS = 24 * 7
MAX_PAGE_SIZE = 100


class MatchService(IMatchService):
    """Match orchestration over repositories, the similarity engine and the notification sink"""

    def __init__(
        self,
        match_repository: IMatchRepository,
        job_repository: IJobRepository,
        user_repository: IUserRepository,
        similarity_service: ISimilarityService,
        notification_dispatcher: INotificationDispatcher,
        default_ttl_hours: int = DEFAULT_TTL_HOURS,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self.match_repo = match_repository
        self.job_repo = job_repository
        self.user_repo = user_repository
        self.similarity = similarity_service
        self.notifications = notification_dispatcher
        self.default_ttl = timedelta(hours=default_ttl_hours)
        self.max_page_size = max_page_size

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
        if not match_type or not match_type.strip():
            raise ValidationException("type", "is required")

        job = await self.job_repo.get_by_id(job_id)
        if job is None:
            raise ResourceNotFoundException("Job", str(job_id))

        if not job.is_owned_by(requester.id):
            logger.warning(f"User {requester.id} tried to match on job {job_id} they do not own")
            raise AuthorizationException("Only the job's employer can create matches for it")

        candidate = await self.user_repo.get_by_id(candidate_id)
        if candidate is None:
            raise ResourceNotFoundException("User", str(candidate_id))

        now = datetime.now(timezone.utc)
        if expires_at is None:
            expires_at = now + self.default_ttl
        elif _aware(expires_at) <= now:
            raise ValidationException("expires_at", "must be in the future")

        if match_factors is None and auto_factors:
            match_factors = self.calculate_factors(candidate, job)

        if match_factors is not None:
            score = match_factors.weighted_score()
        else:
            score = self.similarity.calculate_match_score(candidate.profile_text(), job.description)

        match = Match(
            id=uuid4(),
            job_id=job.id,
            candidate_id=candidate.id,
            employer_id=job.employer_id,
            score=score,
            type=match_type.strip(),
            status=MatchStatus.PENDING,
            message=message,
            match_factors=match_factors,
            expires_at=expires_at,
            created_at=now,
            updated_at=now,
        )

        # The unique (job, candidate) constraint decides duplicates
        created = await self.match_repo.create(match)
        logger.info(f"Match {created.id} created: job={job.id} candidate={candidate.id} score={created.score}")

        self._notify(NotificationRequest(
            recipient_id=candidate.id,
            sender_id=requester.id,
            type=NotificationType.MATCH_CREATED,
            title="New match",
            message=f"{requester.full_name} wants to match with you for {job.title}.",
            data={"match_id": str(created.id), "job_id": str(job.id)},
        ))
        return created

    async def list_matches(
        self,
        requester: User,
        status: Optional[MatchStatus] = None,
        match_type: Optional[str] = None,
        sort: MatchSort = MatchSort.NEWEST,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Match], int]:
        if page < 1:
            raise ValidationException("page", "must be at least 1")
        if not 1 <= limit <= self.max_page_size:
            raise ValidationException("limit", f"must be between 1 and {self.max_page_size}")

        query = MatchQuery(
            participant_id=requester.id,
            status=status,
            type=match_type,
            sort=sort,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return await self.match_repo.list_for_participant(query)

    async def get_match(self, requester: User, match_id: UUID) -> Match:
        return await self._get_for_party(requester, match_id)

    async def update_match(
        self,
        requester: User,
        match_id: UUID,
        match_type: Optional[str] = None,
        message: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> Match:
        match = await self._get_for_party(requester, match_id)
        if expires_at is not None and _aware(expires_at) <= datetime.now(timezone.utc):
            raise ValidationException("expires_at", "must be in the future")

        updated = match.with_changes(type=match_type, message=message, expires_at=expires_at)
        if updated is match:
            return match
        return await self.match_repo.update(updated)

    async def delete_match(self, requester: User, match_id: UUID) -> None:
        match = await self._get_for_party(requester, match_id)
        await self.match_repo.delete(match.id)
        logger.info(f"Match {match.id} deleted by {requester.id}")

    async def accept_match(self, requester: User, match_id: UUID) -> Match:
        return await self._answer(requester, match_id, MatchStatus.ACCEPTED)

    async def reject_match(self, requester: User, match_id: UUID) -> Match:
        return await self._answer(requester, match_id, MatchStatus.REJECTED)

    async def _answer(self, requester: User, match_id: UUID, target: MatchStatus) -> Match:
        """
        Move a pending match to accepted or rejected.

        The write is conditional on the row still being pending and not
        overdue, so a concurrent expiry or answer is never overwritten. The
        other party is notified only when this call made the change.
        """
        match = await self._get_for_party(requester, match_id)
        if match.status is target:
            logger.debug(f"Match {match.id} already {target.value}")
            return match

        now = datetime.now(timezone.utc)
        if target is MatchStatus.ACCEPTED:
            match.accept(now)
        else:
            match.reject(now)

        saved = await self.match_repo.transition(match.id, target, now)
        if saved is None:
            current = await self.match_repo.get_by_id(match.id)
            if current is None:
                raise ResourceNotFoundException("Match", str(match_id))
            if current.status is target:
                logger.debug(f"Match {match.id} already {target.value}")
                return current
            if current.status is MatchStatus.PENDING:
                # Still pending but the deadline passed before the write
                raise InvalidStateTransitionException("Match", MatchStatus.EXPIRED.value, target.value)
            raise InvalidStateTransitionException("Match", current.status.value, target.value)

        logger.info(f"Match {match.id} {target.value} by {requester.id}")
        if target is MatchStatus.ACCEPTED:
            notification_type, verb = NotificationType.MATCH_ACCEPTED, "accepted"
        else:
            notification_type, verb = NotificationType.MATCH_REJECTED, "rejected"
        self._notify(NotificationRequest(
            recipient_id=match.other_party(requester.id),
            sender_id=requester.id,
            type=notification_type,
            title=f"Match {verb}",
            message=f"{requester.full_name} {verb} the match.",
            data={"match_id": str(match.id), "job_id": str(match.job_id)},
        ))
        return saved

    async def mark_viewed(self, requester: User, match_id: UUID) -> Match:
        match = await self._get_for_party(requester, match_id)
        viewed = match.mark_viewed_by(requester.id)
        if viewed is match:
            return match
        return await self.match_repo.update(viewed)

    async def expire_due_matches(self, now: datetime, limit: int = 100) -> List[Match]:
        expired: List[Match] = []
        for candidate in await self.match_repo.find_due_for_expiry(now, limit=limit):
            match = await self.match_repo.mark_expired(candidate.id, now)
            if match is None:
                # Another sweeper or a concurrent accept/reject got there first
                continue
            expired.append(match)
            for recipient in (match.candidate_id, match.employer_id):
                self._notify(NotificationRequest(
                    recipient_id=recipient,
                    type=NotificationType.MATCH_EXPIRED,
                    title="Match expired",
                    message="A pending match expired before it was answered.",
                    data={"match_id": str(match.id), "job_id": str(match.job_id)},
                ))

        if expired:
            logger.info(f"Expired {len(expired)} pending match(es)")
        return expired

    def calculate_factors(self, candidate: User, job: Job) -> MatchFactors:
        return MatchFactors.derive(
            candidate_skills=candidate.skills,
            required_skills=job.requirements,
            candidate_years=candidate.experience_years,
            required_years=job.min_experience_years,
            candidate_education=candidate.education_level,
            required_education=job.education_level,
            candidate_location=candidate.location,
            job_location=job.location,
            is_remote=job.is_remote,
        )

    async def _get_for_party(self, requester: User, match_id: UUID) -> Match:
        match = await self.match_repo.get_by_id(match_id)
        if match is None:
            raise ResourceNotFoundException("Match", str(match_id))
        if not match.is_party(requester.id):
            raise AuthorizationException("Not authorized to access this match")
        return match

    def _notify(self, request: NotificationRequest) -> None:
        try:
            self.notifications.dispatch(request)
        except Exception:
            logger.exception(f"Failed to dispatch {request.type.value} notification to {request.recipient_id}")


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

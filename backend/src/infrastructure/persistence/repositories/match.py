"""
Match Repository Implementation
SQLAlchemy-based match repository.

Uniqueness of (job_id, candidate_id) is left to the database constraint so
concurrent creates cannot both succeed.
"""
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Match
from domain.enums import MatchSort, MatchStatus
from domain.value_objects import MatchFactors, MatchScore
from application.repositories.interfaces import IMatchRepository, MatchQuery
from infrastructure.persistence.models.match import MatchModel
from core.exceptions import DuplicateResourceException, RepositoryException
from ._time import as_utc, utcnow


UNIQUE_CONSTRAINT_NAME = "uq_matches_job_candidate"


def _is_duplicate_pair(error: IntegrityError) -> bool:
    text = str(error.orig)
    # postgres names the constraint, sqlite names the columns
    return UNIQUE_CONSTRAINT_NAME in text or "UNIQUE constraint failed: matches.job_id" in text


class SQLAlchemyMatchRepository(IMatchRepository):
    """SQLAlchemy implementation of match repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, match_id: UUID) -> Optional[Match]:
        """Get match by ID"""
        try:
            result = await self.session.execute(
                select(MatchModel)
                .where(MatchModel.id == match_id)
                .execution_options(populate_existing=True)
            )
            model = result.scalar_one_or_none()

            if model:
                return self._to_entity(model)
            return None

        except Exception as e:
            logger.error(f"Failed to get match by ID {match_id}: {str(e)}")
            raise RepositoryException(f"Failed to get match: {str(e)}")

    async def create(self, match: Match) -> Match:
        """Insert a new match; a second match for the same pair is a duplicate"""
        try:
            model = self._to_model(match)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except IntegrityError as e:
            await self.session.rollback()
            if _is_duplicate_pair(e):
                logger.info(f"Duplicate match for job {match.job_id} and candidate {match.candidate_id}")
                raise DuplicateResourceException(
                    "Match", "job_id,candidate_id", f"{match.job_id},{match.candidate_id}"
                )
            logger.error(f"Integrity error creating match: {str(e)}")
            raise RepositoryException(f"Failed to create match: {str(e)}")
        except Exception as e:
            logger.error(f"Failed to create match for job {match.job_id}: {str(e)}")
            raise RepositoryException(f"Failed to create match: {str(e)}")

    async def update(self, match: Match) -> Match:
        """Persist the mutable fields of an existing match"""
        try:
            result = await self.session.execute(
                select(MatchModel).where(MatchModel.id == match.id)
            )
            model = result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to load match {match.id}: {str(e)}")
            raise RepositoryException(f"Failed to update match: {str(e)}")

        if not model:
            raise RepositoryException(f"Match not found: {match.id}")

        try:
            model.type = match.type
            model.message = match.message
            model.status = match.status.value
            model.viewed_by_employer = match.viewed_by_employer
            model.viewed_by_candidate = match.viewed_by_candidate
            model.expires_at = match.expires_at
            model.updated_at = match.updated_at or utcnow()

            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to update match {match.id}: {str(e)}")
            raise RepositoryException(f"Failed to update match: {str(e)}")

    async def delete(self, match_id: UUID) -> bool:
        try:
            result = await self.session.execute(
                delete(MatchModel)
                .where(MatchModel.id == match_id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0

        except Exception as e:
            logger.error(f"Failed to delete match {match_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete match: {str(e)}")

    async def list_for_participant(self, query: MatchQuery) -> Tuple[List[Match], int]:
        """Matches where the user is candidate or employer"""
        try:
            conditions = [
                or_(
                    MatchModel.candidate_id == query.participant_id,
                    MatchModel.employer_id == query.participant_id,
                )
            ]
            if query.status is not None:
                conditions.append(MatchModel.status == query.status.value)
            if query.type:
                conditions.append(MatchModel.type == query.type)

            where = and_(*conditions)

            stmt = select(MatchModel).where(where)
            if query.sort is MatchSort.OLDEST:
                stmt = stmt.order_by(MatchModel.created_at.asc(), MatchModel.id.asc())
            elif query.sort is MatchSort.SCORE:
                stmt = stmt.order_by(MatchModel.score.desc(), MatchModel.created_at.desc(), MatchModel.id.desc())
            else:
                stmt = stmt.order_by(MatchModel.created_at.desc(), MatchModel.id.desc())
            stmt = stmt.limit(query.limit).offset(query.offset)

            result = await self.session.execute(stmt)
            models = result.scalars().all()

            total = (
                await self.session.execute(
                    select(func.count()).select_from(MatchModel).where(where)
                )
            ).scalar_one()

            return [self._to_entity(model) for model in models], total

        except Exception as e:
            logger.error(f"Failed to list matches for {query.participant_id}: {str(e)}")
            raise RepositoryException(f"Failed to list matches: {str(e)}")

    async def find_due_for_expiry(self, now: datetime, limit: int = 100) -> List[Match]:
        try:
            result = await self.session.execute(
                select(MatchModel)
                .where(
                    MatchModel.status == MatchStatus.PENDING.value,
                    MatchModel.expires_at.is_not(None),
                    MatchModel.expires_at <= now,
                )
                .order_by(MatchModel.expires_at.asc())
                .limit(limit)
            )
            return [self._to_entity(model) for model in result.scalars().all()]

        except Exception as e:
            logger.error(f"Failed to find expired matches: {str(e)}")
            raise RepositoryException(f"Failed to find expired matches: {str(e)}")

    async def mark_expired(self, match_id: UUID, now: datetime) -> Optional[Match]:
        """Conditional pending -> expired; None if another writer got there first"""
        try:
            result = await self.session.execute(
                update(MatchModel)
                .where(
                    MatchModel.id == match_id,
                    MatchModel.status == MatchStatus.PENDING.value,
                    MatchModel.expires_at.is_not(None),
                    MatchModel.expires_at <= now,
                )
                .values(status=MatchStatus.EXPIRED.value, expires_at=None, updated_at=now)
                .execution_options(synchronize_session=False)
            )
        except Exception as e:
            logger.error(f"Failed to expire match {match_id}: {str(e)}")
            raise RepositoryException(f"Failed to expire match: {str(e)}")

        if result.rowcount != 1:
            return None
        return await self.get_by_id(match_id)

    async def transition(self, match_id: UUID, target: MatchStatus, now: datetime) -> Optional[Match]:
        """Conditional pending -> target while the deadline has not passed"""
        try:
            result = await self.session.execute(
                update(MatchModel)
                .where(
                    MatchModel.id == match_id,
                    MatchModel.status == MatchStatus.PENDING.value,
                    or_(MatchModel.expires_at.is_(None), MatchModel.expires_at > now),
                )
                .values(status=target.value, expires_at=None, updated_at=now)
                .execution_options(synchronize_session=False)
            )
        except Exception as e:
            logger.error(f"Failed to move match {match_id} to {target.value}: {str(e)}")
            raise RepositoryException(f"Failed to update match status: {str(e)}")

        if result.rowcount != 1:
            return None
        return await self.get_by_id(match_id)

    def _to_entity(self, model: MatchModel) -> Match:
        """Convert ORM model to domain entity"""
        return Match(
            id=model.id,
            job_id=model.job_id,
            candidate_id=model.candidate_id,
            employer_id=model.employer_id,
            score=MatchScore.clamped(model.score or 0.0),
            type=model.type,
            status=MatchStatus(model.status),
            message=model.message,
            match_factors=MatchFactors.from_dict(model.match_factors) if model.match_factors else None,
            viewed_by_employer=bool(model.viewed_by_employer),
            viewed_by_candidate=bool(model.viewed_by_candidate),
            expires_at=as_utc(model.expires_at),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    def _to_model(self, entity: Match) -> MatchModel:
        """Convert domain entity to ORM model"""
        now = utcnow()
        return MatchModel(
            id=entity.id,
            job_id=entity.job_id,
            candidate_id=entity.candidate_id,
            employer_id=entity.employer_id,
            score=float(entity.score),
            type=entity.type,
            status=entity.status.value,
            message=entity.message,
            match_factors=entity.match_factors.to_dict() if entity.match_factors else None,
            viewed_by_employer=entity.viewed_by_employer,
            viewed_by_candidate=entity.viewed_by_candidate,
            expires_at=entity.expires_at,
            created_at=entity.created_at or now,
            updated_at=entity.updated_at or now,
        )


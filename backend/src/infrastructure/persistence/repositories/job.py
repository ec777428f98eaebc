"""
Job Repository Implementation
SQLAlchemy-based job repository
"""
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Job
from domain.enums import EducationLevel
from application.repositories.interfaces import IJobRepository
from infrastructure.persistence.models.job import JobModel
from core.exceptions import RepositoryException
from ._time import as_utc, utcnow


class SQLAlchemyJobRepository(IJobRepository):
    """SQLAlchemy implementation of job repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID"""
        try:
            result = await self.session.execute(
                select(JobModel).where(JobModel.id == job_id)
            )
            model = result.scalar_one_or_none()

            if model:
                return self._to_entity(model)
            return None

        except Exception as e:
            logger.error(f"Failed to get job by ID {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to get job: {str(e)}")

    async def create(self, job: Job) -> Job:
        """Create new job"""
        try:
            model = self._to_model(job)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)

            logger.info(f"Created job {model.id} for employer {model.employer_id}")
            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to create job {job.title}: {str(e)}")
            raise RepositoryException(f"Failed to create job: {str(e)}")

    async def list(
        self,
        employer_id: Optional[UUID] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Job], int]:
        """List jobs newest first"""
        try:
            query = select(JobModel)
            count_query = select(func.count()).select_from(JobModel)
            if employer_id is not None:
                query = query.where(JobModel.employer_id == employer_id)
                count_query = count_query.where(JobModel.employer_id == employer_id)

            query = query.order_by(JobModel.created_at.desc(), JobModel.id.desc())
            query = query.limit(limit).offset(offset)

            result = await self.session.execute(query)
            models = result.scalars().all()
            total = (await self.session.execute(count_query)).scalar_one()

            return [self._to_entity(model) for model in models], total

        except Exception as e:
            logger.error(f"Failed to list jobs: {str(e)}")
            raise RepositoryException(f"Failed to list jobs: {str(e)}")

    def _to_entity(self, model: JobModel) -> Job:
        """Convert ORM model to domain entity"""
        return Job(
            id=model.id,
            employer_id=model.employer_id,
            title=model.title,
            company=model.company,
            description=model.description or "",
            requirements=list(model.requirements or []),
            location=model.location,
            is_remote=bool(model.is_remote),
            min_experience_years=model.min_experience_years,
            education_level=EducationLevel(model.education_level) if model.education_level else None,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    def _to_model(self, entity: Job) -> JobModel:
        """Convert domain entity to ORM model"""
        now = utcnow()
        return JobModel(
            id=entity.id,
            employer_id=entity.employer_id,
            title=entity.title,
            company=entity.company,
            description=entity.description,
            requirements=list(entity.requirements),
            location=entity.location,
            is_remote=entity.is_remote,
            min_experience_years=entity.min_experience_years,
            education_level=entity.education_level.value if entity.education_level else None,
            created_at=entity.created_at or now,
            updated_at=entity.updated_at or now,
        )


# Alias for convenience
JobRepository = SQLAlchemyJobRepository

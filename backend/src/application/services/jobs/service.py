"""
Job Posting Service
Employers publish postings; any authenticated user can read them
"""
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from loguru import logger

from application.repositories.interfaces import IJobRepository
from core.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.entities import Job, User
from domain.enums import EducationLevel


class JobService:
    """Job posting use cases"""

    def __init__(self, job_repository: IJobRepository):
        self.job_repo = job_repository

    async def create_job(
        self,
        employer: User,
        title: str,
        company: str,
        description: str = "",
        requirements: Optional[List[str]] = None,
        location: Optional[str] = None,
        is_remote: bool = False,
        min_experience_years: Optional[float] = None,
        education_level: Optional[EducationLevel] = None,
    ) -> Job:
        if not employer.is_employer:
            raise AuthorizationException("Only employers can post jobs")
        if not title or not title.strip():
            raise ValidationException("title", "is required")
        if not company or not company.strip():
            raise ValidationException("company", "is required")
        if min_experience_years is not None and min_experience_years < 0:
            raise ValidationException("min_experience_years", "must not be negative")

        now = datetime.now(timezone.utc)
        job = Job(
            id=uuid4(),
            employer_id=employer.id,
            title=title.strip(),
            company=company.strip(),
            description=description or "",
            requirements=[r.strip() for r in (requirements or []) if r and r.strip()],
            location=(location or "").strip() or None,
            is_remote=is_remote,
            min_experience_years=min_experience_years,
            education_level=education_level,
            created_at=now,
            updated_at=now,
        )
        created = await self.job_repo.create(job)
        logger.info(f"Job {created.id} posted by employer {employer.id}")
        return created

    async def get_job(self, job_id: UUID) -> Job:
        job = await self.job_repo.get_by_id(job_id)
        if job is None:
            raise ResourceNotFoundException("Job", str(job_id))
        return job

    async def list_jobs(
        self,
        employer_id: Optional[UUID] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Job], int]:
        if page < 1:
            raise ValidationException("page", "must be at least 1")
        if not 1 <= limit <= 100:
            raise ValidationException("limit", "must be between 1 and 100")
        return await self.job_repo.list(employer_id=employer_id, limit=limit, offset=(page - 1) * limit)

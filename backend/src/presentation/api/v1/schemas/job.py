"""
Job Posting Schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.entities import Job
from domain.enums import EducationLevel


class JobCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    company: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=50_000)
    requirements: List[str] = Field(default_factory=list, description="Required skills")
    location: Optional[str] = Field(None, max_length=255)
    is_remote: bool = False
    min_experience_years: Optional[float] = Field(None, ge=0, le=80)
    education_level: Optional[EducationLevel] = None


class JobResponse(BaseModel):
    id: UUID
    employer_id: UUID
    title: str
    company: str
    description: str
    requirements: List[str]
    location: Optional[str] = None
    is_remote: bool
    min_experience_years: Optional[float] = None
    education_level: Optional[EducationLevel] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, job: Job) -> "JobResponse":
        return cls(
            id=job.id,
            employer_id=job.employer_id,
            title=job.title,
            company=job.company,
            description=job.description,
            requirements=list(job.requirements),
            location=job.location,
            is_remote=job.is_remote,
            min_experience_years=job.min_experience_years,
            education_level=job.education_level,
            created_at=job.created_at,
        )


class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    total: int
    page: int
    pages: int

"""
Job Posting Endpoints
/api/v1/jobs/* routes
"""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from domain.entities import User
from application.services.jobs import JobService
from presentation.api.v1.container import get_job_service
from presentation.api.v1.dependencies import get_current_user
from presentation.api.v1.schemas.common import ApiResponse, page_count
from presentation.api.v1.schemas.job import JobCreateRequest, JobListResponse, JobResponse


router = APIRouter()


@router.post("/jobs", response_model=ApiResponse[JobResponse], status_code=status.HTTP_201_CREATED)
async def create_job(
    body: JobCreateRequest,
    current_user: User = Depends(get_current_user),
    job_service: JobService = Depends(get_job_service)
):
    """Post a job (employers only)"""
    job = await job_service.create_job(
        current_user,
        title=body.title,
        company=body.company,
        description=body.description,
        requirements=body.requirements,
        location=body.location,
        is_remote=body.is_remote,
        min_experience_years=body.min_experience_years,
        education_level=body.education_level,
    )
    return ApiResponse(data=JobResponse.from_entity(job), message="Job created")


@router.get("/jobs", response_model=ApiResponse[JobListResponse])
async def list_jobs(
    mine: bool = Query(False, description="Only the caller's own postings"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    job_service: JobService = Depends(get_job_service)
):
    jobs, total = await job_service.list_jobs(
        employer_id=current_user.id if mine else None,
        page=page,
        limit=limit,
    )
    return ApiResponse(data=JobListResponse(
        jobs=[JobResponse.from_entity(job) for job in jobs],
        total=total,
        page=page,
        pages=page_count(total, limit),
    ))


@router.get("/jobs/{job_id}", response_model=ApiResponse[JobResponse])
async def get_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    job_service: JobService = Depends(get_job_service)
):
    job = await job_service.get_job(job_id)
    return ApiResponse(data=JobResponse.from_entity(job))

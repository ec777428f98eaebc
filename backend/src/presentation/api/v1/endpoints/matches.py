"""
Match Endpoints
/api/v1/matches/* routes

Every route acts on behalf of the authenticated user; a match is only
visible to its candidate and its employer.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from core.config import settings
from domain.entities import User
from domain.enums import MatchSort, MatchStatus
from application.services.matching import IMatchService
from presentation.api.v1.container import get_match_service
from presentation.api.v1.dependencies import get_current_user
from presentation.api.v1.rate_limit import DEFAULT_LIMIT, limiter
from presentation.api.v1.schemas.common import ApiResponse, page_count
from presentation.api.v1.schemas.match import (
    MatchCreateRequest,
    MatchListResponse,
    MatchResponse,
    MatchUpdateRequest,
)


router = APIRouter()


@router.post("/matches", response_model=ApiResponse[MatchResponse], status_code=status.HTTP_201_CREATED)
@limiter.limit(DEFAULT_LIMIT)
async def create_match(
    request: Request,
    body: MatchCreateRequest,
    current_user: User = Depends(get_current_user),
    match_service: IMatchService = Depends(get_match_service)
):
    """
    Create a pending match for one of the caller's jobs

    - 404 when the job or candidate does not exist
    - 403 when the caller does not own the job
    - 409 when the pair is already matched
    """
    match = await match_service.create_match(
        current_user,
        job_id=body.job_id,
        candidate_id=body.user_id,
        match_type=body.type,
        message=body.message,
        match_factors=body.match_factors.to_domain() if body.match_factors else None,
        auto_factors=body.auto_factors,
        expires_at=body.expires_at,
    )
    return ApiResponse(data=MatchResponse.from_entity(match), message="Match created")


@router.get("/matches", response_model=ApiResponse[MatchListResponse])
async def list_matches(
    status_filter: Optional[MatchStatus] = Query(None, alias="status"),
    match_type: Optional[str] = Query(None, alias="type", max_length=50),
    sort: MatchSort = Query(MatchSort.NEWEST),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.MATCH_LIST_MAX_LIMIT),
    current_user: User = Depends(get_current_user),
    match_service: IMatchService = Depends(get_match_service)
):
    """Matches where the caller is the candidate or the employer"""
    matches, total = await match_service.list_matches(
        current_user,
        status=status_filter,
        match_type=match_type,
        sort=sort,
        page=page,
        limit=limit,
    )
    return ApiResponse(data=MatchListResponse(
        matches=[MatchResponse.from_entity(m) for m in matches],
        total=total,
        page=page,
        pages=page_count(total, limit),
    ))


@router.get("/matches/{match_id}", response_model=ApiResponse[MatchResponse])
async def get_match(
    match_id: UUID,
    current_user: User = Depends(get_current_user),
    match_service: IMatchService = Depends(get_match_service)
):
    match = await match_service.get_match(current_user, match_id)
    return ApiResponse(data=MatchResponse.from_entity(match))


@router.put("/matches/{match_id}", response_model=ApiResponse[MatchResponse])
async def update_match(
    match_id: UUID,
    body: MatchUpdateRequest,
    current_user: User = Depends(get_current_user),
    match_service: IMatchService = Depends(get_match_service)
):
    match = await match_service.update_match(
        current_user,
        match_id,
        match_type=body.type,
        message=body.message,
        expires_at=body.expires_at,
    )
    return ApiResponse(data=MatchResponse.from_entity(match), message="Match updated")


@router.delete("/matches/{match_id}", response_model=ApiResponse[None])
async def delete_match(
    match_id: UUID,
    current_user: User = Depends(get_current_user),
    match_service: IMatchService = Depends(get_match_service)
):
    await match_service.delete_match(current_user, match_id)
    return ApiResponse(message="Match deleted")


@router.post("/matches/{match_id}/accept", response_model=ApiResponse[MatchResponse])
async def accept_match(
    match_id: UUID,
    current_user: User = Depends(get_current_user),
    match_service: IMatchService = Depends(get_match_service)
):
    match = await match_service.accept_match(current_user, match_id)
    return ApiResponse(data=MatchResponse.from_entity(match), message="Match accepted")


@router.post("/matches/{match_id}/reject", response_model=ApiResponse[MatchResponse])
async def reject_match(
    match_id: UUID,
    current_user: User = Depends(get_current_user),
    match_service: IMatchService = Depends(get_match_service)
):
    match = await match_service.reject_match(current_user, match_id)
    return ApiResponse(data=MatchResponse.from_entity(match), message="Match rejected")


@router.post("/matches/{match_id}/view", response_model=ApiResponse[MatchResponse])
async def mark_viewed(
    match_id: UUID,
    current_user: User = Depends(get_current_user),
    match_service: IMatchService = Depends(get_match_service)
):
    match = await match_service.mark_viewed(current_user, match_id)
    return ApiResponse(data=MatchResponse.from_entity(match))

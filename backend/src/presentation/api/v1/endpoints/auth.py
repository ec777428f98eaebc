"""
Authentication Endpoints
/api/v1/auth/* routes
"""
from fastapi import APIRouter, Depends, Request, status
from loguru import logger

from domain.entities import User
from application.services.auth.interfaces import IAuthService, IJwtService
from presentation.api.v1.container import get_auth_service, get_jwt_service
from presentation.api.v1.dependencies import get_current_user
from presentation.api.v1.rate_limit import DEFAULT_LIMIT, limiter
from presentation.api.v1.schemas.auth import (
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from presentation.api.v1.schemas.common import ApiResponse


router = APIRouter()


def _token_response(user: User, jwt_service: IJwtService) -> TokenResponse:
    access_token, refresh_token = jwt_service.create_token_pair(user.id)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserResponse.from_entity(user),
    )


@router.post("/register", response_model=ApiResponse[TokenResponse], status_code=status.HTTP_201_CREATED)
@limiter.limit(DEFAULT_LIMIT)
async def register(
    request: Request,
    body: RegisterRequest,
    auth_service: IAuthService = Depends(get_auth_service),
    jwt_service: IJwtService = Depends(get_jwt_service)
):
    """Create a candidate or employer account and return its tokens"""
    user, message = await auth_service.register(
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        role=body.role,
    )
    return ApiResponse(data=_token_response(user, jwt_service), message=message)


@router.post("/login", response_model=ApiResponse[TokenResponse])
@limiter.limit(DEFAULT_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: IAuthService = Depends(get_auth_service),
    jwt_service: IJwtService = Depends(get_jwt_service)
):
    user, message = await auth_service.login(body.email, body.password)
    return ApiResponse(data=_token_response(user, jwt_service), message=message)


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(current_user: User = Depends(get_current_user)):
    return ApiResponse(data=UserResponse.from_entity(current_user))


@router.put("/me", response_model=ApiResponse[UserResponse])
async def update_me(
    body: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    auth_service: IAuthService = Depends(get_auth_service)
):
    """Update the caller's matching profile (CV text, skills, experience, education, location)"""
    updated = await auth_service.update_profile(
        current_user,
        full_name=body.full_name,
        cv_text=body.cv_text,
        skills=body.skills,
        experience_years=body.experience_years,
        education_level=body.education_level,
        location=body.location,
    )
    logger.debug(f"Profile of {current_user.id} saved")
    return ApiResponse(data=UserResponse.from_entity(updated), message="Profile updated")

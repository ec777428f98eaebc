"""
FastAPI Dependencies
Current user and authentication
"""
from typing import Optional

from fastapi import Depends, HTTPException, status, Header

from domain.entities import User
from application.services.auth.interfaces import IAuthService
from core.exceptions import AuthenticationException
from .container import get_auth_service


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: Optional[str] = Header(None),
    auth_service: IAuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            ...
    """
    if not authorization:
        raise _unauthorized("Missing authorization header")

    # Extract token from "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Invalid authorization header format")

    try:
        return await auth_service.verify_access_token(parts[1])
    except AuthenticationException:
        raise _unauthorized("Invalid or expired token")

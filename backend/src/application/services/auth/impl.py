"""
Authentication Service Implementation
Concrete implementation of IAuthService
"""
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from loguru import logger

from domain.entities import User
from domain.enums import EducationLevel, UserRole
from domain.value_objects import Email
from core.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuplicateResourceException,
    ValidationException
)
from application.repositories.interfaces import IUserRepository
from .interfaces import IAuthService, IJwtService, IPasswordHasher


MIN_PASSWORD_LENGTH = 8


class AuthService(IAuthService):
    """Authentication service implementation"""

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        jwt_service: IJwtService
    ):
        self.user_repo = user_repository
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        role: UserRole = UserRole.CANDIDATE
    ) -> Tuple[User, str]:
        """Register a new user"""

        logger.info(f"Registering new user: {email}")

        try:
            email_vo = Email(email)
        except ValueError as e:
            raise ValidationException("email", str(e))

        if role is UserRole.ADMIN:
            raise AuthorizationException("Admin accounts cannot be self-registered")

        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationException("password", f"must be at least {MIN_PASSWORD_LENGTH} characters")

        if not full_name or not full_name.strip():
            raise ValidationException("full_name", "is required")

        if await self.user_repo.exists_by_email(email_vo.value):
            raise DuplicateResourceException("User", "email", email_vo.value)

        now = datetime.now(timezone.utc)
        user = User(
            id=uuid4(),
            email=email_vo,
            password_hash=self.password_hasher.hash_password(password),
            full_name=full_name.strip(),
            role=role,
            created_at=now,
            updated_at=now
        )

        created_user = await self.user_repo.create(user)

        logger.info(f"User registered successfully: {email_vo}")

        return created_user, "User registered successfully"

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """Authenticate user"""

        logger.info(f"Login attempt: {email}")

        user = await self.user_repo.get_by_email((email or "").strip().lower())
        if not user:
            logger.warning(f"Login failed: User not found - {email}")
            raise AuthenticationException("Invalid email or password")

        if not self.password_hasher.verify_password(password, user.password_hash):
            logger.warning(f"Login failed: Invalid password - {email}")
            raise AuthenticationException("Invalid email or password")

        logger.info(f"User logged in successfully: {email}")

        return user, "Logged in successfully"

    async def verify_access_token(self, token: str) -> User:
        payload = self.jwt_service.verify_token(token)
        if payload.get("type") != "access":
            raise AuthenticationException("Invalid token type")

        try:
            user_id = UUID(payload.get("sub", ""))
        except ValueError:
            raise AuthenticationException("Invalid token subject")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise AuthenticationException("User no longer exists")
        return user

    async def update_profile(
        self,
        user: User,
        full_name: Optional[str] = None,
        cv_text: Optional[str] = None,
        skills: Optional[List[str]] = None,
        experience_years: Optional[float] = None,
        education_level: Optional[EducationLevel] = None,
        location: Optional[str] = None
    ) -> User:
        changes = {}
        if full_name is not None:
            if not full_name.strip():
                raise ValidationException("full_name", "must not be empty")
            changes["full_name"] = full_name.strip()
        if cv_text is not None:
            changes["cv_text"] = cv_text
        if skills is not None:
            changes["skills"] = [s.strip() for s in skills if s and s.strip()]
        if experience_years is not None:
            if experience_years < 0:
                raise ValidationException("experience_years", "must not be negative")
            changes["experience_years"] = experience_years
        if education_level is not None:
            changes["education_level"] = education_level
        if location is not None:
            changes["location"] = location.strip() or None

        if not changes:
            return user

        updated = replace(user, updated_at=datetime.now(timezone.utc), **changes)
        logger.info(f"Profile updated for user {user.id}: {sorted(changes)}")
        return await self.user_repo.update(updated)

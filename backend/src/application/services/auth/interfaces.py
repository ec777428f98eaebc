"""
Authentication Service Interfaces
Abstract base classes for authentication services
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from uuid import UUID

from domain.entities import User
from domain.enums import EducationLevel, UserRole


class IPasswordHasher(ABC):
    """Password hashing interface"""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """Hash a plain password"""
        pass

    @abstractmethod
    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash"""
        pass


class IJwtService(ABC):
    """JWT token service interface"""

    @abstractmethod
    def create_access_token(self, user_id: UUID) -> str:
        """Create access token"""
        pass

    @abstractmethod
    def create_refresh_token(self, user_id: UUID) -> str:
        """Create refresh token"""
        pass

    @abstractmethod
    def verify_token(self, token: str) -> dict:
        """Verify and decode token; raises AuthenticationException when invalid"""
        pass

    def create_token_pair(self, user_id: UUID) -> Tuple[str, str]:
        """Create both access and refresh tokens"""
        return self.create_access_token(user_id), self.create_refresh_token(user_id)


class IAuthService(ABC):
    """Authentication service interface"""

    @abstractmethod
    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        role: UserRole = UserRole.CANDIDATE
    ) -> Tuple[User, str]:
        """
        Register a new user

        Returns:
            Tuple of (User, message)
        """
        pass

    @abstractmethod
    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user

        Returns:
            Tuple of (User, message)
        """
        pass

    @abstractmethod
    async def verify_access_token(self, token: str) -> User:
        """Resolve the user behind an access token"""
        pass

    @abstractmethod
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
        """Update the matching profile of a user"""
        pass

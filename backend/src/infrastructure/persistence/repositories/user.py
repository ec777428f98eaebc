"""
User Repository Implementation
SQLAlchemy-based user repository
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import User
from domain.enums import EducationLevel, UserRole
from domain.value_objects import Email
from application.repositories.interfaces import IUserRepository
from infrastructure.persistence.models.user import UserModel
from core.exceptions import DuplicateResourceException, RepositoryException
from ._time import as_utc, utcnow


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation of user repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.id == user_id)
            )
            model = result.scalar_one_or_none()

            if model:
                return self._to_entity(model)
            return None

        except Exception as e:
            logger.error(f"Failed to get user by ID {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.email == email.strip().lower())
            )
            model = result.scalar_one_or_none()

            if model:
                return self._to_entity(model)
            return None

        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def create(self, user: User) -> User:
        """Create new user"""
        try:
            model = self._to_model(user)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except IntegrityError:
            await self.session.rollback()
            raise DuplicateResourceException("User", "email", str(user.email))
        except Exception as e:
            logger.error(f"Failed to create user {user.email}: {str(e)}")
            raise RepositoryException(f"Failed to create user: {str(e)}")

    async def update(self, user: User) -> User:
        """Update existing user"""
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.id == user.id)
            )
            model = result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to load user {user.id}: {str(e)}")
            raise RepositoryException(f"Failed to update user: {str(e)}")

        if not model:
            raise RepositoryException(f"User not found: {user.id}")

        try:
            model.full_name = user.full_name
            model.cv_text = user.cv_text
            model.skills = list(user.skills)
            model.experience_years = user.experience_years
            model.education_level = user.education_level.value if user.education_level else None
            model.location = user.location
            model.updated_at = utcnow()

            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to update user {user.id}: {str(e)}")
            raise RepositoryException(f"Failed to update user: {str(e)}")

    async def exists_by_email(self, email: str) -> bool:
        try:
            result = await self.session.execute(
                select(UserModel.id).where(UserModel.email == email.strip().lower())
            )
            return result.scalar_one_or_none() is not None

        except Exception as e:
            logger.error(f"Failed to check user existence {email}: {str(e)}")
            raise RepositoryException(f"Failed to check user existence: {str(e)}")

    def _to_entity(self, model: UserModel) -> User:
        """Convert ORM model to domain entity"""
        return User(
            id=model.id,
            email=Email(model.email),
            password_hash=model.password_hash,
            full_name=model.full_name,
            role=UserRole(model.role),
            cv_text=model.cv_text or "",
            skills=list(model.skills or []),
            experience_years=model.experience_years,
            education_level=EducationLevel(model.education_level) if model.education_level else None,
            location=model.location,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    def _to_model(self, entity: User) -> UserModel:
        """Convert domain entity to ORM model"""
        now = utcnow()
        return UserModel(
            id=entity.id,
            email=str(entity.email),
            password_hash=entity.password_hash,
            full_name=entity.full_name,
            role=entity.role.value,
            cv_text=entity.cv_text,
            skills=list(entity.skills),
            experience_years=entity.experience_years,
            education_level=entity.education_level.value if entity.education_level else None,
            location=entity.location,
            created_at=entity.created_at or now,
            updated_at=entity.updated_at or now,
        )


# Alias for convenience
UserRepository = SQLAlchemyUserRepository

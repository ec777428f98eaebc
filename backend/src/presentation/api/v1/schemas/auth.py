"""
Authentication Request/Response Schemas
Pydantic v2 models with strict validation
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from domain.entities import User
from domain.enums import EducationLevel, UserRole


class RegisterRequest(BaseModel):
    """Account registration"""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = Field(UserRole.CANDIDATE, description="candidate or employer")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged"""

    model_config = ConfigDict(extra="forbid")

    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    cv_text: Optional[str] = Field(None, max_length=50_000)
    skills: Optional[List[str]] = None
    experience_years: Optional[float] = Field(None, ge=0, le=80)
    education_level: Optional[EducationLevel] = None
    location: Optional[str] = Field(None, max_length=255)

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return [s.strip() for s in v if s and s.strip()]


class UserResponse(BaseModel):
    id: UUID
    email: str
    full_name: str
    role: UserRole
    cv_text: str
    skills: List[str]
    experience_years: Optional[float] = None
    education_level: Optional[EducationLevel] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=str(user.email),
            full_name=user.full_name,
            role=user.role,
            cv_text=user.cv_text,
            skills=list(user.skills),
            experience_years=user.experience_years,
            education_level=user.education_level,
            location=user.location,
            created_at=user.created_at,
        )


class TokenResponse(BaseModel):
    """Tokens issued on register and login"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse

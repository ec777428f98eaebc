"""
User Domain Entity
Immutable user business object
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from ..enums import EducationLevel, UserRole
from ..value_objects import Email


@dataclass(frozen=True)
class User:
    """User domain entity - immutable"""

    id: UUID
    email: Email
    password_hash: str
    full_name: str
    role: UserRole = UserRole.CANDIDATE

    # Candidate profile
    cv_text: str = ""
    skills: List[str] = field(default_factory=list)
    experience_years: Optional[float] = None
    education_level: Optional[EducationLevel] = None
    location: Optional[str] = None

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_employer(self) -> bool:
        return self.role in (UserRole.EMPLOYER, UserRole.ADMIN)

    def profile_text(self) -> str:
        """Free text used for lexical matching; listed skills stand in for a missing CV"""
        if self.cv_text:
            return self.cv_text
        return " ".join(self.skills)

    def __str__(self) -> str:
        return f"User({self.email}, {self.role.value})"

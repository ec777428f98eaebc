"""
Job Domain Entity
A posting owned by an employer
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from ..enums import EducationLevel


@dataclass(frozen=True)
class Job:
    """Job posting domain entity"""

    id: UUID
    employer_id: UUID
    title: str
    company: str
    description: str = ""
    requirements: List[str] = field(default_factory=list)
    location: Optional[str] = None
    is_remote: bool = False
    min_experience_years: Optional[float] = None
    education_level: Optional[EducationLevel] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.employer_id == user_id

    def __str__(self) -> str:
        return f"Job({self.title} @ {self.company})"

"""
Match Request/Response Schemas
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities import Match
from domain.enums import MatchStatus
from domain.value_objects import MatchFactors
from domain.value_objects.match_factors import (
    EDUCATION_WEIGHT,
    EXPERIENCE_WEIGHT,
    LOCATION_WEIGHT,
    SKILLS_WEIGHT,
)


class SkillsFactorSchema(BaseModel):
    matched: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)
    percentage: float = Field(..., ge=0, le=100)
    weight: float = Field(SKILLS_WEIGHT, ge=0, le=1)


class ExperienceFactorSchema(BaseModel):
    required_years: float = Field(0.0, ge=0)
    candidate_years: float = Field(0.0, ge=0)
    percentage: float = Field(..., ge=0, le=100)
    weight: float = Field(EXPERIENCE_WEIGHT, ge=0, le=1)


class EducationFactorSchema(BaseModel):
    required: Optional[str] = None
    candidate: Optional[str] = None
    percentage: float = Field(..., ge=0, le=100)
    weight: float = Field(EDUCATION_WEIGHT, ge=0, le=1)


class LocationFactorSchema(BaseModel):
    required: Optional[str] = None
    candidate: Optional[str] = None
    percentage: float = Field(..., ge=0, le=100)
    weight: float = Field(LOCATION_WEIGHT, ge=0, le=1)


class MatchFactorsSchema(BaseModel):
    """Pre-computed factor breakdown supplied by the employer"""

    skills: SkillsFactorSchema
    experience: ExperienceFactorSchema
    education: EducationFactorSchema
    location: LocationFactorSchema

    def to_domain(self) -> MatchFactors:
        return MatchFactors.from_dict(self.model_dump())


class MatchCreateRequest(BaseModel):
    """
    Create a match between one of the caller's jobs and a candidate

    Scoring: match_factors when given, factors derived from both profiles
    when auto_factors is true, otherwise TF-IDF similarity of the
    candidate's CV text and the job description.
    """

    job_id: UUID
    user_id: UUID = Field(..., description="Candidate to match")
    type: str = Field(..., min_length=1, max_length=50)
    message: Optional[str] = Field(None, max_length=2000)
    match_factors: Optional[MatchFactorsSchema] = None
    auto_factors: bool = False
    expires_at: Optional[datetime] = None


class MatchUpdateRequest(BaseModel):
    """Editable fields only; parties, score and status are not writable here"""

    model_config = ConfigDict(extra="forbid")

    type: Optional[str] = Field(None, min_length=1, max_length=50)
    message: Optional[str] = Field(None, max_length=2000)
    expires_at: Optional[datetime] = None


class MatchResponse(BaseModel):
    id: UUID
    job_id: UUID
    candidate_id: UUID
    employer_id: UUID
    score: float
    type: str
    status: MatchStatus
    message: Optional[str] = None
    match_factors: Optional[Dict[str, Any]] = None
    viewed_by_employer: bool
    viewed_by_candidate: bool
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, match: Match) -> "MatchResponse":
        return cls(
            id=match.id,
            job_id=match.job_id,
            candidate_id=match.candidate_id,
            employer_id=match.employer_id,
            score=float(match.score),
            type=match.type,
            status=match.status,
            message=match.message,
            match_factors=match.match_factors.to_dict() if match.match_factors else None,
            viewed_by_employer=match.viewed_by_employer,
            viewed_by_candidate=match.viewed_by_candidate,
            expires_at=match.expires_at,
            created_at=match.created_at,
            updated_at=match.updated_at,
        )


class MatchListResponse(BaseModel):
    matches: List[MatchResponse]
    total: int
    page: int
    pages: int

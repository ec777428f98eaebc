"""
MatchFactors Value Object
Structured per-attribute breakdown used by the weighted scoring path
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..enums import EducationLevel, education_rank
from .match_score import MatchScore


SKILLS_WEIGHT = 0.40
EXPERIENCE_WEIGHT = 0.25
EDUCATION_WEIGHT = 0.20
LOCATION_WEIGHT = 0.15


def _check_percentage(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} percentage must be a number")
    if not 0 <= value <= 100:
        raise ValueError(f"{name} percentage must be between 0 and 100")


def _check_weight(name: str, value: float) -> None:
    if not 0 <= value <= 1:
        raise ValueError(f"{name} weight must be between 0 and 1")


@dataclass(frozen=True)
class SkillsFactor:
    matched: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    percentage: float = 0.0
    weight: float = SKILLS_WEIGHT

    def __post_init__(self):
        _check_percentage("skills", self.percentage)
        _check_weight("skills", self.weight)


@dataclass(frozen=True)
class ExperienceFactor:
    required_years: float = 0.0
    candidate_years: float = 0.0
    percentage: float = 0.0
    weight: float = EXPERIENCE_WEIGHT

    def __post_init__(self):
        _check_percentage("experience", self.percentage)
        _check_weight("experience", self.weight)


@dataclass(frozen=True)
class EducationFactor:
    required: Optional[str] = None
    candidate: Optional[str] = None
    percentage: float = 0.0
    weight: float = EDUCATION_WEIGHT

    def __post_init__(self):
        _check_percentage("education", self.percentage)
        _check_weight("education", self.weight)


@dataclass(frozen=True)
class LocationFactor:
    required: Optional[str] = None
    candidate: Optional[str] = None
    percentage: float = 0.0
    weight: float = LOCATION_WEIGHT

    def __post_init__(self):
        _check_percentage("location", self.percentage)
        _check_weight("location", self.weight)


@dataclass(frozen=True)
class MatchFactors:
    """Weighted breakdown of how a candidate fits a job"""

    skills: SkillsFactor = field(default_factory=SkillsFactor)
    experience: ExperienceFactor = field(default_factory=ExperienceFactor)
    education: EducationFactor = field(default_factory=EducationFactor)
    location: LocationFactor = field(default_factory=LocationFactor)

    def weighted_score(self) -> MatchScore:
        """skills*0.4 + experience*0.25 + education*0.2 + location*0.15 with the default weights"""
        total = (
            self.skills.percentage * self.skills.weight
            + self.experience.percentage * self.experience.weight
            + self.education.percentage * self.education.weight
            + self.location.percentage * self.location.weight
        )
        return MatchScore.clamped(total)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skills": {
                "matched": list(self.skills.matched),
                "missing": list(self.skills.missing),
                "percentage": self.skills.percentage,
                "weight": self.skills.weight,
            },
            "experience": {
                "required_years": self.experience.required_years,
                "candidate_years": self.experience.candidate_years,
                "percentage": self.experience.percentage,
                "weight": self.experience.weight,
            },
            "education": {
                "required": self.education.required,
                "candidate": self.education.candidate,
                "percentage": self.education.percentage,
                "weight": self.education.weight,
            },
            "location": {
                "required": self.location.required,
                "candidate": self.location.candidate,
                "percentage": self.location.percentage,
                "weight": self.location.weight,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchFactors":
        return cls(
            skills=SkillsFactor(**data.get("skills", {})),
            experience=ExperienceFactor(**data.get("experience", {})),
            education=EducationFactor(**data.get("education", {})),
            location=LocationFactor(**data.get("location", {})),
        )

    @classmethod
    def derive(
        cls,
        candidate_skills: Iterable[str],
        required_skills: Iterable[str],
        candidate_years: Optional[float],
        required_years: Optional[float],
        candidate_education: Optional[EducationLevel],
        required_education: Optional[EducationLevel],
        candidate_location: Optional[str],
        job_location: Optional[str],
        is_remote: bool = False,
    ) -> "MatchFactors":
        """Compute factors from structured candidate and job attributes"""
        have = {s.strip().lower() for s in candidate_skills if s and s.strip()}
        required = [s.strip() for s in required_skills if s and s.strip()]
        matched = [s for s in required if s.lower() in have]
        missing = [s for s in required if s.lower() not in have]
        skills_pct = 100.0 if not required else len(matched) / len(required) * 100

        cand_years = float(candidate_years or 0)
        req_years = float(required_years or 0)
        if req_years <= 0:
            experience_pct = 100.0
        else:
            experience_pct = min(cand_years / req_years, 1.0) * 100

        req_rank = education_rank(required_education)
        cand_rank = education_rank(candidate_education)
        if req_rank == 0 or cand_rank >= req_rank:
            education_pct = 100.0
        else:
            education_pct = cand_rank / req_rank * 100

        job_loc = (job_location or "").strip().casefold()
        cand_loc = (candidate_location or "").strip().casefold()
        if is_remote or not job_loc:
            location_pct = 100.0
        else:
            location_pct = 100.0 if cand_loc == job_loc else 0.0

        return cls(
            skills=SkillsFactor(matched=matched, missing=missing, percentage=round(skills_pct, 2)),
            experience=ExperienceFactor(
                required_years=req_years,
                candidate_years=cand_years,
                percentage=round(experience_pct, 2),
            ),
            education=EducationFactor(
                required=required_education.value if required_education else None,
                candidate=candidate_education.value if candidate_education else None,
                percentage=round(education_pct, 2),
            ),
            location=LocationFactor(
                required=job_location,
                candidate=candidate_location,
                percentage=location_pct,
            ),
        )

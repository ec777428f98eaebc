"""Value Objects - Immutable objects defined by their attributes"""

from .email import Email
from .match_score import MatchScore
from .match_factors import (
    MatchFactors,
    SkillsFactor,
    ExperienceFactor,
    EducationFactor,
    LocationFactor,
)
__all__ = [
    "Email",
    "MatchScore",
    "MatchFactors",
    "SkillsFactor",
    "ExperienceFactor",
    "EducationFactor",
    "LocationFactor",
]

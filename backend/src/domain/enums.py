"""
Domain Enums
Business enumerations for the application
"""
from enum import Enum
from typing import Dict, Optional


class UserRole(str, Enum):
    """Account role"""
    CANDIDATE = "candidate"
    EMPLOYER = "employer"
    ADMIN = "admin"


class MatchStatus(str, Enum):
    """Lifecycle status of a job-candidate match"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self is not MatchStatus.PENDING


class MatchSort(str, Enum):
    """Sort orders for match listings"""
    NEWEST = "newest"
    OLDEST = "oldest"
    SCORE = "score"


class NotificationType(str, Enum):
    """Notification kinds emitted by the match lifecycle"""
    MATCH_CREATED = "match_created"
    MATCH_ACCEPTED = "match_accepted"
    MATCH_REJECTED = "match_rejected"
    MATCH_EXPIRED = "match_expired"
    SYSTEM = "system"


class EducationLevel(str, Enum):
    """Education levels, ordered from lowest to highest"""
    NONE = "none"
    HIGH_SCHOOL = "high_school"
    ASSOCIATE = "associate"
    BACHELOR = "bachelor"
    MASTER = "master"
    DOCTORATE = "doctorate"


EDUCATION_RANK: Dict[EducationLevel, int] = {
    EducationLevel.NONE: 0,
    EducationLevel.HIGH_SCHOOL: 1,
    EducationLevel.ASSOCIATE: 2,
    EducationLevel.BACHELOR: 3,
    EducationLevel.MASTER: 4,
    EducationLevel.DOCTORATE: 5,
}


def education_rank(level: Optional[EducationLevel]) -> int:
    """Rank of an education level (unknown counts as none)"""
    if level is None:
        return 0
    return EDUCATION_RANK.get(level, 0)

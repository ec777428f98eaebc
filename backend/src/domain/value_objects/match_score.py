"""
MatchScore Value Object
Type-safe match score with validation (0-100)
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class MatchScore:
    """Match score value object - immutable"""

    value: float

    def __post_init__(self):
        """Validate match score range"""
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError("Match score must be a number")

        if not 0 <= self.value <= 100:
            raise ValueError("Match score must be between 0 and 100")

    @classmethod
    def from_similarity(cls, similarity: float) -> "MatchScore":
        """Scale a [0, 1] similarity to a percentage, clamped to the valid range"""
        return cls(value=round(max(0.0, min(100.0, similarity * 100)), 2))

    @classmethod
    def clamped(cls, value: float) -> "MatchScore":
        return cls(value=round(max(0.0, min(100.0, value)), 2))

    def __float__(self) -> float:
        """Allow conversion to float"""
        return float(self.value)

    def __str__(self) -> str:
        return f"{self.value:.1f}%"

    def __repr__(self) -> str:
        return f"MatchScore({self.value})"

"""
Similarity Service Interface
Lexical relevance between a candidate profile and a job description
"""
from abc import ABC, abstractmethod

from domain.value_objects import MatchScore


class ISimilarityService(ABC):
    """Text similarity service interface"""

    @abstractmethod
    def similarity(self, candidate_text: str, job_text: str) -> float:
        """
        Similarity between two free-text documents

        Args:
            candidate_text: CV / profile text (may be empty)
            job_text: Job description (may be empty)

        Returns:
            Value in [0, 1]; 0 when either document has no usable terms
        """
        pass

    def calculate_match_score(self, candidate_text: str, job_text: str) -> MatchScore:
        """Similarity scaled to a 0-100 MatchScore"""
        return MatchScore.from_similarity(self.similarity(candidate_text, job_text))

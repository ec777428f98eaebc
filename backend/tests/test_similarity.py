"""
Tests for the TF-IDF similarity engine
"""
import math

import pytest

from domain.value_objects import MatchScore
from infrastructure.services.tfidf_similarity_service import TfidfSimilarityService


@pytest.fixture
def engine():
    return TfidfSimilarityService()


class TestTfidfSimilarity:
    """Similarity properties"""

    def test_identical_documents_score_one(self, engine):
        text = "Senior Python developer building Django APIs on PostgreSQL"
        assert engine.similarity(text, text) == pytest.approx(1.0)

    def test_symmetric(self, engine):
        a = "Python developer with Django experience"
        b = "We are hiring a Django engineer who knows Python and React"
        assert engine.similarity(a, b) == pytest.approx(engine.similarity(b, a))

    def test_disjoint_vocabulary_scores_zero(self, engine):
        assert engine.similarity("python django postgres", "marketing brand campaigns") == 0.0

    @pytest.mark.parametrize("a, b", [
        ("", ""),
        ("", "python developer"),
        ("python developer", ""),
        ("the and of", "python developer"),
        ("   ", "\n\t"),
    ])
    def test_empty_or_stopword_only_input_scores_zero(self, engine, a, b):
        assert engine.similarity(a, b) == 0.0

    def test_controlled_pair_exact_value(self, engine):
        # Shared term "python" has df=2: idf = 1 + ln(2/3); the others df=1: idf = 1
        w = 1 + math.log(2 / 3)
        expected = w * w / (1 + w * w)
        assert engine.similarity("python django", "python flask") == pytest.approx(expected)

    def test_case_insensitive(self, engine):
        assert engine.similarity("PYTHON Django", "python DJANGO") == pytest.approx(1.0)

    def test_relevant_job_outscores_unrelated_job(self, engine):
        cv = "Backend engineer: Python, Django, REST APIs, PostgreSQL, Docker, AWS"
        relevant = "Looking for a Python backend engineer to build Django REST APIs"
        unrelated = "Retail store supervisor managing shifts and inventory"
        assert engine.similarity(cv, relevant) > engine.similarity(cv, unrelated)

    def test_unrelated_job_scores_zero_whatever_the_term_order(self, engine):
        # Weights are compared term by term, never by position in each document
        cv = "Python Django PostgreSQL Docker"
        assert engine.similarity(cv, "Pastry chef baking croissants sourdough") == 0.0
        assert engine.similarity(cv, "Sourdough croissants baking pastry chef") == 0.0

    def test_result_is_in_unit_interval(self, engine):
        score = engine.similarity("python python python django", "python react")
        assert 0.0 <= score <= 1.0

    def test_deterministic(self, engine):
        a, b = "data engineer spark airflow", "spark data pipelines"
        assert engine.similarity(a, b) == engine.similarity(a, b)


class TestMatchScoreFromSimilarity:
    def test_scaled_to_percentage(self, engine):
        score = engine.calculate_match_score("python django", "python django")
        assert isinstance(score, MatchScore)
        assert score.value == pytest.approx(100.0)

    def test_rounded_to_two_decimals(self, engine):
        score = engine.calculate_match_score("python django", "python flask")
        assert score.value == round(score.value, 2)

    def test_zero_when_nothing_to_compare(self, engine):
        assert engine.calculate_match_score("", "python").value == 0.0

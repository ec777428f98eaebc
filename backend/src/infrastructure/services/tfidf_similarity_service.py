"""
TF-IDF Similarity Service
Lexical similarity between a candidate profile and a job description.

Both documents form the corpus. Terms are lower-cased word tokens with
English stop words removed; a term's weight is its raw count times
idf = 1 + ln(N / (1 + df)) with N = 2. The score is the cosine of the two
weight vectors aligned on the shared vocabulary.
"""
import numpy as np
from loguru import logger
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from application.services.similarity import ISimilarityService


TOKEN_PATTERN = r"(?u)\b\w+\b"


class TfidfSimilarityService(ISimilarityService):
    """TF-IDF cosine similarity over a two-document corpus"""

    def __init__(self, stop_words: str = "english"):
        self.stop_words = stop_words
        self._analyzer = self._vectorizer().build_analyzer()

    def similarity(self, candidate_text: str, job_text: str) -> float:
        candidate_text = candidate_text or ""
        job_text = job_text or ""

        # Empty after tokenisation means nothing to compare
        if not self._analyzer(candidate_text) or not self._analyzer(job_text):
            return 0.0

        counts = self._vectorizer().fit_transform([candidate_text, job_text]).toarray().astype(float)

        doc_count = counts.shape[0]
        document_frequency = (counts > 0).sum(axis=0)
        idf = 1.0 + np.log(doc_count / (1.0 + document_frequency))
        weights = counts * idf

        if not np.any(weights[0]) or not np.any(weights[1]):
            return 0.0

        score = float(cosine_similarity(weights[0:1], weights[1:2])[0][0])
        score = max(0.0, min(1.0, score))
        logger.debug(f"TF-IDF similarity {score:.4f} over {counts.shape[1]} terms")
        return score

    def _vectorizer(self) -> CountVectorizer:
        return CountVectorizer(
            lowercase=True,
            token_pattern=TOKEN_PATTERN,
            stop_words=self.stop_words,
        )

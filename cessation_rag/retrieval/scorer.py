"""
Multi-signal chunk scorer.

Each chunk is scored against the question with three independent signals,
each normalized to [0, 1]:
- keyword: question keywords vs. the chunk's keyword set and content
- synonym: expanded keywords vs. the content
- semantic: cosine similarity of question and chunk embeddings

The total is a fixed weighted blend. Scoring is a pure function of its
inputs, so chunks can be scored in any order or batch size.
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from ..models import Chunk, QuestionAnalysis, ScoreBreakdown, ScoredChunk
from .config import ScoringWeights

logger = logging.getLogger(__name__)


def _clamp(value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(1.0, value))


def count_occurrences(text: str, term: str) -> int:
    """Non-overlapping, case-insensitive occurrences of ``term`` in ``text``."""
    term = term.lower()
    if not term:
        return 0
    return text.lower().count(term)


def cosine_similarity(v1: Sequence[float], v2: Sequence[float]) -> float:
    """Cosine similarity after right-padding the shorter vector with zeros.

    Returns 0.0 when either vector has zero magnitude.
    """
    a = np.asarray(v1, dtype=np.float64)
    b = np.asarray(v2, dtype=np.float64)
    size = max(a.size, b.size)
    if size == 0:
        return 0.0
    a = np.pad(a, (0, size - a.size))
    b = np.pad(b, (0, size - b.size))

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


class MultiSignalScorer:
    """Score chunks against a question analysis."""

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights()

    def keyword_score(self, keywords: Sequence[str], chunk: Chunk) -> float:
        keywords = [k for k in keywords if k and k.strip()]
        if not keywords:
            return 0.0

        w = self.weights
        chunk_keywords = {k.lower() for k in chunk.keywords}
        score = 0.0
        matches = 0
        for keyword in keywords:
            if keyword.lower() in chunk_keywords:
                score += w.exact_match_weight
                matches += 1
                continue
            count = count_occurrences(chunk.content, keyword)
            if count:
                score += min(count * w.content_match_unit, w.content_match_cap)
                matches += 1

        if matches == 0:
            return 0.0
        return _clamp(score / (len(keywords) * w.content_match_cap))

    def synonym_score(self, expanded_keywords: Sequence[str], chunk: Chunk) -> float:
        expanded_keywords = [k for k in expanded_keywords if k and k.strip()]
        if not expanded_keywords:
            return 0.0

        w = self.weights
        score = 0.0
        for term in expanded_keywords:
            count = count_occurrences(chunk.content, term)
            if count:
                score += min(count * w.synonym_match_unit, w.synonym_match_cap)
        return _clamp(score / (len(expanded_keywords) * w.synonym_match_cap))

    def semantic_score(self, question_embedding: Optional[Sequence[float]], chunk: Chunk) -> float:
        if question_embedding is None or chunk.embedding is None:
            return 0.0
        # Negative similarity carries no relevance
        return _clamp(cosine_similarity(question_embedding, chunk.embedding))

    def combine(self, breakdown: ScoreBreakdown) -> float:
        w = self.weights
        return _clamp(
            breakdown.keyword * w.keyword
            + breakdown.synonym * w.synonym
            + breakdown.semantic * w.semantic
        )

    def score(
        self,
        chunk: Chunk,
        analysis: QuestionAnalysis,
        question_embedding: Optional[Sequence[float]] = None,
    ) -> ScoredChunk:
        breakdown = ScoreBreakdown(
            keyword=self.keyword_score(analysis.keywords, chunk),
            synonym=self.synonym_score(analysis.expanded_keywords, chunk),
            semantic=self.semantic_score(question_embedding, chunk),
        )
        return ScoredChunk(chunk=chunk, score=self.combine(breakdown), breakdown=breakdown)

    def score_all(
        self,
        chunks: Sequence[Chunk],
        analysis: QuestionAnalysis,
        question_embedding: Optional[Sequence[float]] = None,
        batch_size: int = 100,
    ) -> list[ScoredChunk]:
        """Score every chunk, logging progress per batch."""
        batch_size = max(1, batch_size)
        results: list[ScoredChunk] = []
        for start in range(0, len(chunks), batch_size):
            batch = chunks[start:start + batch_size]
            results.extend(self.score(c, analysis, question_embedding) for c in batch)
            logger.debug(f"[SCORE] Progress: {len(results)}/{len(chunks)}")
        return results


def average_breakdown(scored: Sequence[ScoredChunk]) -> ScoreBreakdown:
    """Mean of each signal over ``scored``."""
    if not scored:
        return ScoreBreakdown()
    n = len(scored)
    return ScoreBreakdown(
        keyword=sum(s.breakdown.keyword for s in scored) / n,
        synonym=sum(s.breakdown.synonym for s in scored) / n,
        semantic=sum(s.breakdown.semantic for s in scored) / n,
    )

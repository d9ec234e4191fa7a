"""
Context Quality Optimizer.

Selects the final context from ranked chunks under two character budgets:
- every chunk is cut to ``max_chunk_length``
- chunks are accepted in rank order while the running total stays within
  ``max_context_length``; selection stops at the first chunk that does not
  fit (greedy prefix, later shorter chunks are not considered)

Also computes per-chunk quality metrics and their summary.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from ..models import (
    ChunkQuality,
    QualitySummary,
    QuestionAnalysis,
    QuestionComplexity,
    ScoredChunk,
)
from .config import ContextLimits, QualityThresholds

logger = logging.getLogger(__name__)

# Content length considered "complete" for each question complexity
IDEAL_LENGTH = {
    QuestionComplexity.SIMPLE: 300,
    QuestionComplexity.MEDIUM: 600,
    QuestionComplexity.COMPLEX: 1000,
}

TRUNCATION_PENALTY = 0.8

# Readable chunk length range for the clarity heuristic
CLARITY_MIN_LENGTH = 100
CLARITY_MAX_LENGTH = 2000

# Blend of the per-chunk metrics into "overall"
QUALITY_WEIGHTS = {
    "relevance": 0.4,
    "completeness": 0.2,
    "accuracy": 0.25,
    "clarity": 0.15,
}


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def assess_chunk_quality(
    scored: ScoredChunk,
    complexity: QuestionComplexity = QuestionComplexity.SIMPLE,
) -> ChunkQuality:
    """Quality metrics derived from the score breakdown and content length."""
    length = len(scored.chunk.content)

    relevance = _clamp(scored.score)

    completeness = _clamp(length / IDEAL_LENGTH[complexity])
    if scored.truncated:
        completeness *= TRUNCATION_PENALTY

    accuracy = _clamp(0.7 * scored.breakdown.keyword + 0.3 * scored.breakdown.synonym)

    if length < CLARITY_MIN_LENGTH:
        clarity = length / CLARITY_MIN_LENGTH
    elif length <= CLARITY_MAX_LENGTH:
        clarity = 1.0
    else:
        clarity = max(0.5, CLARITY_MAX_LENGTH / length)

    overall = (
        relevance * QUALITY_WEIGHTS["relevance"]
        + completeness * QUALITY_WEIGHTS["completeness"]
        + accuracy * QUALITY_WEIGHTS["accuracy"]
        + clarity * QUALITY_WEIGHTS["clarity"]
    )
    return ChunkQuality(
        relevance=relevance,
        completeness=completeness,
        accuracy=accuracy,
        clarity=clarity,
        overall=_clamp(overall),
    )


class ContextQualityOptimizer:
    """Pick the context for one answer and measure its quality."""

    def __init__(
        self,
        limits: Optional[ContextLimits] = None,
        thresholds: Optional[QualityThresholds] = None,
    ):
        self.limits = limits or ContextLimits()
        self.thresholds = thresholds or QualityThresholds()

    def truncate(self, scored: ScoredChunk) -> ScoredChunk:
        """Cut content to the per-chunk cap; the original chunk is untouched."""
        cap = self.limits.max_chunk_length
        if len(scored.chunk.content) <= cap:
            return replace(scored)
        return replace(
            scored,
            chunk=scored.chunk.with_content(scored.chunk.content[:cap]),
            truncated=True,
        )

    def optimize(
        self,
        ranked: list[ScoredChunk],
        analysis: QuestionAnalysis,
        max_chunks: int,
    ) -> list[ScoredChunk]:
        """Greedy-prefix selection under the chunk count and length budgets."""
        if max_chunks <= 0 or not ranked:
            return []

        selected: list[ScoredChunk] = []
        total_length = 0
        for scored in ranked:
            if len(selected) >= max_chunks:
                logger.debug(f"[OPTIMIZE] Chunk limit reached: {max_chunks}")
                break

            candidate = self.truncate(scored)
            length = len(candidate.chunk.content)
            if total_length + length > self.limits.max_context_length:
                logger.debug(
                    f"[OPTIMIZE] Context budget reached at {total_length} chars "
                    f"(limit {self.limits.max_context_length})"
                )
                break

            candidate.quality = assess_chunk_quality(candidate, analysis.complexity)
            selected.append(candidate)
            total_length += length

        logger.info(f"[OPTIMIZE] Selected {len(selected)} chunks, {total_length} chars")
        return selected

    def tier(self, quality: ChunkQuality) -> str:
        if quality.overall >= self.thresholds.high:
            return "high"
        if quality.overall < self.thresholds.low:
            return "low"
        return "medium"

    def quality_summary(self, chunks: list[ScoredChunk]) -> QualitySummary:
        """Average the per-chunk metrics and count quality tiers."""
        if not chunks:
            return QualitySummary()

        qualities = [c.quality or assess_chunk_quality(c) for c in chunks]
        n = len(qualities)
        tiers = [self.tier(q) for q in qualities]
        return QualitySummary(
            total_chunks=n,
            average_relevance=sum(q.relevance for q in qualities) / n,
            average_completeness=sum(q.completeness for q in qualities) / n,
            average_accuracy=sum(q.accuracy for q in qualities) / n,
            average_clarity=sum(q.clarity for q in qualities) / n,
            average_overall=sum(q.overall for q in qualities) / n,
            high_quality_chunks=tiers.count("high"),
            medium_quality_chunks=tiers.count("medium"),
            low_quality_chunks=tiers.count("low"),
        )


@dataclass
class QualityReport:
    """Human-readable strengths and weaknesses of a context."""
    overall_score: float
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return dict(self.__dict__)


def build_quality_report(summary: QualitySummary) -> QualityReport:
    """Summarize a QualitySummary as strengths, weaknesses and recommendations."""
    report = QualityReport(overall_score=round(summary.average_overall, 3))

    if summary.average_relevance >= 0.8:
        report.strengths.append("높은 관련성 점수")
    if summary.average_completeness >= 0.8:
        report.strengths.append("완성도 높은 결과")
    if summary.average_accuracy >= 0.8:
        report.strengths.append("정확한 정보 제공")

    if summary.average_relevance < 0.6:
        report.weaknesses.append("낮은 관련성")
        report.recommendations.append("키워드 확장 및 동의어 사전 개선")
    if summary.average_completeness < 0.6:
        report.weaknesses.append("불완전한 정보")
        report.recommendations.append("검색 범위 확대 및 컨텍스트 품질 향상")
    if summary.average_accuracy < 0.6:
        report.weaknesses.append("정확성 부족")
        report.recommendations.append("출처 검증 및 사실 확인 강화")

    if summary.average_overall < 0.7:
        report.recommendations.append("전체적인 검색 품질 향상 필요")
    if summary.low_quality_chunks > summary.high_quality_chunks:
        report.recommendations.append("저품질 청크 필터링 강화")

    return report

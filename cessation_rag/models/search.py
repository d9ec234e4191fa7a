"""
Search result models for the retrieval pipeline.

This module defines:
- ScoreBreakdown: Per-signal relevance scores (keyword, synonym, semantic)
- ChunkQuality: Per-chunk quality metrics set by the context optimizer
- ScoredChunk: A chunk with its combined score
- QualitySummary: Quality metrics averaged over a context
- SearchMetrics / SearchResult: Orchestrator output
"""

from dataclasses import dataclass, field
from typing import Optional

from .analysis import QuestionAnalysis
from .chunk import Chunk


@dataclass(frozen=True)
class ScoreBreakdown:
    """Individual signal scores, each in [0, 1]."""
    keyword: float = 0.0
    synonym: float = 0.0
    semantic: float = 0.0

    def to_dict(self) -> dict:
        return {"keyword": self.keyword, "synonym": self.synonym, "semantic": self.semantic}


@dataclass(frozen=True)
class ChunkQuality:
    """Quality metrics for one chunk of context."""
    relevance: float
    completeness: float
    accuracy: float
    clarity: float
    overall: float

    def to_dict(self) -> dict:
        return {
            "relevance": self.relevance,
            "completeness": self.completeness,
            "accuracy": self.accuracy,
            "clarity": self.clarity,
            "overall": self.overall,
        }


@dataclass
class ScoredChunk:
    """A chunk scored against one question."""
    chunk: Chunk
    score: float
    breakdown: ScoreBreakdown
    quality: Optional[ChunkQuality] = None
    truncated: bool = False

    @property
    def id(self) -> str:
        return self.chunk.id

    def to_dict(self) -> dict:
        data = self.chunk.to_dict()
        data.update({
            "citation": self.chunk.get_citation(),
            "relevanceScore": self.score,
            "breakdown": self.breakdown.to_dict(),
            "truncated": self.truncated,
        })
        if self.quality is not None:
            data["quality"] = self.quality.to_dict()
        return data


@dataclass
class QualitySummary:
    """Aggregate quality of an optimized context."""
    total_chunks: int = 0
    average_relevance: float = 0.0
    average_completeness: float = 0.0
    average_accuracy: float = 0.0
    average_clarity: float = 0.0
    average_overall: float = 0.0
    high_quality_chunks: int = 0
    medium_quality_chunks: int = 0
    low_quality_chunks: int = 0

    def to_dict(self) -> dict:
        return dict(self.__dict__)


@dataclass
class SearchMetrics:
    """Observability data for one search. Never affects ranking."""
    total_processed: int = 0
    unique_results: int = 0
    average_relevance: float = 0.0
    execution_time_ms: float = 0.0
    score_breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)
    stage_timings_ms: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total_processed": self.total_processed,
            "unique_results": self.unique_results,
            "average_relevance": self.average_relevance,
            "execution_time_ms": self.execution_time_ms,
            "score_breakdown": self.score_breakdown.to_dict(),
            "stage_timings_ms": dict(self.stage_timings_ms),
        }


@dataclass
class SearchResult:
    """Final chunk list plus metrics for one question."""
    question: str
    analysis: QuestionAnalysis
    chunks: list[ScoredChunk] = field(default_factory=list)
    metrics: SearchMetrics = field(default_factory=SearchMetrics)
    quality: QualitySummary = field(default_factory=QualitySummary)

    @property
    def is_empty(self) -> bool:
        """True when no context could be assembled for the question."""
        return not self.chunks

    def get_context_for_llm(self) -> str:
        """Format the selected chunks as numbered, cited source blocks."""
        parts = []
        for i, scored in enumerate(self.chunks, 1):
            parts.append(f"[{i}] {scored.chunk.get_citation()}\n{scored.chunk.content}")
        return "\n\n---\n\n".join(parts)

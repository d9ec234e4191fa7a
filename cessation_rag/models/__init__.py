"""
Data models for the smoking-cessation RAG system.

This package contains:
- chunk: Chunk and citation location models
- analysis: Structured question analysis
- search: Scored chunks, quality metrics and search results
"""

from .chunk import (
    DEFAULT_SECTION,
    DocumentType,
    ChunkLocation,
    Chunk,
    detect_document_type,
)

from .analysis import (
    QuestionCategory,
    QuestionComplexity,
    QuestionAnalysis,
)

from .search import (
    ScoreBreakdown,
    ChunkQuality,
    ScoredChunk,
    QualitySummary,
    SearchMetrics,
    SearchResult,
)

__all__ = [
    # Chunk models
    "DEFAULT_SECTION",
    "DocumentType",
    "ChunkLocation",
    "Chunk",
    "detect_document_type",
    # Analysis
    "QuestionCategory",
    "QuestionComplexity",
    "QuestionAnalysis",
    # Search models
    "ScoreBreakdown",
    "ChunkQuality",
    "ScoredChunk",
    "QualitySummary",
    "SearchMetrics",
    "SearchResult",
]

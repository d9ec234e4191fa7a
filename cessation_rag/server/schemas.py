"""
Request and response schemas for the Cessation RAG API.
"""

from typing import Optional
from pydantic import BaseModel, Field


# ============================================================================
# Requests
# ============================================================================

class SearchRequest(BaseModel):
    """Request schema for the search and ask endpoints."""

    question: str = Field(
        ...,
        description="The user's question, in Korean",
        min_length=1,
        max_length=2000,
        examples=["PC방에서 흡연하면 과태료는 얼마인가요?"]
    )
    max_chunks: Optional[int] = Field(
        default=None,
        description="Maximum number of context chunks (server default when omitted)",
        ge=0,
        le=100
    )


# ============================================================================
# Search Response
# ============================================================================

class ScoreBreakdownSchema(BaseModel):
    keyword: float
    synonym: float
    semantic: float


class ChunkQualitySchema(BaseModel):
    relevance: float
    completeness: float
    accuracy: float
    clarity: float
    overall: float


class ChunkItem(BaseModel):
    """A single context chunk with its score and citation."""

    id: str = Field(..., description="Chunk id")
    document_id: str = Field(..., description="Parent document id")
    title: str = Field(..., description="Document title")
    document_type: str = Field(..., description="'legal' or 'guideline'")
    citation: str = Field(..., description="Human-readable citation")
    content: str = Field(..., description="Chunk text (possibly truncated)")
    page: Optional[int] = Field(None, description="Page number (guidelines only)")
    section: str = Field(..., description="Section or article")
    score: float = Field(..., description="Combined relevance score in [0, 1]")
    breakdown: ScoreBreakdownSchema
    quality: Optional[ChunkQualitySchema] = None
    truncated: bool = False


class AnalysisSchema(BaseModel):
    intent: str
    keywords: list[str]
    expanded_keywords: list[str]
    category: str
    complexity: str
    entities: list[str]
    context: str


class MetricsSchema(BaseModel):
    total_processed: int
    unique_results: int
    average_relevance: float
    execution_time_ms: float
    score_breakdown: ScoreBreakdownSchema
    stage_timings_ms: dict[str, float] = Field(default_factory=dict)


class QualitySummarySchema(BaseModel):
    total_chunks: int
    average_relevance: float
    average_completeness: float
    average_accuracy: float
    average_clarity: float
    average_overall: float
    high_quality_chunks: int
    medium_quality_chunks: int
    low_quality_chunks: int


class SearchResponse(BaseModel):
    """Response schema for the search endpoint."""

    question: str
    analysis: AnalysisSchema
    chunks: list[ChunkItem]
    metrics: MetricsSchema
    quality: QualitySummarySchema
    context: str = Field("", description="Numbered, cited context ready for an LLM prompt")


# ============================================================================
# Ask Response
# ============================================================================

class SourceItem(BaseModel):
    id: str
    title: str
    document_type: str
    section: Optional[str] = None
    page: Optional[int] = None
    citation: str = ""


class AskResponse(BaseModel):
    """Response schema for the ask endpoint."""

    question: str
    answer: str = Field(..., description="Answer text or explicit failure message")
    status: str = Field(..., description="ok | no_context | analysis_failed | answer_failed")
    sources: list[SourceItem] = Field(default_factory=list)
    chunks_used: int = 0


# ============================================================================
# Health & Stats
# ============================================================================

class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    store_loaded: bool = Field(..., description="Whether the search engine is loaded")
    llm_available: bool = Field(..., description="Whether a Gemini credential is configured")


class StatsResponse(BaseModel):
    """Response schema for stats endpoint."""

    total_documents: int = Field(..., description="Documents in the store")
    total_chunks: int = Field(..., description="Chunks in the store")
    credentials: int = Field(..., description="Configured Gemini credentials")
    cache: Optional[dict] = Field(None, description="Chunk cache statistics")


class ErrorResponse(BaseModel):
    """Response schema for error responses."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")

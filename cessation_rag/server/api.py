"""
API route definitions for the Cessation RAG server.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from ..errors import AnalysisUnavailable
from ..models import ScoredChunk, SearchResult
from ..retrieval import ChatAnswer
from .config import get_settings, Settings
from .dependencies import get_rag, is_initialized, is_llm_available
from .schemas import (
    SearchRequest,
    SearchResponse,
    AskResponse,
    ChunkItem,
    AnalysisSchema,
    MetricsSchema,
    QualitySummarySchema,
    ScoreBreakdownSchema,
    ChunkQualitySchema,
    SourceItem,
    HealthResponse,
    StatsResponse,
    ErrorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _format_chunk(scored: ScoredChunk) -> ChunkItem:
    """Convert a scored chunk to API response format."""
    chunk = scored.chunk
    return ChunkItem(
        id=chunk.id,
        document_id=chunk.document_id,
        title=chunk.title or chunk.location.document,
        document_type=chunk.document_type.value,
        citation=chunk.get_citation(),
        content=chunk.content,
        page=chunk.location.page,
        section=chunk.location.section,
        score=scored.score,
        breakdown=ScoreBreakdownSchema(**scored.breakdown.to_dict()),
        quality=ChunkQualitySchema(**scored.quality.to_dict()) if scored.quality else None,
        truncated=scored.truncated,
    )


def format_search_result(result: SearchResult) -> SearchResponse:
    analysis = result.analysis
    metrics = result.metrics
    return SearchResponse(
        question=result.question,
        analysis=AnalysisSchema(
            intent=analysis.intent,
            keywords=analysis.keywords,
            expanded_keywords=analysis.expanded_keywords,
            category=analysis.category.value,
            complexity=analysis.complexity.value,
            entities=analysis.entities,
            context=analysis.context,
        ),
        chunks=[_format_chunk(c) for c in result.chunks],
        metrics=MetricsSchema(
            total_processed=metrics.total_processed,
            unique_results=metrics.unique_results,
            average_relevance=metrics.average_relevance,
            execution_time_ms=metrics.execution_time_ms,
            score_breakdown=ScoreBreakdownSchema(**metrics.score_breakdown.to_dict()),
            stage_timings_ms=metrics.stage_timings_ms,
        ),
        quality=QualitySummarySchema(**result.quality.to_dict()),
        context=result.get_context_for_llm(),
    )


def format_answer(answer: ChatAnswer) -> AskResponse:
    return AskResponse(
        question=answer.question,
        answer=answer.answer,
        status=answer.status,
        sources=[SourceItem(**s.to_dict()) for s in answer.sources],
        chunks_used=len(answer.search.chunks) if answer.search else 0,
    )


# ============================================================================
# SEARCH & ASK
# ============================================================================
# Plain def handlers: engine calls block (Gemini, model encode) and run in
# FastAPI's threadpool.

@router.post(
    "/search",
    response_model=SearchResponse,
    responses={
        503: {"model": ErrorResponse, "description": "Question analysis unavailable"},
        500: {"model": ErrorResponse, "description": "Internal server error"}
    },
    summary="Retrieve ranked context for a question",
    description="""
Run the unified search pipeline: question analysis, synonym expansion,
candidate fetching, multi-signal scoring, ranking and context optimization.

No answer is generated. The `context` field holds the numbered, cited
source blocks that would be sent to the LLM.
"""
)
def search(
    request: SearchRequest,
    rag=Depends(get_rag)
) -> SearchResponse:
    try:
        logger.info(f"Processing search: {request.question[:100]}...")
        result = rag.search(request.question, request.max_chunks)
        logger.info(
            f"Search completed - {len(result.chunks)} chunks, "
            f"{result.metrics.execution_time_ms:.0f}ms"
        )
        return format_search_result(result)

    except AnalysisUnavailable as e:
        logger.error(f"Question analysis unavailable: {e}")
        raise HTTPException(
            status_code=503,
            detail={"error": "analysis_unavailable", "message": str(e)}
        )
    except ValueError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "invalid_question", "message": str(e)}
        )
    except Exception as e:
        logger.exception(f"Error processing search: {e}")
        raise HTTPException(
            status_code=500,
            detail={"error": "search_error", "message": str(e)}
        )


@router.post(
    "/ask",
    response_model=AskResponse,
    responses={
        500: {"model": ErrorResponse, "description": "Internal server error"}
    },
    summary="Answer a question from the regulation corpus",
    description="""
Search, then generate an answer grounded only in the retrieved context.

Failures are reported through `status` instead of an invented answer:
- `analysis_failed`: the question could not be analyzed
- `no_context`: nothing relevant was found (no LLM call is made)
- `answer_failed`: answer generation failed with every credential
"""
)
def ask(
    request: SearchRequest,
    rag=Depends(get_rag)
) -> AskResponse:
    try:
        logger.info(f"Processing question: {request.question[:100]}...")
        answer = rag.ask(request.question, request.max_chunks)
        logger.info(f"Answer completed - status: {answer.status}, sources: {len(answer.sources)}")
        return format_answer(answer)

    except ValueError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "invalid_question", "message": str(e)}
        )
    except Exception as e:
        logger.exception(f"Error answering question: {e}")
        raise HTTPException(
            status_code=500,
            detail={"error": "ask_error", "message": str(e)}
        )


# ============================================================================
# HEALTH & STATS
# ============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check if the service is healthy and the search engine is loaded."
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)]
) -> HealthResponse:
    loaded = is_initialized()
    return HealthResponse(
        status="healthy" if loaded else "initializing",
        version=settings.app_version,
        store_loaded=loaded,
        llm_available=is_llm_available(),
    )


@router.get(
    "/stats",
    response_model=StatsResponse,
    responses={
        503: {"model": ErrorResponse, "description": "Service not ready"}
    },
    summary="Store Statistics",
    description="Get statistics about the chunk store and cache."
)
def get_stats(
    rag=Depends(get_rag)
) -> StatsResponse:
    try:
        adapter = rag.engine.store
        stats = adapter.get_stats()
        return StatsResponse(
            total_documents=stats.get("total_documents", 0),
            total_chunks=stats.get("total_chunks", 0),
            credentials=len(rag.engine.analyzer.credentials),
            cache=adapter.cache.stats() if adapter.cache is not None else None,
        )
    except Exception as e:
        logger.exception(f"Error getting stats: {e}")
        raise HTTPException(
            status_code=503,
            detail={"error": "service_not_ready", "message": str(e)}
        )

"""
Retrieval components for the smoking-cessation RAG system.

This package contains:
- config: Scoring weights, context limits and search configuration
- credentials: Ordered API credential pool with rotation
- completion: Text completion service (Gemini)
- analyzer: LLM question analysis with credential retry
- synonyms: Domain synonym expansion
- store_adapter: Candidate chunk fetching over the document store
- scorer: Multi-signal relevance scoring
- ranker: Deduplication and ranking
- optimizer: Context budget and quality assessment
- orchestrator: Unified search pipeline
- responder: Grounded answer generation
- rag: Complete search + answer flow
"""

from .config import (
    ScoringWeights,
    ContextLimits,
    QualityThresholds,
    SearchConfig,
)

from .credentials import CredentialPool, mask_key
from .completion import TextCompletionService, GeminiCompletionService

from .analyzer import QuestionAnalyzer, parse_analysis_response
from .synonyms import SynonymExpander, CESSATION_SYNONYMS
from .store_adapter import ChunkStoreAdapter

from .scorer import MultiSignalScorer, cosine_similarity
from .ranker import rank
from .optimizer import (
    ContextQualityOptimizer,
    QualityReport,
    assess_chunk_quality,
    build_quality_report,
)

from .orchestrator import UnifiedSearchEngine, SearchStage

from .responder import AnswerGenerator, AnswerUnavailable, SourceInfo, collect_sources
from .rag import CessationRAG, ChatAnswer

__all__ = [
    # Config
    "ScoringWeights",
    "ContextLimits",
    "QualityThresholds",
    "SearchConfig",
    # LLM access
    "CredentialPool",
    "mask_key",
    "TextCompletionService",
    "GeminiCompletionService",
    # Analysis & expansion
    "QuestionAnalyzer",
    "parse_analysis_response",
    "SynonymExpander",
    "CESSATION_SYNONYMS",
    # Fetch, score, rank, optimize
    "ChunkStoreAdapter",
    "MultiSignalScorer",
    "cosine_similarity",
    "rank",
    "ContextQualityOptimizer",
    "QualityReport",
    "assess_chunk_quality",
    "build_quality_report",
    # Orchestration
    "UnifiedSearchEngine",
    "SearchStage",
    # Answering
    "AnswerGenerator",
    "AnswerUnavailable",
    "SourceInfo",
    "collect_sources",
    "CessationRAG",
    "ChatAnswer",
]

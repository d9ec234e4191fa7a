"""
Dependency injection for FastAPI.

Provides the singleton RAG instance and the factory shared with the CLI.
"""

import logging
from typing import TYPE_CHECKING, Optional

from .config import Settings, get_settings

if TYPE_CHECKING:
    from ..retrieval import CessationRAG

logger = logging.getLogger(__name__)

# Global singleton instances
_rag_instance: Optional["CessationRAG"] = None
_is_initialized: bool = False


def build_rag(settings: Settings) -> "CessationRAG":
    """Wire store, analyzer, embedder and responder from settings."""
    # Import here to avoid circular imports
    from ..cache import TTLCache
    from ..chunk_store import JsonDocumentStore
    from ..embedder import SentenceTransformerEmbedder
    from ..retrieval import (
        AnswerGenerator,
        CessationRAG,
        ChunkStoreAdapter,
        ContextLimits,
        CredentialPool,
        GeminiCompletionService,
        QuestionAnalyzer,
        SearchConfig,
        UnifiedSearchEngine,
    )
    from ..retrieval.analyzer import ANALYSIS_SYSTEM_INSTRUCTION
    from ..retrieval.responder import ANSWER_SYSTEM_INSTRUCTION

    logger.info(f"  Chunk store: {settings.chunk_store_path}")
    logger.info(f"  Embedding model: {settings.embedding_model if settings.use_embeddings else 'disabled'}")

    credentials = CredentialPool(settings.api_keys)
    if not len(credentials):
        logger.warning("No GEMINI_API_KEY configured - question analysis will fail")
    else:
        logger.info(f"  {len(credentials)} Gemini credential(s) configured")

    analyzer = QuestionAnalyzer(
        GeminiCompletionService(settings.analysis_model, ANALYSIS_SYSTEM_INSTRUCTION),
        credentials,
    )
    adapter = ChunkStoreAdapter(
        JsonDocumentStore(settings.chunk_store_path),
        cache=TTLCache(ttl_seconds=settings.cache_ttl_seconds),
    )
    embedder = SentenceTransformerEmbedder(settings.embedding_model) if settings.use_embeddings else None

    config = SearchConfig(
        limits=ContextLimits(
            max_context_length=settings.max_context_length,
            max_chunk_length=settings.max_chunk_length,
        ),
        default_max_chunks=settings.default_max_chunks,
    )

    engine = UnifiedSearchEngine(analyzer, adapter, embedder=embedder, config=config)
    responder = AnswerGenerator(
        GeminiCompletionService(settings.answer_model, ANSWER_SYSTEM_INSTRUCTION),
        credentials,
    )
    return CessationRAG(engine, responder)


def _init_rag_engine():
    """Initialize the RAG engine (singleton)."""
    global _rag_instance, _is_initialized

    if _is_initialized:
        return _rag_instance

    logger.info("Loading search engine...")
    _rag_instance = build_rag(get_settings())
    _is_initialized = True
    logger.info("Search engine loaded successfully")

    return _rag_instance


def get_rag() -> "CessationRAG":
    """
    Get the singleton RAG instance.

    This is the main dependency for API endpoints.
    The store is opened once on first call.
    """
    global _rag_instance

    if _rag_instance is None:
        _init_rag_engine()

    assert _rag_instance is not None, "RAG engine failed to initialize"
    return _rag_instance


def is_initialized() -> bool:
    return _is_initialized


def is_llm_available() -> bool:
    """Check if at least one Gemini credential is configured."""
    return bool(get_settings().api_keys)


def startup_load():
    """
    Pre-load the RAG engine on server startup.

    Call this in FastAPI's lifespan so the first request does not pay
    for store and model loading.
    """
    logger.info("Pre-loading search engine on startup...")
    _init_rag_engine()
    logger.info("Startup complete")

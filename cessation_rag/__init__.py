"""
Cessation RAG - Smoking-cessation regulation search

Retrieval-Augmented Generation over Korean smoking-cessation statutes and
administrative guidelines (국민건강증진법, 금연구역 지정 관리 업무지침, ...).

Packages:
    - models: Chunk, analysis and search result models
    - retrieval: Question analysis, scoring, ranking and context optimization
    - server: FastAPI wrapper around the search engine
"""

__version__ = "1.0.0"
__author__ = "Cessation RAG"

# Core models
from .models import (
    DocumentType,
    ChunkLocation,
    Chunk,
    QuestionAnalysis,
    ScoredChunk,
    SearchResult,
)

# Storage
from .chunk_store import DocumentStore, InMemoryDocumentStore, JsonDocumentStore
from .cache import TTLCache
from .embedder import EmbeddingService, SentenceTransformerEmbedder

# Errors
from .errors import (
    CessationRAGError,
    AnalysisUnavailable,
    StoreUnavailable,
    EmbeddingUnavailable,
)

# Retrieval
from .retrieval import (
    SearchConfig,
    CredentialPool,
    QuestionAnalyzer,
    SynonymExpander,
    ChunkStoreAdapter,
    UnifiedSearchEngine,
    CessationRAG,
)

from .validation import ValidationReport, validate_chunk_records

__all__ = [
    "__version__",
    # Models
    "DocumentType",
    "ChunkLocation",
    "Chunk",
    "QuestionAnalysis",
    "ScoredChunk",
    "SearchResult",
    # Storage
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonDocumentStore",
    "TTLCache",
    "EmbeddingService",
    "SentenceTransformerEmbedder",
    # Errors
    "CessationRAGError",
    "AnalysisUnavailable",
    "StoreUnavailable",
    "EmbeddingUnavailable",
    # Retrieval
    "SearchConfig",
    "CredentialPool",
    "QuestionAnalyzer",
    "SynonymExpander",
    "ChunkStoreAdapter",
    "UnifiedSearchEngine",
    "CessationRAG",
    # Validation
    "ValidationReport",
    "validate_chunk_records",
]

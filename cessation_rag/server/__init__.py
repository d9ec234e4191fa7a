"""
FastAPI Server for the Cessation RAG system.

This package provides a thin HTTP wrapper around the unified search engine.
The application lives in ``cessation_rag.server.main:app``; importing this
package does not create it.
"""

from .config import Settings, get_settings
from .schemas import (
    SearchRequest,
    SearchResponse,
    AskResponse,
    HealthResponse,
    StatsResponse,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Schemas
    "SearchRequest",
    "SearchResponse",
    "AskResponse",
    "HealthResponse",
    "StatsResponse",
]

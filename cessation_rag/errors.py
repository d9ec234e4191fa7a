"""
Error taxonomy for the retrieval core.

Only AnalysisUnavailable stops a search. Store and embedding failures are
absorbed where they happen and degrade to empty results / zero scores.
"""

from typing import Optional


class CessationRAGError(Exception):
    """Base class for errors raised by the retrieval core."""


class AnalysisUnavailable(CessationRAGError):
    """Question analysis failed after every credential was tried."""

    def __init__(self, message: str, attempts: Optional[list[str]] = None):
        super().__init__(message)
        self.attempts = attempts or []


class StoreUnavailable(CessationRAGError):
    """The document store could not be read."""


class EmbeddingUnavailable(CessationRAGError):
    """The embedding service could not produce a vector."""

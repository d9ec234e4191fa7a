"""
Document store backends.

The retrieval core reads chunks from a document-oriented store holding two
collections: "documents" and "chunks" (each chunk references its document
by id). The store has no server-side full-text search; filtering happens in
the ChunkStoreAdapter.

Backends:
- JsonDocumentStore: Preprocessed JSON export on disk
- InMemoryDocumentStore: Records held in memory (tests, small corpora)
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

DOCUMENTS_COLLECTION = "documents"
CHUNKS_COLLECTION = "chunks"


class DocumentStore(ABC):
    """Read-only view over the documents/chunks collections."""

    @abstractmethod
    def list_documents(self) -> list[dict]:
        """Return all document records.

        Raises:
            StoreUnavailable: If the store cannot be read
        """

    @abstractmethod
    def list_chunks(self, limit: Optional[int] = None) -> list[dict]:
        """Return up to ``limit`` chunk records in storage order.

        Raises:
            StoreUnavailable: If the store cannot be read
        """

    def get_stats(self) -> dict:
        """Collection sizes, for health/stats endpoints."""
        return {
            "total_documents": len(self.list_documents()),
            "total_chunks": len(self.list_chunks()),
        }


class InMemoryDocumentStore(DocumentStore):
    """Store backed by plain lists of records."""

    def __init__(self, documents: Optional[list[dict]] = None, chunks: Optional[list[dict]] = None):
        self._documents = list(documents or [])
        self._chunks = list(chunks or [])

    def list_documents(self) -> list[dict]:
        return list(self._documents)

    def list_chunks(self, limit: Optional[int] = None) -> list[dict]:
        if limit is None:
            return list(self._chunks)
        return self._chunks[:limit]


class JsonDocumentStore(DocumentStore):
    """Store backed by a JSON export of the documents/chunks collections.

    Expected layout::

        {
          "documents": [{"id": ..., "title": ..., "filename": ...}, ...],
          "chunks": [{"id": ..., "documentId": ..., "content": ..., ...}, ...]
        }

    The file is read once on first access.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._data: Optional[dict] = None

    def _load(self) -> dict:
        if self._data is not None:
            return self._data

        if not self.path.exists():
            raise StoreUnavailable(f"Chunk store not found: {self.path}")

        try:
            logger.debug(f"[STORE] Loading chunk store from disk: {self.path}")
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreUnavailable(f"Failed to read chunk store {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreUnavailable(f"Chunk store {self.path} is not a JSON object")

        self._data = {
            DOCUMENTS_COLLECTION: list(data.get(DOCUMENTS_COLLECTION) or []),
            CHUNKS_COLLECTION: list(data.get(CHUNKS_COLLECTION) or []),
        }
        logger.info(
            f"[STORE] Loaded {len(self._data[DOCUMENTS_COLLECTION])} documents, "
            f"{len(self._data[CHUNKS_COLLECTION])} chunks from {self.path.name}"
        )
        return self._data

    def list_documents(self) -> list[dict]:
        return list(self._load()[DOCUMENTS_COLLECTION])

    def list_chunks(self, limit: Optional[int] = None) -> list[dict]:
        chunks = self._load()[CHUNKS_COLLECTION]
        if limit is None:
            return list(chunks)
        return chunks[:limit]

    def reload(self) -> None:
        """Drop the in-memory copy so the next read hits the disk again."""
        self._data = None

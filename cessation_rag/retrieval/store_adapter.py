"""
Chunk Store Adapter.

Fetches candidate chunks from the document store and filters them
client-side (the store has no full-text index). A chunk matches when ANY
query term is a case-insensitive substring of one of its keywords or of its
content.

Store failures never propagate: they are logged and reported as "no
matches" so the pipeline can continue with its other retrieval paths.
"""

import logging
from typing import Iterable, Optional

from ..cache import TTLCache
from ..chunk_store import DocumentStore
from ..errors import StoreUnavailable
from ..models import Chunk

logger = logging.getLogger(__name__)

CACHE_PREFIX = "chunks_"


def _normalize_terms(terms: Iterable[str]) -> list[str]:
    seen = set()
    result = []
    for term in terms:
        term = (term or "").strip().lower()
        if term and term not in seen:
            seen.add(term)
            result.append(term)
    return result


def chunk_matches(chunk: Chunk, terms: list[str]) -> bool:
    """OR-match of lowercase ``terms`` against keywords and content."""
    content = chunk.content.lower()
    keywords = [k.lower() for k in chunk.keywords]
    for term in terms:
        if term in content:
            return True
        if any(term in keyword for keyword in keywords):
            return True
    return False


class ChunkStoreAdapter:
    """Read chunks from a DocumentStore by keyword, text or document."""

    def __init__(self, store: DocumentStore, cache: Optional[TTLCache] = None):
        self.store = store
        self.cache = cache

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------

    def fetch_all(self, document_id: Optional[str] = None, limit: int = 1000) -> list[Chunk]:
        """All chunks, optionally scoped to one document.

        A single document's chunks come back in document order.
        """
        self._check_limit(limit)
        cache_key = f"{CACHE_PREFIX}all_{document_id or 'all'}_{limit}"
        cached = self._cache_get(cache_key)
        if cached is not None:
            return cached

        try:
            chunks = self._load_chunks(document_id)
        except StoreUnavailable as e:
            logger.warning(f"[FETCH] Store unavailable for fetch_all ({document_id or 'all'}): {e}")
            return []

        if document_id:
            chunks.sort(key=lambda c: c.position)
        chunks = chunks[:limit]
        logger.info(f"[FETCH] fetch_all: {len(chunks)} chunks (document={document_id or 'all'})")
        self._cache_set(cache_key, chunks)
        return chunks

    def fetch_by_keyword(
        self,
        keywords: list[str],
        document_id: Optional[str] = None,
        limit: int = 15,
    ) -> list[Chunk]:
        """Chunks matching any of ``keywords``."""
        terms = _normalize_terms(keywords)
        if not terms:
            raise ValueError("fetch_by_keyword requires at least one keyword")
        self._check_limit(limit)

        cache_key = f"{CACHE_PREFIX}search_{'_'.join(sorted(terms))}_{document_id or 'all'}_{limit}"
        return self._search(terms, document_id, limit, cache_key, "keyword")

    def fetch_by_text(
        self,
        text: str,
        document_id: Optional[str] = None,
        limit: int = 10,
    ) -> list[Chunk]:
        """Chunks containing ``text`` as a whole."""
        terms = _normalize_terms([text])
        if not terms:
            raise ValueError("fetch_by_text requires non-empty text")
        self._check_limit(limit)

        normalized = "_".join(terms[0].split())
        cache_key = f"{CACHE_PREFIX}text_search_{normalized}_{document_id or 'all'}_{limit}"
        return self._search(terms, document_id, limit, cache_key, "text")

    def get_stats(self) -> dict:
        try:
            return self.store.get_stats()
        except StoreUnavailable as e:
            logger.warning(f"[FETCH] Store unavailable for stats: {e}")
            return {"total_documents": 0, "total_chunks": 0}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_limit(limit: int):
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

    def _search(
        self,
        terms: list[str],
        document_id: Optional[str],
        limit: int,
        cache_key: str,
        kind: str,
    ) -> list[Chunk]:
        cached = self._cache_get(cache_key)
        if cached is not None:
            return cached

        try:
            chunks = self._load_chunks(document_id)
        except StoreUnavailable as e:
            logger.warning(f"[FETCH] Store unavailable for {kind} search: {e}")
            return []

        matches = [c for c in chunks if chunk_matches(c, terms)]
        result = matches[:limit]
        logger.info(f"[FETCH] {kind} search: {len(result)} chunks (of {len(matches)} matches)")
        self._cache_set(cache_key, result)
        return result

    def _load_chunks(self, document_id: Optional[str]) -> list[Chunk]:
        """Read and convert chunk records, resolving owning documents."""
        documents = {str(d.get("id")): d for d in self.store.list_documents() if d.get("id") is not None}
        chunks = []
        for record in self.store.list_chunks():
            if document_id and str(record.get("documentId")) != document_id:
                continue
            try:
                chunk = Chunk.from_record(record, documents.get(str(record.get("documentId"))))
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"[FETCH] Skipping unreadable chunk record id={record.get('id')!r}: {e}")
                continue
            if not chunk.id or not chunk.content:
                logger.debug(f"[FETCH] Skipping malformed chunk record: id={chunk.id!r}")
                continue
            chunks.append(chunk)
        return chunks

    def _cache_get(self, key: str) -> Optional[list[Chunk]]:
        if self.cache is None:
            return None
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"[FETCH] Cache hit: {key}")
            return list(cached)
        return None

    def _cache_set(self, key: str, chunks: list[Chunk]):
        if self.cache is not None:
            self.cache.set(key, list(chunks))

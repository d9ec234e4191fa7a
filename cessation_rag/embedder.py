"""
Embedding service for semantic scoring.

Chunk embeddings are computed offline; at query time only the question is
embedded. Any failure is reported as EmbeddingUnavailable so the caller can
drop the semantic signal instead of failing the search.
"""

import logging
from typing import Optional, Protocol

from .errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)

# Multilingual model; the corpus is Korean
DEFAULT_EMBEDDING_MODEL = "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"


class EmbeddingService(Protocol):
    def embed_text(self, text: str) -> list[float]:
        """Return the embedding vector for ``text``.

        Raises:
            EmbeddingUnavailable: If no vector can be produced
        """
        ...


class SentenceTransformerEmbedder:
    """Embed text with a sentence-transformers model, loaded on first use."""

    def __init__(self, model_name: str = DEFAULT_EMBEDDING_MODEL, device: Optional[str] = None):
        """Initialize the embedder.

        Args:
            model_name: Name of the sentence transformer model
            device: Device to use ('cpu', 'cuda', or None for auto)
        """
        self.model_name = model_name
        self.device = device
        self._model = None
        self.embedding_dim: Optional[int] = None

    def _load_model(self):
        if self._model is None:
            # Imported here so the retrieval core can be used without torch loaded
            from sentence_transformers import SentenceTransformer

            logger.info(f"Loading embedding model: {self.model_name}...")
            self._model = SentenceTransformer(self.model_name, device=self.device)
            self.embedding_dim = self._model.get_sentence_embedding_dimension()
            logger.info(f"Model loaded. Embedding dimension: {self.embedding_dim}")
        return self._model

    def embed_text(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise EmbeddingUnavailable("Cannot embed empty text")
        try:
            model = self._load_model()
            return model.encode(text, convert_to_numpy=True).tolist()
        except EmbeddingUnavailable:
            raise
        except Exception as e:
            raise EmbeddingUnavailable(f"Embedding failed with {self.model_name}: {e}") from e

"""
Server configuration and environment settings.
"""

from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings

from ..retrieval.credentials import PLACEHOLDER_KEYS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server settings
    app_name: str = "Cessation RAG API"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Store and model settings
    chunk_store_path: Path = Path("./data/chunks.json")
    embedding_model: str = "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"
    use_embeddings: bool = True

    # LLM settings (ordered credential list, tried in rotation)
    gemini_api_key: str | None = None
    gemini_api_key_2: str | None = None
    gemini_api_key_3: str | None = None
    gemini_api_key_4: str | None = None
    gemini_api_key_5: str | None = None
    analysis_model: str = "gemini-2.5-flash"
    answer_model: str = "gemini-2.5-flash"

    # Retrieval settings
    max_context_length: int = 10000
    max_chunk_length: int = 3000
    default_max_chunks: int = 20
    cache_ttl_seconds: float = 30 * 24 * 60 * 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def api_keys(self) -> list[str]:
        """Configured Gemini keys in order, placeholders and blanks removed."""
        keys = []
        for key in (
            self.gemini_api_key,
            self.gemini_api_key_2,
            self.gemini_api_key_3,
            self.gemini_api_key_4,
            self.gemini_api_key_5,
        ):
            if key and key.strip() and key.strip() not in PLACEHOLDER_KEYS and key.strip() not in keys:
                keys.append(key.strip())
        return keys


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()

"""
Shared fixtures for the Cessation RAG tests.

No test talks to Gemini, loads a sentence-transformers model or reads the
real chunk store: completion, embedding and storage are replaced by the
in-process fakes below.
"""

import json

import pytest

from cessation_rag.chunk_store import DocumentStore, InMemoryDocumentStore
from cessation_rag.errors import EmbeddingUnavailable, StoreUnavailable
from cessation_rag.models import (
    Chunk,
    ChunkLocation,
    DocumentType,
    QuestionAnalysis,
    ScoreBreakdown,
    ScoredChunk,
)
from cessation_rag.retrieval import (
    ChunkStoreAdapter,
    CredentialPool,
    QuestionAnalyzer,
    UnifiedSearchEngine,
)


ANALYSIS_JSON = {
    "intent": "금연구역 과태료 문의",
    "keywords": ["금연구역", "과태료"],
    "category": "regulation",
    "complexity": "simple",
    "entities": ["PC방"],
    "context": "PC방 금연구역에서 흡연한 경우의 과태료",
}


class FakeCompletion:
    """Completion service with scripted replies per API key.

    A reply may be a string or an exception instance (raised when used).
    Keys without a scripted reply get ``default``.
    """

    def __init__(self, replies=None, default=None):
        self.replies = dict(replies or {})
        self.default = default if default is not None else json.dumps(ANALYSIS_JSON, ensure_ascii=False)
        self.calls: list[tuple[str, str]] = []

    def complete(self, prompt: str, api_key: str) -> str:
        self.calls.append((prompt, api_key))
        reply = self.replies.get(api_key, self.default)
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def keys_used(self) -> list[str]:
        return [key for _, key in self.calls]


class FakeEmbedder:
    """Embeds every text to the same vector (or raises)."""

    def __init__(self, vector=None, error: bool = False):
        self.vector = vector if vector is not None else [1.0, 0.0, 0.0]
        self.error = error
        self.calls: list[str] = []

    def embed_text(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.error:
            raise EmbeddingUnavailable("model offline")
        return list(self.vector)


class CountingStore(InMemoryDocumentStore):
    """In-memory store that counts reads."""

    def __init__(self, documents=None, chunks=None):
        super().__init__(documents, chunks)
        self.reads = 0

    def list_chunks(self, limit=None):
        self.reads += 1
        return super().list_chunks(limit)


class BrokenStore(DocumentStore):
    """Store whose every read fails."""

    def list_documents(self):
        raise StoreUnavailable("connection refused")

    def list_chunks(self, limit=None):
        raise StoreUnavailable("connection refused")


def make_chunk(
    chunk_id: str = "c1",
    content: str = "금연구역에서 흡연하면 과태료가 부과된다.",
    keywords=("금연구역",),
    embedding=None,
    document_type: DocumentType = DocumentType.GUIDELINE,
    page=None,
    section: str = "general",
    title: str = "금연구역 지정 관리 업무지침",
    articles=(),
) -> Chunk:
    return Chunk(
        id=chunk_id,
        content=content,
        document_id="doc-1",
        keywords=tuple(keywords),
        location=ChunkLocation(document=title, section=section, page=page),
        embedding=tuple(embedding) if embedding is not None else None,
        title=title,
        document_type=document_type,
        articles=tuple(articles),
    )


def make_scored(chunk_id: str = "c1", score: float = 0.5, content: str = "내용", **kwargs) -> ScoredChunk:
    return ScoredChunk(
        chunk=make_chunk(chunk_id, content=content, **kwargs),
        score=score,
        breakdown=ScoreBreakdown(keyword=score, synonym=score, semantic=0.0),
    )


DOCUMENTS = [
    {"id": "law", "title": "국민건강증진법", "filename": "국민건강증진법률.pdf"},
    {"id": "guide", "title": "금연구역 지정 관리 업무지침", "filename": "금연구역 지정 관리 업무지침.pdf"},
]

CHUNK_RECORDS = [
    {
        "id": "law-1",
        "documentId": "law",
        "content": "제9조 금연을 위한 조치. PC방 등 공중이용시설의 소유자는 해당 시설의 전체를 금연구역으로 지정하여야 한다.",
        "keywords": ["금연구역", "공중이용시설"],
        "metadata": {"articles": ["제9조"], "position": 0},
        "embedding": [1.0, 0.0, 0.0],
    },
    {
        "id": "law-2",
        "documentId": "law",
        "content": "제34조 과태료. 금연구역에서 흡연을 한 사람에게는 10만원 이하의 과태료를 부과한다.",
        "keywords": ["과태료", "금연구역"],
        "metadata": {"articles": ["제34조"], "position": 1},
        "embedding": [0.9, 0.1, 0.0],
    },
    {
        "id": "guide-1",
        "documentId": "guide",
        "content": "공동주택 필로티는 거주세대 2분의 1 이상의 동의로 금연구역 지정이 가능하다.",
        "keywords": ["공동주택", "필로티"],
        "metadata": {"pageNumber": 12, "section": "공동주택 금연구역"},
        "embedding": [0.0, 1.0, 0.0],
    },
    {
        "id": "guide-2",
        "documentId": "guide",
        "content": "보건소는 금연지원서비스를 제공한다.",
        "keywords": ["보건소"],
        "metadata": {"pageNumber": 30},
        "embedding": [0.0, 0.0, 1.0],
    },
]


@pytest.fixture
def analysis() -> QuestionAnalysis:
    return QuestionAnalysis.model_validate(ANALYSIS_JSON)


@pytest.fixture
def completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def credentials() -> CredentialPool:
    return CredentialPool(["key-aaaaaaaaaa-1", "key-bbbbbbbbbb-2", "key-cccccccccc-3"])


@pytest.fixture
def store() -> CountingStore:
    return CountingStore(DOCUMENTS, CHUNK_RECORDS)


@pytest.fixture
def adapter(store) -> ChunkStoreAdapter:
    return ChunkStoreAdapter(store)


@pytest.fixture
def engine(completion, credentials, adapter) -> UnifiedSearchEngine:
    return UnifiedSearchEngine(
        QuestionAnalyzer(completion, credentials),
        adapter,
        embedder=FakeEmbedder(),
    )

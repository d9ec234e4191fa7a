"""
Tests for the unified search pipeline.

Run with: pytest tests/test_orchestrator.py -v
"""

import json

import pytest

from cessation_rag.errors import AnalysisUnavailable
from cessation_rag.retrieval import (
    ChunkStoreAdapter,
    ContextLimits,
    CredentialPool,
    QuestionAnalyzer,
    SearchConfig,
    SearchStage,
    UnifiedSearchEngine,
)

from conftest import (
    CHUNK_RECORDS,
    DOCUMENTS,
    BrokenStore,
    CountingStore,
    FakeCompletion,
    FakeEmbedder,
)


QUESTION = "PC방에서 담배 피우면 과태료가 얼마인가요?"


class TestSearch:
    """End-to-end search over the in-memory corpus."""

    def test_returns_ranked_context(self, engine):
        result = engine.search(QUESTION)

        assert not result.is_empty
        scores = [c.score for c in result.chunks]
        assert scores == sorted(scores, reverse=True)
        assert len({c.id for c in result.chunks}) == len(result.chunks)
        # law-2 mentions both 금연구역 and 과태료
        assert result.chunks[0].id == "law-2"

    def test_expansion_recorded_on_analysis(self, engine):
        result = engine.search(QUESTION)
        expanded = result.analysis.expanded_keywords

        assert expanded[:2] == ["금연구역", "과태료"]
        assert "벌금" in expanded

    def test_chunks_fetched_by_several_paths_appear_once(self, engine):
        result = engine.search(QUESTION)

        # The bulk path returns every chunk; keyword and text hits add no duplicates
        assert result.metrics.total_processed == len(CHUNK_RECORDS)
        assert result.metrics.unique_results == len(result.chunks)

    def test_breakdown_averages_each_chunk_once(self, completion, credentials, adapter):
        engine = UnifiedSearchEngine(QuestionAnalyzer(completion, credentials), adapter)

        result = engine.search(QUESTION, max_chunks=len(CHUNK_RECORDS))

        assert result.metrics.score_breakdown.keyword == pytest.approx(
            sum(c.breakdown.keyword for c in result.chunks) / len(CHUNK_RECORDS)
        )

    def test_max_chunks(self, engine):
        assert len(engine.search(QUESTION, max_chunks=2).chunks) == 2
        assert engine.search(QUESTION, max_chunks=0).chunks == []

    def test_default_max_chunks_from_config(self, completion, credentials, adapter):
        engine = UnifiedSearchEngine(
            QuestionAnalyzer(completion, credentials),
            adapter,
            config=SearchConfig(default_max_chunks=1),
        )
        assert len(engine.search(QUESTION).chunks) == 1

    def test_context_budget_respected(self, completion, credentials, adapter):
        limits = ContextLimits(max_context_length=120, max_chunk_length=60)
        engine = UnifiedSearchEngine(
            QuestionAnalyzer(completion, credentials),
            adapter,
            config=SearchConfig(limits=limits),
        )

        result = engine.search(QUESTION)

        assert all(len(c.chunk.content) <= 60 for c in result.chunks)
        assert sum(len(c.chunk.content) for c in result.chunks) <= 120

    def test_metrics(self, engine):
        result = engine.search(QUESTION)
        metrics = result.metrics

        assert metrics.execution_time_ms >= 0
        assert metrics.average_relevance == pytest.approx(
            sum(c.score for c in result.chunks) / len(result.chunks)
        )
        assert set(metrics.stage_timings_ms) == {
            SearchStage.ANALYZING.value,
            SearchStage.EXPANDING.value,
            SearchStage.FETCHING.value,
            SearchStage.SCORING.value,
            SearchStage.RANKING.value,
            SearchStage.OPTIMIZING.value,
        }
        assert result.quality.total_chunks == len(result.chunks)

    def test_semantic_signal_used(self, engine):
        result = engine.search(QUESTION)
        law1 = next(c for c in result.chunks if c.id == "law-1")
        assert law1.breakdown.semantic == pytest.approx(1.0)

    def test_context_for_llm(self, engine):
        context = engine.search(QUESTION, max_chunks=2).get_context_for_llm()
        assert context.startswith("[1] 국민건강증진법 제34조\n")
        assert "\n\n---\n\n[2] " in context


class TestSearchFailures:
    """Failure handling at each stage."""

    def test_analysis_failure_aborts_before_store(self, store):
        keys = ["key-1111111111", "key-2222222222", "key-3333333333"]
        completion = FakeCompletion({k: RuntimeError("503 UNAVAILABLE") for k in keys})
        embedder = FakeEmbedder()
        engine = UnifiedSearchEngine(
            QuestionAnalyzer(completion, CredentialPool(keys)),
            ChunkStoreAdapter(store),
            embedder=embedder,
        )

        with pytest.raises(AnalysisUnavailable):
            engine.search(QUESTION)

        assert len(completion.calls) == 3
        assert store.reads == 0
        assert embedder.calls == []

    def test_empty_store_gives_empty_context(self, completion, credentials):
        engine = UnifiedSearchEngine(
            QuestionAnalyzer(completion, credentials),
            ChunkStoreAdapter(CountingStore([], [])),
            embedder=FakeEmbedder(),
        )

        result = engine.search(QUESTION)

        assert result.is_empty
        assert result.chunks == []
        assert result.metrics.total_processed == 0
        assert result.metrics.average_relevance == 0.0

    def test_store_outage_gives_empty_context(self, completion, credentials):
        engine = UnifiedSearchEngine(
            QuestionAnalyzer(completion, credentials),
            ChunkStoreAdapter(BrokenStore()),
            embedder=FakeEmbedder(),
        )
        assert engine.search(QUESTION).is_empty

    def test_embedding_failure_disables_semantic_signal(self, completion, credentials, adapter):
        engine = UnifiedSearchEngine(
            QuestionAnalyzer(completion, credentials),
            adapter,
            embedder=FakeEmbedder(error=True),
        )

        result = engine.search(QUESTION)

        assert not result.is_empty
        assert all(c.breakdown.semantic == 0.0 for c in result.chunks)

    def test_unexpected_embedder_error_disables_semantic_signal(self, completion, credentials, adapter):
        class RemoteEmbedder:
            def embed_text(self, text):
                raise ConnectionError("embedding service down")

        engine = UnifiedSearchEngine(QuestionAnalyzer(completion, credentials), adapter, embedder=RemoteEmbedder())

        result = engine.search(QUESTION)

        assert not result.is_empty
        assert all(c.breakdown.semantic == 0.0 for c in result.chunks)

    def test_unreadable_record_does_not_abort_search(self, completion, credentials):
        records = [
            {"id": "ok", "documentId": "guide", "content": "금연구역 과태료 안내", "keywords": ["금연구역"]},
            {"id": "bad", "documentId": "guide", "content": "금연구역", "location": {"page": "iv"}},
        ]
        engine = UnifiedSearchEngine(
            QuestionAnalyzer(completion, credentials),
            ChunkStoreAdapter(CountingStore(DOCUMENTS, records)),
        )

        assert [c.id for c in engine.search(QUESTION).chunks] == ["ok"]

    def test_analysis_without_keywords_still_searches(self, credentials, adapter):
        completion = FakeCompletion(default=json.dumps({"intent": "질문", "keywords": []}))
        engine = UnifiedSearchEngine(QuestionAnalyzer(completion, credentials), adapter)

        result = engine.search(QUESTION)

        assert result.analysis.expanded_keywords == []
        assert all(c.score == 0.0 for c in result.chunks)

    def test_blank_question(self, engine):
        with pytest.raises(ValueError):
            engine.search("  ")


class TestDeterminism:
    def test_same_inputs_same_output(self, credentials, store):
        def run():
            engine = UnifiedSearchEngine(
                QuestionAnalyzer(FakeCompletion(), CredentialPool(credentials.keys)),
                ChunkStoreAdapter(store),
                embedder=FakeEmbedder(),
            )
            return [(c.id, c.score) for c in engine.search(QUESTION).chunks]

        assert run() == run()

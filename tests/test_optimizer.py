"""
Tests for the context quality optimizer.

Run with: pytest tests/test_optimizer.py -v
"""

import pytest

from cessation_rag.models import QuestionAnalysis, QuestionComplexity, QualitySummary
from cessation_rag.retrieval import (
    ContextLimits,
    ContextQualityOptimizer,
    assess_chunk_quality,
    build_quality_report,
)

from conftest import make_scored


@pytest.fixture
def simple_analysis():
    return QuestionAnalysis(keywords=["금연구역"], complexity="simple")


class TestBudget:
    """Greedy prefix selection under the context budgets."""

    def test_stops_at_first_chunk_over_budget(self, simple_analysis):
        optimizer = ContextQualityOptimizer(ContextLimits(max_context_length=9000, max_chunk_length=5000))
        ranked = [make_scored(f"c{i}", 0.9 - i / 10, content="가" * 4000) for i in range(3)]

        selected = optimizer.optimize(ranked, simple_analysis, max_chunks=10)

        assert [s.id for s in selected] == ["c0", "c1"]
        assert sum(len(s.chunk.content) for s in selected) == 8000

    def test_later_shorter_chunk_not_considered(self, simple_analysis):
        optimizer = ContextQualityOptimizer(ContextLimits(max_context_length=5000, max_chunk_length=5000))
        ranked = [
            make_scored("big1", 0.9, content="가" * 3000),
            make_scored("big2", 0.8, content="가" * 3000),
            make_scored("small", 0.7, content="가" * 10),
        ]

        selected = optimizer.optimize(ranked, simple_analysis, max_chunks=10)

        assert [s.id for s in selected] == ["big1"]

    def test_chunks_truncated_to_cap(self, simple_analysis):
        optimizer = ContextQualityOptimizer(ContextLimits(max_context_length=10000, max_chunk_length=3000))
        original = make_scored("long", 0.9, content="나" * 4500)

        selected = optimizer.optimize([original], simple_analysis, max_chunks=5)

        assert len(selected[0].chunk.content) == 3000
        assert selected[0].truncated is True
        # Input is not modified
        assert len(original.chunk.content) == 4500
        assert original.truncated is False

    def test_respects_max_chunks(self, simple_analysis):
        optimizer = ContextQualityOptimizer()
        ranked = [make_scored(f"c{i}", 0.5, content="짧은 내용") for i in range(10)]

        assert len(optimizer.optimize(ranked, simple_analysis, max_chunks=4)) == 4

    def test_zero_max_chunks_returns_empty(self, simple_analysis):
        optimizer = ContextQualityOptimizer()
        assert optimizer.optimize([make_scored("a")], simple_analysis, max_chunks=0) == []

    def test_order_preserved(self, simple_analysis):
        optimizer = ContextQualityOptimizer()
        ranked = [make_scored("a", 0.9), make_scored("b", 0.5), make_scored("c", 0.1)]
        assert [s.id for s in optimizer.optimize(ranked, simple_analysis, 10)] == ["a", "b", "c"]

    def test_selected_chunks_carry_quality(self, simple_analysis):
        optimizer = ContextQualityOptimizer()
        selected = optimizer.optimize([make_scored("a", 0.8, content="가" * 500)], simple_analysis, 5)
        assert selected[0].quality is not None
        assert 0.0 <= selected[0].quality.overall <= 1.0


class TestChunkQuality:
    """Per-chunk quality heuristics."""

    def test_completeness_relative_to_complexity(self):
        scored = make_scored("a", 0.5, content="가" * 300)
        simple = assess_chunk_quality(scored, QuestionComplexity.SIMPLE)
        complex_ = assess_chunk_quality(scored, QuestionComplexity.COMPLEX)
        assert simple.completeness == pytest.approx(1.0)
        assert complex_.completeness == pytest.approx(0.3)

    def test_truncation_penalizes_completeness(self):
        scored = make_scored("a", 0.5, content="가" * 300)
        scored.truncated = True
        assert assess_chunk_quality(scored).completeness == pytest.approx(0.8)

    def test_clarity_ranges(self):
        assert assess_chunk_quality(make_scored("a", content="가" * 50)).clarity == pytest.approx(0.5)
        assert assess_chunk_quality(make_scored("a", content="가" * 1000)).clarity == 1.0
        assert assess_chunk_quality(make_scored("a", content="가" * 8000)).clarity == 0.5

    def test_relevance_is_score(self):
        assert assess_chunk_quality(make_scored("a", 0.65)).relevance == pytest.approx(0.65)


class TestQualitySummary:
    def test_empty_summary(self):
        assert ContextQualityOptimizer().quality_summary([]) == QualitySummary()

    def test_tier_counts(self, simple_analysis):
        optimizer = ContextQualityOptimizer()
        ranked = [
            make_scored("high", 1.0, content="금연구역 " * 100),
            make_scored("low", 0.0, content="가"),
        ]
        selected = optimizer.optimize(ranked, simple_analysis, 10)
        summary = optimizer.quality_summary(selected)

        assert summary.total_chunks == 2
        assert summary.high_quality_chunks == 1
        assert summary.low_quality_chunks == 1


class TestQualityReport:
    def test_strong_context(self):
        summary = QualitySummary(
            total_chunks=3,
            average_relevance=0.9,
            average_completeness=0.9,
            average_accuracy=0.9,
            average_overall=0.9,
            high_quality_chunks=3,
        )
        report = build_quality_report(summary)
        assert len(report.strengths) == 3
        assert report.weaknesses == []
        assert report.recommendations == []

    def test_weak_context(self):
        summary = QualitySummary(total_chunks=2, average_overall=0.3, low_quality_chunks=2)
        report = build_quality_report(summary)
        assert "낮은 관련성" in report.weaknesses
        assert "전체적인 검색 품질 향상 필요" in report.recommendations
        assert "저품질 청크 필터링 강화" in report.recommendations

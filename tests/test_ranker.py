"""
Tests for deduplication and ranking.

Run with: pytest tests/test_ranker.py -v
"""

from cessation_rag.retrieval import rank

from conftest import make_scored


class TestRank:
    """rank() keeps one entry per chunk id, best score first."""

    def test_duplicate_keeps_highest_score(self):
        ranked = rank([make_scored("dup", 0.3), make_scored("dup", 0.7)], cap=10)

        assert len(ranked) == 1
        assert ranked[0].id == "dup"
        assert ranked[0].score == 0.7

    def test_sorted_descending(self):
        ranked = rank([make_scored("a", 0.1), make_scored("b", 0.9), make_scored("c", 0.5)], cap=10)
        assert [s.id for s in ranked] == ["b", "c", "a"]

    def test_cap_applied_after_sort(self):
        ranked = rank([make_scored(f"c{i}", i / 10) for i in range(10)], cap=3)
        assert [s.id for s in ranked] == ["c9", "c8", "c7"]

    def test_non_positive_cap_returns_empty(self):
        scored = [make_scored("a", 0.5)]
        assert rank(scored, cap=0) == []
        assert rank(scored, cap=-1) == []

    def test_empty_input(self):
        assert rank([], cap=5) == []

    def test_ties_broken_by_id(self):
        ranked = rank([make_scored("b", 0.5), make_scored("a", 0.5)], cap=10)
        assert [s.id for s in ranked] == ["a", "b"]

    def test_ids_unique(self):
        scored = [make_scored(i, s) for i, s in [("a", 0.2), ("b", 0.4), ("a", 0.9), ("b", 0.1)]]
        ranked = rank(scored, cap=10)
        ids = [s.id for s in ranked]
        assert len(ids) == len(set(ids))
        assert {s.id: s.score for s in ranked} == {"a": 0.9, "b": 0.4}

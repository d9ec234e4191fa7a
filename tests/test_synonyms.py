"""
Tests for synonym expansion.

Run with: pytest tests/test_synonyms.py -v
"""

from cessation_rag.retrieval import SynonymExpander


class TestSynonymExpander:
    """Deterministic dictionary expansion."""

    def test_inputs_first_then_synonyms(self):
        expander = SynonymExpander({"흡연구역": ["흡연실", "흡연부스"]})
        assert expander.expand(["흡연구역"]) == ["흡연구역", "흡연실", "흡연부스"]

    def test_inputs_never_dropped(self):
        expander = SynonymExpander()
        result = expander.expand(["알수없는용어", "금연구역"])
        assert result[:2] == ["알수없는용어", "금연구역"]

    def test_no_duplicates(self):
        expander = SynonymExpander({"과태료": ["벌금"], "처벌": ["벌금"]})
        result = expander.expand(["과태료", "처벌", "과태료"])
        assert result == ["과태료", "처벌", "벌금"]

    def test_reverse_lookup(self):
        expander = SynonymExpander({"지방자치단체": ["지자체", "시군구"]})
        assert expander.expand(["지자체"]) == ["지자체", "지방자치단체", "시군구"]

    def test_deterministic(self):
        expander = SynonymExpander()
        keywords = ["전자담배", "금연구역", "과태료"]
        assert expander.expand(keywords) == expander.expand(keywords)

    def test_empty_input(self):
        assert SynonymExpander().expand([]) == []
        assert SynonymExpander().expand(["", "  "]) == []

    def test_builtin_dictionary_covers_domain(self):
        expander = SynonymExpander()
        assert "흡연실" in expander.synonyms_for("흡연구역")
        assert "지자체" in expander.synonyms_for("지방자치단체")
        assert "금연구역" not in expander.synonyms_for("금연구역")

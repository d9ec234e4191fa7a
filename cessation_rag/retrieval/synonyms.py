"""
Keyword expansion with a fixed synonym dictionary.

Expansion is deterministic: inputs come first in their original order,
followed by synonyms in dictionary order, duplicates removed. An input is
never dropped.
"""

from typing import Iterable, Optional


# =============================================================================
# SMOKING-CESSATION DOMAIN SYNONYMS
# =============================================================================

CESSATION_SYNONYMS: dict[str, list[str]] = {
    # Places
    "금연구역": ["금연 구역", "흡연금지구역", "흡연 금지 구역", "금연장소"],
    "흡연구역": ["흡연실", "흡연 구역", "흡연시설", "흡연부스"],
    "공중이용시설": ["다중이용시설", "공공시설", "공중 이용 시설"],
    "공동주택": ["아파트", "연립주택", "다세대주택"],
    "어린이집": ["보육시설", "보육기관"],
    "유치원": ["유아교육기관"],
    "필로티": ["필로티 구조", "주차장 필로티"],
    # Acts and enforcement
    "흡연": ["담배", "끽연", "담배를 피우는", "흡연행위"],
    "금연": ["흡연금지", "담배 끊기", "금연실천"],
    "과태료": ["벌금", "부과금", "처분", "제재"],
    "단속": ["점검", "지도단속", "감시", "적발"],
    "지정": ["지정 절차", "고시", "공고"],
    "신고": ["제보", "민원", "접수"],
    "표지": ["안내표지", "표지판", "금연표지", "스티커"],
    "경계": ["경계선", "반경", "10미터", "10m"],
    # Products
    "담배": ["궐련", "연초", "담배제품"],
    "전자담배": ["액상형 전자담배", "궐련형 전자담배", "가열담배", "니코틴 전자담배"],
    "니코틴보조제": ["니코틴 패치", "니코틴 껌", "니코틴 대체요법", "금연보조제"],
    # Programs and administration
    "금연지원서비스": ["금연클리닉", "금연상담", "금연지원", "금연치료"],
    "금연상담": ["상담", "금연 상담", "금연상담전화"],
    "보건소": ["보건지소", "지역보건기관"],
    "지방자치단체": ["지자체", "시군구", "시·군·구", "자치단체"],
    "조례": ["자치법규", "지방조례"],
    "시행령": ["대통령령"],
    "시행규칙": ["보건복지부령", "부령"],
    "국민건강증진법": ["건강증진법", "국민건강증진법률"],
    "통합건강증진사업": ["지역사회 통합건강증진사업", "건강증진사업"],
}


def _build_index(dictionary: dict[str, list[str]]) -> dict[str, list[str]]:
    """Map every term (head word or synonym) to its synonym group."""
    index: dict[str, list[str]] = {}
    for head, synonyms in dictionary.items():
        group = [head] + list(synonyms)
        for term in group:
            index.setdefault(term.lower(), [])
            for candidate in group:
                if candidate not in index[term.lower()]:
                    index[term.lower()].append(candidate)
    return index


class SynonymExpander:
    """Expand keywords with their known synonyms."""

    def __init__(self, dictionary: Optional[dict[str, list[str]]] = None):
        self.dictionary = dictionary if dictionary is not None else CESSATION_SYNONYMS
        self._index = _build_index(self.dictionary)

    def synonyms_for(self, keyword: str) -> list[str]:
        """Synonym group of ``keyword`` (excluding the keyword itself)."""
        group = self._index.get(keyword.strip().lower(), [])
        return [term for term in group if term.lower() != keyword.strip().lower()]

    def expand(self, keywords: Iterable[str]) -> list[str]:
        """Return keywords plus their synonyms, duplicates removed."""
        result: list[str] = []
        seen: set[str] = set()

        def _add(term: str):
            key = term.strip().lower()
            if key and key not in seen:
                seen.add(key)
                result.append(term.strip())

        keywords = [k for k in keywords if k and k.strip()]
        for keyword in keywords:
            _add(keyword)
        for keyword in keywords:
            for synonym in self.synonyms_for(keyword):
                _add(synonym)
        return result

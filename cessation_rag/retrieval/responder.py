"""
Grounded answer generation.

Builds a prompt from the selected context and asks the completion service
for a free-text answer, trying each credential once.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..models import DocumentType, ScoredChunk, SearchResult
from .completion import TextCompletionService
from .credentials import CredentialPool, mask_key

logger = logging.getLogger(__name__)

NO_INFORMATION_MESSAGE = "제공된 자료에서 해당 정보를 찾을 수 없습니다."

ANSWER_SYSTEM_INSTRUCTION = """You are an expert assistant specialized in Korean legal and administrative documents on smoking-cessation policy.

Rules:
1. Answer EXCLUSIVELY from the provided source material; do not use outside knowledge.
2. Quote the source verbatim for critical information, in quotation marks.
3. Cite every statement with the bracketed source label, e.g. [1] 국민건강증진법 제9조 or [2] 금연구역 지정 관리 업무지침, p.7.
4. If the sources do not contain the answer, reply exactly: "{no_information}"
5. Answer in Korean.""".format(no_information=NO_INFORMATION_MESSAGE)

ANSWER_PROMPT_TEMPLATE = """질문: {question}

질문 의도: {intent}
카테고리: {category}

----START OF SOURCE---
{context}
----END OF SOURCE---

위 자료만을 근거로 질문에 답변해주세요."""


class AnswerUnavailable(Exception):
    """Answer generation failed with every credential."""


@dataclass(frozen=True)
class SourceInfo:
    """One cited source, deduplicated by document and article/page."""
    id: str
    title: str
    document_type: str
    section: Optional[str] = None
    page: Optional[int] = None
    citation: str = ""

    def to_dict(self) -> dict:
        return dict(self.__dict__)


def collect_sources(chunks: list[ScoredChunk]) -> list[SourceInfo]:
    """Citation targets for the chunks used in an answer.

    Statutes are keyed by article, guidelines by page and section.
    """
    sources: dict[str, SourceInfo] = {}
    for scored in chunks:
        chunk = scored.chunk
        title = chunk.title or chunk.location.document
        if chunk.document_type == DocumentType.LEGAL:
            article = chunk.articles[0] if chunk.articles else chunk.location.section
            key = f"{chunk.document_id}-{article}"
            info = SourceInfo(
                id=key,
                title=title,
                document_type=chunk.document_type.value,
                section=article,
                citation=chunk.get_citation(),
            )
        else:
            key = f"{chunk.document_id}-{chunk.location.page}-{chunk.location.section}"
            info = SourceInfo(
                id=key,
                title=title,
                document_type=chunk.document_type.value,
                section=chunk.location.section,
                page=chunk.location.page,
                citation=chunk.get_citation(),
            )
        sources.setdefault(key, info)
    return list(sources.values())


class AnswerGenerator:
    """Turn a search result into a cited natural-language answer."""

    def __init__(self, completion: TextCompletionService, credentials: CredentialPool):
        self.completion = completion
        self.credentials = credentials

    def build_prompt(self, result: SearchResult) -> str:
        return ANSWER_PROMPT_TEMPLATE.format(
            question=result.question,
            intent=result.analysis.intent or result.question,
            category=result.analysis.category.value,
            context=result.get_context_for_llm(),
        )

    def generate(self, result: SearchResult) -> str:
        """Generate an answer for a non-empty search result.

        Raises:
            AnswerUnavailable: If every credential failed
        """
        prompt = self.build_prompt(result)
        last_error: Optional[Exception] = None
        for api_key in self.credentials.attempt_order():
            try:
                logger.info(f"[ANSWER] Attempting generation with key {mask_key(api_key)}")
                text = self.completion.complete(prompt, api_key)
            except Exception as e:
                logger.warning(f"[ANSWER] Key {mask_key(api_key)} failed: {e}")
                last_error = e
                continue
            if text and text.strip():
                return text.strip()
            logger.warning(f"[ANSWER] Key {mask_key(api_key)} returned an empty answer")
            last_error = ValueError("empty answer")

        raise AnswerUnavailable(f"Answer generation failed with all credentials: {last_error}")

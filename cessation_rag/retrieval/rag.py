"""
Complete question-answering flow: unified search plus grounded answer.

Failures never produce an invented answer:
- analysis failure -> explicit "could not analyze the question" message
- empty context -> "no information found", without calling the LLM
- answer failure -> explicit error message
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..errors import AnalysisUnavailable
from ..models import SearchResult
from .orchestrator import UnifiedSearchEngine
from .responder import (
    NO_INFORMATION_MESSAGE,
    AnswerGenerator,
    AnswerUnavailable,
    SourceInfo,
    collect_sources,
)

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = (
    "질문을 분석할 수 없습니다. AI 질문 분석 서비스를 사용할 수 없으니 "
    "잠시 후 다시 시도해주세요."
)
ANSWER_FAILED_MESSAGE = "답변을 생성할 수 없습니다. 잠시 후 다시 시도해주세요."

STATUS_OK = "ok"
STATUS_NO_CONTEXT = "no_context"
STATUS_ANALYSIS_FAILED = "analysis_failed"
STATUS_ANSWER_FAILED = "answer_failed"


@dataclass
class ChatAnswer:
    """Answer returned to the chat surface."""
    question: str
    answer: str
    status: str
    sources: list[SourceInfo] = field(default_factory=list)
    search: Optional[SearchResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


class CessationRAG:
    """Search + answer over the smoking-cessation corpus."""

    def __init__(self, engine: UnifiedSearchEngine, responder: Optional[AnswerGenerator] = None):
        self.engine = engine
        self.responder = responder

    def search(self, question: str, max_chunks: Optional[int] = None) -> SearchResult:
        return self.engine.search(question, max_chunks)

    def ask(self, question: str, max_chunks: Optional[int] = None) -> ChatAnswer:
        try:
            result = self.engine.search(question, max_chunks)
        except AnalysisUnavailable as e:
            logger.error(f"[ASK] Question analysis unavailable: {e}")
            return ChatAnswer(
                question=question,
                answer=ANALYSIS_FAILED_MESSAGE,
                status=STATUS_ANALYSIS_FAILED,
                error=str(e),
            )

        if result.is_empty:
            return ChatAnswer(
                question=question,
                answer=NO_INFORMATION_MESSAGE,
                status=STATUS_NO_CONTEXT,
                search=result,
            )

        sources = collect_sources(result.chunks)
        if self.responder is None:
            logger.warning("[ASK] No answer generator configured, returning context only")
            return ChatAnswer(
                question=question,
                answer=ANSWER_FAILED_MESSAGE,
                status=STATUS_ANSWER_FAILED,
                sources=sources,
                search=result,
                error="answer generation disabled",
            )

        try:
            answer = self.responder.generate(result)
        except AnswerUnavailable as e:
            logger.error(f"[ASK] {e}")
            return ChatAnswer(
                question=question,
                answer=ANSWER_FAILED_MESSAGE,
                status=STATUS_ANSWER_FAILED,
                sources=sources,
                search=result,
                error=str(e),
            )

        return ChatAnswer(
            question=question,
            answer=answer,
            status=STATUS_OK,
            sources=sources,
            search=result,
        )

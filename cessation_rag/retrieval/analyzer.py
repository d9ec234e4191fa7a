"""
Question analysis through the text-completion service.

The completion service is asked for a strict JSON object describing the
question. Each credential in the pool is tried once; the first parsable
answer wins. If none succeeds the search cannot continue.
"""

import json
import logging
import re

from pydantic import ValidationError

from ..errors import AnalysisUnavailable
from ..models import QuestionAnalysis
from .completion import TextCompletionService
from .credentials import CredentialPool, mask_key

logger = logging.getLogger(__name__)

ANALYSIS_SYSTEM_INSTRUCTION = (
    "You are an expert assistant for analyzing Korean questions about "
    "smoking cessation policies and regulations."
)

ANALYSIS_PROMPT_TEMPLATE = """
다음 질문을 분석하여 JSON 형태로 답변해주세요:

질문: "{question}"

다음 형식으로 분석해주세요:
{{
  "intent": "질문의 의도 (예: 금연구역 지정 절차 문의, 규정 내용 확인 등)",
  "keywords": ["핵심 키워드 배열"],
  "category": "질문 카테고리 (definition/procedure/regulation/comparison/analysis/general)",
  "complexity": "복잡도 (simple/medium/complex)",
  "entities": ["질문에서 언급된 구체적 개체들"],
  "context": "질문의 맥락 설명"
}}

분석 기준:
- category: definition(정의), procedure(절차), regulation(규정), comparison(비교), analysis(분석), general(일반)
- complexity: simple(단순), medium(중간), complex(복잡)
- keywords: 질문의 핵심을 나타내는 중요한 단어들
- entities: 구체적인 명사, 기관명, 법령명 등

**중요**: Markdown 코드 블록을 사용하지 말고 순수한 JSON 객체만 반환해주세요.
"""

_LEADING_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*")
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker."""
    text = _LEADING_FENCE.sub("", text)
    text = _TRAILING_FENCE.sub("", text)
    return text.strip()


def parse_analysis_response(text: str) -> QuestionAnalysis:
    """Parse a completion into a QuestionAnalysis.

    Raises:
        ValueError: If the response is empty or not a JSON object
    """
    if not text or not text.strip():
        raise ValueError("Empty analysis response")

    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ValueError(f"Analysis response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Analysis response is a JSON {type(data).__name__}, expected an object")

    # expanded_keywords is produced by the expansion step, never by the model
    data.pop("expanded_keywords", None)
    try:
        return QuestionAnalysis.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Analysis response failed validation: {e}") from e


class QuestionAnalyzer:
    """Turn a free-text question into a QuestionAnalysis."""

    def __init__(self, completion: TextCompletionService, credentials: CredentialPool):
        self.completion = completion
        self.credentials = credentials

    def build_prompt(self, question: str) -> str:
        return ANALYSIS_PROMPT_TEMPLATE.format(question=question)

    def analyze(self, question: str) -> QuestionAnalysis:
        """Analyze ``question``, trying each credential at most once.

        Raises:
            ValueError: If the question is blank
            AnalysisUnavailable: If every credential failed
        """
        if not question or not question.strip():
            raise ValueError("Question must not be empty")

        logger.info(f"[ANALYZE] Analyzing question: {question[:80]}")
        prompt = self.build_prompt(question.strip())

        attempts: list[str] = []
        for api_key in self.credentials.attempt_order():
            try:
                logger.debug(f"[ANALYZE] Attempting analysis with key {mask_key(api_key)}")
                text = self.completion.complete(prompt, api_key)
                analysis = parse_analysis_response(text)
            except Exception as e:
                logger.warning(f"[ANALYZE] Key {mask_key(api_key)} failed: {e}")
                attempts.append(f"{mask_key(api_key)}: {e}")
                continue

            logger.info(
                f"[ANALYZE] Done: intent='{analysis.intent}', category={analysis.category.value}, "
                f"keywords={analysis.keywords}"
            )
            return analysis

        if not attempts:
            raise AnalysisUnavailable("No API credentials configured for question analysis")

        raise AnalysisUnavailable(
            f"Question analysis failed with all {len(attempts)} credentials",
            attempts=attempts,
        )

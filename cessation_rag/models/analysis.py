"""
Question analysis model.

The analyzer asks the completion service for a strict JSON object and
validates it into this model. Missing, null or unknown values fall back to
safe defaults instead of failing the search.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class QuestionCategory(str, Enum):
    DEFINITION = "definition"
    PROCEDURE = "procedure"
    REGULATION = "regulation"
    COMPARISON = "comparison"
    ANALYSIS = "analysis"
    GENERAL = "general"


class QuestionComplexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


def _string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    seen = set()
    result = []
    for item in value:
        if item is None:
            continue
        item = str(item).strip()
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return result


class QuestionAnalysis(BaseModel):
    """Structured decomposition of one user question."""
    intent: str = Field("", description="Short description of what the user wants.")
    keywords: list[str] = Field(default_factory=list, description="Core search terms.")
    expanded_keywords: list[str] = Field(
        default_factory=list,
        description="Keywords plus synonyms, filled in by the expansion step.",
    )
    category: QuestionCategory = Field(QuestionCategory.GENERAL, description="Question category.")
    complexity: QuestionComplexity = Field(QuestionComplexity.SIMPLE, description="Question complexity.")
    entities: list[str] = Field(default_factory=list, description="Named entities in the question.")
    context: str = Field("", description="Free-text restatement of the question.")

    @field_validator("intent", "context", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("keywords", "expanded_keywords", "entities", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> list[str]:
        return _string_list(value)

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value: Any) -> QuestionCategory:
        try:
            return QuestionCategory(str(value).strip().lower())
        except ValueError:
            return QuestionCategory.GENERAL

    @field_validator("complexity", mode="before")
    @classmethod
    def _default_complexity(cls, value: Any) -> QuestionComplexity:
        try:
            return QuestionComplexity(str(value).strip().lower())
        except ValueError:
            return QuestionComplexity.SIMPLE

    @property
    def search_terms(self) -> list[str]:
        """Original keywords followed by expanded ones, without duplicates."""
        return _string_list(self.keywords + self.expanded_keywords)

"""
Chunk data models.

This module defines the immutable text span produced by offline
preprocessing:
- ChunkLocation: Human-facing citation data (document, section, page)
- Chunk: Extracted document text with keywords and optional embedding
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional


DEFAULT_SECTION = "general"

# Statutes are cited by article, everything else by page
LEGAL_DOCUMENT_PATTERNS = [
    r"국민건강증진법",
    r"질서위반행위규제법",
]


class DocumentType(str, Enum):
    """How a document is cited."""
    LEGAL = "legal"
    GUIDELINE = "guideline"


def detect_document_type(filename: str) -> DocumentType:
    """Classify a source file as a statute or a guideline/manual."""
    for pattern in LEGAL_DOCUMENT_PATTERNS:
        if re.search(pattern, filename or ""):
            return DocumentType.LEGAL
    return DocumentType.GUIDELINE


def _unique_strings(values) -> tuple[str, ...]:
    seen = set()
    result = []
    for value in values or []:
        if not isinstance(value, str):
            continue
        value = value.strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return tuple(result)


@dataclass(frozen=True)
class ChunkLocation:
    """Where a chunk came from, for citations."""
    document: str
    section: str = DEFAULT_SECTION
    page: Optional[int] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"document": self.document, "section": self.section}
        if self.page is not None:
            data["page"] = self.page
        return data


@dataclass(frozen=True)
class Chunk:
    """A contiguous span of extracted document text."""
    id: str
    content: str
    document_id: str
    keywords: tuple[str, ...] = ()
    location: ChunkLocation = field(default_factory=lambda: ChunkLocation(document="Unknown"))
    embedding: Optional[tuple[float, ...]] = None
    title: str = ""
    document_type: DocumentType = DocumentType.GUIDELINE
    position: int = 0
    articles: tuple[str, ...] = ()

    def with_content(self, content: str) -> "Chunk":
        """Return a copy carrying different content (used for truncation)."""
        return replace(self, content=content)

    def get_citation(self) -> str:
        """Generate a citation string.

        Statutes cite the article (or section), guidelines cite the page.
        """
        title = self.title or self.location.document
        title = re.sub(r"\.pdf$", "", title, flags=re.IGNORECASE)
        if self.document_type == DocumentType.LEGAL:
            article = self.articles[0] if self.articles else self.location.section
            return f"{title} {article}".strip()
        if self.location.page:
            return f"{title}, p.{self.location.page}"
        return title

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "documentId": self.document_id,
            "keywords": list(self.keywords),
            "location": self.location.to_dict(),
            "title": self.title,
            "documentType": self.document_type.value,
            "position": self.position,
            "articles": list(self.articles),
        }

    @classmethod
    def from_record(cls, record: dict, document: Optional[dict] = None) -> "Chunk":
        """Build a chunk from a raw store record.

        Args:
            record: Raw chunk record as stored by the preprocessing scripts
            document: Owning document record, used to fill missing
                title/filename/location data
        """
        document = document or {}
        metadata = record.get("metadata") or {}
        raw_location = record.get("location") or {}

        document_id = str(record.get("documentId") or record.get("source") or document.get("id") or "")
        filename = (
            record.get("filename")
            or metadata.get("source")
            or document.get("filename")
            or document_id
        )
        title = metadata.get("title") or document.get("title") or filename or "Unknown"

        raw_type = metadata.get("documentType") or document.get("documentType")
        try:
            document_type = DocumentType(raw_type) if raw_type else detect_document_type(filename)
        except ValueError:
            document_type = detect_document_type(filename)

        page = raw_location.get("page") or metadata.get("pageNumber") or metadata.get("page")
        if document_type == DocumentType.LEGAL or not page:
            page = None

        location = ChunkLocation(
            document=raw_location.get("document") or document.get("title") or document_id or "Unknown",
            section=raw_location.get("section") or metadata.get("section") or DEFAULT_SECTION,
            page=int(page) if page is not None else None,
        )

        embedding = record.get("embedding")
        if embedding:
            embedding = tuple(float(v) for v in embedding)
        else:
            embedding = None

        return cls(
            id=str(record.get("id") or ""),
            content=record.get("content") or "",
            document_id=document_id,
            keywords=_unique_strings(record.get("keywords")),
            location=location,
            embedding=embedding,
            title=title,
            document_type=document_type,
            position=int(metadata.get("position") or 0),
            articles=_unique_strings(metadata.get("articles")),
        )

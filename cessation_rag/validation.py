"""
Quality checks for a chunk store export.

Detects structural problems (missing ids or content, duplicate ids) and
placeholder text that was generated instead of extracted from the PDFs.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

logger = logging.getLogger(__name__)

# Boilerplate produced by earlier sample-data generators, never by real extraction.
SAMPLE_TEXT_PATTERNS = [
    re.compile(r"제1조\(목적\) 이 법령은 국민의 건강증진을 위한 금연사업의 효율적 추진을 위하여"),
    re.compile(r"제2조\(정의\) 이 법령에서 사용하는 용어의 뜻은 다음과 같다"),
    re.compile(r"금연이란 담배를 피우지 아니하는 것을 말한다"),
    re.compile(r"금연구역이란 금연이 의무화된 장소를 말한다"),
    re.compile(r"이 지침은 금연구역의 지정 및 관리에 관한 업무를 효율적으로 수행하기 위하여"),
    re.compile(r"금연지원서비스 통합시스템은 금연을 원하는 국민에게 종합적인 지원서비스를 제공하기 위한"),
]
SAMPLE_MATCH_THRESHOLD = 2

IMPORTANT_KEYWORDS = ["금연", "금연구역", "건강증진", "필로티"]


def is_sample_text(text: str) -> bool:
    if not text:
        return False
    matches = sum(1 for pattern in SAMPLE_TEXT_PATTERNS if pattern.search(text))
    return matches >= SAMPLE_MATCH_THRESHOLD


@dataclass
class ValidationReport:
    is_valid: bool
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "issues": self.issues,
            "warnings": self.warnings,
            "stats": self.stats,
        }


def validate_chunk_records(records: Iterable[dict]) -> ValidationReport:
    """Validate raw chunk records as stored in the chunk store.

    Issues make the export invalid; warnings do not.
    """
    records = list(records)
    issues: list[str] = []
    warnings: list[str] = []

    if not records:
        issues.append("청크가 없습니다.")

    seen_ids: set[str] = set()
    duplicate_ids: list[str] = []
    missing_content = 0
    missing_document = 0
    without_keywords = 0
    sample_chunks = 0

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            issues.append(f"청크 {index + 1}: 잘못된 레코드 형식")
            continue

        chunk_id = str(record.get("id") or "").strip()
        label = chunk_id or f"#{index + 1}"
        if not chunk_id:
            issues.append(f"청크 {label}: id 누락")
        elif chunk_id in seen_ids:
            duplicate_ids.append(chunk_id)
        else:
            seen_ids.add(chunk_id)

        content = record.get("content") or ""
        if not str(content).strip():
            missing_content += 1
            issues.append(f"청크 {label}: 내용 없음")
        elif is_sample_text(str(content)):
            sample_chunks += 1
            issues.append(f"청크 {label}: 가짜 데이터 감지")

        if not (record.get("documentId") or record.get("document_id")):
            missing_document += 1

        if not record.get("keywords"):
            without_keywords += 1

    if duplicate_ids:
        issues.append(f"중복된 청크 id: {', '.join(sorted(set(duplicate_ids)))}")
    if missing_document:
        warnings.append(f"문서 id가 없는 청크: {missing_document}개")
    if without_keywords:
        warnings.append(f"키워드가 없는 청크: {without_keywords}개")

    all_text = " ".join(str(r.get("content") or "") for r in records if isinstance(r, dict))
    missing_keywords = [k for k in IMPORTANT_KEYWORDS if k not in all_text]
    if records and missing_keywords:
        warnings.append(f"중요 키워드가 누락되었습니다: {', '.join(missing_keywords)}")

    stats = {
        "totalChunks": len(records),
        "uniqueIds": len(seen_ids),
        "duplicateIds": len(set(duplicate_ids)),
        "missingContent": missing_content,
        "missingDocumentId": missing_document,
        "withoutKeywords": without_keywords,
        "sampleChunks": sample_chunks,
    }

    report = ValidationReport(is_valid=not issues, issues=issues, warnings=warnings, stats=stats)
    logger.info(
        f"[VALIDATE] {len(records)} chunks, {len(issues)} issues, {len(warnings)} warnings"
    )
    return report

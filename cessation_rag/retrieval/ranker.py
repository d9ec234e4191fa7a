"""
Deduplication and ranking of scored chunks.
"""

from ..models import ScoredChunk


def rank(scored: list[ScoredChunk], cap: int) -> list[ScoredChunk]:
    """Collapse duplicates by chunk id, sort by score descending, keep ``cap``.

    When the same chunk arrives through several retrieval paths only the
    highest-scoring entry survives (the first one on ties). Equal scores are
    ordered by chunk id so the order is fully determined.
    """
    if cap <= 0:
        return []

    best: dict[str, ScoredChunk] = {}
    for entry in scored:
        existing = best.get(entry.chunk.id)
        if existing is None or entry.score > existing.score:
            best[entry.chunk.id] = entry

    ranked = sorted(best.values(), key=lambda s: (-s.score, s.chunk.id))
    return ranked[:cap]

"""
Retrieval configuration dataclasses.

This module defines:
- ScoringWeights: Signal blend and keyword/synonym match constants
- ContextLimits: Character budgets for the assembled context
- QualityThresholds: Tier boundaries for context quality
- SearchConfig: Configuration for the unified search pipeline

The scoring constants were tuned by hand on the cessation corpus; they are
kept as defaults, not re-derived.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScoringWeights:
    """Constants used by the multi-signal scorer."""
    # Signal blend (sums to 1.0)
    keyword: float = 0.4
    synonym: float = 0.3
    semantic: float = 0.3

    # Keyword signal
    exact_match_weight: float = 10.0  # keyword found in the chunk's keyword set
    content_match_unit: float = 2.0  # per occurrence in the content
    content_match_cap: float = 10.0  # per keyword, also the normaliser

    # Synonym signal
    synonym_match_unit: float = 1.0
    synonym_match_cap: float = 5.0


@dataclass(frozen=True)
class ContextLimits:
    """Character budgets for the final context."""
    max_context_length: int = 10000
    max_chunk_length: int = 3000


@dataclass(frozen=True)
class QualityThresholds:
    """Overall-quality boundaries for high/low tiers."""
    high: float = 0.8
    low: float = 0.5


@dataclass
class SearchConfig:
    """Configuration for the unified search pipeline."""
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    limits: ContextLimits = field(default_factory=ContextLimits)
    quality: QualityThresholds = field(default_factory=QualityThresholds)

    # Number of chunks returned when the caller does not say
    default_max_chunks: int = 20

    # Store fetch sizes for each retrieval path
    bulk_fetch_limit: int = 1000
    keyword_fetch_limit: int = 200
    text_fetch_limit: int = 50

    # Enable/disable the targeted retrieval paths (bulk is always used)
    use_keyword_path: bool = True
    use_text_path: bool = True

    # Scoring batch size (progress logging only, does not affect scores)
    scoring_batch_size: int = 100

"""
Unified Search Orchestrator.

Runs one question through the pipeline:

    IDLE -> ANALYZING -> EXPANDING -> FETCHING -> SCORING -> RANKING
         -> OPTIMIZING -> DONE

Stages run once, in order. Analysis failure aborts the search before the
store is touched. Store and embedding failures degrade to empty candidate
paths and a zero semantic signal.
"""

import logging
import time
from contextlib import contextmanager
from enum import Enum
from typing import Optional

from ..embedder import EmbeddingService
from ..models import Chunk, QuestionAnalysis, SearchMetrics, SearchResult
from .analyzer import QuestionAnalyzer
from .config import SearchConfig
from .optimizer import ContextQualityOptimizer
from .ranker import rank
from .scorer import MultiSignalScorer, average_breakdown
from .store_adapter import ChunkStoreAdapter
from .synonyms import SynonymExpander

logger = logging.getLogger(__name__)


class SearchStage(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    EXPANDING = "expanding"
    FETCHING = "fetching"
    SCORING = "scoring"
    RANKING = "ranking"
    OPTIMIZING = "optimizing"
    DONE = "done"


class UnifiedSearchEngine:
    """Single entry point for question -> ranked, budgeted context."""

    def __init__(
        self,
        analyzer: QuestionAnalyzer,
        store: ChunkStoreAdapter,
        embedder: Optional[EmbeddingService] = None,
        expander: Optional[SynonymExpander] = None,
        config: Optional[SearchConfig] = None,
    ):
        """Initialize the engine.

        Args:
            analyzer: Question analyzer (completion service + credentials)
            store: Chunk store adapter
            embedder: Embedding service for the semantic signal; None disables it
            expander: Synonym expander (defaults to the built-in dictionary)
            config: Search configuration
        """
        self.analyzer = analyzer
        self.store = store
        self.embedder = embedder
        self.expander = expander or SynonymExpander()
        self.config = config or SearchConfig()
        self.scorer = MultiSignalScorer(self.config.weights)
        self.optimizer = ContextQualityOptimizer(self.config.limits, self.config.quality)

    def search(self, question: str, max_chunks: Optional[int] = None) -> SearchResult:
        """Retrieve the context for ``question``.

        Raises:
            AnalysisUnavailable: If the question could not be analyzed
        """
        if max_chunks is None:
            max_chunks = self.config.default_max_chunks

        timings: dict[str, float] = {}
        started = time.perf_counter()
        logger.info(f"[SEARCH] Starting search: {question[:80]}")

        with self._stage(SearchStage.ANALYZING, timings):
            analysis = self.analyzer.analyze(question)

        with self._stage(SearchStage.EXPANDING, timings):
            analysis.expanded_keywords = self.expander.expand(analysis.keywords)

        with self._stage(SearchStage.FETCHING, timings):
            candidates = self._fetch_candidates(analysis)

        with self._stage(SearchStage.SCORING, timings):
            question_embedding = self._embed_question(question, analysis) if candidates else None
            scored = self.scorer.score_all(
                candidates,
                analysis,
                question_embedding,
                batch_size=self.config.scoring_batch_size,
            )

        with self._stage(SearchStage.RANKING, timings):
            ranked = rank(scored, max_chunks)

        with self._stage(SearchStage.OPTIMIZING, timings):
            selected = self.optimizer.optimize(ranked, analysis, max_chunks)
            quality = self.optimizer.quality_summary(selected)

        elapsed_ms = (time.perf_counter() - started) * 1000
        metrics = SearchMetrics(
            total_processed=len(candidates),
            unique_results=len(selected),
            average_relevance=(sum(s.score for s in selected) / len(selected)) if selected else 0.0,
            execution_time_ms=elapsed_ms,
            score_breakdown=average_breakdown(scored),
            stage_timings_ms=timings,
        )
        logger.info(
            f"[SEARCH] {SearchStage.DONE.value}: {len(selected)} chunks from {len(candidates)} candidates "
            f"in {elapsed_ms:.0f}ms (avg relevance {metrics.average_relevance:.3f}; "
            f"keyword {metrics.score_breakdown.keyword:.2f}, synonym {metrics.score_breakdown.synonym:.2f}, "
            f"semantic {metrics.score_breakdown.semantic:.2f})"
        )
        if not selected:
            logger.warning(f"[SEARCH] No context available for question: {question[:80]}")

        return SearchResult(
            question=question,
            analysis=analysis,
            chunks=selected,
            metrics=metrics,
            quality=quality,
        )

    @contextmanager
    def _stage(self, stage: SearchStage, timings: dict[str, float]):
        logger.debug(f"[SEARCH] Stage: {stage.value}")
        start = time.perf_counter()
        try:
            yield
        finally:
            timings[stage.value] = (time.perf_counter() - start) * 1000

    def _fetch_candidates(self, analysis: QuestionAnalysis) -> list[Chunk]:
        """Collect candidates from every retrieval path.

        A chunk reached through several paths is kept once, first occurrence wins.
        """
        config = self.config
        fetched = list(self.store.fetch_all(limit=config.bulk_fetch_limit))

        terms = analysis.search_terms
        if config.use_keyword_path and terms:
            fetched.extend(self.store.fetch_by_keyword(terms, limit=config.keyword_fetch_limit))

        if config.use_text_path and analysis.context:
            fetched.extend(self.store.fetch_by_text(analysis.context, limit=config.text_fetch_limit))

        seen: set[str] = set()
        candidates = []
        for chunk in fetched:
            if chunk.id not in seen:
                seen.add(chunk.id)
                candidates.append(chunk)

        logger.info(f"[FETCH] {len(candidates)} candidates ({len(terms)} search terms)")
        return candidates

    def _embed_question(self, question: str, analysis: QuestionAnalysis) -> Optional[list[float]]:
        if self.embedder is None:
            return None
        text = analysis.context or question
        try:
            embedding = self.embedder.embed_text(text)
        except Exception as e:
            logger.warning(f"[SCORE] Question embedding unavailable, semantic signal disabled: {e}")
            return None
        logger.debug(f"[SCORE] Question embedding: {len(embedding)} dimensions")
        return embedding

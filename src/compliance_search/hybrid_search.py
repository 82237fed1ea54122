"""Hybrid (lexical + semantic) search with standards-aware reranking.

This module ties the pieces together:
- Query analysis for intent and mentioned standards
- BM25 and similarity retrieval, each bounded to a fixed candidate count
- Merge, domain boosting and deduplication
- Confidence and explanation scoring

A failing index never fails the search: its candidates are treated as
empty and the failure is reported through ``metrics.errors``.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from .bm25_index import LexicalIndex
from .confidence import enhance_results, overall_confidence
from .config import SearchConfig
from .corpora import MultilingualCorpora
from .indexer import DocumentIndexer, IndexBuildReport
from .models import (
    Document,
    Language,
    Query,
    ScoredDocument,
    SearchContext,
    SearchMetrics,
    SearchResponse,
)
from .query_analyzer import QueryAnalyzer
from .registry import StandardsRegistry
from .reranker import StandardsReranker
from .semantic_index import SemanticIndex, SimilarityScorer
from .tokenization import detect_language

logger = logging.getLogger(__name__)

ContextArg = Optional[Union[SearchContext, Mapping[str, Any]]]


class HybridSearchEngine:
    """Searches a compliance knowledge base.

    Usage:
        engine = HybridSearchEngine(registry)
        engine.build_index()
        response = engine.hybrid_search("fire safety training under SMETA")
    """

    def __init__(
        self,
        registry: Optional[StandardsRegistry] = None,
        config: Optional[SearchConfig] = None,
        scorer: Optional[SimilarityScorer] = None,
    ) -> None:
        """Initialize the engine with empty indices.

        Args:
            registry: Standards registry used as document source and for
                entity extraction
            config: Search configuration
            scorer: Similarity strategy for the semantic index
        """
        self._registry = registry or StandardsRegistry()
        self._config = config or SearchConfig()
        self.lexical_index = LexicalIndex(self._config.bm25)
        self.semantic_index = SemanticIndex(
            scorer=scorer, min_similarity=self._config.min_similarity
        )
        self.corpora = MultilingualCorpora()
        self._indexer = DocumentIndexer(self.lexical_index, self.semantic_index, self.corpora)
        self._analyzer = QueryAnalyzer(
            self._registry, default_confidence=self._config.default_confidence
        )
        self._reranker = StandardsReranker(
            boosts=self._config.boosts, limit=self._config.result_limit
        )

    @property
    def config(self) -> SearchConfig:
        return self._config

    @property
    def registry(self) -> StandardsRegistry:
        return self._registry

    def build_index(self) -> IndexBuildReport:
        """Load every registry record into the indices."""
        return self._indexer.build(self._registry)

    def add_document(self, document: Document) -> None:
        """Index one document after the initial build."""
        self._indexer.add_document(document)

    def hybrid_search(
        self,
        query_text: str,
        language: Union[Language, str] = Language.EN,
        context: ContextArg = None,
    ) -> SearchResponse:
        """Run a hybrid search.

        Args:
            query_text: Free-text query
            language: "en" or "km"
            context: Optional search context (``factory_id``)

        Returns:
            SearchResponse with ranked results, the query analysis and metrics
        """
        language = _coerce_language(language, query_text)
        search_context = _coerce_context(context)
        analysis = self._analyzer.analyze(query_text or "", language)
        metrics = SearchMetrics()

        if not query_text or not query_text.strip():
            logger.debug("Empty query, returning no results")
            return SearchResponse(results=[], query_analysis=analysis, metrics=metrics)

        limit = self._config.candidate_limit
        lexical_results = self._run_index(
            "lexical",
            lambda: self.lexical_index.search(query_text, language=language, limit=limit),
            metrics,
        )
        semantic_results = self._run_index(
            "semantic",
            lambda: self.semantic_index.search(query_text, limit=limit),
            metrics,
        )

        reranked = self._reranker.rerank(
            lexical_results, semantic_results, analysis, search_context
        )
        results = enhance_results(reranked, analysis, self._config.weights)

        metrics.lexical_count = len(lexical_results)
        metrics.semantic_count = len(semantic_results)
        metrics.reranked_count = len(results)
        metrics.average_confidence = overall_confidence(results)

        logger.debug(
            f"Hybrid search: lexical={metrics.lexical_count} "
            f"semantic={metrics.semantic_count} results={metrics.reranked_count}"
        )
        return SearchResponse(results=results, query_analysis=analysis, metrics=metrics)

    def search(self, query: Query) -> SearchResponse:
        return self.hybrid_search(query.raw_text, query.language, query.context)

    def _run_index(self, name: str, run, metrics: SearchMetrics) -> List[ScoredDocument]:
        try:
            results = run()
        except Exception as exc:
            logger.warning(f"{name} index failed, continuing without it: {exc}")
            metrics.errors.append(f"{name} index error: {exc}")
            return []
        return list(results or [])


def _coerce_language(language: Union[Language, str], query_text: Optional[str]) -> Language:
    try:
        return Language(language)
    except ValueError:
        detected = detect_language(query_text or "")
        logger.warning(f"Unsupported language {language!r}, using {detected.value}")
        return detected


def _coerce_context(context: ContextArg) -> Optional[SearchContext]:
    if context is None or isinstance(context, SearchContext):
        return context
    factory_id = context.get("factory_id", context.get("factoryId"))
    return SearchContext(factory_id=factory_id)


def create_search_engine(
    registry: StandardsRegistry,
    config: Optional[SearchConfig] = None,
    scorer: Optional[SimilarityScorer] = None,
) -> HybridSearchEngine:
    """Create a search engine and index the registry.

    Args:
        registry: Standards and requirements to index
        config: Optional search configuration
        scorer: Optional similarity strategy for the semantic index

    Returns:
        HybridSearchEngine ready to serve queries
    """
    engine = HybridSearchEngine(registry=registry, config=config, scorer=scorer)
    engine.build_index()
    return engine

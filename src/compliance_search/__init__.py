"""Bilingual (English/Khmer) hybrid search for compliance standards."""

from .bm25_index import LexicalIndex
from .cap_synthesizer import build_cap_summary, generate_cap
from .confidence import (
    ConfidenceBand,
    calculate_confidence,
    calculate_relevance,
    confidence_band,
    enhance_results,
    generate_explanation,
    overall_confidence,
)
from .config import BM25Config, BoostFactors, ConfidenceWeights, SearchConfig
from .corpora import MultilingualCorpora
from .errors import CAPInputError, ComplianceSearchError, InputError
from .hybrid_search import HybridSearchEngine, create_search_engine
from .indexer import DocumentIndexer, IndexBuildReport
from .models import (
    CorrectiveActionPlan,
    Document,
    DocumentType,
    Language,
    Milestone,
    NonConformity,
    Query,
    QueryAnalysis,
    QueryIntent,
    RootCauseAnalysis,
    ScoredDocument,
    SearchContext,
    SearchMetrics,
    SearchResponse,
    SearchResult,
    SMARTAction,
    Timeline,
    TimelinePhase,
    VerificationMethod,
)
from .query_analyzer import INTENT_KEYWORDS, QueryAnalyzer
from .registry import Requirement, Standard, StandardsRegistry
from .reranker import RankedCandidate, StandardsReranker, boost_score
from .semantic_index import (
    SemanticIndex,
    SimilarityScorer,
    TermOverlapScorer,
    TfidfCosineScorer,
)

__all__ = [
    "HybridSearchEngine",
    "create_search_engine",
    "LexicalIndex",
    "SemanticIndex",
    "SimilarityScorer",
    "TermOverlapScorer",
    "TfidfCosineScorer",
    "QueryAnalyzer",
    "INTENT_KEYWORDS",
    "StandardsReranker",
    "RankedCandidate",
    "boost_score",
    "enhance_results",
    "calculate_confidence",
    "calculate_relevance",
    "generate_explanation",
    "overall_confidence",
    "confidence_band",
    "ConfidenceBand",
    "generate_cap",
    "build_cap_summary",
    "DocumentIndexer",
    "IndexBuildReport",
    "MultilingualCorpora",
    "StandardsRegistry",
    "Standard",
    "Requirement",
    # Configuration
    "SearchConfig",
    "BM25Config",
    "BoostFactors",
    "ConfidenceWeights",
    # Errors
    "ComplianceSearchError",
    "InputError",
    "CAPInputError",
    # Models
    "Document",
    "DocumentType",
    "Language",
    "Query",
    "QueryAnalysis",
    "QueryIntent",
    "ScoredDocument",
    "SearchContext",
    "SearchMetrics",
    "SearchResponse",
    "SearchResult",
    "NonConformity",
    "SMARTAction",
    "RootCauseAnalysis",
    "Timeline",
    "TimelinePhase",
    "Milestone",
    "VerificationMethod",
    "CorrectiveActionPlan",
]

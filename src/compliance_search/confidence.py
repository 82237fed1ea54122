"""Confidence, relevance and explanations for reranked search results.

Each result gets:
- a confidence score in [0, 1], starting from its boosted score and raised
  for standard matches, critical priority and active status
- a relevance score in [0, 1] driven by intent, standard and priority
- a short explanation made of the clauses that applied
"""

from enum import Enum
from typing import List, Optional, Sequence

from .config import ConfidenceWeights
from .models import QueryAnalysis, SearchResult
from .reranker import RankedCandidate, is_critical, matches_intent, matches_standard


class ConfidenceBand(str, Enum):
    """Confidence band categories."""
    HIGH = "high"  # >= 0.7
    MEDIUM = "medium"  # 0.4 - 0.7
    LOW = "low"  # < 0.4


def confidence_band(value: float, threshold: float = 0.7) -> ConfidenceBand:
    if value >= threshold:
        return ConfidenceBand.HIGH
    if value >= 0.4:
        return ConfidenceBand.MEDIUM
    return ConfidenceBand.LOW


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def calculate_confidence(
    candidate: RankedCandidate,
    analysis: QueryAnalysis,
    weights: Optional[ConfidenceWeights] = None,
) -> float:
    weights = weights or ConfidenceWeights()
    document = candidate.document

    confidence = min(candidate.final_score, 1.0)
    if matches_standard(document, analysis):
        confidence += weights.standard_match
    if is_critical(document):
        confidence += weights.critical_priority
    if document.status == "active":
        confidence += weights.active_status
    return _clamp(confidence)


def calculate_relevance(
    candidate: RankedCandidate,
    analysis: QueryAnalysis,
    weights: Optional[ConfidenceWeights] = None,
) -> float:
    weights = weights or ConfidenceWeights()
    document = candidate.document

    relevance = weights.relevance_base
    if matches_intent(document, analysis):
        relevance += weights.relevance_intent_match
    if matches_standard(document, analysis):
        relevance += weights.relevance_standard_match
    if is_critical(document):
        relevance += weights.relevance_critical_priority
    return _clamp(relevance)


def generate_explanation(candidate: RankedCandidate, analysis: QueryAnalysis) -> str:
    """Explain why a result is relevant. Empty when nothing applies."""
    document = candidate.document
    clauses: List[str] = []

    if matches_standard(document, analysis):
        clauses.append("Directly matches the standard you mentioned")
    if matches_intent(document, analysis):
        clauses.append(f"Addresses your {analysis.intent.value} question")
    if is_critical(document):
        clauses.append("High-priority compliance requirement")
    if document.category:
        clauses.append(f"Related to {document.category} compliance")

    return ". ".join(clauses)


def enhance_results(
    candidates: Sequence[RankedCandidate],
    analysis: QueryAnalysis,
    weights: Optional[ConfidenceWeights] = None,
) -> List[SearchResult]:
    """Attach confidence, relevance and an explanation to each candidate."""
    return [
        SearchResult(
            document=candidate.document,
            lexical_score=candidate.lexical_score,
            semantic_score=candidate.semantic_score,
            final_score=candidate.final_score,
            confidence=calculate_confidence(candidate, analysis, weights),
            explanation=generate_explanation(candidate, analysis),
            relevance=calculate_relevance(candidate, analysis, weights),
            source=candidate.source,
        )
        for candidate in candidates
    ]


def overall_confidence(results: Sequence[SearchResult]) -> float:
    """Mean confidence of a result list; 0 when it is empty."""
    if not results:
        return 0.0
    return sum(result.confidence for result in results) / len(results)

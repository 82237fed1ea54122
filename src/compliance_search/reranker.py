"""Merge, boost and deduplicate candidates from the lexical and semantic indices."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .config import BoostFactors
from .models import Document, QueryAnalysis, ScoredDocument, SearchContext

LEXICAL = "lexical"
SEMANTIC = "semantic"


@dataclass
class RankedCandidate:
    """A merged candidate after domain boosting."""

    document: Document
    source: str
    raw_score: float
    final_score: float
    lexical_score: float = 0.0
    semantic_score: float = 0.0


def matches_standard(document: Document, analysis: QueryAnalysis) -> bool:
    return document.standard_id is not None and document.standard_id in analysis.matched_standard_ids


def matches_intent(document: Document, analysis: QueryAnalysis) -> bool:
    return document.type.value == analysis.intent.value


def is_critical(document: Document) -> bool:
    return document.priority == "critical"


def boost_score(
    score: float,
    document: Document,
    analysis: QueryAnalysis,
    context: Optional[SearchContext] = None,
    boosts: Optional[BoostFactors] = None,
) -> float:
    """Apply the domain boosts to a raw index score."""
    boosts = boosts or BoostFactors()
    if matches_standard(document, analysis):
        score *= boosts.standard_match
    if matches_intent(document, analysis):
        score *= boosts.intent_match
    if is_critical(document):
        score *= boosts.critical_priority
    if context is not None and context.factory_id and document.factory_id == context.factory_id:
        score *= boosts.factory_match
    return score


class StandardsReranker:
    """Reranks merged candidates with standards-aware boosts.

    Lexical candidates precede semantic ones in the merge, so when both
    indices return the same ``(id, type)`` the lexical candidate is kept.
    """

    def __init__(self, boosts: Optional[BoostFactors] = None, limit: int = 10) -> None:
        self._boosts = boosts or BoostFactors()
        self._limit = limit

    def rerank(
        self,
        lexical_results: Sequence[ScoredDocument],
        semantic_results: Sequence[ScoredDocument],
        analysis: QueryAnalysis,
        context: Optional[SearchContext] = None,
    ) -> List[RankedCandidate]:
        lexical_scores = _first_scores(lexical_results)
        semantic_scores = _first_scores(semantic_results)

        merged: List[Tuple[ScoredDocument, str]] = [
            (item, LEXICAL) for item in lexical_results
        ] + [(item, SEMANTIC) for item in semantic_results]

        seen = set()
        candidates: List[RankedCandidate] = []
        for item, source in merged:
            key = item.document.key
            if key in seen:
                continue
            seen.add(key)
            candidates.append(
                RankedCandidate(
                    document=item.document,
                    source=source,
                    raw_score=item.score,
                    final_score=boost_score(
                        item.score, item.document, analysis, context, self._boosts
                    ),
                    lexical_score=lexical_scores.get(key, 0.0),
                    semantic_score=semantic_scores.get(key, 0.0),
                )
            )

        candidates.sort(key=lambda c: c.final_score, reverse=True)
        return candidates[: self._limit]


def _first_scores(results: Sequence[ScoredDocument]) -> Dict[Tuple[str, str], float]:
    scores: Dict[Tuple[str, str], float] = {}
    for item in results:
        scores.setdefault(item.document.key, item.score)
    return scores

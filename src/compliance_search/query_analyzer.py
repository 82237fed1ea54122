"""Query intent classification and standard extraction.

The analyzer answers two questions about a free-text query:
- Intent: is the user asking about a standard, a requirement, a corrective
  action plan, evidence, or an audit?
- Entities: which known standards does the query name?
"""

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .models import Language, QueryAnalysis, QueryIntent
from .registry import Standard, StandardsRegistry

logger = logging.getLogger(__name__)


# Checked in order; the first family with a hit decides the intent.
INTENT_KEYWORDS: Tuple[Tuple[QueryIntent, Tuple[str, ...]], ...] = (
    (QueryIntent.STANDARD, ("standard", "ស្តង់ដារ", "compliance", "audit")),
    (QueryIntent.REQUIREMENT, ("requirement", "តម្រូវការ", "need", "must")),
    (QueryIntent.CAP, ("cap", "corrective action", "ការសកម្មភាពកែតម្រូវ", "improvement")),
    (QueryIntent.EVIDENCE, ("evidence", "ភស្តុតាង", "proof", "document")),
    (QueryIntent.AUDIT, ("audit", "ការត្រួតពិនិត្យ", "inspection", "review")),
)

DEFAULT_CONFIDENCE = 0.8


def intent_keywords() -> Dict[QueryIntent, List[str]]:
    """The keyword table as a mapping, for inspection and tests."""
    return {intent: list(keywords) for intent, keywords in INTENT_KEYWORDS}


class QueryAnalyzer:
    """Classifies query intent and finds the standards a query mentions."""

    def __init__(
        self,
        registry: Optional[StandardsRegistry] = None,
        default_confidence: float = DEFAULT_CONFIDENCE,
    ) -> None:
        """Initialize the analyzer.

        Args:
            registry: Source of known standards for entity extraction
            default_confidence: Confidence reported for every analysis
        """
        self._registry = registry or StandardsRegistry()
        self._default_confidence = default_confidence

    def analyze(self, query: str, language: Language = Language.EN) -> QueryAnalysis:
        """Analyze a query.

        Args:
            query: The user's query string
            language: Language the query was written in

        Returns:
            QueryAnalysis with intent and matched standard ids
        """
        query_lower = (query or "").lower()
        intent, matched_keywords = self._classify_intent(query_lower)
        matched_standards = self._extract_standards(
            query_lower, self._registry.get_all_standards()
        )

        analysis = QueryAnalysis(
            language=Language(language),
            intent=intent,
            matched_standard_ids=matched_standards,
            confidence=self._default_confidence,
            matched_keywords=matched_keywords,
        )
        logger.debug(
            f"Query intent={intent.value} standards={sorted(matched_standards)}"
        )
        return analysis

    def _classify_intent(self, query_lower: str) -> Tuple[QueryIntent, List[str]]:
        if not query_lower:
            return QueryIntent.GENERAL, []
        for intent, keywords in INTENT_KEYWORDS:
            hits = [keyword for keyword in keywords if keyword.lower() in query_lower]
            if hits:
                return intent, hits
        return QueryIntent.GENERAL, []

    def _extract_standards(
        self, query_lower: str, standards: Sequence[Standard]
    ) -> Set[str]:
        matched: Set[str] = set()
        if not query_lower:
            return matched
        for standard in standards:
            if standard.mentioned_in(query_lower):
                matched.add(standard.id)
        return matched

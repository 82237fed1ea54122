"""Similarity-based index with a pluggable scoring strategy."""

import logging
import math
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .models import Document, ScoredDocument
from .tokenization import tokenize, whitespace_tokens

logger = logging.getLogger(__name__)


class SimilarityScorer:
    """Interface for query/content similarity.

    Implementations return a score in [0, 1] where higher means more
    relevant. ``fit`` is called with every indexed content string before a
    search whenever the corpus has changed.
    """

    def fit(self, contents: Sequence[str]) -> None:
        """Observe the indexed corpus. Stateless scorers ignore this."""

    def score(self, query: str, content: str) -> float:
        raise NotImplementedError


class TermOverlapScorer(SimilarityScorer):
    """Fraction of query tokens that also appear as tokens of the content."""

    def score(self, query: str, content: str) -> float:
        query_tokens = whitespace_tokens(query)
        if not query_tokens:
            return 0.0
        content_tokens = set(whitespace_tokens(content))
        matches = sum(1 for token in query_tokens if token in content_tokens)
        return matches / len(query_tokens)


class TfidfCosineScorer(SimilarityScorer):
    """Cosine similarity between TF-IDF vectors fitted on the indexed corpus.

    Stands in for a dense embedding model: it satisfies the same contract
    without external dependencies.
    """

    def __init__(self, min_df: int = 1) -> None:
        """Initialize the scorer.

        Args:
            min_df: Minimum document frequency for a term to be weighted
        """
        self._min_df = min_df
        self._idf: Dict[str, float] = {}
        self._doc_count = 0

    def fit(self, contents: Sequence[str]) -> None:
        self._doc_count = len(contents)
        doc_freq: Counter = Counter()
        for content in contents:
            doc_freq.update(set(tokenize(content)))

        # Smooth IDF to avoid division by zero
        self._idf = {
            term: math.log((self._doc_count + 1) / (df + 1)) + 1
            for term, df in doc_freq.items()
            if df >= self._min_df
        }

    def score(self, query: str, content: str) -> float:
        query_vector = self._vectorize(query)
        content_vector = self._vectorize(content)
        return _cosine_similarity(query_vector, content_vector)

    def _vectorize(self, text: str) -> Dict[str, float]:
        term_freq = Counter(tokenize(text))
        vector: Dict[str, float] = {}
        for term, freq in term_freq.items():
            idf = self._idf.get(term)
            if idf is None:
                continue
            vector[term] = (1.0 + math.log(freq)) * idf
        return vector


def _cosine_similarity(a: Dict[str, float], b: Dict[str, float]) -> float:
    if not a or not b:
        return 0.0
    dot = sum(weight * b.get(term, 0.0) for term, weight in a.items())
    norm_a = math.sqrt(sum(v * v for v in a.values()))
    norm_b = math.sqrt(sum(v * v for v in b.values()))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


@dataclass
class SemanticEntry:
    id: str
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class SemanticIndex:
    """Index that ranks documents by a :class:`SimilarityScorer`."""

    def __init__(
        self,
        scorer: Optional[SimilarityScorer] = None,
        min_similarity: float = 0.1,
    ) -> None:
        self._scorer = scorer or TermOverlapScorer()
        self._min_similarity = min_similarity
        self._entries: List[SemanticEntry] = []
        self._fitted = False
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def scorer(self) -> SimilarityScorer:
        return self._scorer

    def add_document(self, document: Document) -> None:
        entry = SemanticEntry(
            id=document.id,
            content=document.full_text,
            metadata={
                "document": document,
                "type": document.type.value,
                "category": document.category,
                "standard_id": document.standard_id,
                "priority": document.priority,
            },
        )
        with self._lock:
            self._entries.append(entry)
            self._fitted = False

    def search(self, query: str, limit: int = 10) -> List[ScoredDocument]:
        """Return documents whose similarity exceeds the threshold, best first."""
        if not query or not query.strip() or limit <= 0:
            return []

        with self._lock:
            if not self._fitted:
                self._scorer.fit([entry.content for entry in self._entries])
                self._fitted = True

            scored = []
            for entry in self._entries:
                score = min(1.0, max(0.0, self._scorer.score(query, entry.content)))
                if score > self._min_similarity:
                    scored.append(
                        ScoredDocument(document=entry.metadata["document"], score=score)
                    )

        scored.sort(key=lambda item: item.score, reverse=True)
        logger.debug(f"Semantic index matched {len(scored)} of {len(self._entries)} entries")
        return scored[:limit]

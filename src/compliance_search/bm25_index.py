"""BM25 lexical index over bilingual standard and requirement records.

BM25 (Best Matching 25) ranks documents by summing, over the query terms,
the inverse document frequency of each term weighted by a saturating
function of its frequency in the document:

    score(Q, D) = sum over qi in Q:
        IDF(qi) * (f(qi, D) * (k1 + 1)) /
        (f(qi, D) + k1 * (1 - b + b * |D| / avgdl))

Each document is indexed as the concatenation of its English title, English
content, Khmer title and Khmer content.
"""

import logging
import math
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .config import BM25Config
from .models import Document, Language, ScoredDocument
from .tokenization import tokenize

logger = logging.getLogger(__name__)


@dataclass
class BM25Stats:
    """Corpus statistics for BM25 scoring."""

    avg_doc_length: float = 0.0
    total_docs: int = 0
    total_length: int = 0
    doc_count_with_term: Counter = field(default_factory=Counter)


class LexicalIndex:
    """In-memory Okapi BM25 index.

    Documents may be added after construction; mutation and search share a
    lock so a search never sees the term table and the average length out
    of step with each other.
    """

    def __init__(self, config: Optional[BM25Config] = None) -> None:
        """Initialize an empty index.

        Args:
            config: BM25 parameters; defaults to k1=1.2, b=0.75
        """
        self._config = config or BM25Config()
        self._documents: List[Document] = []
        self._term_counts: List[Counter] = []
        self._doc_lengths: List[int] = []
        self._stats = BM25Stats()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._documents)

    @property
    def documents(self) -> List[Document]:
        return list(self._documents)

    @property
    def avg_doc_length(self) -> float:
        return self._stats.avg_doc_length

    def add_document(self, document: Document) -> None:
        """Append a document and refresh the corpus statistics."""
        tokens = self._tokenize(document.full_text)
        counts = Counter(tokens)
        with self._lock:
            self._documents.append(document)
            self._term_counts.append(counts)
            self._doc_lengths.append(len(tokens))
            self._stats.total_docs += 1
            self._stats.total_length += len(tokens)
            self._stats.avg_doc_length = self._stats.total_length / self._stats.total_docs
            self._stats.doc_count_with_term.update(counts.keys())

    def add_documents(self, documents: Sequence[Document]) -> None:
        for document in documents:
            self.add_document(document)

    def search(
        self,
        query: str,
        language: Language = Language.EN,
        limit: int = 10,
    ) -> List[ScoredDocument]:
        """Rank documents against a query.

        Args:
            query: Free-text query
            language: Query language
            limit: Maximum number of results

        Returns:
            Documents with a positive score, best first. Equal scores keep
            insertion order.
        """
        query_terms = self._tokenize(query, language)
        if not query_terms or limit <= 0:
            return []

        with self._lock:
            scored = []
            for position, document in enumerate(self._documents):
                score = self._score(query_terms, position)
                if score > 0:
                    scored.append(ScoredDocument(document=document, score=score))

        scored.sort(key=lambda item: item.score, reverse=True)
        logger.debug(f"BM25 matched {len(scored)} of {len(self._documents)} documents")
        return scored[:limit]

    def score(self, query: str, position: int) -> float:
        """BM25 score of a query against the document at ``position``."""
        query_terms = self._tokenize(query)
        with self._lock:
            if position < 0 or position >= len(self._documents):
                return 0.0
            return self._score(query_terms, position)

    def idf(self, term: str) -> float:
        """Inverse document frequency.

        IDF = ln((N - n(q) + 0.5) / (n(q) + 0.5)), floored at
        ``config.idf_floor`` when one is set.
        """
        with self._lock:
            return self._idf(term)

    def _idf(self, term: str) -> float:
        total = self._stats.total_docs
        if total == 0:
            return 0.0
        containing = self._stats.doc_count_with_term.get(term, 0)
        value = math.log((total - containing + 0.5) / (containing + 0.5))
        if self._config.idf_floor is not None:
            value = max(value, self._config.idf_floor)
        return value

    def _score(self, query_terms: Sequence[str], position: int) -> float:
        avg_length = self._stats.avg_doc_length
        if not query_terms or avg_length <= 0:
            return 0.0

        counts = self._term_counts[position]
        doc_length = self._doc_lengths[position]
        k1 = self._config.k1
        b = self._config.b

        score = 0.0
        for term in query_terms:
            tf = counts.get(term, 0)
            if tf == 0:
                continue
            numerator = tf * (k1 + 1)
            denominator = tf + k1 * (1 - b + b * (doc_length / avg_length))
            score += self._idf(term) * (numerator / denominator)

        return max(score, 0.0)

    def _tokenize(self, text: str, language: Optional[Language] = None) -> List[str]:
        return tokenize(text, language, min_length=self._config.min_token_length)

    def stats(self) -> Dict[str, float]:
        """Summary of the corpus statistics."""
        with self._lock:
            return {
                "total_docs": self._stats.total_docs,
                "avg_doc_length": self._stats.avg_doc_length,
                "vocab_size": len(self._stats.doc_count_with_term),
            }

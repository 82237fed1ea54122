"""Tunable parameters for indexing, reranking and confidence scoring."""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional


@dataclass
class BM25Config:
    """Okapi BM25 parameters."""

    k1: float = 1.2
    b: float = 0.75
    min_token_length: int = 3
    # None keeps the classic IDF, which goes negative for common terms
    idf_floor: Optional[float] = 0.01


@dataclass
class BoostFactors:
    """Multiplicative boosts applied to candidates during reranking."""

    standard_match: float = 1.5
    intent_match: float = 1.3
    critical_priority: float = 1.2
    factory_match: float = 1.1


@dataclass
class ConfidenceWeights:
    """Additive adjustments used for per-result confidence and relevance."""

    standard_match: float = 0.2
    critical_priority: float = 0.1
    active_status: float = 0.05

    relevance_base: float = 0.5
    relevance_intent_match: float = 0.3
    relevance_standard_match: float = 0.4
    relevance_critical_priority: float = 0.2


@dataclass
class SearchConfig:
    """Configuration for a hybrid search engine."""

    candidate_limit: int = 20
    result_limit: int = 10
    min_similarity: float = 0.1
    confidence_threshold: float = 0.7
    default_confidence: float = 0.8

    bm25: BM25Config = field(default_factory=BM25Config)
    boosts: BoostFactors = field(default_factory=BoostFactors)
    weights: ConfidenceWeights = field(default_factory=ConfidenceWeights)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SearchConfig":
        """Build a configuration from a nested mapping such as loaded JSON.

        Nested sections (``bm25``, ``boosts``, ``weights``) may be partial;
        missing keys keep their defaults. Unknown keys raise ``ValueError``.
        """
        nested = {
            "bm25": BM25Config,
            "boosts": BoostFactors,
            "weights": ConfidenceWeights,
        }
        kwargs: Dict[str, Any] = {}
        known = {f.name for f in fields(cls)}
        for key, value in data.items():
            if key not in known:
                raise ValueError(f"Unknown search config key: {key}")
            if key in nested:
                kwargs[key] = _build_section(nested[key], value)
            else:
                kwargs[key] = value
        return cls(**kwargs)


def _build_section(section_cls, values: Mapping[str, Any]):
    known = {f.name for f in fields(section_cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(
            f"Unknown {section_cls.__name__} key(s): {', '.join(unknown)}"
        )
    return section_cls(**values)

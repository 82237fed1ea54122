from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple


class Language(str, Enum):
    EN = "en"
    KM = "km"


class DocumentType(str, Enum):
    STANDARD = "standard"
    REQUIREMENT = "requirement"


class QueryIntent(str, Enum):
    GENERAL = "general"
    STANDARD = "standard"
    REQUIREMENT = "requirement"
    CAP = "cap"
    EVIDENCE = "evidence"
    AUDIT = "audit"


@dataclass(frozen=True)
class Document:
    """A bilingual standard or requirement record."""

    id: str
    title_en: str
    title_km: str = ""
    content_en: str = ""
    content_km: str = ""
    type: DocumentType = DocumentType.REQUIREMENT
    category: str = ""
    organization: str = ""
    standard_id: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    factory_id: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.id, self.type.value)

    @property
    def title(self) -> str:
        return self.title_en or self.title_km

    @property
    def full_text(self) -> str:
        return f"{self.title_en} {self.content_en} {self.title_km} {self.content_km}"

    def to_dict(self) -> Dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass
class SearchContext:
    factory_id: Optional[str] = None


@dataclass
class Query:
    raw_text: str
    language: Language = Language.EN
    context: Optional[SearchContext] = None


@dataclass
class ScoredDocument:
    """A document together with the raw score one index assigned it."""

    document: Document
    score: float


@dataclass
class QueryAnalysis:
    language: Language
    intent: QueryIntent = QueryIntent.GENERAL
    matched_standard_ids: Set[str] = field(default_factory=set)
    confidence: float = 0.8
    matched_keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass
class SearchResult:
    document: Document
    lexical_score: float = 0.0
    semantic_score: float = 0.0
    final_score: float = 0.0
    confidence: float = 0.0
    explanation: str = ""
    relevance: float = 0.0
    source: str = "lexical"

    def is_confident(self, threshold: float) -> bool:
        return self.confidence >= threshold

    def to_dict(self) -> Dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass
class SearchMetrics:
    lexical_count: int = 0
    semantic_count: int = 0
    reranked_count: int = 0
    average_confidence: float = 0.0
    errors: List[str] = field(default_factory=list)


@dataclass
class SearchResponse:
    results: List[SearchResult]
    query_analysis: QueryAnalysis
    metrics: SearchMetrics = field(default_factory=SearchMetrics)

    def to_dict(self) -> Dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass
class NonConformity:
    description: str
    reference: Optional[str] = None


@dataclass
class SMARTAction:
    id: str
    title: str
    description: str
    specific: str
    measurable: str
    achievable: str
    relevant: str
    time_bound: str
    owner: str
    deadline: datetime
    status: str
    requirement_id: str


@dataclass
class RootCauseAnalysis:
    immediate_cause: str
    underlying_causes: List[str] = field(default_factory=list)
    root_causes: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass
class TimelinePhase:
    action_id: str
    title: str
    start_date: datetime
    end_date: datetime
    duration_days: int
    status: str = "planned"


@dataclass
class Milestone:
    date: datetime
    description: str
    type: str = "completion"


@dataclass
class Timeline:
    phases: List[TimelinePhase] = field(default_factory=list)
    milestones: List[Milestone] = field(default_factory=list)
    total_duration_days: int = 0


@dataclass
class VerificationMethod:
    action_id: str
    method: str
    description: str
    frequency: str
    responsible: str


@dataclass
class CorrectiveActionPlan:
    actions: List[SMARTAction]
    root_cause: RootCauseAnalysis
    timeline: Timeline
    verification: List[VerificationMethod] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return _jsonable(asdict(self))


def _jsonable(value: Any) -> Any:
    """Convert dataclass output into JSON-serializable structures."""
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted(_jsonable(item) for item in value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value

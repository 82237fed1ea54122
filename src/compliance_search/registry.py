"""In-memory standards registry used as the document source."""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .errors import InputError
from .models import Document, DocumentType
from .tokenization import contains_khmer

logger = logging.getLogger(__name__)

# Only version-shaped suffixes are dropped: "SMETA 6.1" -> "SMETA",
# "SA8000:2014" -> "SA8000", "BSCI v2" -> "BSCI". "ISO 45001" is left alone.
_VERSION_SUFFIX = re.compile(
    r"(?:\s+\d+(?:\.\d+)+|\s*:\s*\d{4}|\s+v\d+(?:\.\d+)*)$", re.IGNORECASE
)


@dataclass
class Standard:
    """A compliance framework such as SMETA or SA8000."""

    id: str
    name: str
    name_km: str = ""
    description: str = ""
    description_km: str = ""
    category: str = ""
    organization: str = ""
    status: Optional[str] = None
    aliases: List[str] = field(default_factory=list)

    def match_names(self) -> List[str]:
        """Lower-cased names a query may use to refer to this standard."""
        names = [self.name, self.name_km, *self.aliases]
        short = _VERSION_SUFFIX.sub("", self.name).strip()
        if short and short != self.name:
            names.append(short)

        seen = set()
        result = []
        for name in names:
            lowered = (name or "").strip().lower()
            if lowered and lowered not in seen:
                seen.add(lowered)
                result.append(lowered)
        return result

    def mentioned_in(self, query: str) -> bool:
        """Whether a query names this standard.

        Latin names must stand as whole words, so "iso 45001" does not match
        inside "iso 450012". Khmer is written without spaces between words,
        so Khmer names match anywhere in the query.
        """
        query_lower = (query or "").lower()
        if not query_lower:
            return False
        for name in self.match_names():
            if contains_khmer(name):
                if name in query_lower:
                    return True
            elif re.search(rf"(?<!\w){re.escape(name)}(?!\w)", query_lower):
                return True
        return False

    def to_document(self) -> Document:
        return Document(
            id=self.id,
            title_en=self.name,
            title_km=self.name_km,
            content_en=self.description,
            content_km=self.description_km,
            type=DocumentType.STANDARD,
            category=self.category,
            organization=self.organization,
            status=self.status,
        )


@dataclass
class Requirement:
    """A single auditable clause of a standard."""

    id: str
    title: str
    title_km: str = ""
    description: str = ""
    description_km: str = ""
    standard_id: Optional[str] = None
    category: str = ""
    organization: str = ""
    priority: Optional[str] = None
    status: Optional[str] = None
    factory_id: Optional[str] = None

    def to_document(self) -> Document:
        return Document(
            id=self.id,
            title_en=self.title,
            title_km=self.title_km,
            content_en=self.description,
            content_km=self.description_km,
            type=DocumentType.REQUIREMENT,
            category=self.category,
            organization=self.organization,
            standard_id=self.standard_id,
            priority=self.priority,
            status=self.status,
            factory_id=self.factory_id,
        )


class StandardsRegistry:
    """Holds the standards and requirements that get indexed."""

    def __init__(
        self,
        standards: Optional[Iterable[Standard]] = None,
        requirements: Optional[Iterable[Requirement]] = None,
    ) -> None:
        self._standards: List[Standard] = list(standards or [])
        self._requirements: List[Requirement] = list(requirements or [])

    def add_standard(self, standard: Standard) -> None:
        self._standards.append(standard)

    def add_requirement(self, requirement: Requirement) -> None:
        self._requirements.append(requirement)

    def get_all_standards(self) -> List[Standard]:
        return list(self._standards)

    def get_all_requirements(self) -> List[Requirement]:
        return list(self._requirements)

    def get_standard(self, standard_id: str) -> Optional[Standard]:
        for standard in self._standards:
            if standard.id == standard_id:
                return standard
        return None

    def documents(self) -> List[Document]:
        """All records as documents, standards first."""
        return [s.to_document() for s in self._standards] + [
            r.to_document() for r in self._requirements
        ]

    @classmethod
    def from_records(
        cls,
        standards: Sequence[Mapping[str, Any]] = (),
        requirements: Sequence[Mapping[str, Any]] = (),
    ) -> "StandardsRegistry":
        """Build a registry from raw records.

        Accepts both the camelCase field names used by the compliance
        application (``nameKhmer``, ``descriptionKhmer``, ``standardId``)
        and snake_case equivalents.
        """
        return cls(
            standards=[_standard_from_record(r) for r in standards],
            requirements=[_requirement_from_record(r) for r in requirements],
        )

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "StandardsRegistry":
        """Load ``{"standards": [...], "requirements": [...]}`` from a file."""
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise InputError(f"Registry file must contain a JSON object: {path}")
        registry = cls.from_records(
            standards=payload.get("standards", []),
            requirements=payload.get("requirements", []),
        )
        logger.info(
            f"Loaded {len(registry._standards)} standards and "
            f"{len(registry._requirements)} requirements from {path}"
        )
        return registry


def _field(record: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        if record.get(name) is not None:
            return record[name]
    return default


def _require_id(record: Mapping[str, Any], kind: str) -> str:
    record_id = record.get("id")
    if not record_id:
        raise InputError(f"{kind} record is missing an id: {dict(record)!r}")
    return str(record_id)


def _aliases(record: Mapping[str, Any]) -> List[str]:
    aliases = _field(record, "aliases", default=[])
    if isinstance(aliases, str):
        return [aliases]
    if not isinstance(aliases, (list, tuple)) or not all(isinstance(a, str) for a in aliases):
        raise InputError(f"Standard {record.get('id')!r} aliases must be a string or a list of strings")
    return list(aliases)


def _standard_from_record(record: Mapping[str, Any]) -> Standard:
    return Standard(
        id=_require_id(record, "Standard"),
        name=_field(record, "name", "title", default=""),
        name_km=_field(record, "nameKhmer", "name_km", default=""),
        description=_field(record, "description", default=""),
        description_km=_field(record, "descriptionKhmer", "description_km", default=""),
        category=_field(record, "category", default=""),
        organization=_field(record, "organization", default=""),
        status=_field(record, "status"),
        aliases=_aliases(record),
    )


def _requirement_from_record(record: Mapping[str, Any]) -> Requirement:
    return Requirement(
        id=_require_id(record, "Requirement"),
        title=_field(record, "title", "name", default=""),
        title_km=_field(record, "titleKhmer", "title_km", default=""),
        description=_field(record, "description", default=""),
        description_km=_field(record, "descriptionKhmer", "description_km", default=""),
        standard_id=_field(record, "standardId", "standard_id"),
        category=_field(record, "category", default=""),
        organization=_field(record, "organization", default=""),
        priority=_field(record, "priority"),
        status=_field(record, "status"),
        factory_id=_field(record, "factoryId", "factory_id"),
    )

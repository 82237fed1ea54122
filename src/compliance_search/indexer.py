"""Loads registry documents into the lexical and semantic indices."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .bm25_index import LexicalIndex
from .corpora import MultilingualCorpora
from .models import Document, DocumentType
from .registry import StandardsRegistry
from .semantic_index import SemanticIndex

logger = logging.getLogger(__name__)


@dataclass
class IndexBuildReport:
    standards: int = 0
    requirements: int = 0

    @property
    def total(self) -> int:
        return self.standards + self.requirements


class DocumentIndexer:
    """Feeds every document to each index it maintains."""

    def __init__(
        self,
        lexical_index: LexicalIndex,
        semantic_index: SemanticIndex,
        corpora: Optional[MultilingualCorpora] = None,
    ) -> None:
        self._lexical_index = lexical_index
        self._semantic_index = semantic_index
        self._corpora = corpora

    def add_document(self, document: Document) -> None:
        self._lexical_index.add_document(document)
        self._semantic_index.add_document(document)
        if self._corpora is not None:
            self._corpora.add_document(document)

    def index_documents(self, documents: Iterable[Document]) -> IndexBuildReport:
        report = IndexBuildReport()
        for document in documents:
            self.add_document(document)
            if document.type == DocumentType.STANDARD:
                report.standards += 1
            else:
                report.requirements += 1
        return report

    def build(self, registry: StandardsRegistry) -> IndexBuildReport:
        """Index every standard and requirement the registry holds."""
        report = self.index_documents(registry.documents())
        logger.info(
            f"Indexed {report.standards} standards and {report.requirements} requirements"
        )
        return report

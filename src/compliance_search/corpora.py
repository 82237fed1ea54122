"""Per-language free-text corpora with substring lookup."""

from typing import Dict, List

from .models import Document, Language


class MultilingualCorpora:
    """English and Khmer text collections kept side by side."""

    def __init__(self) -> None:
        self._corpora: Dict[Language, List[str]] = {
            Language.EN: [],
            Language.KM: [],
        }

    def add_to_corpus(self, text: str, language) -> bool:
        """Add text to a language corpus. Unknown languages are ignored."""
        corpus = self._corpus(language)
        if corpus is None or not text:
            return False
        corpus.append(text)
        return True

    def add_document(self, document: Document) -> None:
        self.add_to_corpus(f"{document.title_en} {document.content_en}".strip(), Language.EN)
        self.add_to_corpus(f"{document.title_km} {document.content_km}".strip(), Language.KM)

    def search_corpus(self, query: str, language) -> List[str]:
        """Texts of one language containing the query, case-insensitively."""
        corpus = self._corpus(language)
        if not corpus or not query:
            return []
        needle = query.lower()
        return [text for text in corpus if needle in text.lower()]

    def size(self, language) -> int:
        corpus = self._corpus(language)
        return len(corpus) if corpus is not None else 0

    def _corpus(self, language):
        try:
            return self._corpora[Language(language)]
        except ValueError:
            return None

"""Tests for the standards registry, document indexer and multilingual corpora."""

import json

import pytest
from compliance_search.bm25_index import LexicalIndex
from compliance_search.corpora import MultilingualCorpora
from compliance_search.errors import InputError
from compliance_search.indexer import DocumentIndexer
from compliance_search.models import DocumentType, Language
from compliance_search.registry import Requirement, Standard, StandardsRegistry
from compliance_search.semantic_index import SemanticIndex

RECORDS = {
    "standards": [
        {
            "id": "std-1",
            "name": "SMETA 6.1",
            "nameKhmer": "ស្មេតា",
            "description": "Sedex ethical trade audit methodology",
            "descriptionKhmer": "វិធីសាស្ត្រ",
            "category": "social",
            "organization": "Sedex",
            "aliases": ["Sedex audit"],
        }
    ],
    "requirements": [
        {
            "id": "req-1",
            "title": "Fire safety training",
            "titleKhmer": "ការបណ្តុះបណ្តាលសុវត្ថិភាពអគ្គីភ័យ",
            "description": "All workers receive annual fire safety training",
            "standardId": "std-1",
            "category": "health and safety",
            "priority": "critical",
            "status": "active",
            "factoryId": "factory-7",
        }
    ],
}


class TestStandard:
    def test_match_names_include_versionless_alias(self):
        standard = Standard(id="s", name="SMETA 6.1", name_km="ស្មេតា", aliases=["Sedex"])

        assert standard.match_names() == ["smeta 6.1", "ស្មេតា", "sedex", "smeta"]

    @pytest.mark.parametrize(
        "name,alias",
        [
            ("SA8000:2014", "sa8000"),
            ("ISO 45001:2018", "iso 45001"),
            ("BSCI v2", "bsci"),
        ],
    )
    def test_version_suffixes(self, name, alias):
        assert alias in Standard(id="s", name=name).match_names()

    @pytest.mark.parametrize("name", ["ISO 45001", "SMETA 6", "WRAP 12"])
    def test_plain_trailing_numbers_are_kept(self, name):
        assert Standard(id="s", name=name).match_names() == [name.lower()]

    def test_name_must_appear_as_whole_words(self):
        standard = Standard(id="iso", name="ISO 45001")

        assert not standard.mentioned_in("supervisor training records")
        assert not standard.mentioned_in("isolation of iso 450012 drums")
        assert standard.mentioned_in("ISO 45001 supervisor training")
        assert standard.mentioned_in("(iso 45001)")

    def test_khmer_name_matches_inside_unspaced_text(self):
        standard = Standard(id="s", name="SMETA 6.1", name_km="ស្មេតា")

        assert standard.mentioned_in("តម្រូវការស្មេតាថ្មី")

    def test_name_without_version_has_no_duplicate(self):
        assert Standard(id="s", name="WRAP").match_names() == ["wrap"]

    def test_empty_names_are_skipped(self):
        assert Standard(id="s", name="").match_names() == []

    def test_to_document(self):
        doc = Standard(id="s", name="WRAP", description="Worldwide accredited").to_document()

        assert doc.type == DocumentType.STANDARD
        assert doc.title_en == "WRAP"
        assert doc.content_en == "Worldwide accredited"
        assert doc.standard_id is None


class TestStandardsRegistry:
    def test_from_records_accepts_camel_case(self):
        registry = StandardsRegistry.from_records(**RECORDS)

        requirement = registry.get_all_requirements()[0]
        assert requirement.title_km == "ការបណ្តុះបណ្តាលសុវត្ថិភាពអគ្គីភ័យ"
        assert requirement.standard_id == "std-1"
        assert requirement.factory_id == "factory-7"
        standard = registry.get_standard("std-1")
        assert standard.name_km == "ស្មេតា"
        assert standard.aliases == ["Sedex audit"]

    def test_from_records_accepts_snake_case(self):
        registry = StandardsRegistry.from_records(
            requirements=[{"id": "r", "title": "Exits", "standard_id": "s", "factory_id": "f"}]
        )

        requirement = registry.get_all_requirements()[0]
        assert requirement.standard_id == "s"
        assert requirement.factory_id == "f"

    def test_string_alias_is_one_alias(self):
        registry = StandardsRegistry.from_records(
            standards=[{"id": "s", "name": "SMETA 6.1", "aliases": "Sedex"}]
        )

        standard = registry.get_standard("s")
        assert standard.aliases == ["Sedex"]
        assert standard.match_names() == ["smeta 6.1", "sedex", "smeta"]
        assert not standard.mentioned_in("wage slips and exits")

    @pytest.mark.parametrize("aliases", [42, {"name": "Sedex"}, ["Sedex", 7]])
    def test_invalid_aliases_raise(self, aliases):
        with pytest.raises(InputError):
            StandardsRegistry.from_records(
                standards=[{"id": "s", "name": "SMETA", "aliases": aliases}]
            )

    def test_missing_id_raises(self):
        with pytest.raises(InputError):
            StandardsRegistry.from_records(standards=[{"name": "SMETA"}])

    def test_documents_standards_first(self):
        registry = StandardsRegistry.from_records(**RECORDS)

        docs = registry.documents()

        assert [d.key for d in docs] == [("std-1", "standard"), ("req-1", "requirement")]
        assert docs[1].priority == "critical"
        assert docs[1].status == "active"

    def test_from_json(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text(json.dumps(RECORDS, ensure_ascii=False), encoding="utf-8")

        registry = StandardsRegistry.from_json(path)

        assert len(registry.get_all_standards()) == 1
        assert len(registry.get_all_requirements()) == 1

    def test_from_json_rejects_non_object(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(InputError):
            StandardsRegistry.from_json(path)

    def test_get_standard_unknown(self):
        assert StandardsRegistry().get_standard("missing") is None


class TestDocumentIndexer:
    def test_build_populates_every_index(self):
        lexical = LexicalIndex()
        semantic = SemanticIndex()
        corpora = MultilingualCorpora()
        registry = StandardsRegistry(
            standards=[Standard(id="s", name="WRAP")],
            requirements=[
                Requirement(id="r1", title="Fire exits"),
                Requirement(id="r2", title="Wage slips"),
            ],
        )

        report = DocumentIndexer(lexical, semantic, corpora).build(registry)

        assert (report.standards, report.requirements, report.total) == (1, 2, 3)
        assert len(lexical) == 3
        assert len(semantic) == 3
        assert corpora.size(Language.EN) == 3
        assert corpora.size(Language.KM) == 0


class TestMultilingualCorpora:
    def test_substring_search_is_case_insensitive(self):
        corpora = MultilingualCorpora()
        corpora.add_to_corpus("Fire exits must be unlocked", "en")
        corpora.add_to_corpus("Wage slips in Khmer", "en")

        assert corpora.search_corpus("FIRE EXITS", "en") == ["Fire exits must be unlocked"]

    def test_languages_are_separate(self):
        corpora = MultilingualCorpora()
        corpora.add_to_corpus("ច្រកចេញ", Language.KM)

        assert corpora.search_corpus("ច្រក", "km") == ["ច្រកចេញ"]
        assert corpora.search_corpus("ច្រក", "en") == []

    def test_unknown_language_is_ignored(self):
        corpora = MultilingualCorpora()

        assert corpora.add_to_corpus("bonjour", "fr") is False
        assert corpora.search_corpus("bonjour", "fr") == []
        assert corpora.size("fr") == 0

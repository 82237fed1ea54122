"""Tests for candidate merging, boosting and deduplication."""

import pytest
from compliance_search.config import BoostFactors
from compliance_search.models import (
    Document,
    DocumentType,
    Language,
    QueryAnalysis,
    QueryIntent,
    ScoredDocument,
    SearchContext,
)
from compliance_search.reranker import StandardsReranker, boost_score


def _analysis(intent=QueryIntent.GENERAL, standards=()):
    return QueryAnalysis(
        language=Language.EN, intent=intent, matched_standard_ids=set(standards)
    )


def _req(doc_id, **kwargs):
    return Document(id=doc_id, title_en=doc_id, type=DocumentType.REQUIREMENT, **kwargs)


class TestBoostScore:
    def test_no_boost(self):
        assert boost_score(0.5, _req("r"), _analysis()) == 0.5

    def test_each_boost(self):
        doc = _req("r", standard_id="std-1", priority="critical", factory_id="f1")

        assert boost_score(1.0, doc, _analysis(standards=["std-1"])) == pytest.approx(1.5 * 1.2)
        assert boost_score(1.0, doc, _analysis(QueryIntent.REQUIREMENT)) == pytest.approx(1.3 * 1.2)
        assert boost_score(1.0, _req("r", factory_id="f1"), _analysis(), SearchContext("f1")) == pytest.approx(1.1)

    def test_all_boosts_multiply(self):
        doc = _req("r", standard_id="std-1", priority="critical", factory_id="f1")
        analysis = _analysis(QueryIntent.REQUIREMENT, ["std-1"])

        score = boost_score(1.0, doc, analysis, SearchContext(factory_id="f1"))

        assert score == pytest.approx(1.5 * 1.3 * 1.2 * 1.1)

    def test_factory_boost_needs_context(self):
        doc = _req("r", factory_id="f1")

        assert boost_score(1.0, doc, _analysis(), SearchContext()) == 1.0
        assert boost_score(1.0, doc, _analysis(), SearchContext("f2")) == 1.0
        assert boost_score(1.0, _req("r"), _analysis(), SearchContext()) == 1.0

    def test_custom_factors(self):
        factors = BoostFactors(critical_priority=2.0)

        assert boost_score(1.0, _req("r", priority="critical"), _analysis(), boosts=factors) == 2.0

    def test_standard_intent_matches_standard_documents(self):
        doc = Document(id="s", title_en="SMETA", type=DocumentType.STANDARD)

        assert boost_score(1.0, doc, _analysis(QueryIntent.STANDARD)) == pytest.approx(1.3)


class TestStandardsReranker:
    def test_lexical_duplicate_wins(self):
        doc = _req("r1")
        lexical = [ScoredDocument(doc, 0.5)]
        semantic = [ScoredDocument(doc, 0.9)]

        ranked = StandardsReranker().rerank(lexical, semantic, _analysis())

        assert len(ranked) == 1
        assert ranked[0].source == "lexical"
        assert ranked[0].raw_score == 0.5
        assert ranked[0].final_score == 0.5
        assert ranked[0].lexical_score == 0.5
        assert ranked[0].semantic_score == 0.9

    def test_same_id_different_type_kept(self):
        lexical = [ScoredDocument(_req("x"), 0.5)]
        semantic = [ScoredDocument(Document(id="x", title_en="x", type=DocumentType.STANDARD), 0.4)]

        ranked = StandardsReranker().rerank(lexical, semantic, _analysis())

        assert [c.document.key for c in ranked] == [("x", "requirement"), ("x", "standard")]

    def test_sorted_by_boosted_score(self):
        lexical = [
            ScoredDocument(_req("plain"), 1.0),
            ScoredDocument(_req("linked", standard_id="std-1"), 0.8),
        ]

        ranked = StandardsReranker().rerank(lexical, [], _analysis(standards=["std-1"]))

        assert [c.document.id for c in ranked] == ["linked", "plain"]
        assert ranked[0].final_score == pytest.approx(1.2)

    def test_ties_keep_merge_order(self):
        lexical = [ScoredDocument(_req("a"), 0.5)]
        semantic = [ScoredDocument(_req("b"), 0.5), ScoredDocument(_req("c"), 0.5)]

        ranked = StandardsReranker().rerank(lexical, semantic, _analysis())

        assert [c.document.id for c in ranked] == ["a", "b", "c"]
        assert [c.source for c in ranked] == ["lexical", "semantic", "semantic"]

    def test_truncates_to_limit(self):
        lexical = [ScoredDocument(_req(f"l{i}"), 1.0 + i) for i in range(8)]
        semantic = [ScoredDocument(_req(f"s{i}"), 0.5) for i in range(8)]

        ranked = StandardsReranker().rerank(lexical, semantic, _analysis())

        assert len(ranked) == 10
        assert ranked[0].document.id == "l7"
        assert len({c.document.key for c in ranked}) == 10

    def test_custom_limit(self):
        lexical = [ScoredDocument(_req(f"l{i}"), 1.0) for i in range(5)]

        assert len(StandardsReranker(limit=3).rerank(lexical, [], _analysis())) == 3

    def test_empty_inputs(self):
        assert StandardsReranker().rerank([], [], _analysis()) == []

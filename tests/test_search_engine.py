"""
Unit Tests for the Search Engine

Tests ranking, truncation, tie-breaking and the fail-fast dimension
policy. Documents are built directly - no store involved.
"""

import pytest

from semantic_corpus.core.errors import DimensionMismatch, ValidationError
from semantic_corpus.search.engine import DEFAULT_LIMIT, SearchResult, search
from semantic_corpus.storage.document import Document, build_metadata


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


def make_doc(doc_id, embedding, text=None):
    text = text or f"text for {doc_id}"
    return Document(
        id=doc_id,
        text=text,
        embedding=list(embedding),
        metadata=build_metadata(text),
    )


@pytest.fixture
def corpus():
    """Small 3-d corpus with a clear ranking for query [1, 0, 0]."""
    return [
        make_doc("far", [0.0, 0.0, 1.0]),
        make_doc("exact", [1.0, 0.0, 0.0]),
        make_doc("close", [0.9, 0.1, 0.0]),
        make_doc("opposite", [-1.0, 0.0, 0.0]),
    ]


# ---------------------------------------------------------------------------
# RANKING
# ---------------------------------------------------------------------------


class TestRanking:
    """Test ordering and truncation."""

    def test_two_document_scenario(self):
        """[1,0] and [0,1], query [1,0], limit 1 -> first doc at 1.0."""
        docs = [make_doc("a", [1.0, 0.0]), make_doc("b", [0.0, 1.0])]

        results = search([1.0, 0.0], docs, limit=1)

        assert len(results) == 1
        assert results[0].document.id == "a"
        assert results[0].similarity == 1.0

    def test_sorted_by_non_increasing_similarity(self, corpus):
        results = search([1.0, 0.0, 0.0], corpus, limit=10)

        scores = [r.similarity for r in results]
        assert scores == sorted(scores, reverse=True)
        assert [r.document.id for r in results] == ["exact", "close", "far", "opposite"]

    def test_respects_limit(self, corpus):
        results = search([1.0, 0.0, 0.0], corpus, limit=2)

        assert len(results) == 2
        assert [r.document.id for r in results] == ["exact", "close"]

    def test_limit_larger_than_corpus(self, corpus):
        assert len(search([1.0, 0.0, 0.0], corpus, limit=100)) == len(corpus)

    def test_default_limit(self):
        docs = [make_doc(f"d{i}", [1.0, float(i)]) for i in range(15)]

        results = search([1.0, 0.0], docs)

        assert DEFAULT_LIMIT == 10
        assert len(results) == 10

    def test_ties_preserve_corpus_order(self):
        """Equal scores keep insertion order (stable sort)."""
        docs = [
            make_doc("low", [0.0, 1.0]),
            make_doc("tie-1", [1.0, 1.0]),
            make_doc("tie-2", [1.0, 1.0]),
            make_doc("tie-3", [1.0, 1.0]),
        ]

        results = search([1.0, 1.0], docs, limit=4)

        assert [r.document.id for r in results[:3]] == ["tie-1", "tie-2", "tie-3"]
        assert results[3].document.id == "low"

    def test_zero_vector_document_scores_zero(self):
        docs = [make_doc("zero", [0.0, 0.0]), make_doc("one", [1.0, 0.0])]

        results = search([1.0, 0.0], docs)

        assert results[-1].document.id == "zero"
        assert results[-1].similarity == 0.0

    def test_results_are_search_results(self, corpus):
        results = search([1.0, 0.0, 0.0], corpus)

        assert all(isinstance(r, SearchResult) for r in results)
        assert results[0].document is corpus[1]


# ---------------------------------------------------------------------------
# TIMING
# ---------------------------------------------------------------------------


class TestProcessingTime:
    """Per-result processing time is measured from the start of scoring."""

    def test_processing_time_non_decreasing_in_scoring_order(self):
        # Corpus already in descending-similarity order, so ranking == scoring order
        docs = [make_doc(f"d{i}", [1.0, i * 0.1]) for i in range(20)]

        results = search([1.0, 0.0], docs, limit=20)

        assert [r.document.id for r in results] == [d.id for d in docs]
        times = [r.processing_time_ms for r in results]
        assert all(t >= 0 for t in times)
        assert times == sorted(times)


# ---------------------------------------------------------------------------
# EDGE CASES
# ---------------------------------------------------------------------------


class TestEdgeCases:
    """Test validation and failure modes."""

    def test_empty_corpus_returns_empty(self):
        assert search([1.0, 0.0], []) == []

    @pytest.mark.parametrize("limit", [0, -1, True, 2.5, "3"])
    def test_invalid_limit_rejected(self, corpus, limit):
        with pytest.raises(ValidationError):
            search([1.0, 0.0, 0.0], corpus, limit=limit)

    def test_empty_query_rejected(self, corpus):
        with pytest.raises(ValidationError):
            search([], corpus)

    def test_mixed_dimensions_fail_fast(self):
        """A mismatched document aborts the query instead of being skipped."""
        docs = [make_doc("two", [1.0, 0.0]), make_doc("three", [1.0, 0.0, 0.0])]

        with pytest.raises(DimensionMismatch) as exc_info:
            search([1.0, 0.0], docs)

        assert "three" in exc_info.value.message
        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 3

    def test_mismatched_document_fails_even_if_outside_limit(self):
        docs = [make_doc("best", [1.0, 0.0]), make_doc("bad", [0.0, 1.0, 0.0])]

        with pytest.raises(DimensionMismatch):
            search([1.0, 0.0], docs, limit=1)

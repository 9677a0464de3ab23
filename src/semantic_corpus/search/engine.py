"""
Brute-force search engine.

Scores every document in a corpus snapshot against a query vector and
returns the best matches. O(N*D) per query - fine for the small and
medium corpora this package targets, no index to maintain.

Ranking rules:
1. Similarity descending
2. Ties keep corpus (insertion) order - sorted() is stable
3. Truncate to ``limit``

A document whose embedding length disagrees with the query aborts the
whole query with DimensionMismatch. It is never skipped.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Sequence

from semantic_corpus.core.errors import DimensionMismatch, ValidationError
from semantic_corpus.search.similarity import Vector, cosine_similarity
from semantic_corpus.storage.document import Document

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class SearchResult:
    """One ranked hit. Ephemeral - never persisted."""

    document: Document
    similarity: float
    processing_time_ms: float


def validate_limit(limit: int) -> int:
    """Reject non-integer or non-positive limits."""
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValidationError(f"limit must be an integer, got {limit!r}")
    if limit <= 0:
        raise ValidationError(f"limit must be at least 1, got {limit}")
    return limit


def search(
    query_embedding: Vector,
    corpus: Sequence[Document],
    limit: int = DEFAULT_LIMIT,
) -> list[SearchResult]:
    """
    Rank ``corpus`` by cosine similarity to ``query_embedding``.

    Args:
        query_embedding: Query vector
        corpus: Snapshot of documents, in insertion order
        limit: Maximum number of results (>= 1)

    Returns:
        At most ``limit`` results, by non-increasing similarity

    Raises:
        ValidationError: bad limit or empty query vector
        DimensionMismatch: a document's embedding length differs from the query
    """
    validate_limit(limit)
    if len(query_embedding) == 0:
        raise ValidationError("query embedding must not be empty")

    if not corpus:
        return []

    start = time.perf_counter()
    scored: list[SearchResult] = []

    for document in corpus:
        if len(document.embedding) != len(query_embedding):
            raise DimensionMismatch(
                expected=len(query_embedding),
                actual=len(document.embedding),
                message=(
                    f"Document {document.id} has embedding dimension "
                    f"{len(document.embedding)}, query has {len(query_embedding)}"
                ),
            )
        similarity = cosine_similarity(query_embedding, document.embedding)
        scored.append(
            SearchResult(
                document=document,
                similarity=similarity,
                processing_time_ms=(time.perf_counter() - start) * 1000,
            )
        )

    ranked = sorted(scored, key=lambda r: r.similarity, reverse=True)

    logger.debug(
        "Scored %d documents in %.3f ms, returning top %d",
        len(scored),
        (time.perf_counter() - start) * 1000,
        min(limit, len(ranked)),
    )
    return ranked[:limit]

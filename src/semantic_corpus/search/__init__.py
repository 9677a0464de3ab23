"""
Search module - vector math and brute-force ranking.

This module provides:
- cosine_similarity / magnitude: pure vector functions
- search(): rank a corpus snapshot against a query vector
- SearchResult: one ranked hit
"""

from semantic_corpus.search.similarity import cosine_similarity, magnitude
from semantic_corpus.search.engine import (
    DEFAULT_LIMIT,
    SearchResult,
    search,
    validate_limit,
)

__all__ = [
    "cosine_similarity",
    "magnitude",
    "DEFAULT_LIMIT",
    "SearchResult",
    "search",
    "validate_limit",
]

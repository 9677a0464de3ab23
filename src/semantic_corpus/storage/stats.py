"""
Corpus statistics - derived on demand, never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from semantic_corpus.storage.document import Document


@dataclass(frozen=True)
class CorpusStats:
    """Aggregate view of one corpus snapshot."""

    total_documents: int
    total_vectors: int
    average_text_length: float
    categories: list[str] = field(default_factory=list)
    dimension: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalDocuments": self.total_documents,
            "totalVectors": self.total_vectors,
            "averageTextLength": self.average_text_length,
            "categories": list(self.categories),
            "dimension": self.dimension,
        }


def compute_stats(
    documents: Sequence[Document],
    dimension: int | None = None,
) -> CorpusStats:
    """
    Compute stats for a snapshot.

    Average length is 0.0 for an empty corpus. Categories are distinct,
    non-empty, in first-seen order.
    """
    total = len(documents)
    average = sum(doc.metadata.length for doc in documents) / total if total else 0.0

    categories: list[str] = []
    for doc in documents:
        category = doc.metadata.category
        if category and category not in categories:
            categories.append(category)

    return CorpusStats(
        total_documents=total,
        total_vectors=total,
        average_text_length=float(average),
        categories=categories,
        dimension=dimension,
    )

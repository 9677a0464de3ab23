"""
Document model for the corpus.

Single responsibility: Define the structure of documents
held by document stores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, 'Z' suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class DocumentMetadata:
    """Metadata captured once, at insertion."""

    created_at: str
    length: int  # character count of text, denormalized for stats
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"createdAt": self.created_at, "length": self.length}
        if self.category is not None:
            data["category"] = self.category
        return data


@dataclass(frozen=True)
class Document:
    """
    A stored document with its embedding.

    Immutable once created. Stores assign the id; callers never do.
    """

    id: str
    text: str
    embedding: list[float] = field(repr=False)
    metadata: DocumentMetadata

    @property
    def dimension(self) -> int:
        return len(self.embedding)

    def to_dict(self, include_embedding: bool = True) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {"id": self.id, "text": self.text}
        if include_embedding:
            data["embedding"] = list(self.embedding)
        data["metadata"] = self.metadata.to_dict()
        return data


def build_metadata(text: str, category: str | None = None) -> DocumentMetadata:
    """Capture insertion-time metadata for ``text``."""
    return DocumentMetadata(
        created_at=utc_timestamp(),
        length=len(text),
        category=category or None,
    )

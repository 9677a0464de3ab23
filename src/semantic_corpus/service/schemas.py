"""
Request/response contracts for the corpus facade.

These Pydantic models define the boundary: requests are validated here
before anything touches the store, and responses have a fixed shape that
presentation layers (CLI, HTTP) can serialize directly.

Wire format is camelCase (``model_dump(by_alias=True)``), matching the
on-disk metadata keys; Python attribute names stay snake_case.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from semantic_corpus.storage.document import Document
from semantic_corpus.storage.stats import CorpusStats

# Ints are accepted, bools and strings are not; nan/inf rejected.
FiniteFloat = Annotated[float, Field(strict=True, allow_inf_nan=False)]
PositiveInt = Annotated[int, Field(strict=True, ge=1)]

INGEST_PREVIEW_CHARS = 150
LIST_PREVIEW_CHARS = 100


def preview(text: str, max_chars: int) -> str:
    """First ``max_chars`` characters, with '...' appended when truncated."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."


def _tolist(value: Any) -> Any:
    # numpy arrays (and anything else array-like) arrive as plain lists
    if hasattr(value, "tolist") and not isinstance(value, (str, bytes)):
        return value.tolist()
    return value


class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# REQUESTS
# ---------------------------------------------------------------------------


class IngestRequest(_Wire):
    """Add one document with a precomputed embedding."""

    text: str
    embedding: list[FiniteFloat] = Field(min_length=1)
    category: str | None = None

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Text is required")
        return v

    @field_validator("embedding", mode="before")
    @classmethod
    def embedding_as_list(cls, v: Any) -> Any:
        return _tolist(v)

    @field_validator("category")
    @classmethod
    def blank_category_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v


class SearchRequest(_Wire):
    """Rank the corpus against a query embedding."""

    query_embedding: list[FiniteFloat] = Field(min_length=1)
    limit: PositiveInt | None = None  # None -> configured default
    query: str | None = None  # echoed back, not used for scoring

    @field_validator("query_embedding", mode="before")
    @classmethod
    def embedding_as_list(cls, v: Any) -> Any:
        return _tolist(v)


class EmbedRequest(_Wire):
    """Ask the embedding provider for a vector."""

    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Text is required")
        return v


# ---------------------------------------------------------------------------
# RESPONSES
# ---------------------------------------------------------------------------


class MetadataView(_Wire):
    created_at: str
    length: int
    category: str | None = None


class DocumentView(_Wire):
    """A document as callers see it - the embedding is never included."""

    id: str
    text: str
    metadata: MetadataView

    @classmethod
    def from_document(cls, doc: Document, preview_chars: int | None = None) -> "DocumentView":
        text = doc.text if preview_chars is None else preview(doc.text, preview_chars)
        return cls(
            id=doc.id,
            text=text,
            metadata=MetadataView(
                created_at=doc.metadata.created_at,
                length=doc.metadata.length,
                category=doc.metadata.category,
            ),
        )


class StatsView(_Wire):
    total_documents: int
    total_vectors: int
    average_text_length: float
    categories: list[str]
    dimension: int | None = None

    @classmethod
    def from_stats(cls, stats: CorpusStats) -> "StatsView":
        return cls(
            total_documents=stats.total_documents,
            total_vectors=stats.total_vectors,
            average_text_length=stats.average_text_length,
            categories=list(stats.categories),
            dimension=stats.dimension,
        )


class ProcessingInfo(_Wire):
    dimensions: int
    total_documents: int


class IngestResponse(_Wire):
    success: bool = True
    document: DocumentView
    processing: ProcessingInfo
    stats: StatsView


class SearchHit(_Wire):
    document: DocumentView
    similarity: float
    processing_time_ms: float


class SearchResponse(_Wire):
    success: bool = True
    query: str | None = None
    results: list[SearchHit]
    total_results: int
    processing_time_ms: float


class StatsResponse(_Wire):
    success: bool = True
    stats: StatsView
    recent_documents: list[DocumentView]


class EmbedResponse(_Wire):
    embedding: list[float]
    dimensions: int
    text: str

"""
On-disk schema for the JSON document store.

The file holds one self-describing collection:

    {
      "version": 1,
      "next_id": 42,
      "dimension": 512,
      "documents": [{"id", "text", "embedding", "metadata"}, ...]
    }

Files written by the earlier, unversioned format are a bare JSON array of
documents. They are read as version 0 and upgraded on the next write.
A version newer than SCHEMA_VERSION fails validation, so it is never
silently downgraded.

Pydantic validates the structure on read; anything that fails validation
is treated as a corrupt file by the store.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from semantic_corpus.storage.document import Document, DocumentMetadata

SCHEMA_VERSION = 1
LEGACY_VERSION = 0


class StoredMetadata(BaseModel):
    """Per-document metadata as persisted."""

    model_config = ConfigDict(populate_by_name=True)

    created_at: str = Field(alias="createdAt")
    length: int = Field(ge=0)
    category: str | None = None


class StoredDocument(BaseModel):
    """One persisted document record."""

    id: str = Field(min_length=1)
    text: str
    embedding: list[float]
    metadata: StoredMetadata

    def to_document(self) -> Document:
        return Document(
            id=self.id,
            text=self.text,
            embedding=list(self.embedding),
            metadata=DocumentMetadata(
                created_at=self.metadata.created_at,
                length=self.metadata.length,
                category=self.metadata.category or None,
            ),
        )


class CorpusFile(BaseModel):
    """The whole persisted collection."""

    # newer files are unreadable here, and go through the recovery path
    version: int = Field(default=SCHEMA_VERSION, ge=LEGACY_VERSION, le=SCHEMA_VERSION)
    next_id: int = Field(default=1, ge=1)
    dimension: int | None = Field(default=None, ge=1)
    documents: list[StoredDocument] = Field(default_factory=list)


def parse_corpus(raw: Any) -> CorpusFile:
    """
    Build a CorpusFile from decoded JSON, accepting the legacy bare-array layout.

    Raises:
        pydantic.ValidationError: if the structure is malformed
    """
    if isinstance(raw, list):
        documents = [StoredDocument.model_validate(item) for item in raw]
        dimension = len(documents[0].embedding) if documents and documents[0].embedding else None
        return CorpusFile(
            version=LEGACY_VERSION,
            next_id=len(documents) + 1,
            dimension=dimension,
            documents=documents,
        )
    return CorpusFile.model_validate(raw)


def serialize_corpus(
    documents: list[Document],
    next_id: int,
    dimension: int | None,
) -> dict[str, Any]:
    """Full collection image, always written at the current version."""
    return {
        "version": SCHEMA_VERSION,
        "next_id": next_id,
        "dimension": dimension,
        "documents": [doc.to_dict() for doc in documents],
    }

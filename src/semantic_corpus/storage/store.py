"""
Document store implementations following the gold standard pattern.

Pattern: Protocol → Production impl → Test double → Factory

This module contains:
1. JSONDocumentStore - one JSON file on disk (production)
2. InMemoryDocumentStore - in-memory store (testing/development)
3. get_document_store() - Factory function

PERSISTENCE MODEL:
------------------
Every insertion rewrites the whole collection (read-modify-write). The
new image goes to a temp file in the same directory and is swapped in
with os.replace, so a crash mid-write leaves the previous image intact.
Writers are serialized with a lock; readers never take it.

READ RECOVERY:
--------------
A missing, unreadable or malformed file reads as an EMPTY corpus instead
of raising. That keeps search available, but it can hide data loss, so
the recovery path logs a warning and bumps ``recovery_count``. A genuinely
empty corpus does neither.

INTERVIEW TALKING POINT:
------------------------
"The store owns identity. Ids come from a counter persisted next to the
documents, checked against existing ids, so uniqueness is provable rather
than 'timestamp plus random and hope'. The store also pins the embedding
dimension on first insert - a mismatched vector is rejected at write time
instead of blowing up a query a week later."
"""

from __future__ import annotations

import json
import logging
import math
import numbers
import os
import shutil
import tempfile
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from semantic_corpus.config import CorpusConfig
from semantic_corpus.core.errors import DimensionMismatch, StorageError, ValidationError
from semantic_corpus.storage.document import Document, build_metadata
from semantic_corpus.storage.schema import parse_corpus, serialize_corpus
from semantic_corpus.storage.stats import CorpusStats, compute_stats

logger = logging.getLogger(__name__)

ID_PREFIX = "doc-"


# ---------------------------------------------------------------------------
# SHARED HELPERS
# ---------------------------------------------------------------------------


@dataclass
class _Snapshot:
    """One read of the collection plus its bookkeeping."""

    documents: list[Document] = field(default_factory=list)
    next_id: int = 1
    dimension: int | None = None
    recovered: bool = False


def validate_text(text: Any) -> str:
    """Text must be a non-blank string."""
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Text is required")
    return text


def validate_embedding(embedding: Any) -> list[float]:
    """Embedding must be a non-empty sequence of finite real numbers."""
    if embedding is None or isinstance(embedding, (str, bytes, dict)):
        raise ValidationError("Embedding is required and must be an array")
    try:
        values = list(embedding)
    except TypeError:
        raise ValidationError("Embedding is required and must be an array") from None
    if not values:
        raise ValidationError("Embedding must not be empty")

    vector: list[float] = []
    for i, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ValidationError(f"Embedding value at index {i} is not a number: {value!r}")
        value = float(value)
        if not math.isfinite(value):
            raise ValidationError(f"Embedding value at index {i} is not finite: {value}")
        vector.append(value)
    return vector


def _allocate_id(documents: Sequence[Document], next_id: int) -> tuple[str, int]:
    """Return (new id, next counter value), skipping any id already taken."""
    taken = {doc.id for doc in documents}
    candidate = next_id
    while f"{ID_PREFIX}{candidate}" in taken:
        candidate += 1
    return f"{ID_PREFIX}{candidate}", candidate + 1


class _BaseDocumentStore:
    """Validation, identity and stats shared by every store."""

    def __init__(self) -> None:
        self._write_lock = threading.Lock()

    # Subclasses provide these two
    def _read(self) -> _Snapshot:
        raise NotImplementedError

    def _persist(self, snapshot: _Snapshot, documents: list[Document], next_id: int, dimension: int) -> None:
        raise NotImplementedError

    @property
    def dimension(self) -> int | None:
        return self._read().dimension

    def read_snapshot(self) -> tuple[list[Document], int | None]:
        """Documents and recorded dimension from one read of the collection."""
        snapshot = self._read()
        return list(snapshot.documents), snapshot.dimension

    def add_document(
        self,
        text: str,
        embedding: Sequence[float],
        metadata: dict[str, Any] | None = None,
    ) -> Document:
        """
        Assign an id, persist the whole collection, return the new document.

        Args:
            text: Non-empty document text
            embedding: Precomputed vector for ``text``
            metadata: Optional, ``{"category": str}``

        Raises:
            ValidationError: empty text or malformed embedding
            DimensionMismatch: embedding length differs from the corpus
            StorageError: the collection could not be written
        """
        text = validate_text(text)
        vector = validate_embedding(embedding)
        category = (metadata or {}).get("category")
        if category is not None and not isinstance(category, str):
            raise ValidationError("Category must be a string")

        with self._write_lock:
            snapshot = self._read()
            if snapshot.dimension is not None and len(vector) != snapshot.dimension:
                raise DimensionMismatch(expected=snapshot.dimension, actual=len(vector))

            doc_id, next_id = _allocate_id(snapshot.documents, snapshot.next_id)
            document = Document(
                id=doc_id,
                text=text,
                embedding=vector,
                metadata=build_metadata(text, category),
            )
            self._persist(
                snapshot,
                snapshot.documents + [document],
                next_id,
                snapshot.dimension or len(vector),
            )

        logger.info("Added document %s (dimension=%d, length=%d)", doc_id, len(vector), len(text))
        return document

    def get_all_documents(self) -> list[Document]:
        """Fresh snapshot of every document, insertion order."""
        return list(self._read().documents)

    def get_document(self, document_id: str) -> Document | None:
        for doc in self._read().documents:
            if doc.id == document_id:
                return doc
        return None

    def get_stats(self) -> CorpusStats:
        snapshot = self._read()
        return compute_stats(snapshot.documents, snapshot.dimension)


# ---------------------------------------------------------------------------
# JSON FILE STORE (Production)
# ---------------------------------------------------------------------------


class JSONDocumentStore(_BaseDocumentStore):
    """
    Document store backed by a single JSON file.

    The file is created (with an empty collection) on construction if it
    does not exist. Only one process should write to a given file; the
    lock serializes writers within this process.
    """

    def __init__(self, path: Path | str):
        super().__init__()
        self._path = Path(path)
        self.recovery_count = 0
        self._ensure_data_file()

    @property
    def path(self) -> Path:
        """Get the backing file path."""
        return self._path

    def _ensure_data_file(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory {self._path.parent}: {e}") from e

        if not self._path.exists():
            self._write_image(serialize_corpus([], next_id=1, dimension=None))
            logger.info("Initialized empty document store at %s", self._path)
        else:
            logger.info("Using document store at %s", self._path)

    def _read(self) -> _Snapshot:
        if not self._path.exists():
            logger.debug("Document store %s does not exist, reading as empty", self._path)
            return _Snapshot()

        try:
            with open(self._path, encoding="utf-8") as f:
                raw = json.load(f)
            corpus = parse_corpus(raw)
        except (OSError, ValueError) as e:
            # ValueError covers JSON decode, unicode and pydantic validation errors
            self.recovery_count += 1
            logger.warning(
                "Document store %s is unreadable or malformed, serving an empty corpus "
                "(recovery #%d): %s",
                self._path,
                self.recovery_count,
                e,
            )
            return _Snapshot(recovered=True)

        documents = [stored.to_document() for stored in corpus.documents]
        dimension = corpus.dimension
        if dimension is None and documents:
            dimension = documents[0].dimension or None
        return _Snapshot(
            documents=documents,
            next_id=corpus.next_id,
            dimension=dimension,
        )

    def _persist(self, snapshot: _Snapshot, documents: list[Document], next_id: int, dimension: int) -> None:
        if snapshot.recovered:
            self._preserve_corrupt_file()
        self._write_image(serialize_corpus(documents, next_id=next_id, dimension=dimension))

    def _preserve_corrupt_file(self) -> None:
        """Copy a recovered-as-corrupt file aside before it is overwritten."""
        if not self._path.exists():
            return
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        backup = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        try:
            shutil.copy2(self._path, backup)
        except OSError as e:
            logger.error("Could not preserve corrupt store %s: %s", self._path, e)
            raise StorageError(
                f"Refusing to overwrite unreadable store {self._path}: backup failed: {e}"
            ) from e
        logger.warning("Preserved corrupt document store as %s", backup)

    def _write_image(self, image: dict[str, Any]) -> None:
        """Write the full collection atomically: temp file, fsync, rename."""
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=self._path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(image, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Failed to write document store %s: %s", self._path, e)
            raise StorageError(f"Failed to write document store {self._path}: {e}") from e


# ---------------------------------------------------------------------------
# IN-MEMORY STORE (Testing/Development)
# ---------------------------------------------------------------------------


class InMemoryDocumentStore(_BaseDocumentStore):
    """
    In-memory document store for development/testing.

    Implements the same interface as JSONDocumentStore but never touches
    the filesystem. Same id scheme, same dimension enforcement.
    """

    def __init__(self) -> None:
        super().__init__()
        self._documents: list[Document] = []
        self._next_id = 1
        self._dimension: int | None = None

    def _read(self) -> _Snapshot:
        return _Snapshot(
            documents=list(self._documents),
            next_id=self._next_id,
            dimension=self._dimension,
        )

    def _persist(self, snapshot: _Snapshot, documents: list[Document], next_id: int, dimension: int) -> None:
        self._documents = documents
        self._next_id = next_id
        self._dimension = dimension


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_document_store(
    config: CorpusConfig | None = None,
) -> JSONDocumentStore | InMemoryDocumentStore:
    """
    Factory function to get the appropriate document store.

    Args:
        config: Corpus configuration (uses defaults if not provided).
            ``data_path=None`` selects the in-memory store.

    Returns:
        DocumentStore implementation

    Example:
        # Production
        store = get_document_store(CorpusConfig(data_path="data/documents.json"))

        # Testing
        store = get_document_store(CorpusConfig(data_path=None))
    """
    config = config or CorpusConfig()
    if config.data_path is None:
        return InMemoryDocumentStore()
    return JSONDocumentStore(config.data_path)

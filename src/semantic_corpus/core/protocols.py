"""
Core protocols defining contracts for the corpus.

All infrastructure components implement these protocols,
enabling dependency injection and easy testing.

PATTERN:
- Protocol defines the contract
- Multiple implementations possible
- Factory functions for instantiation
- Test doubles for fast unit tests

INTERVIEW TALKING POINT:
------------------------
"The store and the embedding model are both behind Protocols. The search
engine never knows whether it is reading a JSON file or a dict in memory,
and the facade never knows whether vectors come from OpenAI or a hash.
Every test builds its own store against a temp directory - no globals."
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from semantic_corpus.storage.document import Document
    from semantic_corpus.storage.stats import CorpusStats


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation.

    Implementations:
    - OpenAIEmbeddings (production)
    - MockEmbeddings (testing)
    """

    @property
    def dimensions(self) -> int:
        """Length of every vector this provider returns."""
        ...

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        ...

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        ...


# ---------------------------------------------------------------------------
# DOCUMENT STORE PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class DocumentStore(Protocol):
    """
    Contract for document persistence.

    Implementations:
    - JSONDocumentStore (production, one JSON file)
    - InMemoryDocumentStore (testing/development)
    """

    @property
    def dimension(self) -> int | None:
        """Embedding dimensionality recorded for the corpus, if any."""
        ...

    def add_document(
        self,
        text: str,
        embedding: list[float],
        metadata: dict[str, Any] | None = None,
    ) -> Document:
        """Assign an id, persist, and return the new document."""
        ...

    def get_all_documents(self) -> list[Document]:
        """Fresh snapshot of every document in insertion order."""
        ...

    def read_snapshot(self) -> tuple[list[Document], int | None]:
        """Documents and recorded dimension taken from a single read."""
        ...

    def get_document(self, document_id: str) -> Document | None:
        """Look up one document by id."""
        ...

    def get_stats(self) -> CorpusStats:
        """Aggregate statistics over a fresh snapshot."""
        ...

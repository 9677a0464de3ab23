"""
Core module - shared protocols and errors for the corpus.

USAGE:
------
from semantic_corpus.core import DocumentStore, EmbeddingProvider, ValidationError
"""

from semantic_corpus.core.errors import (
    CorpusError,
    ValidationError,
    DimensionMismatch,
    StorageError,
    ProviderUnavailable,
)
from semantic_corpus.core.protocols import (
    EmbeddingProvider,
    DocumentStore,
)

__all__ = [
    # Protocols
    "EmbeddingProvider",
    "DocumentStore",
    # Errors
    "CorpusError",
    "ValidationError",
    "DimensionMismatch",
    "StorageError",
    "ProviderUnavailable",
]

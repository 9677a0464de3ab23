"""
semantic_corpus - a local, single-node semantic search corpus.

Store text documents with precomputed embeddings, then rank them by
cosine similarity against a query embedding.

USAGE:
------
from semantic_corpus import CorpusService, JSONDocumentStore

service = CorpusService(JSONDocumentStore("data/documents.json"))
service.ingest({"text": "Cats sleep a lot", "embedding": [0.1, 0.9], "category": "animals"})
hits = service.search({"queryEmbedding": [0.2, 0.8], "limit": 5})
"""

from semantic_corpus.config import CorpusConfig, get_config, reset_config
from semantic_corpus.core import (
    CorpusError,
    DimensionMismatch,
    DocumentStore,
    EmbeddingProvider,
    ProviderUnavailable,
    StorageError,
    ValidationError,
)
from semantic_corpus.search import SearchResult, cosine_similarity, magnitude, search
from semantic_corpus.service import CorpusService
from semantic_corpus.storage import (
    CorpusStats,
    Document,
    DocumentMetadata,
    InMemoryDocumentStore,
    JSONDocumentStore,
    get_document_store,
)

__version__ = "0.1.0"

__all__ = [
    # Config
    "CorpusConfig",
    "get_config",
    "reset_config",
    # Errors
    "CorpusError",
    "ValidationError",
    "DimensionMismatch",
    "StorageError",
    "ProviderUnavailable",
    # Protocols
    "DocumentStore",
    "EmbeddingProvider",
    # Storage
    "Document",
    "DocumentMetadata",
    "CorpusStats",
    "JSONDocumentStore",
    "InMemoryDocumentStore",
    "get_document_store",
    # Search
    "SearchResult",
    "cosine_similarity",
    "magnitude",
    "search",
    # Facade
    "CorpusService",
]

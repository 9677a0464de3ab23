"""
Storage module - durable document persistence.

This module provides:
- Document / DocumentMetadata: the document model
- CorpusStats / compute_stats(): derived statistics
- JSONDocumentStore: single-file production store
- InMemoryDocumentStore: testing/development store
- get_document_store(): Factory function

ARCHITECTURE:
-------------
1. Protocol defines the contract (in core.protocols)
2. Multiple implementations (JSONDocumentStore, InMemoryDocumentStore)
3. Factory function for instantiation
4. Test doubles for fast unit tests
"""

from semantic_corpus.storage.document import Document, DocumentMetadata
from semantic_corpus.storage.stats import CorpusStats, compute_stats
from semantic_corpus.storage.store import (
    JSONDocumentStore,
    InMemoryDocumentStore,
    get_document_store,
)

__all__ = [
    # Document
    "Document",
    "DocumentMetadata",
    # Stats
    "CorpusStats",
    "compute_stats",
    # Implementations
    "JSONDocumentStore",
    "InMemoryDocumentStore",
    # Factory
    "get_document_store",
]

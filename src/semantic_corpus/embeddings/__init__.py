"""
Embeddings module - text embedding generation.

The pattern:
1. Protocol (EmbeddingProvider, in core.protocols) defines the interface
2. Production implementation (OpenAIEmbeddings)
3. Test double (MockEmbeddings) for fast testing
4. Factory function (get_embedding_provider)
"""

from semantic_corpus.core.protocols import EmbeddingProvider
from semantic_corpus.embeddings.providers import (
    OpenAIEmbeddings,
    MockEmbeddings,
    get_embedding_provider,
)

__all__ = [
    "EmbeddingProvider",
    "OpenAIEmbeddings",
    "MockEmbeddings",
    "get_embedding_provider",
]

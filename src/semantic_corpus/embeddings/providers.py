"""
Text-to-vector providers for the corpus.

The store and search engine only compare vectors they are handed; these
classes are where vectors come from when a caller has text instead.

- OpenAIEmbeddings: the hosted embeddings endpoint
- MockEmbeddings: hash-seeded vectors, no network
- get_embedding_provider(): picks one from config

A failing provider surfaces as ProviderUnavailable on the first attempt.
Retrying is the caller's decision.
"""

from __future__ import annotations

import hashlib
import logging
import os
from typing import Any

import numpy as np
import openai
from openai import OpenAI

from semantic_corpus.core.errors import ProviderUnavailable

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "text-embedding-3-small"
MOCK_DIMENSIONS = 512

# Output width of the hosted models; unknown models assume 1536
MODEL_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbeddings:
    """Vectors from the OpenAI embeddings API."""

    def __init__(self, model: str = DEFAULT_MODEL, api_key: str | None = None):
        self.model = model
        try:
            self._client = OpenAI(api_key=api_key or os.environ.get("OPENAI_API_KEY"))
        except openai.OpenAIError as e:
            # the client refuses to start without a key
            raise ProviderUnavailable(f"OpenAI client unavailable: {e}") from e

    @property
    def dimensions(self) -> int:
        return MODEL_DIMENSIONS.get(self.model, 1536)

    def _request(self, payload: str | list[str]) -> list[Any]:
        try:
            response = self._client.embeddings.create(input=payload, model=self.model)
        except openai.OpenAIError as e:
            logger.error("Embedding request to %s failed: %s", self.model, e)
            raise ProviderUnavailable(f"Embedding generation failed: {e}") from e
        return response.data

    def embed(self, text: str) -> np.ndarray:
        item = self._request(text)[0]
        return np.asarray(item.embedding, dtype=np.float32)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """One request for the whole batch; an empty batch makes no request."""
        if not texts:
            return []
        return [np.asarray(item.embedding, dtype=np.float32) for item in self._request(texts)]


class MockEmbeddings:
    """
    Offline provider for tests and local runs.

    The SHA-256 of the text seeds a numpy Generator, so a given text always
    maps to the same unit-length vector, in any process.
    """

    def __init__(self, dimensions: int = MOCK_DIMENSIONS):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> np.ndarray:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        rng = np.random.default_rng(int.from_bytes(digest[:8], "big"))
        vector = rng.standard_normal(self._dimensions)
        return (vector / np.linalg.norm(vector)).astype(np.float32)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        return [self.embed(text) for text in texts]


def get_embedding_provider(
    use_mock: bool = False,
    model: str = DEFAULT_MODEL,
    dimensions: int | None = None,
) -> OpenAIEmbeddings | MockEmbeddings:
    """
    Build the provider selected by configuration.

    Args:
        use_mock: MockEmbeddings instead of the API
        model: OpenAI model name, ignored by the mock
        dimensions: Mock vector width (512 when omitted)

    Raises:
        ProviderUnavailable: the OpenAI client could not be created
    """
    if use_mock:
        return MockEmbeddings(dimensions or MOCK_DIMENSIONS)
    return OpenAIEmbeddings(model=model)

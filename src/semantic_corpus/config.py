"""
Corpus configuration.

Loads settings from environment variables. The CLI loads a .env file
first, so the same variables can live there.

Environment Variables:
    CORPUS_DATA_PATH: JSON file backing the store (default: data/documents.json,
        ":memory:" selects the in-memory store)
    CORPUS_DEFAULT_LIMIT: Search results returned when no limit is given (default: 10)
    CORPUS_RECENT_DOCUMENTS: Documents previewed by stats (default: 5)
    USE_MOCK_EMBEDDINGS: Use the deterministic mock provider (default: true)
    CORPUS_EMBEDDING_MODEL: OpenAI embedding model (default: text-embedding-3-small)
    CORPUS_EMBEDDING_DIM: Mock provider dimensionality (default: 512)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from semantic_corpus.core.errors import ValidationError

MEMORY_PATH = ":memory:"
DEFAULT_DATA_PATH = Path("data") / "documents.json"

_TRUTHY = ("true", "1", "yes")


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValidationError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass
class CorpusConfig:
    """Configuration for the corpus service and its collaborators."""

    data_path: Path | None = DEFAULT_DATA_PATH
    default_limit: int = 10
    recent_documents: int = 5
    use_mock_embeddings: bool = True
    embedding_model: str = "text-embedding-3-small"
    embedding_dim: int = 512

    @classmethod
    def from_env(cls) -> "CorpusConfig":
        """Load config from environment variables."""
        raw_path = os.environ.get("CORPUS_DATA_PATH", "").strip()
        if raw_path == MEMORY_PATH:
            data_path = None
        elif raw_path:
            data_path = Path(raw_path)
        else:
            data_path = DEFAULT_DATA_PATH

        return cls(
            data_path=data_path,
            default_limit=_env_int("CORPUS_DEFAULT_LIMIT", 10),
            recent_documents=_env_int("CORPUS_RECENT_DOCUMENTS", 5),
            use_mock_embeddings=os.environ.get("USE_MOCK_EMBEDDINGS", "true").lower() in _TRUTHY,
            embedding_model=os.environ.get("CORPUS_EMBEDDING_MODEL", "text-embedding-3-small"),
            embedding_dim=_env_int("CORPUS_EMBEDDING_DIM", 512),
        )


# Lazily loaded, process-wide default. Components take an explicit config;
# this is only the fallback used by entry points.
_config: CorpusConfig | None = None


def get_config() -> CorpusConfig:
    """Get the default config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = CorpusConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None

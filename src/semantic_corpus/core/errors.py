"""
Error taxonomy for the corpus.

Every failure the library raises derives from CorpusError and carries a
stable ``kind`` plus a human-readable message. Presentation layers (the CLI,
an HTTP wrapper) turn these into user-visible responses with ``to_dict()``.

KINDS:
------
- validation_error:     malformed or missing caller input
- dimension_mismatch:   embedding length disagreement
- storage_error:        durable write failure
- provider_unavailable: the embedding provider failed (never retried here)
"""

from __future__ import annotations

from typing import Any


class CorpusError(Exception):
    """Base class for all corpus errors."""

    kind = "corpus_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for presentation layers."""
        return {"error": self.kind, "message": self.message}


class ValidationError(CorpusError):
    """Caller input is malformed or missing."""

    kind = "validation_error"


class DimensionMismatch(CorpusError):
    """Two vectors that must agree in length do not."""

    kind = "dimension_mismatch"

    def __init__(self, expected: int, actual: int, message: str | None = None):
        super().__init__(
            message
            or f"Embedding dimension mismatch: expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["expected"] = self.expected
        data["actual"] = self.actual
        return data


class StorageError(CorpusError):
    """Durable storage could not be written."""

    kind = "storage_error"


class ProviderUnavailable(CorpusError):
    """The embedding provider failed to produce a vector."""

    kind = "provider_unavailable"

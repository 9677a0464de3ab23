"""
Corpus facade - the one entry point presentation layers call.

Flow for every operation:
1. Validate the request (pydantic) - nothing is applied on failure
2. Delegate to the store / search engine
3. Time it, trace it
4. Shape the response

DEPENDENCY INJECTION:
---------------------
The store, the embedding provider and the config are passed in. Nothing
here reaches for a module-level singleton, so each test builds its own
service around its own temp-dir store.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

import numpy as np
import pydantic

from semantic_corpus.config import CorpusConfig
from semantic_corpus.core.errors import (
    CorpusError,
    DimensionMismatch,
    ProviderUnavailable,
    ValidationError,
)
from semantic_corpus.core.protocols import DocumentStore, EmbeddingProvider
from semantic_corpus.observability.attributes import (
    CORPUS_CATEGORY,
    CORPUS_DIMENSION,
    CORPUS_DOCUMENT_COUNT,
    CORPUS_DOCUMENT_ID,
    CORPUS_ELAPSED_MS,
    CORPUS_ERROR_KIND,
    CORPUS_SEARCH_LIMIT,
    CORPUS_SEARCH_RESULT_COUNT,
    CORPUS_SEARCH_TOP_SIMILARITY,
    CORPUS_TEXT,
    operation_attributes,
)
from semantic_corpus.observability.config import get_config as get_tracing_config
from semantic_corpus.observability.tracer import SpanProtocol, TracerProtocol, get_tracer
from semantic_corpus.search.engine import search
from semantic_corpus.service.schemas import (
    INGEST_PREVIEW_CHARS,
    LIST_PREVIEW_CHARS,
    DocumentView,
    EmbedRequest,
    EmbedResponse,
    IngestRequest,
    IngestResponse,
    ProcessingInfo,
    SearchHit,
    SearchRequest,
    SearchResponse,
    StatsResponse,
    StatsView,
    preview,
)
from semantic_corpus.storage.stats import compute_stats

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=pydantic.BaseModel)


def _format_validation_error(error: pydantic.ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(p) for p in err["loc"])
        message = err["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def _validate(model: type[RequestT], request: RequestT | Mapping[str, Any]) -> RequestT:
    """Coerce a mapping into ``model``, raising our ValidationError."""
    if isinstance(request, model):
        return request
    if not isinstance(request, Mapping):
        raise ValidationError(f"Request must be a mapping, got {type(request).__name__}")
    try:
        return model.model_validate(dict(request))
    except pydantic.ValidationError as e:
        raise ValidationError(_format_validation_error(e)) from e


class CorpusService:
    """
    Ingestion and query facade over a document store.

    Args:
        store: Document store (injected)
        embeddings: Embedding provider, only needed by the text-based
            operations (embed, ingest_text, search_text)
        config: Corpus configuration (defaults if not provided)
        tracer: Tracer (global tracer if not provided)
    """

    def __init__(
        self,
        store: DocumentStore,
        embeddings: EmbeddingProvider | None = None,
        config: CorpusConfig | None = None,
        tracer: TracerProtocol | None = None,
    ):
        self._store = store
        self._embeddings = embeddings
        self._config = config or CorpusConfig()
        self._tracer = tracer or get_tracer()

    @property
    def store(self) -> DocumentStore:
        return self._store

    @contextmanager
    def _traced(self, operation: str, attributes: dict[str, Any] | None = None) -> Iterator[SpanProtocol]:
        start = time.perf_counter()
        with self._tracer.start_span(
            f"corpus.{operation}",
            attributes=operation_attributes(operation, attributes),
        ) as span:
            try:
                yield span
            except CorpusError as e:
                span.set_attribute(CORPUS_ERROR_KIND, e.kind)
                span.record_exception(e)
                span.set_status("error", e.message)
                raise
            else:
                span.set_status("ok")
            finally:
                span.set_attribute(CORPUS_ELAPSED_MS, (time.perf_counter() - start) * 1000)

    # -----------------------------------------------------------------------
    # VECTOR-BASED OPERATIONS
    # -----------------------------------------------------------------------

    def ingest(self, request: IngestRequest | Mapping[str, Any]) -> IngestResponse:
        """
        Add one document with a caller-supplied embedding.

        Raises:
            ValidationError: missing/blank text, missing/invalid embedding
            DimensionMismatch: embedding length differs from the corpus
            StorageError: the store could not be written
        """
        with self._traced("ingest") as span:
            req = _validate(IngestRequest, request)
            span.set_attribute(CORPUS_DIMENSION, len(req.embedding))
            if req.category:
                span.set_attribute(CORPUS_CATEGORY, req.category)
            if get_tracing_config().capture_text:
                span.set_attribute(CORPUS_TEXT, req.text)

            document = self._store.add_document(
                req.text,
                req.embedding,
                {"category": req.category},
            )
            stats = self._store.get_stats()

            span.set_attribute(CORPUS_DOCUMENT_ID, document.id)
            span.set_attribute(CORPUS_DOCUMENT_COUNT, stats.total_documents)

            return IngestResponse(
                document=DocumentView.from_document(document, INGEST_PREVIEW_CHARS),
                processing=ProcessingInfo(
                    dimensions=document.dimension,
                    total_documents=stats.total_documents,
                ),
                stats=StatsView.from_stats(stats),
            )

    def search(self, request: SearchRequest | Mapping[str, Any]) -> SearchResponse:
        """
        Rank stored documents against a query embedding.

        Raises:
            ValidationError: missing/invalid query embedding or limit
            DimensionMismatch: query length differs from the corpus
        """
        with self._traced("search") as span:
            req = _validate(SearchRequest, request)
            limit = req.limit or self._config.default_limit
            span.set_attribute(CORPUS_SEARCH_LIMIT, limit)
            span.set_attribute(CORPUS_DIMENSION, len(req.query_embedding))
            if req.query and get_tracing_config().capture_text:
                span.set_attribute(CORPUS_TEXT, req.query)

            start = time.perf_counter()
            corpus, expected = self._store.read_snapshot()
            if expected is not None and expected != len(req.query_embedding):
                raise DimensionMismatch(expected=expected, actual=len(req.query_embedding))

            results = search(req.query_embedding, corpus, limit)
            elapsed_ms = (time.perf_counter() - start) * 1000

            span.set_attribute(CORPUS_DOCUMENT_COUNT, len(corpus))
            span.set_attribute(CORPUS_SEARCH_RESULT_COUNT, len(results))
            if results:
                span.set_attribute(CORPUS_SEARCH_TOP_SIMILARITY, results[0].similarity)

            logger.debug(
                "Search over %d documents returned %d results in %.2f ms",
                len(corpus),
                len(results),
                elapsed_ms,
            )
            return SearchResponse(
                query=req.query,
                results=[
                    SearchHit(
                        document=DocumentView.from_document(r.document),
                        similarity=r.similarity,
                        processing_time_ms=r.processing_time_ms,
                    )
                    for r in results
                ],
                total_results=len(results),
                processing_time_ms=elapsed_ms,
            )

    def stats(self, recent: int | None = None) -> StatsResponse:
        """
        Corpus statistics plus a preview of the most recently added documents.

        Args:
            recent: How many documents to preview (configured default if None)
        """
        if recent is None:
            recent = self._config.recent_documents
        if isinstance(recent, bool) or not isinstance(recent, int) or recent < 0:
            raise ValidationError(f"recent must be a non-negative integer, got {recent!r}")

        with self._traced("stats") as span:
            documents, dimension = self._store.read_snapshot()
            stats = compute_stats(documents, dimension)
            span.set_attribute(CORPUS_DOCUMENT_COUNT, stats.total_documents)

            latest = documents[-recent:] if recent else []
            return StatsResponse(
                stats=StatsView.from_stats(stats),
                recent_documents=[
                    DocumentView.from_document(doc, LIST_PREVIEW_CHARS) for doc in latest
                ],
            )

    # -----------------------------------------------------------------------
    # TEXT-BASED OPERATIONS (need an embedding provider)
    # -----------------------------------------------------------------------

    def _embed_vector(self, text: str) -> list[float]:
        if self._embeddings is None:
            raise ProviderUnavailable("No embedding provider configured")
        try:
            vector = self._embeddings.embed(text)
        except ProviderUnavailable:
            raise
        except Exception as e:
            raise ProviderUnavailable(f"Embedding generation failed: {e}") from e
        return np.asarray(vector, dtype=np.float64).ravel().tolist()

    def embed(self, text: str) -> EmbedResponse:
        """Embed ``text`` with the configured provider. Nothing is stored."""
        with self._traced("embed") as span:
            req = _validate(EmbedRequest, {"text": text})
            vector = self._embed_vector(req.text)
            span.set_attribute(CORPUS_DIMENSION, len(vector))
            return EmbedResponse(
                embedding=vector,
                dimensions=len(vector),
                text=preview(req.text, LIST_PREVIEW_CHARS),
            )

    def ingest_text(self, text: str, category: str | None = None) -> IngestResponse:
        """Embed ``text`` with the configured provider, then ingest it."""
        req = _validate(EmbedRequest, {"text": text})
        vector = self._embed_vector(req.text)
        return self.ingest({"text": req.text, "embedding": vector, "category": category})

    def search_text(self, query: str, limit: int | None = None) -> SearchResponse:
        """Embed ``query`` with the configured provider, then search."""
        req = _validate(EmbedRequest, {"text": query})
        vector = self._embed_vector(req.text)
        return self.search({"query_embedding": vector, "limit": limit, "query": req.text})

"""
Span attribute keys for corpus operations.
"""

# ---------------------------------------------------------------------------
# CORPUS NAMESPACE (custom)
# ---------------------------------------------------------------------------

CORPUS_OPERATION = "corpus.operation"  # "ingest", "search", "stats", "embed"
CORPUS_DOCUMENT_ID = "corpus.document.id"
CORPUS_DOCUMENT_COUNT = "corpus.document_count"
CORPUS_DIMENSION = "corpus.dimension"
CORPUS_CATEGORY = "corpus.category"
CORPUS_TEXT = "corpus.text"  # only when CORPUS_TRACING_CAPTURE_TEXT=true

# Search specific
CORPUS_SEARCH_LIMIT = "corpus.search.limit"
CORPUS_SEARCH_RESULT_COUNT = "corpus.search.result_count"
CORPUS_SEARCH_TOP_SIMILARITY = "corpus.search.top_similarity"

CORPUS_ELAPSED_MS = "corpus.elapsed_ms"
CORPUS_ERROR_KIND = "corpus.error.kind"


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------


def operation_attributes(operation: str, extra: dict | None = None) -> dict:
    """Base attributes for a corpus operation span, dropping None values."""
    attrs = {CORPUS_OPERATION: operation}
    attrs.update({k: v for k, v in (extra or {}).items() if v is not None})
    return attrs

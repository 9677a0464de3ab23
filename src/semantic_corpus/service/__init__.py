"""
Service module - the ingestion and query facade.

This module provides:
- CorpusService: validate, delegate, time, shape
- Request/response models (pydantic)
"""

from semantic_corpus.service.corpus_service import CorpusService
from semantic_corpus.service.schemas import (
    IngestRequest,
    SearchRequest,
    EmbedRequest,
    DocumentView,
    MetadataView,
    StatsView,
    ProcessingInfo,
    IngestResponse,
    SearchHit,
    SearchResponse,
    StatsResponse,
    EmbedResponse,
    preview,
)

__all__ = [
    "CorpusService",
    # Requests
    "IngestRequest",
    "SearchRequest",
    "EmbedRequest",
    # Responses
    "DocumentView",
    "MetadataView",
    "StatsView",
    "ProcessingInfo",
    "IngestResponse",
    "SearchHit",
    "SearchResponse",
    "StatsResponse",
    "EmbedResponse",
    "preview",
]

"""
CLI module - command-line interface for the corpus.

Provides entry points for:
- Adding documents
- Searching
- Corpus statistics
- Inspecting embeddings
"""

from semantic_corpus.cli.commands import (
    main,
    build_service,
    run_add_cli,
    run_search_cli,
    run_stats_cli,
    run_embed_cli,
)

__all__ = [
    "main",
    "build_service",
    "run_add_cli",
    "run_search_cli",
    "run_stats_cli",
    "run_embed_cli",
]

"""
CLI commands - entry points for the corpus.

Each command follows a consistent pattern:
1. Parse arguments
2. Call the CorpusService
3. Print results
4. Return exit code

CLI commands are thin wrappers: argument parsing and output formatting
only. Errors from the library arrive as CorpusError and become exit
code 1 with the error printed to stderr - never a traceback.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from semantic_corpus.config import MEMORY_PATH, get_config
from semantic_corpus.core.errors import CorpusError
from semantic_corpus.embeddings import get_embedding_provider
from semantic_corpus.observability import configure_logging, init_tracing, shutdown_tracing
from semantic_corpus.service import CorpusService
from semantic_corpus.storage import get_document_store

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _load_env() -> None:
    """Load environment variables from .env file."""
    load_dotenv()


def build_service(data_path: str | None = None, with_embeddings: bool = True) -> CorpusService:
    """
    Wire store, provider and config from the environment.

    ``with_embeddings=False`` skips the provider for commands that never embed.
    """
    config = get_config()
    if data_path == MEMORY_PATH:
        config = replace(config, data_path=None)
    elif data_path:
        config = replace(config, data_path=Path(data_path))

    store = get_document_store(config)
    embeddings = None
    if with_embeddings:
        embeddings = get_embedding_provider(
            use_mock=config.use_mock_embeddings,
            model=config.embedding_model,
            dimensions=config.embedding_dim,
        )
    return CorpusService(store, embeddings=embeddings, config=config)


def run_add_cli(argv: list[str], service: CorpusService) -> int:
    """Embed a text and add it to the corpus."""
    parser = argparse.ArgumentParser(prog="semantic-corpus add", description="Add a document")
    parser.add_argument("text", help="Document text")
    parser.add_argument("--category", default=None, help="Optional category label")
    args = parser.parse_args(argv)

    response = service.ingest_text(args.text, category=args.category)
    print(response.model_dump_json(by_alias=True, indent=2))
    return 0


def run_search_cli(argv: list[str], service: CorpusService) -> int:
    """Embed a query and print the best matches."""
    parser = argparse.ArgumentParser(prog="semantic-corpus search", description="Semantic search")
    parser.add_argument("query", help="Query text")
    parser.add_argument("--limit", type=int, default=None, help="Maximum results")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON response")
    args = parser.parse_args(argv)

    response = service.search_text(args.query, limit=args.limit)

    if args.json:
        print(response.model_dump_json(by_alias=True, indent=2))
        return 0

    print("=" * 60)
    print(f"SEARCH: {args.query}")
    print("=" * 60)

    if not response.results:
        print("  No documents in corpus")
    for rank, hit in enumerate(response.results, start=1):
        category = f" [{hit.document.metadata.category}]" if hit.document.metadata.category else ""
        snippet = hit.document.text[:80].replace("\n", " ")
        print(f"  {rank:>2}. {hit.similarity:+.4f}  {hit.document.id}{category}  {snippet}")

    print(f"\nResults: {response.total_results}")
    print(f"Time: {response.processing_time_ms:.2f} ms")
    return 0


def run_stats_cli(argv: list[str], service: CorpusService) -> int:
    """Print corpus statistics and the latest documents."""
    parser = argparse.ArgumentParser(prog="semantic-corpus stats", description="Corpus statistics")
    parser.add_argument("--recent", type=int, default=None, help="Documents to preview")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON response")
    args = parser.parse_args(argv)

    response = service.stats(recent=args.recent)

    if args.json:
        print(response.model_dump_json(by_alias=True, indent=2))
        return 0

    stats = response.stats
    print("=" * 60)
    print("CORPUS STATS")
    print("=" * 60)
    print(f"  Documents:       {stats.total_documents}")
    print(f"  Vectors:         {stats.total_vectors}")
    print(f"  Avg text length: {stats.average_text_length:.0f}")
    print(f"  Dimension:       {stats.dimension if stats.dimension is not None else '-'}")
    print(f"  Categories:      {', '.join(stats.categories) or '-'}")

    if response.recent_documents:
        print("\nRecent documents:")
        for doc in response.recent_documents:
            print(f"  {doc.id}  {doc.text}")
    return 0


def run_embed_cli(argv: list[str], service: CorpusService) -> int:
    """Print the embedding of a text without storing it."""
    parser = argparse.ArgumentParser(prog="semantic-corpus embed", description="Embed a text")
    parser.add_argument("text", help="Text to embed")
    parser.add_argument("--show", type=int, default=10, help="Values to print")
    args = parser.parse_args(argv)
    show = max(args.show, 0)

    response = service.embed(args.text)
    print(f"Dimensions: {response.dimensions}")
    print(json.dumps([round(v, 4) for v in response.embedding[:show]]))
    if response.dimensions > show:
        print(f"... and {response.dimensions - show} more dimensions")
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        semantic-corpus add "some text" --category notes
        semantic-corpus search "query text" --limit 5
        semantic-corpus stats
        semantic-corpus embed "some text"
    """
    _load_env()

    parser = argparse.ArgumentParser(
        description="Local semantic search corpus",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  add       Embed a text and store it
  search    Rank stored documents against a query
  stats     Corpus statistics and recent documents
  embed     Show the embedding of a text

Examples:
  semantic-corpus add "Cats sleep a lot" --category animals
  semantic-corpus search "feline habits" --limit 3
  semantic-corpus --data-path :memory: stats
        """,
    )
    parser.add_argument("--data-path", default=None, help="Store file (':memory:' for in-memory)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level",
    )
    parser.add_argument("command", choices=["add", "search", "stats", "embed"], help="Command to run")

    # Parse just the globals and the command first
    args, remaining = parser.parse_known_args(argv)

    configure_logging(args.log_level)
    init_tracing()

    # Dispatch to appropriate handler
    commands = {
        "add": run_add_cli,
        "search": run_search_cli,
        "stats": run_stats_cli,
        "embed": run_embed_cli,
    }

    try:
        service = build_service(args.data_path, with_embeddings=args.command != "stats")
        return commands[args.command](remaining, service)
    except CorpusError as e:
        print(json.dumps(e.to_dict()), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    sys.exit(main())

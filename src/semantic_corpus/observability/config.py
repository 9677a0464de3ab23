"""
Tracing configuration.

Loads observability settings from environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class TracingConfig:
    """Configuration for OpenTelemetry tracing.

    Environment Variables:
        CORPUS_TRACING_ENABLED: Enable tracing (default: false)
        CORPUS_SERVICE_NAME: service.name resource attribute (default: semantic-corpus)
        CORPUS_TRACING_ENDPOINT: OTLP/HTTP endpoint (optional, console exporter if empty)
        CORPUS_TRACING_CAPTURE_TEXT: Attach document/query text to spans (default: false)
    """

    enabled: bool = False
    service_name: str = "semantic-corpus"
    endpoint: str | None = None
    capture_text: bool = False

    @classmethod
    def from_env(cls) -> "TracingConfig":
        """Load config from environment variables."""
        return cls(
            enabled=os.environ.get("CORPUS_TRACING_ENABLED", "false").lower() in ("true", "1", "yes"),
            service_name=os.environ.get("CORPUS_SERVICE_NAME", "semantic-corpus"),
            endpoint=os.environ.get("CORPUS_TRACING_ENDPOINT") or None,
            capture_text=os.environ.get("CORPUS_TRACING_CAPTURE_TEXT", "false").lower() in ("true", "1", "yes"),
        )


# Global config singleton
_config: TracingConfig | None = None


def get_config() -> TracingConfig:
    """Get the global tracing config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = TracingConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None

"""fileblob configuration from environment variables.

Environment Variables:
    FILEBLOB_ROOT_DIR: Default bucket root for open_bucket() and the CLI.
    FILEBLOB_OTEL_ENABLED: Set to "1" to emit OpenTelemetry spans.
    FILEBLOB_REQUIRE_OTEL: Set to "1" to fail if tracing cannot initialize.
    FILEBLOB_OTEL_SERVICE_NAME: Service name for spans (default: "fileblob").
    FILEBLOB_OTEL_EXPORTER: "otlp" or "console" (default: "otlp").
    FILEBLOB_OTEL_EXPORTER_OTLP_ENDPOINT: OTLP endpoint URL (optional).
    FILEBLOB_OTEL_EXPORTER_OTLP_PROTOCOL: "grpc" or "http" (default: "grpc").
    FILEBLOB_OTEL_TEST_CAPTURE: Set to "1" to capture spans in memory.

Values are read on every call so tests can change them with monkeypatch.
"""

from __future__ import annotations

import os
from pathlib import Path

FILEBLOB_ROOT_DIR_ENV = "FILEBLOB_ROOT_DIR"
FILEBLOB_OTEL_ENABLED_ENV = "FILEBLOB_OTEL_ENABLED"
FILEBLOB_REQUIRE_OTEL_ENV = "FILEBLOB_REQUIRE_OTEL"
FILEBLOB_OTEL_TEST_CAPTURE_ENV = "FILEBLOB_OTEL_TEST_CAPTURE"
FILEBLOB_OTEL_SERVICE_NAME_ENV = "FILEBLOB_OTEL_SERVICE_NAME"
FILEBLOB_OTEL_EXPORTER_ENV = "FILEBLOB_OTEL_EXPORTER"
FILEBLOB_OTEL_ENDPOINT_ENV = "FILEBLOB_OTEL_EXPORTER_OTLP_ENDPOINT"
FILEBLOB_OTEL_PROTOCOL_ENV = "FILEBLOB_OTEL_EXPORTER_OTLP_PROTOCOL"


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    val = os.environ.get(key, "").strip().lower()
    if val in ("1", "true", "yes"):
        return True
    if val in ("0", "false", "no"):
        return False
    return default


def get_env_str(key: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default).strip()


def otel_enabled() -> bool:
    """Check if OpenTelemetry tracing is enabled."""
    return get_env_bool(FILEBLOB_OTEL_ENABLED_ENV, False)


def root_dir_from_env() -> Path:
    """Return the bucket root configured in FILEBLOB_ROOT_DIR.

    Raises:
        ConfigError: If the variable is unset or empty.
    """
    value = get_env_str(FILEBLOB_ROOT_DIR_ENV)
    if not value:
        raise ConfigError(f"{FILEBLOB_ROOT_DIR_ENV} is not set")
    return Path(value)

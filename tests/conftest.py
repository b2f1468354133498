"""Pytest configuration and fixtures for fileblob tests.

This module provides common fixtures and configuration for all tests.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from fileblob.bucket import FileBucket
from fileblob.config import (
    FILEBLOB_OTEL_ENABLED_ENV,
    FILEBLOB_OTEL_EXPORTER_ENV,
    FILEBLOB_OTEL_PROTOCOL_ENV,
    FILEBLOB_OTEL_TEST_CAPTURE_ENV,
    FILEBLOB_REQUIRE_OTEL_ENV,
    FILEBLOB_ROOT_DIR_ENV,
)
from fileblob.models import WriterOptions


@pytest.fixture(autouse=True)
def clean_fileblob_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without fileblob environment configuration.

    Tests that need tracing or a default root set the variables themselves.
    """
    for name in (
        FILEBLOB_ROOT_DIR_ENV,
        FILEBLOB_OTEL_ENABLED_ENV,
        FILEBLOB_OTEL_TEST_CAPTURE_ENV,
        FILEBLOB_OTEL_EXPORTER_ENV,
        FILEBLOB_OTEL_PROTOCOL_ENV,
        FILEBLOB_REQUIRE_OTEL_ENV,
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def root_dir(tmp_path: Path) -> Iterator[Path]:
    """Return an empty directory to use as a bucket root."""
    root = tmp_path / "bucket"
    root.mkdir()
    yield root


@pytest.fixture
def bucket(root_dir: Path) -> FileBucket:
    """Create a FileBucket over an empty root directory."""
    return FileBucket(root_dir)


@pytest.fixture
def put(bucket: FileBucket) -> Callable[..., None]:
    """Return a helper that stores bytes under a key through a writer."""

    def _put(
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> None:
        with bucket.new_typed_writer(key, content_type, WriterOptions(metadata=metadata)) as w:
            w.write(data)

    return _put


@pytest.fixture
def get(bucket: FileBucket) -> Callable[[str], bytes]:
    """Return a helper that reads a whole object."""

    def _get(key: str) -> bytes:
        with bucket.new_reader(key) as r:
            return r.read()

    return _get

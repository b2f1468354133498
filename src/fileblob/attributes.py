"""Sidecar attribute storage.

Each object file may have a companion file named ``<object path>.attrs``
holding its content type and user metadata as JSON. The sidecar is written
after the payload is complete and replaced atomically, so readers see either
the previous record or the new one. A missing sidecar reads as an empty
record so that files placed in the root by other tools are still readable.
"""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fileblob.errors import StorageBackendError
from fileblob.paths import ATTRS_EXT

logger = logging.getLogger(__name__)


class AttributeRecord(BaseModel):
    """Attributes persisted alongside an object."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    content_type: str = Field(default="")
    metadata: dict[str, str] | None = Field(default=None)


def sidecar_path(path: str | Path) -> Path:
    """Return the sidecar file path for an object path."""
    return Path(f"{os.fspath(path)}{ATTRS_EXT}")


def get_attributes(path: str | Path) -> AttributeRecord:
    """Load the attribute record for the object at ``path``.

    Returns:
        The stored record, or an empty record if no sidecar exists.

    Raises:
        StorageBackendError: If the sidecar exists but cannot be read or
            does not hold a valid record.
    """
    attrs_file = sidecar_path(path)
    try:
        raw = attrs_file.read_bytes()
    except FileNotFoundError:
        return AttributeRecord()
    except OSError as e:
        raise StorageBackendError(
            message=f"Failed to read attributes: {e}",
            operation="get_attributes",
            cause=e,
        ) from e

    try:
        return AttributeRecord.model_validate_json(raw)
    except ValidationError as e:
        raise StorageBackendError(
            message=f"Malformed attributes file {attrs_file.name}",
            operation="get_attributes",
            cause=e,
        ) from e


def set_attributes(path: str | Path, record: AttributeRecord) -> None:
    """Persist ``record`` as the sidecar of the object at ``path``.

    The record is written to a temporary file in the same directory and
    renamed over the sidecar. The temporary name also ends in the sidecar
    extension, so listings never show it and keys cannot address it.

    Raises:
        StorageBackendError: If the sidecar cannot be written.
    """
    attrs_file = sidecar_path(path)
    tmp_file = attrs_file.with_name(f"{attrs_file.name}.{uuid.uuid4().hex}{ATTRS_EXT}")
    try:
        tmp_file.write_text(record.model_dump_json(), encoding="utf-8")
        tmp_file.replace(attrs_file)
    except OSError as e:
        tmp_file.unlink(missing_ok=True)
        raise StorageBackendError(
            message=f"Failed to write attributes: {e}",
            operation="set_attributes",
            cause=e,
        ) from e
    logger.debug("Wrote attributes file %s", attrs_file.name)


def delete_attributes(path: str | Path) -> None:
    """Remove the sidecar of the object at ``path``; a missing sidecar is fine.

    Raises:
        StorageBackendError: If the sidecar exists but cannot be removed.
    """
    try:
        sidecar_path(path).unlink(missing_ok=True)
    except OSError as e:
        raise StorageBackendError(
            message=f"Failed to delete attributes: {e}",
            operation="delete_attributes",
            cause=e,
        ) from e

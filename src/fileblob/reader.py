"""Sequential and ranged readers over stored objects."""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import BinaryIO

from fileblob.attributes import get_attributes
from fileblob.errors import (
    InvalidArgumentError,
    ObjectNotFoundError,
    StorageBackendError,
)
from fileblob.models import ReaderAttributes, mod_time_from_stat
from fileblob.paths import object_path

logger = logging.getLogger(__name__)


class BlobReader(io.RawIOBase):
    """Read-only stream over one object, optionally limited to a byte range.

    Attributes are captured when the reader is opened and are not refreshed
    while reading. The reader owns the underlying file handle and must be
    closed, either explicitly or by using it as a context manager.
    """

    def __init__(
        self,
        fileobj: BinaryIO,
        attributes: ReaderAttributes,
        limit: int | None = None,
    ) -> None:
        super().__init__()
        self._file = fileobj
        self._attributes = attributes
        self._remaining = limit

    @property
    def attributes(self) -> ReaderAttributes:
        return self._attributes

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: bytearray | memoryview) -> int:  # type: ignore[override]
        if self.closed:
            raise ValueError("I/O operation on closed reader")
        view = memoryview(buffer).cast("B")
        if self._remaining is not None:
            if self._remaining <= 0:
                return 0
            view = view[: self._remaining]
        n = self._file.readinto(view) or 0
        if self._remaining is not None:
            self._remaining -= n
        return n

    def close(self) -> None:
        if not self.closed:
            try:
                self._file.close()
            finally:
                super().close()

    def as_(self, target: object) -> bool:
        """Capability probe: no backend-specific reader types are exposed."""
        return False


def open_range_reader(root: Path, key: str, offset: int = 0, length: int = -1) -> BlobReader:
    """Open a reader for ``key`` starting at ``offset``.

    Args:
        root: Bucket root directory.
        key: Object key.
        offset: Byte offset to start reading from.
        length: Maximum number of bytes to read; 0 or negative reads to the
            end of the object.

    Raises:
        InvalidKeyError: If the key is invalid or reserved.
        InvalidArgumentError: If offset is negative.
        ObjectNotFoundError: If no object exists for the key.
        StorageBackendError: If the file cannot be opened or positioned.
    """
    relpath, path = object_path(root, key)
    if offset < 0:
        raise InvalidArgumentError(f"Negative offset {offset}", key=key)

    try:
        info = os.stat(path)
    except FileNotFoundError as e:
        raise ObjectNotFoundError(key=key, relpath=relpath) from e
    except OSError as e:
        raise StorageBackendError(
            message=f"open file blob: {e}", key=key, operation="new_range_reader", cause=e
        ) from e

    try:
        record = get_attributes(path)
    except StorageBackendError as e:
        e.key = key
        raise

    try:
        f = open(path, "rb")
    except OSError as e:
        raise StorageBackendError(
            message=f"open file blob: {e}", key=key, operation="new_range_reader", cause=e
        ) from e

    try:
        if offset > 0:
            f.seek(offset, io.SEEK_SET)
    except OSError as e:
        f.close()
        raise StorageBackendError(
            message=f"open file blob: {e}", key=key, operation="new_range_reader", cause=e
        ) from e

    attributes = ReaderAttributes(
        content_type=record.content_type,
        mod_time=mod_time_from_stat(info.st_mtime),
        size=info.st_size,
    )
    logger.debug("Opened reader key=%s offset=%d length=%d", key, offset, length)
    return BlobReader(f, attributes, limit=length if length > 0 else None)

"""Writers that stage an object file and persist its attributes on close.

Data goes straight into the destination file. Attributes are written only
when the writer is closed under a live context, after the payload is
flushed. A writer closed under a cancelled or expired context removes the
partial file instead and raises the cancellation error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from fileblob.attributes import AttributeRecord, set_attributes, sidecar_path
from fileblob.context import OperationContext
from fileblob.errors import StorageBackendError
from fileblob.models import WriterOptions
from fileblob.paths import object_path

logger = logging.getLogger(__name__)


def _no_capability(target: object) -> bool:
    return False


class BlobWriter:
    """Write-only stream for one object.

    ``close()`` must be called exactly once to commit the object. Used as a
    context manager, an exception inside the block discards the write and
    the partial file is removed without cancelling the caller's context. A
    writer that is never closed leaves its payload without attributes.
    """

    def __init__(
        self,
        fileobj: BinaryIO,
        path: Path,
        key: str,
        record: AttributeRecord,
        ctx: OperationContext,
    ) -> None:
        self._file = fileobj
        self._path = path
        self._key = key
        self._record = record
        self._ctx = ctx
        self._closed = False

    @property
    def key(self) -> str:
        return self._key

    @property
    def closed(self) -> bool:
        return self._closed

    def writable(self) -> bool:
        return not self._closed

    def write(self, data: bytes | bytearray | memoryview) -> int:
        if self._closed:
            raise ValueError("I/O operation on closed writer")
        return self._file.write(data)

    def writelines(self, chunks: Iterable[bytes]) -> None:
        for chunk in chunks:
            self.write(chunk)

    def close(self) -> None:
        """Commit the object, or discard it if the context is done.

        Raises:
            OperationCancelledError: If the context was cancelled or its
                deadline passed; the partial file has been removed.
            StorageBackendError: If the payload could not be flushed or
                attributes could not be persisted. The file handle is left
                open in that case.
        """
        if self._closed:
            return

        err = self._ctx.err()
        if err is not None:
            self._discard()
            err.key = self._key
            raise err

        try:
            self._file.flush()
        except OSError as e:
            raise StorageBackendError(
                message=f"flush file blob: {e}", key=self._key, operation="flush", cause=e
            ) from e

        try:
            set_attributes(self._path, self._record)
        except StorageBackendError as e:
            e.key = self._key
            e.operation = "write_attributes"
            raise

        self._closed = True
        try:
            self._file.close()
        except OSError as e:
            raise StorageBackendError(
                message=f"close file blob: {e}", key=self._key, operation="close", cause=e
            ) from e
        logger.debug("Committed object key=%s", self._key)

    def _discard(self) -> None:
        self._closed = True
        try:
            self._file.close()
        except OSError as e:
            logger.debug("Closing cancelled write key=%s failed: %s", self._key, e)
        for path in (self._path, sidecar_path(self._path)):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Removing cancelled write %s failed: %s", path.name, e)
        logger.debug("Discarded cancelled write key=%s", self._key)

    def __enter__(self) -> BlobWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None and not self._closed:
            self._discard()
            return
        self.close()

    def as_(self, target: object) -> bool:
        """Capability probe: no backend-specific writer types are exposed."""
        return False


def open_writer(
    root: Path,
    key: str,
    content_type: str,
    opts: WriterOptions | None = None,
    ctx: OperationContext | None = None,
) -> BlobWriter:
    """Create or truncate the object file for ``key`` and return a writer.

    Args:
        root: Bucket root directory.
        key: Object key.
        content_type: MIME type to record for the object.
        opts: Metadata and before-write hook.
        ctx: Context checked at close time; defaults to one that is never
            cancelled.

    Raises:
        InvalidKeyError: If the key is invalid or reserved.
        StorageBackendError: If parent directories or the file cannot be
            created.
    """
    opts = opts or WriterOptions()
    ctx = ctx or OperationContext.background()
    _, path = object_path(root, key)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        f = open(path, "wb")
    except OSError as e:
        raise StorageBackendError(
            message=f"open file blob: {e}", key=key, operation="new_typed_writer", cause=e
        ) from e

    if opts.before_write is not None:
        try:
            opts.before_write(_no_capability)
        except Exception:
            f.close()
            path.unlink(missing_ok=True)
            raise

    record = AttributeRecord(
        content_type=content_type,
        metadata=dict(opts.metadata) if opts.metadata else None,
    )
    logger.debug("Opened writer key=%s content_type=%s", key, content_type)
    return BlobWriter(f, path, key, record, ctx)

"""fileblob local filesystem bucket.

Provides a bucket that reads and writes files under a root directory, for
local development and testing in place of a networked object store:
- Keys map 1:1 onto relative paths and never escape the root
- Content type and user metadata live in "<object>.attrs" sidecar files
- Writers closed under a cancelled context leave nothing behind
- Flat, sorted, paged listing of the root directory

Not intended for production durability. Concurrent writers to the same key
race; the last writer to close wins.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

from fileblob.attributes import delete_attributes, get_attributes
from fileblob.config import root_dir_from_env
from fileblob.context import OperationContext
from fileblob.driver import Bucket
from fileblob.errors import (
    ErrorKind,
    NotImplementedByBackendError,
    ObjectNotFoundError,
    StorageBackendError,
    error_kind,
)
from fileblob.lister import list_paged
from fileblob.models import (
    Attributes,
    ListObject,
    ListOptions,
    ListPage,
    SignedURLOptions,
    WriterOptions,
    mod_time_from_stat,
)
from fileblob.paths import object_path
from fileblob.reader import BlobReader, open_range_reader
from fileblob.tracing import traced_storage_operation
from fileblob.writer import BlobWriter, open_writer

logger = logging.getLogger(__name__)


class FileBucket(Bucket):
    """Bucket backed by a directory on the local filesystem.

    Objects are stored as:
        {root}/{key}          # payload
        {root}/{key}.attrs    # content type and metadata (JSON)

    The root is fixed at construction and must already exist. No object
    state is cached; every call goes to the filesystem.
    """

    def __init__(self, root: str | Path) -> None:
        """Initialize the bucket.

        Args:
            root: Existing directory to store objects in.

        Raises:
            StorageBackendError: If root does not exist or is not a directory.
        """
        root = Path(root)
        try:
            info = os.stat(root)
        except OSError as e:
            raise StorageBackendError(
                message=f"open file bucket: {e}", operation="open_bucket", cause=e
            ) from e
        if not stat.S_ISDIR(info.st_mode):
            raise StorageBackendError(
                message=f"open file bucket: {root} is not a directory", operation="open_bucket"
            )

        self._root = root.resolve()
        logger.debug("FileBucket initialized with root=%s", self._root)

    @property
    def backend_name(self) -> str:
        """Return the backend identifier."""
        return "file"

    @property
    def root(self) -> Path:
        """Return the root directory path."""
        return self._root

    @traced_storage_operation("attributes")
    def attributes(self, key: str) -> Attributes:
        """Return content type, metadata, modification time and size."""
        relpath, path = object_path(self._root, key)
        try:
            info = os.stat(path)
        except FileNotFoundError as e:
            raise ObjectNotFoundError(key=key, relpath=relpath) from e
        except OSError as e:
            raise StorageBackendError(
                message=f"stat file blob: {e}", key=key, operation="attributes", cause=e
            ) from e

        try:
            record = get_attributes(path)
        except StorageBackendError as e:
            e.key = key
            raise

        return Attributes(
            content_type=record.content_type,
            metadata=dict(record.metadata) if record.metadata is not None else None,
            mod_time=mod_time_from_stat(info.st_mtime),
            size=info.st_size,
        )

    def exists(self, key: str) -> bool:
        """Return True if an object is stored under ``key``."""
        try:
            self.attributes(key)
        except ObjectNotFoundError:
            return False
        return True

    @traced_storage_operation("new_range_reader")
    def new_range_reader(self, key: str, offset: int = 0, length: int = -1) -> BlobReader:
        """Open a reader over a byte range of ``key``."""
        return open_range_reader(self._root, key, offset, length)

    def new_reader(self, key: str) -> BlobReader:
        """Open a reader over the whole of ``key``."""
        return self.new_range_reader(key, 0, -1)

    @traced_storage_operation("new_typed_writer")
    def new_typed_writer(
        self,
        key: str,
        content_type: str,
        opts: WriterOptions | None = None,
        ctx: OperationContext | None = None,
    ) -> BlobWriter:
        """Open a writer for ``key``; attributes are stored on close."""
        return open_writer(self._root, key, content_type, opts, ctx)

    @traced_storage_operation("delete")
    def delete(self, key: str) -> None:
        """Delete the object file, then its sidecar if one exists."""
        relpath, path = object_path(self._root, key)
        try:
            os.remove(path)
        except FileNotFoundError as e:
            raise ObjectNotFoundError(key=key, relpath=relpath) from e
        except OSError as e:
            raise StorageBackendError(
                message=f"delete file blob: {e}", key=key, operation="delete", cause=e
            ) from e

        try:
            delete_attributes(path)
        except StorageBackendError as e:
            e.key = key
            e.operation = "delete"
            raise
        logger.debug("Deleted object key=%s", key)

    @traced_storage_operation("list_paged", keyed=False)
    def list_paged(self, opts: ListOptions | None = None) -> ListPage:
        """Return one page of objects in the root directory."""
        return list_paged(self._root, opts)

    def list_all(self, prefix: str = "", page_size: int = 0) -> Iterator[ListObject]:
        """Yield every listed object, following page tokens."""
        token: bytes | None = None
        while True:
            page = self.list_paged(
                ListOptions(prefix=prefix, page_token=token, page_size=page_size)
            )
            yield from page.objects
            if page.next_page_token is None:
                return
            token = page.next_page_token

    def signed_url(self, key: str, opts: SignedURLOptions | None = None) -> str:
        """Signed URLs have no meaning for local files."""
        raise NotImplementedByBackendError("SignedURL not supported", key=key)

    def as_(self, target: object) -> bool:
        """Capability probe: no backend-specific bucket types are exposed."""
        return False

    def error_kind(self, exc: BaseException) -> ErrorKind:
        """Classify an exception raised by this bucket."""
        return error_kind(exc)


def open_bucket(root: str | Path | None = None) -> FileBucket:
    """Open a FileBucket rooted at ``root``.

    Args:
        root: Existing directory. If None, uses the FILEBLOB_ROOT_DIR
            environment variable.

    Raises:
        ConfigError: If root is None and FILEBLOB_ROOT_DIR is not set.
        StorageBackendError: If the directory does not exist or is not a
            directory.
    """
    if root is None:
        root = root_dir_from_env()
    return FileBucket(root)

"""fileblob: local filesystem object storage.

Maps object keys onto files under a root directory, with sidecar files for
content type and user metadata. Intended for development and testing in
place of a networked object store.

Environment Variables:
    FILEBLOB_ROOT_DIR: Default root directory for open_bucket()
    FILEBLOB_OTEL_ENABLED: Set to "1" to emit OpenTelemetry spans
"""

from fileblob.bucket import FileBucket, open_bucket
from fileblob.context import OperationContext
from fileblob.driver import Bucket
from fileblob.errors import (
    DeadlineExceededError,
    ErrorKind,
    InvalidArgumentError,
    InvalidKeyError,
    NotImplementedByBackendError,
    ObjectNotFoundError,
    ObjectStorageError,
    OperationCancelledError,
    StorageBackendError,
    error_kind,
)
from fileblob.models import (
    Attributes,
    ListObject,
    ListOptions,
    ListPage,
    ReaderAttributes,
    SignedURLOptions,
    WriterOptions,
)
from fileblob.paths import ATTRS_EXT, resolve_path
from fileblob.reader import BlobReader
from fileblob.writer import BlobWriter

__all__ = [
    "ATTRS_EXT",
    "Attributes",
    "BlobReader",
    "BlobWriter",
    "Bucket",
    "DeadlineExceededError",
    "ErrorKind",
    "FileBucket",
    "InvalidArgumentError",
    "InvalidKeyError",
    "ListObject",
    "ListOptions",
    "ListPage",
    "NotImplementedByBackendError",
    "ObjectNotFoundError",
    "ObjectStorageError",
    "OperationCancelledError",
    "OperationContext",
    "ReaderAttributes",
    "SignedURLOptions",
    "StorageBackendError",
    "WriterOptions",
    "error_kind",
    "open_bucket",
    "resolve_path",
]

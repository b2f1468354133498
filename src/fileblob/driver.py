"""fileblob driver interface.

Provides the Bucket abstract base class that the generic storage layer talks
to. FileBucket is the local filesystem implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fileblob.context import OperationContext
    from fileblob.models import (
        Attributes,
        ListOptions,
        ListPage,
        SignedURLOptions,
        WriterOptions,
    )
    from fileblob.reader import BlobReader
    from fileblob.writer import BlobWriter


class Bucket(ABC):
    """Abstract base class for blob storage drivers.

    All implementations must provide:
    - Key validation before any object I/O
    - Attribute lookup, ranged reads, typed writes and deletes
    - Paged listing with prefix filtering
    - Typed errors carrying an ErrorKind
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the backend identifier for observability."""
        ...

    @abstractmethod
    def attributes(self, key: str) -> Attributes:
        """Return the attributes of the object stored under ``key``.

        Raises:
            InvalidKeyError: If the key is invalid or reserved.
            ObjectNotFoundError: If no object exists for the key.
            StorageBackendError: If the backend cannot complete the lookup.
        """
        ...

    @abstractmethod
    def new_range_reader(self, key: str, offset: int, length: int) -> BlobReader:
        """Open a reader over ``length`` bytes of ``key`` starting at ``offset``.

        A ``length`` of 0 or less reads to the end of the object.

        Raises:
            InvalidKeyError: If the key is invalid or reserved.
            ObjectNotFoundError: If no object exists for the key.
            StorageBackendError: If the backend cannot open the object.
        """
        ...

    @abstractmethod
    def new_typed_writer(
        self,
        key: str,
        content_type: str,
        opts: WriterOptions | None = None,
        ctx: OperationContext | None = None,
    ) -> BlobWriter:
        """Open a writer that stores data under ``key`` with ``content_type``.

        The object becomes visible with its attributes only once the writer
        is closed under a live context.

        Raises:
            InvalidKeyError: If the key is invalid or reserved.
            StorageBackendError: If the backend cannot create the object.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete the object stored under ``key``.

        Raises:
            InvalidKeyError: If the key is invalid or reserved.
            ObjectNotFoundError: If no object exists for the key.
            StorageBackendError: If the backend cannot complete the deletion.
        """
        ...

    @abstractmethod
    def list_paged(self, opts: ListOptions | None = None) -> ListPage:
        """Return one page of objects, sorted by key.

        Raises:
            InvalidArgumentError: If the options are out of range.
            StorageBackendError: If the backend cannot complete the listing.
        """
        ...

    @abstractmethod
    def signed_url(self, key: str, opts: SignedURLOptions | None = None) -> str:
        """Return a URL granting temporary access to ``key``.

        Raises:
            NotImplementedByBackendError: If the backend has no signed URLs.
        """
        ...

    @abstractmethod
    def as_(self, target: object) -> bool:
        """Capability probe for backend-specific handle types.

        Returns:
            True if ``target`` was populated, False if unsupported.
        """
        ...

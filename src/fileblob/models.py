"""fileblob data models.

Provides typed dataclasses for attribute lookups, reader metadata, listing
pages and writer options.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

DEFAULT_PAGE_SIZE = 1000

# A capability probe is offered a target and reports whether it could be
# populated with a backend-specific handle.
CapabilityProbe = Callable[[object], bool]


def mod_time_from_stat(st_mtime: float) -> datetime:
    """Convert a stat modification time to an aware UTC datetime."""
    return datetime.fromtimestamp(st_mtime, tz=UTC)


@dataclass(frozen=True)
class Attributes:
    """Attributes of a stored object.

    Attributes:
        content_type: MIME type recorded at write time ("" if unknown).
        metadata: User metadata recorded at write time, or None.
        mod_time: Modification time of the payload file.
        size: Size of the payload in bytes.
    """

    content_type: str
    metadata: dict[str, str] | None
    mod_time: datetime
    size: int

    def to_dict(self) -> dict[str, object]:
        """Convert attributes to dictionary for JSON serialization."""
        return {
            "content_type": self.content_type,
            "metadata": dict(self.metadata) if self.metadata else None,
            "mod_time": self.mod_time.isoformat(),
            "size": self.size,
        }


@dataclass(frozen=True)
class ReaderAttributes:
    """Object attributes captured when a reader is opened."""

    content_type: str
    mod_time: datetime
    size: int


@dataclass(frozen=True)
class ListObject:
    """Summary of one listed object."""

    key: str
    mod_time: datetime
    size: int


@dataclass
class ListPage:
    """One page of listing results.

    Not frozen: the lister builds the page in place while scanning the
    directory.

    Attributes:
        objects: Objects in this page, sorted by key.
        next_page_token: Opaque cursor for the next page, or None when the
            listing is exhausted.
    """

    objects: list[ListObject] = field(default_factory=list)
    next_page_token: bytes | None = None


@dataclass(frozen=True)
class ListOptions:
    """Options for a paged listing.

    Attributes:
        prefix: Only names starting with this string are returned.
        page_token: Cursor returned by a previous page.
        page_size: Maximum objects per page; 0 means DEFAULT_PAGE_SIZE.
    """

    prefix: str = ""
    page_token: bytes | None = None
    page_size: int = 0


@dataclass(frozen=True)
class WriterOptions:
    """Options for opening a writer.

    Attributes:
        metadata: User metadata to persist with the object.
        before_write: Hook called once before any data is written. It is
            passed a capability probe; this backend exposes no handle types
            so the probe always returns False.
    """

    metadata: dict[str, str] | None = None
    before_write: Callable[[CapabilityProbe], None] | None = None


@dataclass(frozen=True)
class SignedURLOptions:
    """Options for signed URL generation."""

    expiry: timedelta = timedelta(hours=1)

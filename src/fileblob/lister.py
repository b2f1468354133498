"""Paged listing of the bucket root.

Listing is flat: only the entries directly inside the root are returned and
subdirectories are not walked. A subdirectory shows up as a single entry
named after the directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fileblob.errors import InvalidArgumentError, StorageBackendError
from fileblob.models import (
    DEFAULT_PAGE_SIZE,
    ListObject,
    ListOptions,
    ListPage,
    mod_time_from_stat,
)
from fileblob.paths import is_reserved

logger = logging.getLogger(__name__)


def _decode_token(token: bytes | None) -> str:
    if not token:
        return ""
    try:
        return token.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidArgumentError("Invalid page token") from e


def list_paged(root: Path, opts: ListOptions | None = None) -> ListPage:
    """Return one page of objects in ``root`` sorted by name.

    Sidecar attribute files are never listed. When the page is full and a
    further matching entry exists, ``next_page_token`` names that entry;
    passing it back resumes the listing at that entry.

    Raises:
        InvalidArgumentError: If the page size is negative or the token is
            not valid UTF-8.
        StorageBackendError: If the root cannot be read.
    """
    opts = opts or ListOptions()
    if opts.page_size < 0:
        raise InvalidArgumentError(f"Negative page size {opts.page_size}")
    page_size = opts.page_size or DEFAULT_PAGE_SIZE
    page_token = _decode_token(opts.page_token)

    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise StorageBackendError(
            message=f"list file bucket: {e}", operation="list_paged", cause=e
        ) from e

    page = ListPage()
    for entry in entries:
        name = entry.name
        if is_reserved(name):
            continue
        if opts.prefix and not name.startswith(opts.prefix):
            continue
        if page_token and name < page_token:
            continue
        if len(page.objects) == page_size:
            page.next_page_token = name.encode("utf-8")
            break
        try:
            info = entry.stat()
        except FileNotFoundError:
            # Removed between scandir and stat.
            continue
        except OSError as e:
            raise StorageBackendError(
                message=f"list file bucket: {e}", key=name, operation="list_paged", cause=e
            ) from e
        page.objects.append(
            ListObject(key=name, mod_time=mod_time_from_stat(info.st_mtime), size=info.st_size)
        )

    logger.debug(
        "Listed %d objects prefix=%r more=%s",
        len(page.objects),
        opts.prefix,
        page.next_page_token is not None,
    )
    return page

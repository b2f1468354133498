"""Key to filesystem path resolution.

Keys map onto files underneath the bucket root. A key is accepted only when
it is already in canonical form, so that exactly one key names any file and
no key can reach outside the root:

- characters are limited to ASCII letters, digits, "/", ".", " ", "_" and "-"
- the key must equal its cleaned form (no "//", no "./" segments, no "a/../b")
- the key must be relative and must not climb out with ".."
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from fileblob.errors import InvalidKeyError

ATTRS_EXT = ".attrs"

_INVALID_KEY_CHAR = re.compile(r"[^A-Za-z0-9/._ \-]")


def clean_path(path: str) -> str:
    """Return the shortest slash-separated path equivalent to ``path``.

    Repeated slashes collapse, "." segments drop, "name/.." pairs cancel,
    ".." directly under the root is dropped and a trailing slash is removed.
    The empty path cleans to ".". Unlike ``posixpath.normpath`` a leading
    "//" is collapsed too.
    """
    if not path:
        return "."

    rooted = path.startswith("/")
    parts: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not rooted:
                parts.append(segment)
            continue
        parts.append(segment)

    cleaned = "/".join(parts)
    if rooted:
        return "/" + cleaned
    return cleaned or "."


def _invalid(key: str, reason: str) -> InvalidKeyError:
    return InvalidKeyError(f"Invalid key: {reason}", key=key, reason=reason)


def resolve_path(key: str) -> str:
    """Convert a key into a relative, platform-native filesystem path.

    Raises:
        InvalidKeyError: If the key has a disallowed character, is not in
            clean slash-separated form, is absolute, is "." or climbs out
            of the root.
    """
    bad_char = _INVALID_KEY_CHAR.search(key)
    if bad_char is not None:
        raise _invalid(key, f"contains invalid character {bad_char.group()!r}")
    if clean_path(key) != key:
        raise _invalid(key, "not a clean slash-separated path")
    if key.startswith("/"):
        raise _invalid(key, "starts with a slash")
    if key == ".":
        raise _invalid(key, 'invalid path "."')
    if key == ".." or key.startswith("../"):
        raise _invalid(key, 'starts with "../"')
    return key.replace("/", os.sep)


def is_reserved(path: str | Path) -> bool:
    """Return True if ``path`` names a sidecar attributes file."""
    return os.fspath(path).endswith(ATTRS_EXT)


def object_path(root: Path, key: str) -> tuple[str, Path]:
    """Resolve ``key`` under ``root``, refusing sidecar names.

    Returns:
        Tuple of (relative path, absolute object path).

    Raises:
        InvalidKeyError: If the key is invalid or ends with the reserved
            sidecar extension.
    """
    relpath = resolve_path(key)
    path = root / relpath
    if is_reserved(path):
        raise _invalid(key, f"extension {ATTRS_EXT!r} is reserved")
    return relpath, path


def is_valid_key(key: str) -> bool:
    """Return True if ``key`` resolves to a usable object path."""
    try:
        relpath = resolve_path(key)
    except InvalidKeyError:
        return False
    return not is_reserved(relpath)

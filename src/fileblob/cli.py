"""fileblob CLI - inspect and edit a local bucket from the shell.

Usage:
    python -m fileblob [--root DIR] ls [--prefix P] [--page-size N]
    python -m fileblob [--root DIR] cat KEY [--offset N] [--length N]
    python -m fileblob [--root DIR] put KEY [FILE] [--content-type T] [--meta K=V ...]
    python -m fileblob [--root DIR] stat KEY
    python -m fileblob [--root DIR] rm KEY

The root defaults to FILEBLOB_ROOT_DIR.

Exit codes:
    0: Success
    1: Object not found / storage error
    2: Usage or configuration error (including invalid keys)
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import shutil
import sys
from typing import Any, BinaryIO

from fileblob.bucket import FileBucket, open_bucket
from fileblob.config import ConfigError
from fileblob.errors import InvalidArgumentError, InvalidKeyError, ObjectStorageError
from fileblob.models import ListOptions, WriterOptions
from fileblob.observability import configure_tracing

logger = logging.getLogger(__name__)

_COPY_CHUNK_SIZE = 64 * 1024


def _output_json(data: dict[str, Any]) -> None:
    """Output JSON to stdout with deterministic ordering."""
    print(json.dumps(data, sort_keys=True, indent=2))


def _error(message: str) -> None:
    print(f"fileblob: {message}", file=sys.stderr)


def _parse_metadata(pairs: list[str]) -> dict[str, str]:
    """Parse repeated K=V arguments into a metadata mapping."""
    metadata: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise InvalidArgumentError(f"metadata must be KEY=VALUE, got {pair!r}")
        k, v = pair.split("=", 1)
        metadata[k] = v
    return metadata


def cmd_ls(bucket: FileBucket, args: argparse.Namespace) -> int:
    """List objects one per line: key, size, modification time."""
    if args.page_size is not None:
        page = bucket.list_paged(ListOptions(prefix=args.prefix, page_size=args.page_size))
        objects = page.objects
    else:
        objects = list(bucket.list_all(prefix=args.prefix))
    for obj in objects:
        print(f"{obj.key}\t{obj.size}\t{obj.mod_time.isoformat()}")
    return 0


def cmd_cat(bucket: FileBucket, args: argparse.Namespace) -> int:
    """Copy object bytes to stdout."""
    out = sys.stdout.buffer
    with bucket.new_range_reader(args.key, args.offset, args.length) as reader:
        shutil.copyfileobj(reader, out, _COPY_CHUNK_SIZE)
    out.flush()
    return 0


def _open_source(path: str | None) -> contextlib.AbstractContextManager[BinaryIO]:
    """Open FILE for reading, or pass stdin through without closing it."""
    if path:
        return open(path, "rb")
    return contextlib.nullcontext(sys.stdin.buffer)


def cmd_put(bucket: FileBucket, args: argparse.Namespace) -> int:
    """Store FILE (or stdin) under KEY.

    The source is opened before the writer so a bad path leaves any
    existing object untouched.
    """
    opts = WriterOptions(metadata=_parse_metadata(args.meta) or None)
    with _open_source(args.file) as src:
        with bucket.new_typed_writer(args.key, args.content_type, opts) as writer:
            shutil.copyfileobj(src, writer, _COPY_CHUNK_SIZE)
    logger.info("Stored %s", args.key)
    return 0


def cmd_stat(bucket: FileBucket, args: argparse.Namespace) -> int:
    """Print object attributes as JSON."""
    attrs = bucket.attributes(args.key)
    data = attrs.to_dict()
    data["key"] = args.key
    _output_json(data)
    return 0


def cmd_rm(bucket: FileBucket, args: argparse.Namespace) -> int:
    """Delete an object and its attributes."""
    bucket.delete(args.key)
    logger.info("Deleted %s", args.key)
    return 0


COMMAND_DISPATCH = {
    "ls": cmd_ls,
    "cat": cmd_cat,
    "put": cmd_put,
    "stat": cmd_stat,
    "rm": cmd_rm,
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="fileblob",
        description="fileblob - local filesystem object storage",
    )
    parser.add_argument(
        "--root",
        metavar="DIR",
        default=None,
        help="Bucket root directory (default: $FILEBLOB_ROOT_DIR)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    ls_parser = subparsers.add_parser("ls", help="List objects in the bucket root")
    ls_parser.add_argument("--prefix", default="", help="Only list keys with this prefix")
    ls_parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        metavar="N",
        help="Print only the first page of N objects",
    )

    cat_parser = subparsers.add_parser("cat", help="Write object contents to stdout")
    cat_parser.add_argument("key")
    cat_parser.add_argument("--offset", type=int, default=0, metavar="N")
    cat_parser.add_argument(
        "--length",
        type=int,
        default=-1,
        metavar="N",
        help="Bytes to read (default: to end of object)",
    )

    put_parser = subparsers.add_parser("put", help="Store a file or stdin as an object")
    put_parser.add_argument("key")
    put_parser.add_argument("file", nargs="?", default=None, help="Input file (default: stdin)")
    put_parser.add_argument(
        "--content-type",
        default="application/octet-stream",
        help="MIME type to record (default: application/octet-stream)",
    )
    put_parser.add_argument(
        "--meta",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="User metadata entry; may be repeated",
    )

    stat_parser = subparsers.add_parser("stat", help="Print object attributes as JSON")
    stat_parser.add_argument("key")

    rm_parser = subparsers.add_parser("rm", help="Delete an object")
    rm_parser.add_argument("key")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Exit codes:
        0: Success
        1: Object not found / storage error
        2: Usage or configuration error
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        configure_tracing()
        bucket = open_bucket(args.root)
        return COMMAND_DISPATCH[args.command](bucket, args)
    except (ConfigError, InvalidKeyError, InvalidArgumentError) as e:
        _error(str(e))
        return 2
    except ObjectStorageError as e:
        _error(str(e))
        return 1
    except OSError as e:
        _error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())

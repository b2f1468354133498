"""Tests for paged listing.

Covers:
- Sorted, flat listing that hides sidecar files
- Prefix filtering on raw names
- Page tokens: ceil(N/P) pages, no duplicates or omissions
"""

from __future__ import annotations

import math
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from fileblob.bucket import FileBucket
from fileblob.errors import InvalidArgumentError
from fileblob.lister import list_paged
from fileblob.models import DEFAULT_PAGE_SIZE, ListOptions
from fileblob.paths import ATTRS_EXT


def _collect_pages(bucket: FileBucket, page_size: int, prefix: str = "") -> list[list[str]]:
    pages: list[list[str]] = []
    token: bytes | None = None
    while True:
        page = bucket.list_paged(ListOptions(prefix=prefix, page_token=token, page_size=page_size))
        pages.append([obj.key for obj in page.objects])
        if page.next_page_token is None:
            return pages
        token = page.next_page_token


class TestListing:
    """Tests for single-page listings."""

    def test_empty_root(self, bucket: FileBucket) -> None:
        """An empty root lists nothing and has no next page."""
        page = bucket.list_paged()

        assert page.objects == []
        assert page.next_page_token is None

    def test_sorted_and_sidecars_hidden(
        self, bucket: FileBucket, put: Callable[..., None]
    ) -> None:
        """Objects come back sorted by name and sidecar files never appear."""
        for key in ["delta", "alpha", "charlie", "bravo"]:
            put(key, key.encode(), "text/plain")

        page = bucket.list_paged()

        assert [obj.key for obj in page.objects] == ["alpha", "bravo", "charlie", "delta"]
        assert all(not obj.key.endswith(ATTRS_EXT) for obj in page.objects)

    def test_sizes_and_times(self, bucket: FileBucket, put: Callable[..., None]) -> None:
        """Each summary carries the payload size and an aware modification time."""
        put("five", b"12345")

        (obj,) = bucket.list_paged().objects

        assert obj.key == "five"
        assert obj.size == 5
        assert obj.mod_time.tzinfo is not None

    def test_external_files_listed(self, bucket: FileBucket, root_dir: Path) -> None:
        """Files placed directly in the root are listed even without a sidecar."""
        (root_dir / "external.csv").write_text("a,b\n", encoding="utf-8")

        assert [obj.key for obj in bucket.list_paged().objects] == ["external.csv"]

    def test_listing_is_flat(self, bucket: FileBucket, put: Callable[..., None]) -> None:
        """Nested keys are not walked; their top-level directory is a single entry."""
        put("top.txt", b"t")
        put("nested/inner.txt", b"i")
        put("nested/deeper/leaf.txt", b"l")

        keys = [obj.key for obj in bucket.list_paged().objects]

        assert keys == ["nested", "top.txt"]

    def test_default_page_size(self, bucket: FileBucket, root_dir: Path) -> None:
        """Page size 0 means the default page size."""
        for i in range(DEFAULT_PAGE_SIZE + 1):
            (root_dir / f"obj{i:05d}").write_bytes(b"")

        page = bucket.list_paged(ListOptions(page_size=0))

        assert len(page.objects) == DEFAULT_PAGE_SIZE
        assert page.next_page_token == f"obj{DEFAULT_PAGE_SIZE:05d}".encode()

    def test_negative_page_size_rejected(self, bucket: FileBucket) -> None:
        """Negative page sizes are invalid."""
        with pytest.raises(InvalidArgumentError):
            bucket.list_paged(ListOptions(page_size=-1))

    def test_list_function_matches_bucket(
        self, bucket: FileBucket, root_dir: Path, put: Callable[..., None]
    ) -> None:
        """The bucket method is a thin wrapper over list_paged."""
        put("a", b"1")

        assert list_paged(root_dir).objects == bucket.list_paged().objects

    def test_sidecar_staging_file_hidden(
        self,
        root_dir: Path,
        put: Callable[..., None],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """The temporary file used to stage a sidecar never shows up in a listing."""
        listed: list[list[str]] = []
        real_replace = Path.replace

        def list_then_replace(self: Path, target: Any) -> Path:
            listed.append([obj.key for obj in list_paged(root_dir).objects])
            return real_replace(self, target)

        monkeypatch.setattr(Path, "replace", list_then_replace)

        put("k", b"v", "text/plain")

        assert listed == [["k"]]


class TestPrefix:
    """Tests for prefix filtering."""

    def test_prefix_filters_raw_names(self, bucket: FileBucket, put: Callable[..., None]) -> None:
        """Only names beginning with the prefix are returned."""
        for key in ["img-1.png", "img-2.png", "doc-1.pdf", "img", "im"]:
            put(key, b"x")

        page = bucket.list_paged(ListOptions(prefix="img"))

        assert [obj.key for obj in page.objects] == ["img", "img-1.png", "img-2.png"]

    def test_prefix_without_matches(self, bucket: FileBucket, put: Callable[..., None]) -> None:
        put("a", b"x")

        assert bucket.list_paged(ListOptions(prefix="zzz")).objects == []


class TestPagination:
    """Tests for page tokens."""

    @pytest.mark.parametrize(("count", "page_size"), [(1, 1), (5, 2), (6, 3), (7, 10), (10, 1)])
    def test_pages_cover_everything_once(
        self, bucket: FileBucket, put: Callable[..., None], count: int, page_size: int
    ) -> None:
        """N objects at page size P give ceil(N/P) sorted pages without gaps or repeats."""
        keys = [f"key-{i:03d}" for i in range(count)]
        for key in reversed(keys):
            put(key, b"v")

        pages = _collect_pages(bucket, page_size)

        assert len(pages) == math.ceil(count / page_size)
        for page in pages:
            assert page == sorted(page)
            assert len(page) <= page_size
        flattened = [key for page in pages for key in page]
        assert flattened == keys

    def test_pagination_with_prefix(self, bucket: FileBucket, put: Callable[..., None]) -> None:
        """Prefix and page token combine."""
        for key in ["a1", "a2", "a3", "b1", "b2"]:
            put(key, b"v")

        pages = _collect_pages(bucket, 2, prefix="a")

        assert pages == [["a1", "a2"], ["a3"]]

    def test_token_is_first_unconsumed_name(
        self, bucket: FileBucket, put: Callable[..., None]
    ) -> None:
        """The next page token names the first entry of the next page."""
        for key in ["a", "b", "c"]:
            put(key, b"v")

        page = bucket.list_paged(ListOptions(page_size=2))

        assert page.next_page_token == b"c"

    def test_token_for_removed_entry(self, bucket: FileBucket, put: Callable[..., None]) -> None:
        """A token naming a deleted object resumes at the next name."""
        for key in ["a", "b", "c", "d"]:
            put(key, b"v")
        page = bucket.list_paged(ListOptions(page_size=2))
        assert page.next_page_token == b"c"

        bucket.delete("c")
        rest = bucket.list_paged(ListOptions(page_token=page.next_page_token, page_size=2))

        assert [obj.key for obj in rest.objects] == ["d"]
        assert rest.next_page_token is None

    def test_list_all_follows_tokens(self, bucket: FileBucket, put: Callable[..., None]) -> None:
        """list_all yields every object across pages."""
        keys = [f"k{i}" for i in range(7)]
        for key in keys:
            put(key, b"v")

        assert [obj.key for obj in bucket.list_all(page_size=3)] == keys

"""Tests for the directory stack engine using an in-memory lister."""

import asyncio
import stat
from types import SimpleNamespace

import pytest

from aiowalkdir.core import DirectoryStack, Filtering, WalkEntry


class MockListing:
    """Listing over a fixed list of raw records."""

    def __init__(self, path, records):
        self.path = path
        self.records = iter(records)


class MockLister:
    """In-memory listing collaborator.

    ``tree`` maps a directory path to a list of (name, is_dir) pairs.
    Paths in the error sets fail the matching operation.
    """

    def __init__(self, tree, open_errors=(), stat_errors=(), read_errors=()):
        self.tree = tree
        self.open_errors = set(open_errors)
        self.stat_errors = set(stat_errors)
        self.read_errors = set(read_errors)
        self.opened = []
        self.closed = []
        self.lstat_calls = 0

    async def open(self, path):
        await asyncio.sleep(0)
        path = str(path)
        if path in self.open_errors:
            raise PermissionError(13, "Permission denied", path)
        if path not in self.tree:
            raise FileNotFoundError(2, "No such file or directory", path)
        self.opened.append(path)
        records = [
            SimpleNamespace(name=name, path=f"{path}/{name}", is_dir=is_dir)
            for name, is_dir in self.tree[path]
        ]
        return MockListing(path, records)

    async def read(self, listing):
        await asyncio.sleep(0)
        if listing.path in self.read_errors:
            raise OSError(5, "Input/output error", listing.path)
        return next(listing.records, None)

    async def lstat(self, raw):
        self.lstat_calls += 1
        await asyncio.sleep(0)
        if raw.path in self.stat_errors:
            raise FileNotFoundError(2, "No such file or directory", raw.path)
        mode = (stat.S_IFDIR | 0o755) if raw.is_dir else (stat.S_IFREG | 0o644)
        return SimpleNamespace(st_mode=mode, st_size=0, st_mtime=0.0)

    async def stat(self, raw, follow_symlinks=True):
        return await self.lstat(raw)

    def close(self, listing):
        self.closed.append(listing.path)


async def run_engine(lister, filter_fn=None, root="/r"):
    """Step the engine to completion, returning (items, stack)."""
    stack = DirectoryStack(lister, await lister.open(root))
    items = []
    while True:
        item = await stack.step(filter_fn)
        if item is None:
            return items, stack
        items.append(item)


def describe(items):
    """Entries as path strings, errors as their type name."""
    return [
        type(item).__name__ if isinstance(item, OSError) else str(item.path)
        for item in items
    ]


@pytest.fixture
def tree():
    """
    Structure:
        /r
        ├── a
        ├── d
        │   ├── x
        │   └── e
        │       └── y
        └── b
    """
    return {
        "/r": [("a", False), ("d", True), ("b", False)],
        "/r/d": [("x", False), ("e", True)],
        "/r/d/e": [("y", False)],
    }


class TestTraversalOrder:

    @pytest.mark.asyncio
    async def test_depth_first_pre_order(self, tree):
        items, stack = await run_engine(MockLister(tree))

        assert describe(items) == ["/r/a", "/r/d", "/r/d/x", "/r/d/e", "/r/d/e/y", "/r/b"]
        assert stack.depth == 0
        assert stack.exhausted

    @pytest.mark.asyncio
    async def test_listings_closed_deepest_first(self, tree):
        lister = MockLister(tree)
        await run_engine(lister)

        assert lister.closed == ["/r/d/e", "/r/d", "/r"]

    @pytest.mark.asyncio
    async def test_step_after_finish_returns_none(self, tree):
        items, stack = await run_engine(MockLister(tree))
        assert await stack.step() is None

    @pytest.mark.asyncio
    async def test_depth_follows_descent(self, tree):
        lister = MockLister(tree)
        stack = DirectoryStack(lister, await lister.open("/r"))

        assert stack.depth == 1
        await stack.step()  # a
        assert stack.depth == 1
        await stack.step()  # d, pushed
        assert stack.depth == 2
        await stack.step()  # x
        await stack.step()  # e, pushed
        assert len(stack) == 3


class TestVerdicts:

    @pytest.mark.asyncio
    async def test_ignore_hides_but_descends(self, tree):
        def ignore_d(entry):
            return Filtering.IGNORE if str(entry.path) == "/r/d" else Filtering.CONTINUE

        items, _ = await run_engine(MockLister(tree), ignore_d)
        assert describe(items) == ["/r/a", "/r/d/x", "/r/d/e", "/r/d/e/y", "/r/b"]

    @pytest.mark.asyncio
    async def test_ignore_dir_prunes_without_opening(self, tree):
        def prune_d(entry):
            return Filtering.IGNORE_DIR if str(entry.path) == "/r/d" else Filtering.CONTINUE

        lister = MockLister(tree)
        items, _ = await run_engine(lister, prune_d)

        assert describe(items) == ["/r/a", "/r/b"]
        assert lister.opened == ["/r"]

    @pytest.mark.asyncio
    async def test_filter_called_once_per_entry_in_discovery_order(self, tree):
        calls = []

        async def record(entry):
            calls.append(str(entry.path))
            await asyncio.sleep(0)
            return Filtering.IGNORE

        items, _ = await run_engine(MockLister(tree), record)

        assert items == []
        assert calls == ["/r/a", "/r/d", "/r/d/x", "/r/d/e", "/r/d/e/y", "/r/b"]

    @pytest.mark.asyncio
    async def test_non_verdict_raises_type_error(self, tree):
        lister = MockLister(tree)
        stack = DirectoryStack(lister, await lister.open("/r"))

        with pytest.raises(TypeError):
            await stack.step(lambda entry: True)


class TestErrors:

    @pytest.mark.asyncio
    async def test_read_error_abandons_listing(self, tree):
        lister = MockLister(tree, read_errors={"/r/d"})
        items, _ = await run_engine(lister)

        assert describe(items) == ["/r/a", "/r/d", "OSError", "/r/b"]
        assert "/r/d" in lister.closed

    @pytest.mark.asyncio
    async def test_read_error_on_root_listing_ends_walk(self, tree):
        lister = MockLister(tree, read_errors={"/r"})
        items, stack = await run_engine(lister)

        assert describe(items) == ["OSError"]
        assert stack.depth == 0

    @pytest.mark.asyncio
    async def test_classification_error_skips_entry(self, tree):
        lister = MockLister(tree, stat_errors={"/r/d"})
        items, _ = await run_engine(lister)

        assert describe(items) == ["/r/a", "FileNotFoundError", "/r/b"]
        assert lister.opened == ["/r"]

    @pytest.mark.asyncio
    async def test_open_error_reports_then_yields_directory(self, tree):
        lister = MockLister(tree, open_errors={"/r/d"})
        items, _ = await run_engine(lister)

        assert describe(items) == ["/r/a", "PermissionError", "/r/d", "/r/b"]

    @pytest.mark.asyncio
    async def test_open_error_with_ignore_reports_only_error(self, tree):
        def ignore_dirs(entry):
            return Filtering.IGNORE if entry.name in ("d", "e") else Filtering.CONTINUE

        lister = MockLister(tree, open_errors={"/r/d"})
        items, _ = await run_engine(lister, ignore_dirs)

        assert describe(items) == ["/r/a", "PermissionError", "/r/b"]

    @pytest.mark.asyncio
    async def test_nested_open_error_resumes_parent(self, tree):
        lister = MockLister(tree, open_errors={"/r/d/e"})
        items, _ = await run_engine(lister)

        assert describe(items) == ["/r/a", "/r/d", "/r/d/x", "PermissionError", "/r/d/e", "/r/b"]


class TestClose:

    @pytest.mark.asyncio
    async def test_close_releases_all_listings(self, tree):
        lister = MockLister(tree)
        stack = DirectoryStack(lister, await lister.open("/r"))
        for _ in range(4):
            await stack.step()
        assert stack.depth == 3

        stack.close()

        assert stack.depth == 0
        assert lister.closed == ["/r/d/e", "/r/d", "/r"]
        assert await stack.step() is None

    @pytest.mark.asyncio
    async def test_close_drops_pending_entry(self, tree):
        lister = MockLister(tree, open_errors={"/r/d"})
        stack = DirectoryStack(lister, await lister.open("/r"))
        await stack.step()  # a
        assert isinstance(await stack.step(), PermissionError)

        stack.close()

        assert stack.exhausted
        assert await stack.step() is None


class TestEntryIdentity:

    @pytest.mark.asyncio
    async def test_yielded_entry_type_is_cached(self, tree):
        lister = MockLister(tree)
        stack = DirectoryStack(lister, await lister.open("/r"))

        entry = await stack.step()
        assert isinstance(entry, WalkEntry)
        calls = lister.lstat_calls
        first = await entry.file_type()
        second = await entry.file_type()

        assert first is second
        assert lister.lstat_calls == calls

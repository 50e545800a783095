"""Directory listing adapter backed by ``os.scandir``.

The engine only needs three operations from a listing collaborator:
open a directory, read its next member, close it. This module provides
them on top of ``os.scandir`` with every blocking call off-loaded through
``run_blocking``.
"""

import asyncio
import logging
import os
import threading
from concurrent.futures import Executor
from pathlib import Path
from typing import Iterator, Optional, Union

from .blocking import run_blocking

logger = logging.getLogger(__name__)


class DirectoryListing:
    """One open directory listing handle.

    Wraps the iterator returned by ``os.scandir``. Reading and opening are
    blocking; callers are expected to run them through ``ScandirLister``.
    Reads and ``close`` hold the same lock, so a read still running in a
    worker thread finishes before the handle is closed.
    """

    def __init__(self, path: Path, iterator: Iterator[os.DirEntry]):
        self.path = path
        self._iterator = iterator
        self._closed = False
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: Union[str, Path]) -> 'DirectoryListing':
        """Open ``path`` for listing (blocking).

        Raises:
            OSError: If the directory cannot be opened
        """
        path = Path(path)
        return cls(path, os.scandir(path))

    def next_entry(self) -> Optional[os.DirEntry]:
        """Return the next member, or None once the listing is exhausted.

        Blocking. An ``OSError`` raised by the underlying read propagates;
        ``os.scandir`` closes its iterator when that happens, so the next
        call reports exhaustion.
        """
        with self._lock:
            if self._closed:
                return None
            try:
                return next(self._iterator)
            except StopIteration:
                self._close_locked()
                return None

    def close(self) -> None:
        """Release the handle. Safe to call more than once.

        Blocks until a read in progress on another thread returns.
        """
        with self._lock:
            self._close_locked()

    def _close_locked(self) -> None:
        if self._closed:
            return
        self._closed = True
        close = getattr(self._iterator, 'close', None)
        if close is not None:
            close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        state = 'closed' if self._closed else 'open'
        return f"DirectoryListing({self.path}, {state})"


def _close_abandoned(task: 'asyncio.Future[DirectoryListing]') -> None:
    """Close a listing whose opener was cancelled before receiving it."""
    if task.cancelled() or task.exception() is not None:
        return
    listing = task.result()
    listing.close()
    logger.debug("Closed abandoned listing for %s", listing.path)


class ScandirLister:
    """Async listing collaborator used by the directory stack engine.

    Args:
        executor: Optional executor for blocking calls (defaults to the
            event loop's thread pool)
    """

    def __init__(self, executor: Optional[Executor] = None):
        self.executor = executor

    async def open(self, path: Union[str, Path]) -> DirectoryListing:
        """Open a listing for ``path`` without blocking the event loop.

        If the caller is cancelled while the worker is still opening, the
        listing is closed as soon as the worker hands it back.
        """
        task = asyncio.ensure_future(
            run_blocking(DirectoryListing.open, path, executor=self.executor)
        )
        try:
            listing = await asyncio.shield(task)
        except asyncio.CancelledError:
            task.add_done_callback(_close_abandoned)
            raise
        logger.debug("Opened listing for %s", listing.path)
        return listing

    async def read(self, listing: DirectoryListing) -> Optional[os.DirEntry]:
        """Read the next raw member from ``listing``."""
        return await run_blocking(listing.next_entry, executor=self.executor)

    async def lstat(self, entry: os.DirEntry) -> os.stat_result:
        """Unfollowed stat of a raw member, cached by ``os.DirEntry``."""
        return await run_blocking(_lstat_entry, entry, executor=self.executor)

    async def stat(self, entry: os.DirEntry, follow_symlinks: bool = True) -> os.stat_result:
        """Stat of a raw member, following symlinks when asked."""
        if follow_symlinks:
            return await run_blocking(entry.stat, executor=self.executor)
        return await self.lstat(entry)

    def close(self, listing: DirectoryListing) -> None:
        listing.close()
        logger.debug("Closed listing for %s", listing.path)


def _lstat_entry(entry: os.DirEntry) -> os.stat_result:
    return entry.stat(follow_symlinks=False)

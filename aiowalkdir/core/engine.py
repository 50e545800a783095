"""Directory stack engine.

Drives a depth-first walk one step at a time. The engine owns a stack of
open directory listings: the bottom is the root listing, the top is the
deepest directory currently being read. Each step reads from the top,
pushes a listing when it descends and pops one when a listing runs dry,
so backtracking needs no native recursion.
"""

import logging
from typing import Any, List, Optional, Union

from .entry import WalkEntry
from .filtering import FilterFn, Filtering, resolve_verdict

logger = logging.getLogger(__name__)

StepResult = Union[WalkEntry, OSError]


class DirectoryStack:
    """Stack of open listings plus the step function that advances it.

    Args:
        lister: Listing adapter (see ``adapters.scandir.ScandirLister``)
        root_listing: Already opened listing of the walk root
    """

    def __init__(self, lister: Any, root_listing: Any):
        self._lister = lister
        self._listings: List[Any] = [root_listing]
        # Entry held back while an error about it is reported first
        self._pending: Optional[WalkEntry] = None

    def __len__(self) -> int:
        return len(self._listings)

    @property
    def depth(self) -> int:
        """Number of open listings, i.e. the current traversal depth."""
        return len(self._listings)

    @property
    def exhausted(self) -> bool:
        return not self._listings and self._pending is None

    async def step(self, filter_fn: Optional[FilterFn] = None) -> Optional[StepResult]:
        """Advance the walk until there is something to report.

        Discarded entries never return control to the caller; the loop
        keeps going until an entry passes the filter, an error occurs, or
        the stack is empty.

        Args:
            filter_fn: Filter consulted once per classified entry

        Returns:
            The next entry to yield, an ``OSError`` to report, or None when
            the walk is finished

        Raises:
            TypeError: If the filter returns something other than a verdict
        """
        if self._pending is not None:
            entry, self._pending = self._pending, None
            return entry

        while self._listings:
            top = self._listings[-1]
            try:
                raw = await self._lister.read(top)
            except OSError as e:
                # Abandon the listing so a handle that does not advance
                # past a failing record cannot loop forever.
                logger.debug("Read failed in %s: %s", getattr(top, 'path', top), e)
                self._pop()
                return e

            if raw is None:
                self._pop()
                continue

            entry = WalkEntry(raw, self._lister)
            try:
                file_type = await entry.file_type()
            except OSError as e:
                logger.debug("Cannot classify %s: %s", entry.path, e)
                return e

            verdict = await resolve_verdict(filter_fn, entry)

            if file_type.is_dir() and verdict is not Filtering.IGNORE_DIR:
                try:
                    listing = await self._lister.open(entry.path)
                except OSError as e:
                    logger.debug("Cannot descend into %s: %s", entry.path, e)
                    if verdict is Filtering.CONTINUE:
                        self._pending = entry
                    return e
                self._listings.append(listing)
                logger.debug("Descended into %s (depth %d)", entry.path, len(self._listings))

            if verdict is Filtering.CONTINUE:
                return entry

        return None

    def close(self) -> None:
        """Close every open listing, deepest first."""
        while self._listings:
            self._pop()
        self._pending = None

    def _pop(self) -> None:
        listing = self._listings.pop()
        self._lister.close(listing)

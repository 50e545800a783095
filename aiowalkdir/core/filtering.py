"""Filtering protocol for directory walks.

A filter is called once per discovered entry and answers with a
``Filtering`` verdict. Yield and descent are decided independently:

    CONTINUE    yield the entry, descend if it is a directory
    IGNORE      skip the entry, still descend if it is a directory
    IGNORE_DIR  skip the entry and, if a directory, its whole subtree

Filters may be plain callables or coroutine functions.
"""

import inspect
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from ..config import FilterConfig
from .entry import WalkEntry


class Filtering(Enum):
    """Verdict returned by a filter for one entry."""
    CONTINUE = "continue"
    IGNORE = "ignore"
    IGNORE_DIR = "ignore_dir"


FilterResult = Union[Filtering, Awaitable[Filtering]]
FilterFn = Callable[[WalkEntry], FilterResult]


async def resolve_verdict(filter_fn: Optional[FilterFn], entry: WalkEntry) -> Filtering:
    """Ask ``filter_fn`` for the verdict on ``entry``.

    Args:
        filter_fn: Filter callable, or None to accept everything
        entry: Entry under consideration

    Returns:
        The verdict; ``Filtering.CONTINUE`` when there is no filter

    Raises:
        TypeError: If the filter answers with something other than a verdict
    """
    if filter_fn is None:
        return Filtering.CONTINUE

    verdict = filter_fn(entry)
    if inspect.isawaitable(verdict):
        verdict = await verdict

    if not isinstance(verdict, Filtering):
        raise TypeError(
            f"Filter must return a Filtering verdict, got {type(verdict).__name__}"
        )
    return verdict


class PatternFilter:
    """Glob and hidden-name based filter.

    Uses composition with ``FilterConfig`` for the actual settings.
    Hidden and excluded entries are pruned with ``IGNORE_DIR``; files that
    miss the include patterns are skipped with ``IGNORE``.
    """

    def __init__(self, config: Optional[FilterConfig] = None):
        self.config = config or FilterConfig()
        self.config.validate()

    async def __call__(self, entry: WalkEntry) -> Filtering:
        path = entry.path

        if not self.config.include_hidden and entry.name.startswith('.'):
            return Filtering.IGNORE_DIR

        # Exclusion takes precedence
        for pattern in self.config.exclude_patterns:
            if path.match(pattern):
                return Filtering.IGNORE_DIR

        if not self.config.include_patterns and not self.config.files_only:
            return Filtering.CONTINUE

        file_type = await entry.file_type()
        if file_type.is_dir():
            return Filtering.IGNORE if self.config.files_only else Filtering.CONTINUE

        if self.config.include_patterns:
            if any(path.match(pattern) for pattern in self.config.include_patterns):
                return Filtering.CONTINUE
            return Filtering.IGNORE

        return Filtering.CONTINUE

    def __repr__(self) -> str:
        return f"PatternFilter({self.config!r})"


def skip_hidden(entry: WalkEntry) -> Filtering:
    """Filter pruning every entry whose name starts with '.'."""
    if entry.name.startswith('.'):
        return Filtering.IGNORE_DIR
    return Filtering.CONTINUE

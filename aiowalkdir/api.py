"""High-level async API for aiowalkdir.

Simple functions for common walk operations. They consume a ``WalkDir``
to the end and route every error item to an ``ErrorPolicy``
(``FailFastPolicy`` unless told otherwise). Each accepts an optional
``executor`` for the blocking filesystem calls.
"""

from concurrent.futures import Executor
from pathlib import Path
from typing import AsyncIterator, Dict, List, Optional, Union

from .core.entry import FileType, WalkEntry
from .core.filtering import FilterFn
from .error_policies import ErrorPolicy, FailFastPolicy
from .walker import WalkDir


async def iter_entries(
    root: Union[str, Path],
    filter: Optional[FilterFn] = None,
    policy: Optional[ErrorPolicy] = None,
    executor: Optional[Executor] = None,
) -> AsyncIterator[WalkEntry]:
    """Walk ``root`` yielding entries only.

    Args:
        root: Directory to walk
        filter: Optional filter deciding yield and descent
        policy: Error policy for error items (FailFastPolicy if None)
        executor: Optional executor for blocking calls

    Yields:
        WalkEntry objects in depth-first pre-order
    """
    policy = policy or FailFastPolicy()
    async with WalkDir(root, filter, executor=executor) as walk:
        while True:
            item = await walk.pull()
            if item is None:
                return
            if isinstance(item, OSError):
                await policy.handle(item)
                continue
            yield item


async def collect_paths(
    root: Union[str, Path],
    filter: Optional[FilterFn] = None,
    policy: Optional[ErrorPolicy] = None,
    executor: Optional[Executor] = None,
) -> List[Path]:
    """Collect the paths of every entry below ``root``.

    Returns:
        Sorted list of paths (the walk itself is unordered)
    """
    paths = [entry.path async for entry in iter_entries(root, filter, policy, executor)]
    paths.sort()
    return paths


async def find_files(
    root: Union[str, Path],
    pattern: str = '*',
    filter: Optional[FilterFn] = None,
    policy: Optional[ErrorPolicy] = None,
    executor: Optional[Executor] = None,
) -> List[WalkEntry]:
    """Find regular files matching a glob pattern.

    Args:
        root: Directory to search
        pattern: Glob pattern matched against each file path
        filter: Optional filter applied during the walk
        policy: Error policy for error items
        executor: Optional executor for blocking calls

    Returns:
        Matching file entries in walk order
    """
    matches = []
    async for entry in iter_entries(root, filter, policy, executor):
        if entry.path.match(pattern) and (await entry.file_type()).is_file():
            matches.append(entry)
    return matches


async def find_directories(
    root: Union[str, Path],
    pattern: str = '*',
    filter: Optional[FilterFn] = None,
    policy: Optional[ErrorPolicy] = None,
    executor: Optional[Executor] = None,
) -> List[WalkEntry]:
    """Find directories matching a glob pattern."""
    matches = []
    async for entry in iter_entries(root, filter, policy, executor):
        if entry.path.match(pattern) and (await entry.file_type()).is_dir():
            matches.append(entry)
    return matches


async def count_entries(
    root: Union[str, Path],
    filter: Optional[FilterFn] = None,
    policy: Optional[ErrorPolicy] = None,
    executor: Optional[Executor] = None,
) -> Dict[str, int]:
    """Count entries below ``root`` by file type.

    Returns:
        Dictionary keyed by ``FileType`` value plus a 'total' key
    """
    counts = {file_type.value: 0 for file_type in FileType}
    counts['total'] = 0
    async for entry in iter_entries(root, filter, policy, executor):
        counts[(await entry.file_type()).value] += 1
        counts['total'] += 1
    return counts


async def calculate_size(
    root: Union[str, Path],
    filter: Optional[FilterFn] = None,
    policy: Optional[ErrorPolicy] = None,
    executor: Optional[Executor] = None,
) -> int:
    """Total size in bytes of the regular files below ``root``.

    Symlinks are not followed, so linked files are not counted.
    """
    total = 0
    async for entry in iter_entries(root, filter, policy, executor):
        if (await entry.file_type()).is_file():
            st = await entry.stat(follow_symlinks=False)
            total += st.st_size
    return total

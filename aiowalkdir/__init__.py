"""aiowalkdir - Asynchronous recursive directory walking.

Walk a directory tree depth-first from an asyncio program without
blocking the event loop, deciding per entry what is yielded and what is
descended into:

    from aiowalkdir import WalkDir, Filtering

    async def no_build_dirs(entry):
        if entry.name == 'build':
            return Filtering.IGNORE_DIR
        return Filtering.CONTINUE

    async for entry in WalkDir('src').with_filter(no_build_dirs):
        print(entry.path)
"""

__version__ = "0.1.0"

from .config import FilterConfig
from .core import (
    FileType,
    WalkEntry,
    Filtering,
    FilterFn,
    PatternFilter,
    skip_hidden,
)
from .walker import WalkDir, WalkState, walk_dir
from .error_policies import (
    ErrorPolicy,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    ThresholdPolicy,
)
from .api import (
    iter_entries,
    collect_paths,
    find_files,
    find_directories,
    count_entries,
    calculate_size,
)

__all__ = [
    "__version__",
    # Walk
    'WalkDir',
    'WalkState',
    'walk_dir',
    # Entries
    'WalkEntry',
    'FileType',
    # Filtering
    'Filtering',
    'FilterFn',
    'FilterConfig',
    'PatternFilter',
    'skip_hidden',
    # Error policies
    'ErrorPolicy',
    'FailFastPolicy',
    'ContinueOnErrorsPolicy',
    'CollectErrorsPolicy',
    'ThresholdPolicy',
    # High-level API
    'iter_entries',
    'collect_paths',
    'find_files',
    'find_directories',
    'count_entries',
    'calculate_size',
]

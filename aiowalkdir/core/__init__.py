"""Core abstractions for async directory walks.

Entries, the filtering protocol and the directory stack engine.
"""

from .entry import FileType, WalkEntry
from .filtering import (
    Filtering,
    FilterFn,
    PatternFilter,
    resolve_verdict,
    skip_hidden,
)
from .engine import DirectoryStack, StepResult

__all__ = [
    # Entry
    'FileType',
    'WalkEntry',
    # Filtering
    'Filtering',
    'FilterFn',
    'PatternFilter',
    'resolve_verdict',
    'skip_hidden',
    # Engine
    'DirectoryStack',
    'StepResult',
]

"""Filesystem collaborators used by the walk engine."""

from .blocking import run_blocking
from .scandir import DirectoryListing, ScandirLister

__all__ = [
    'run_blocking',
    'DirectoryListing',
    'ScandirLister',
]

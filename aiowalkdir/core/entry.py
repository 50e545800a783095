"""Entries produced by a directory walk.

A ``WalkEntry`` is handed both to the filter and to the consumer. Its path
is known without I/O; its file type and stat data are fetched lazily
through the listing adapter so the event loop is not blocked.
"""

import os
import stat as stat_module  # To avoid name collision with stat results
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class FileType(Enum):
    """Classification of a directory member, symlinks not followed."""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> 'FileType':
        """Classify an ``st_mode`` taken from an unfollowed stat."""
        if stat_module.S_ISLNK(mode):
            return cls.SYMLINK
        if stat_module.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat_module.S_ISREG(mode):
            return cls.FILE
        return cls.OTHER

    def is_file(self) -> bool:
        return self is FileType.FILE

    def is_dir(self) -> bool:
        return self is FileType.DIRECTORY

    def is_symlink(self) -> bool:
        return self is FileType.SYMLINK


class WalkEntry:
    """One filesystem member discovered during a walk.

    The object is shared: the filter receives the same instance the
    consumer later gets, so metadata fetched by the filter is reused.

    Args:
        raw: Raw member record (``os.DirEntry``) from the listing
        lister: Listing adapter used for off-loaded stat calls
    """

    __slots__ = ('_raw', '_lister', '_path', '_file_type')

    def __init__(self, raw: os.DirEntry, lister: Any):
        self._raw = raw
        self._lister = lister
        self._path = Path(raw.path)
        self._file_type: Optional[FileType] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def name(self) -> str:
        return self._raw.name

    async def file_type(self) -> FileType:
        """Get the file type of this entry without following symlinks.

        The first call performs an ``lstat`` in the worker pool; later
        calls return the cached classification.

        Returns:
            FileType of the entry

        Raises:
            OSError: If the entry cannot be stat'ed (e.g. removed meanwhile)
        """
        if self._file_type is None:
            st = await self._lister.lstat(self._raw)
            self._file_type = FileType.from_mode(st.st_mode)
        return self._file_type

    async def stat(self, follow_symlinks: bool = True) -> os.stat_result:
        """Stat the entry in the worker pool.

        Raises:
            OSError: If the stat call fails (broken symlink, removed entry)
        """
        return await self._lister.stat(self._raw, follow_symlinks=follow_symlinks)

    async def metadata(self) -> Dict[str, Any]:
        """Get basic metadata for the entry.

        Returns:
            Dictionary with path, name, type, size, modified_time and mode
        """
        st = await self.stat(follow_symlinks=False)
        file_type = await self.file_type()
        return {
            'path': str(self._path),
            'name': self.name,
            'type': file_type.value,
            'size': st.st_size,
            'modified_time': st.st_mtime,
            'mode': st.st_mode,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WalkEntry):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __fspath__(self) -> str:
        return str(self._path)

    def __repr__(self) -> str:
        return f"WalkEntry({self._path})"

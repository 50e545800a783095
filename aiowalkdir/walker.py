"""Asynchronous recursive directory walk.

``WalkDir`` is a pull-based stream over the entries below a root
directory. It is a small state machine::

    START --open root--> WALKING --stack empty--> DONE
      |                                            ^
      +--------- root cannot be opened ------------+

Nothing touches the filesystem until the first pull. Entries come out in
depth-first pre-order; within one directory the order is whatever the
operating system lists, not sorted. The root itself is never yielded.

Example:
    >>> async with WalkDir('/some/dir').with_filter(skip_hidden) as walk:
    ...     async for entry in walk:
    ...         print(entry.path)
"""

import logging
from concurrent.futures import Executor
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .adapters.scandir import ScandirLister
from .core.engine import DirectoryStack, StepResult
from .core.entry import WalkEntry
from .core.filtering import FilterFn

logger = logging.getLogger(__name__)


class WalkState(Enum):
    """Lifecycle of a walk session. Only ever moves forward."""
    START = "start"
    WALKING = "walking"
    DONE = "done"


class WalkDir:
    """Stream of ``WalkEntry`` objects from recursively walking ``root``.

    Errors do not end the walk (except failing to open the root). With
    ``pull()`` they arrive as ``OSError`` items; with ``async for`` they
    are raised from ``__anext__``, and the caller may catch them and keep
    pulling.

    Args:
        root: Directory to walk
        filter: Optional filter deciding yield and descent per entry
        executor: Optional executor for blocking filesystem calls
    """

    def __init__(
        self,
        root: Union[str, Path],
        filter: Optional[FilterFn] = None,
        *,
        executor: Optional[Executor] = None,
    ):
        self._root = Path(root)
        self._filter = filter
        self._executor = executor
        self._lister = ScandirLister(executor=executor)
        self._state = WalkState.START
        self._stack: Optional[DirectoryStack] = None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def state(self) -> WalkState:
        return self._state

    @property
    def depth(self) -> int:
        """Number of directory listings currently open."""
        return self._stack.depth if self._stack is not None else 0

    def with_filter(self, filter: FilterFn) -> 'WalkDir':
        """Return a new walk over the same root using ``filter``.

        Filters do not compose: the new walk uses only ``filter``.
        """
        return WalkDir(self._root, filter, executor=self._executor)

    async def pull(self) -> Optional[StepResult]:
        """Produce the next item of the walk.

        Returns:
            A ``WalkEntry``, an ``OSError`` describing a failure, or None
            once the walk is over (and on every call after that)
        """
        if self._state is WalkState.DONE:
            return None

        if self._state is WalkState.START:
            try:
                root_listing = await self._lister.open(self._root)
            except OSError as e:
                logger.debug("Cannot open walk root %s: %s", self._root, e)
                self._state = WalkState.DONE
                return e
            self._stack = DirectoryStack(self._lister, root_listing)
            self._state = WalkState.WALKING

        try:
            result = await self._stack.step(self._filter)
        except Exception:
            await self.aclose()
            raise

        if result is None:
            self._finish()
        return result

    async def aclose(self) -> None:
        """Stop the walk and release every open listing."""
        self._finish()

    def _finish(self) -> None:
        if self._stack is not None:
            self._stack.close()
            self._stack = None
        self._state = WalkState.DONE

    def __aiter__(self) -> 'WalkDir':
        return self

    async def __anext__(self) -> WalkEntry:
        result = await self.pull()
        if result is None:
            raise StopAsyncIteration
        if isinstance(result, OSError):
            raise result
        return result

    async def __aenter__(self) -> 'WalkDir':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def __repr__(self) -> str:
        return f"WalkDir({self._root}, state={self._state.value})"


def walk_dir(
    root: Union[str, Path],
    filter: Optional[FilterFn] = None,
    *,
    executor: Optional[Executor] = None,
) -> WalkDir:
    """Create a ``WalkDir`` over ``root``. No I/O happens until pulled."""
    return WalkDir(root, filter, executor=executor)

"""Bridge from blocking filesystem calls to asyncio.

Every call that can block on disk (opening a listing, reading the next
member, stat) goes through ``run_blocking`` so the event loop keeps
scheduling other work while the call runs in a worker thread.
"""

import asyncio
import functools
from concurrent.futures import Executor
from typing import Any, Callable, Optional, TypeVar

T = TypeVar('T')


async def run_blocking(
    func: Callable[..., T],
    *args: Any,
    executor: Optional[Executor] = None,
) -> T:
    """Run ``func(*args)`` in a worker and await its result.

    Args:
        func: Blocking callable
        *args: Positional arguments for ``func``
        executor: Optional executor; the loop's default thread pool
            (via ``asyncio.to_thread``) is used when None

    Returns:
        Whatever ``func`` returns. Exceptions raised by ``func`` propagate.
    """
    if executor is None:
        return await asyncio.to_thread(func, *args)

    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, functools.partial(func, *args))

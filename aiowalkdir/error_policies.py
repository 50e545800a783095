"""
Error handling policies for aiowalkdir.

A walk reports filesystem failures as items instead of raising them. The
policies in this module decide, at the consumer side, what to do with
those items: stop, log and continue, or collect them for later.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def error_path(error: OSError) -> Optional[Path]:
    """Path an ``OSError`` refers to, if it carries one."""
    if error.filename is None:
        return None
    return Path(error.filename)


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for errors reported by
    a walk.
    """

    @abstractmethod
    async def handle(self, error: OSError) -> None:
        """
        Handle an error reported by the walk.

        Args:
            error: The error item produced by the walk

        Raises:
            Any exception to stop consuming the walk. Returning normally
            means the walk continues.
        """


class FailFastPolicy(ErrorPolicy):
    """
    Policy that immediately re-raises any error, stopping the walk.

    This is the default behavior. Useful when partial results are not
    acceptable.
    """

    async def handle(self, error: OSError) -> None:
        """Re-raise the error immediately."""
        raise error


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that collects all errors without logging.

    Useful for gathering every error and presenting them at the end.
    """

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []
        self.skipped_paths: List[Path] = []

    async def handle(self, error: OSError) -> None:
        """Silently record the error."""
        self._record(error)

    def _record(self, error: OSError) -> Optional[Path]:
        path = error_path(error)
        self.errors.append({
            'path': path,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        })
        if path is not None:
            self.skipped_paths.append(path)
        return path

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'permission_errors': sum(1 for e in self.errors if e['error_type'] == 'PermissionError'),
            'not_found_errors': sum(1 for e in self.errors if e['error_type'] == 'FileNotFoundError'),
            'skipped_paths': len(self.skipped_paths),
            'errors': self.errors,
        }


class ContinueOnErrorsPolicy(CollectErrorsPolicy):
    """
    Policy that logs errors and continues the walk.

    Errors are collected for later inspection like ``CollectErrorsPolicy``
    and, when verbose, logged as warnings.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for every error
        """
        super().__init__()
        self.verbose = verbose

    async def handle(self, error: OSError) -> None:
        path = self._record(error)
        if not self.verbose:
            return
        if isinstance(error, PermissionError):
            logger.warning("Skipping inaccessible path '%s': %s", path, error)
        else:
            logger.warning("Error walking '%s': %s", path, error)


class ThresholdPolicy(ErrorPolicy):
    """
    Policy that tolerates errors up to a threshold, then fails.

    Useful when some errors are expected but too many indicate
    a systemic problem that should halt processing.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
            verbose: If True, log a warning for each tolerated error
        """
        self.max_errors = max_errors
        self.error_count = 0
        self.verbose = verbose
        self.errors: List[OSError] = []

    async def handle(self, error: OSError) -> None:
        """Tolerate the error while under the threshold, otherwise raise."""
        self.error_count += 1
        self.errors.append(error)

        if self.error_count > self.max_errors:
            raise RuntimeError(f"Error threshold exceeded ({self.max_errors} errors)") from error

        if self.verbose:
            logger.warning(
                "[%d/%d] Error walking '%s': %s",
                self.error_count, self.max_errors, error_path(error), error,
            )

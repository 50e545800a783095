"""Configuration for aiowalkdir filters.

Walks themselves need nothing beyond a root path; this module holds the
settings for the ready-made pattern filter.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class FilterConfig:
    """Settings for ``PatternFilter``.

    Attributes:
        include_patterns: Glob patterns a file must match to be yielded.
            Empty means every file is yielded. Directories are never
            rejected by include patterns, so matches deeper down are found.
        exclude_patterns: Glob patterns whose matches are pruned entirely
            (not yielded, not descended). Exclusion takes precedence.
        include_hidden: Whether names starting with '.' are walked
        files_only: Whether directories are hidden from the output (they
            are still descended)
    """
    include_patterns: List[str] = field(default_factory=list)
    exclude_patterns: List[str] = field(default_factory=list)
    include_hidden: bool = False
    files_only: bool = False

    def validate(self) -> None:
        """Check the configuration.

        Raises:
            ValueError: If a pattern is empty
        """
        for pattern in self.include_patterns + self.exclude_patterns:
            if not pattern:
                raise ValueError("Filter patterns must be non-empty strings")

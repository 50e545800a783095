#!/usr/bin/env python3
"""
Basic async walk example.

This example demonstrates:
- Walking a directory without blocking the event loop
- Pruning hidden directories with a filter
- Reporting unreadable paths and carrying on
"""

import asyncio
import sys
from pathlib import Path

from aiowalkdir import Filtering, WalkDir


async def skip_dot_dirs(entry):
    """Do not recurse into directories whose name starts with '.'."""
    if entry.name.startswith('.'):
        return Filtering.IGNORE_DIR
    return Filtering.CONTINUE


async def main():
    """Walk a directory and print a summary."""
    root_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()

    print(f"Walking: {root_path}")
    print("-" * 50)

    file_count = 0
    dir_count = 0
    total_size = 0
    errors = 0

    async with WalkDir(root_path).with_filter(skip_dot_dirs) as walk:
        while True:
            item = await walk.pull()
            if item is None:
                break
            if isinstance(item, OSError):
                errors += 1
                print(f"  error: {item}", file=sys.stderr)
                continue

            file_type = await item.file_type()
            if file_type.is_dir():
                dir_count += 1
            elif file_type.is_file():
                file_count += 1
                total_size += (await item.stat(follow_symlinks=False)).st_size

    print(f"\nWalk Summary:")
    print(f"  Directories: {dir_count:,}")
    print(f"  Files: {file_count:,}")
    print(f"  Total Size: {total_size / 1024 / 1024:.1f} MB")
    print(f"  Errors: {errors:,}")


if __name__ == "__main__":
    asyncio.run(main())

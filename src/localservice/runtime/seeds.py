"""Seed file resolution."""

from __future__ import annotations

import glob
import os
from pathlib import Path

from ..errors import SeedResolutionError


def split_patterns(value: str) -> list[str]:
    """Split a comma-separated pattern list, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


def resolve_seed_files(value: str, cwd: str | Path) -> list[Path]:
    """Expand comma-separated glob patterns relative to ``cwd``.

    Hidden files are matched and ``**`` recurses. Results are de-duplicated and
    sorted; directories are ignored.

    Args:
        value: Comma-separated glob patterns.
        cwd: Directory relative patterns are resolved against.

    Returns:
        Sorted list of absolute file paths.

    Raises:
        SeedResolutionError: If no file matches.
    """
    patterns = split_patterns(value)
    base = Path(cwd)
    matches: set[Path] = set()

    for pattern in patterns:
        full_pattern = pattern if os.path.isabs(pattern) else str(base / pattern)
        for match in glob.glob(full_pattern, recursive=True, include_hidden=True):
            path = Path(match)
            if path.is_file():
                matches.add(path.resolve())

    if not matches:
        raise SeedResolutionError(
            message=f"No files matched seed pattern(s): {', '.join(patterns) or value!r}",
            patterns=patterns,
        )
    return sorted(matches)

# MirrorSync Path Utilities
# Directory creation and exclude-pattern matching

import fnmatch
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating it and any missing parents.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.

    Raises:
        FileExistsError: If path or one of its parents is an existing file.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def matches_pattern(name: str, pattern: str) -> bool:
    """
    Check if an entry name matches an exclude pattern.

    Patterns are shell globs (*, ?, [seq]) applied to a single path
    component; a pattern containing "/" never matches.

    Args:
        name: Entry name, e.g. "notes.swp".
        pattern: Glob pattern, e.g. "*.swp".

    Returns:
        True if name matches pattern.
    """
    if "/" in pattern:
        return False
    return fnmatch.fnmatchcase(name, pattern)


def matches_any_pattern(name: str, patterns: list[str]) -> bool:
    """Check if an entry name matches any of the given patterns."""
    return any(matches_pattern(name, p) for p in patterns)

# MirrorSync Utilities Module
# Helper functions for path handling

from mirrorsync.utils.paths import ensure_dir, matches_any_pattern, matches_pattern

__all__ = [
    "ensure_dir",
    "matches_pattern",
    "matches_any_pattern",
]

# MirrorSync Path Utility Tests
# Tests for directory creation and exclude patterns

from pathlib import Path

import pytest

from mirrorsync.utils.paths import ensure_dir, matches_any_pattern, matches_pattern


class TestEnsureDir:
    """Tests for ensure_dir."""

    def test_creates_parents(self, temp_dir: Path):
        target = temp_dir / "a" / "b" / "c"
        assert ensure_dir(target) == target
        assert target.is_dir()

    def test_existing(self, temp_dir: Path):
        assert ensure_dir(temp_dir) == temp_dir

    def test_file_in_the_way(self, temp_dir: Path):
        (temp_dir / "file").write_text("x")
        with pytest.raises(FileExistsError):
            ensure_dir(temp_dir / "file")


class TestPatterns:
    """Tests for exclude pattern matching."""

    @pytest.mark.parametrize(
        "name,pattern,expected",
        [
            ("notes.swp", "*.swp", True),
            ("notes.txt", "*.swp", False),
            (".git", ".git", True),
            ("backup~", "*~", True),
            ("a1", "a?", True),
            ("README", "readme", False),
            ("a", "dir/a", False),
        ],
    )
    def test_matches_pattern(self, name: str, pattern: str, expected: bool):
        assert matches_pattern(name, pattern) is expected

    def test_matches_any(self):
        assert matches_any_pattern(".DS_Store", ["*.tmp", ".DS_Store"])
        assert not matches_any_pattern("keep.txt", ["*.tmp", ".DS_Store"])
        assert not matches_any_pattern("keep.txt", [])

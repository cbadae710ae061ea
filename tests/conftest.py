# MirrorSync Test Fixtures
# Pytest fixtures and fakes shared by the test suite

import functools
import io
import tempfile
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pytest
import yaml

from mirrorsync.handlers.base import FunctionHandler
from mirrorsync.sync.entry import Container, Leaf, Locator

T0 = datetime(2020, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_leaf(path: str, content: bytes = b"test", modified_at: datetime = T0) -> Leaf:
    """Create a leaf with in-memory content."""
    return Leaf(
        locator=Locator(path=path),
        modified_at=modified_at,
        producer=functools.partial(io.BytesIO, content),
    )


def make_container(path: str) -> Container:
    """Create a container for a bare path."""
    return Container(Locator(path=path))


def tree_lookup(tree: dict, missing: Optional[set] = None):
    """
    Build a lookup over an in-memory tree.

    tree maps a container path to the children its handler pushes;
    containers whose path is in missing have no handler.
    """
    missing = missing or set()

    def expand(entry, sink):
        for child in tree.get(entry.locator.path, []):
            if isinstance(child, BaseException):
                sink.put_error(child)
            else:
                sink.put_child(child)

    handler = FunctionHandler(expand, name="tree")

    def lookup(entry):
        if entry.locator.path in missing:
            return None
        return handler

    return lookup


class RecordingSink:
    """Stand-in for ExpansionSink that records what a handler pushes."""

    def __init__(self) -> None:
        self.children: list = []
        self.errors: list = []

    @property
    def closed(self) -> bool:
        return False

    def put_child(self, entry) -> None:
        self.children.append(entry)

    def put_error(self, error) -> None:
        self.errors.append(error)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("MIRRORSYNC_CONFIG", raising=False)
    return home


@pytest.fixture
def sink() -> RecordingSink:
    """Create a recording sink."""
    return RecordingSink()


@pytest.fixture
def sample_config(temp_home: Path) -> dict:
    """Create sample configuration dict."""
    return {
        "destination": str(temp_home / "mirror"),
        "sync": {
            "handler_timeout": 30,
            "exclude": ["*.tmp"],
        },
        "tumblr": {
            "api_host": "https://api.tumblr.com/",
            "api_key": "key",
            "blogs": ["staff", "engineering"],
            "page_size": 20,
        },
        "output": {"verbose": False, "colored": False},
    }


@pytest.fixture
def config_file(temp_home: Path, sample_config: dict) -> Path:
    """Create a configuration file."""
    config_dir = temp_home / ".config" / "mirrorsync"
    config_dir.mkdir(parents=True)
    config_path = config_dir / "config.yaml"

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config, f, default_flow_style=False)

    return config_path

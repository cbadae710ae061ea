# MirrorSync Local Handler
# Expands local directories (bare paths and file:// locators)

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from mirrorsync.handlers.base import Handler
from mirrorsync.sync.entry import Container, Leaf
from mirrorsync.sync.expansion import ExpansionSink
from mirrorsync.utils.paths import matches_any_pattern

logger = logging.getLogger(__name__)


def _opener(path: Path):
    return lambda: open(path, "rb")


class LocalHandler(Handler):
    """
    Handler for directories on the local file system.

    Sub-directories become containers and regular files become leaves,
    in name order. Symbolic links to directories are not followed.
    """

    name = "local"

    def __init__(self, exclude: Optional[list[str]] = None):
        """
        Initialize handler.

        Args:
            exclude: Glob patterns matched against entry names to skip.
        """
        self.exclude = list(exclude or [])

    def expand(self, entry: Container, sink: ExpansionSink) -> None:
        directory = Path(entry.locator.path or ".")

        try:
            children = sorted(os.scandir(directory), key=lambda d: d.name)
        except OSError as e:
            sink.put_error(e)
            return

        for child in children:
            if self.exclude and matches_any_pattern(child.name, self.exclude):
                logger.debug("Excluded %s", child.path)
                continue

            locator = entry.locator.child(child.name)
            try:
                if child.is_dir(follow_symlinks=False):
                    sink.put_child(Container(locator))
                elif child.is_file():
                    st = child.stat()
                    sink.put_child(
                        Leaf(
                            locator=locator,
                            modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
                            producer=_opener(Path(child.path)),
                        )
                    )
            except OSError as e:
                sink.put_error(e)

    def describe(self) -> str:
        if self.exclude:
            return f"local directories (excluding {', '.join(self.exclude)})"
        return "local directories"

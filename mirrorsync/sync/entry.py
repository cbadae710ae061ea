# MirrorSync Entries
# Locators and the Container/Leaf entries flowing through a sync run

import posixpath
import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Union
from urllib.parse import urlsplit, urlunsplit

from mirrorsync.errors import InvalidLocatorError

ContentProducer = Callable[[], BinaryIO]

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*:")


@dataclass(frozen=True)
class Locator:
    """
    Hierarchical address of an entry.

    Identifies an entry remotely and, once a leaf has been rebased,
    its location on the local file system.
    """

    scheme: str = ""
    host: str = ""
    path: str = ""

    @classmethod
    def parse(cls, raw: str) -> "Locator":
        """
        Parse a locator string.

        Args:
            raw: URL-like string, e.g. "https://api.tumblr.com/staff", or a
                file system path such as "/tmp/data", taken literally.

        Returns:
            Parsed Locator.

        Raises:
            InvalidLocatorError: If the string is not a valid locator.
        """
        if any(ord(c) < 0x20 or ord(c) == 0x7F for c in raw):
            raise InvalidLocatorError(f"Invalid control character in locator: {raw!r}", locator=raw)
        if raw.startswith(":"):
            raise InvalidLocatorError(f"Missing scheme in locator: {raw!r}", locator=raw)
        if not _SCHEME.match(raw):
            # Without a scheme the whole string is a literal file system path
            return cls(path=raw)
        if _BAD_ESCAPE.search(raw):
            raise InvalidLocatorError(f"Invalid escape in locator: {raw!r}", locator=raw)

        try:
            parts = urlsplit(raw)
            # port is validated lazily by urllib
            parts.port
        except ValueError as e:
            raise InvalidLocatorError(f"Invalid locator {raw!r}: {e}", locator=raw) from e

        return cls(scheme=parts.scheme, host=parts.netloc, path=parts.path)

    def child(self, name: str) -> "Locator":
        """Return the locator one path segment below this one."""
        base = self.path.rstrip("/")
        return replace(self, path=f"{base}/{name.strip('/')}")

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.host, self.path, "", ""))


@dataclass(frozen=True)
class Container:
    """An entry that must be expanded by a handler before it yields content."""

    locator: Locator

    def __str__(self) -> str:
        return str(self.locator)


@dataclass(frozen=True)
class Leaf:
    """
    A directly downloadable entry.

    The producer is called lazily, at most once, to open a readable
    binary stream with the entry's content.
    """

    locator: Locator
    modified_at: datetime
    producer: ContentProducer

    @property
    def local_path(self) -> Path:
        """Locator path as a file system path."""
        return Path(self.locator.path)

    def rebase(self, destination_root: Union[str, Path]) -> "Leaf":
        """
        Return a copy of this leaf located under destination_root.

        The remote path becomes a relative path below the destination;
        ".." segments are resolved first so the result cannot leave it.
        """
        relative = posixpath.normpath("/" + self.locator.path).lstrip("/")
        local_path = Path(destination_root) / relative
        return replace(self, locator=replace(self.locator, path=str(local_path)))

    def read_bytes(self) -> bytes:
        """Invoke the producer and read the whole content."""
        with self.producer() as stream:
            return stream.read()

    def __str__(self) -> str:
        return str(self.locator)


Entry = Union[Container, Leaf]

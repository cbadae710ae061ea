# MirrorSync Handler Base
# Contract every source-specific handler implements

from abc import ABC, abstractmethod
from collections.abc import Callable

from mirrorsync.sync.entry import Container
from mirrorsync.sync.expansion import ExpansionSink


class Handler(ABC):
    """
    Expands one container into its children.

    expand() runs on its own thread, once per container. It may push any
    number of containers, leaves and errors to the sink, in any order,
    and must return in finite time. Returning signals completion.
    """

    name: str = "handler"

    @abstractmethod
    def expand(self, entry: Container, sink: ExpansionSink) -> None:
        """
        Expand a container.

        Args:
            entry: Container to expand.
            sink: Channel for discovered children and per-child errors.
        """

    def describe(self) -> str:
        """Short human-readable label."""
        return self.name

    def close(self) -> None:
        """Release resources held by the handler."""


class FunctionHandler(Handler):
    """Adapts a plain function (entry, sink) -> None to the Handler contract."""

    def __init__(self, func: Callable[[Container, ExpansionSink], None], name: str = ""):
        self.func = func
        self.name = name or getattr(func, "__name__", "function")

    def expand(self, entry: Container, sink: ExpansionSink) -> None:
        self.func(entry, sink)

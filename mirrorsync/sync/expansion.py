# MirrorSync Expansion Channel
# Hand-off between a running handler and the traversal engine

from __future__ import annotations

import logging
import queue
import threading
from typing import TYPE_CHECKING, Union

from mirrorsync.errors import ExpansionClosed
from mirrorsync.sync.entry import Container, Entry, Locator

if TYPE_CHECKING:
    from mirrorsync.handlers.base import Handler

logger = logging.getLogger(__name__)

# Marks the end of one expansion on the channel
DONE = object()

ExpansionItem = Union[Entry, BaseException]


class ExpansionSink:
    """
    Channel a handler pushes children and errors into.

    Children and errors share one queue of capacity 1, so the engine
    sees them in exactly the order the handler produced them and the
    handler blocks until the engine is ready for the next item.
    Once closed, any further push raises ExpansionClosed.
    """

    def __init__(self, locator: Locator, *, poll_interval: float = 0.05):
        self.locator = locator
        self.poll_interval = poll_interval
        self._queue: queue.Queue = queue.Queue(maxsize=1)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        """Check if the engine stopped listening."""
        return self._closed.is_set()

    def put_child(self, entry: Entry) -> None:
        """Push a Container or Leaf discovered while expanding."""
        self._put(entry)

    def put_error(self, error: BaseException) -> None:
        """Push a per-child error."""
        self._put(error)

    def finish(self) -> None:
        """Signal that the handler is done."""
        self._put(DONE)

    def close(self) -> None:
        """Stop accepting items; a blocked handler is released with ExpansionClosed."""
        self._closed.set()

    def receive(self, timeout: float) -> object:
        """
        Take the next item pushed by the handler.

        Raises:
            queue.Empty: If nothing arrived within timeout.
        """
        return self._queue.get(timeout=timeout)

    def _put(self, item: object) -> None:
        while True:
            if self._closed.is_set():
                raise ExpansionClosed(f"Expansion of {self.locator} is closed", locator=str(self.locator))
            try:
                self._queue.put(item, timeout=self.poll_interval)
                return
            except queue.Full:
                continue


def run_expansion(handler: Handler, container: Container, sink: ExpansionSink) -> None:
    """
    Execute one handler expansion and signal completion on the sink.

    An exception escaping the handler is pushed as an error before
    completion is signalled.
    """
    try:
        handler.expand(container, sink)
    except ExpansionClosed:
        logger.debug("Expansion of %s abandoned", container)
        return
    except Exception as e:
        logger.debug("Handler for %s raised %r", container, e)
        try:
            sink.put_error(e)
        except ExpansionClosed:
            return

    try:
        sink.finish()
    except ExpansionClosed:
        logger.debug("Expansion of %s closed before completion", container)


def start_expansion(handler: Handler, container: Container, sink: ExpansionSink) -> threading.Thread:
    """Run a handler on its own daemon thread."""
    worker = threading.Thread(
        target=run_expansion,
        args=(handler, container, sink),
        name=f"expand:{container}",
        daemon=True,
    )
    worker.start()
    return worker

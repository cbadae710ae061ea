# MirrorSync Traversal Engine
# Worklist-driven expansion of a remote tree into local files

from __future__ import annotations

import logging
import queue
import threading
import time
from collections import deque
from collections.abc import Callable, Iterator
from contextlib import closing
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from mirrorsync.errors import HandlerTimeoutError, NoHandlerError
from mirrorsync.sync.entry import Container, Leaf, Locator
from mirrorsync.sync.expansion import DONE, ExpansionItem, ExpansionSink, start_expansion
from mirrorsync.sync.writer import WriteOutcome, write_local

if TYPE_CHECKING:
    from mirrorsync.handlers.base import Handler

logger = logging.getLogger(__name__)

Lookup = Callable[[Container], Optional["Handler"]]


class EventType(str, Enum):
    """Kinds of events reported by a sync run."""

    SYNCED = "synced"
    ERROR = "error"


@dataclass
class SyncEvent:
    """
    One entry in the audit stream of a sync run.

    SYNCED events carry the rebased leaf and whether bytes were written;
    ERROR events carry the error and the locator it concerns.
    """

    event_type: EventType
    locator: Optional[Locator] = None
    entry: Optional[Leaf] = None
    outcome: Optional[WriteOutcome] = None
    error: Optional[BaseException] = None

    @classmethod
    def synced(cls, entry: Leaf, outcome: WriteOutcome) -> SyncEvent:
        return cls(EventType.SYNCED, locator=entry.locator, entry=entry, outcome=outcome)

    @classmethod
    def failed(cls, error: BaseException, locator: Optional[Locator] = None) -> SyncEvent:
        return cls(EventType.ERROR, locator=locator, error=error)

    @property
    def is_error(self) -> bool:
        """Check if this event reports an error."""
        return self.event_type == EventType.ERROR


@dataclass
class SyncResult:
    """Collected outcome of a complete sync run."""

    synced: list[Leaf] = field(default_factory=list)
    errors: list[BaseException] = field(default_factory=list)
    written: int = 0
    skipped: int = 0
    cancelled: bool = False

    @property
    def success(self) -> bool:
        """Check if the run finished without errors."""
        return not self.errors and not self.cancelled

    @property
    def total(self) -> int:
        """Number of leaves reported as synced."""
        return len(self.synced)

    def add(self, event: SyncEvent) -> None:
        """Record one event."""
        if event.is_error:
            self.errors.append(event.error)
            return
        self.synced.append(event.entry)
        if event.outcome == WriteOutcome.WRITTEN:
            self.written += 1
        else:
            self.skipped += 1


class SyncEngine:
    """
    Traversal engine.

    Drives a FIFO worklist of containers. Each container is expanded by
    the handler the lookup returns, on its own thread; containers it
    yields are appended to the end of the worklist, leaves are rebased
    under the destination and written locally.
    """

    def __init__(
        self,
        destination: Union[str, Path],
        lookup: Lookup,
        *,
        cancel: Optional[threading.Event] = None,
        handler_timeout: Optional[float] = None,
        poll_interval: float = 0.05,
    ):
        """
        Initialize sync engine.

        Args:
            destination: Local root every leaf is rebased under.
            lookup: Maps a container to the handler able to expand it, or None.
            cancel: Optional event; setting it stops the run.
            handler_timeout: Optional limit in seconds on waiting for a single expansion.
            poll_interval: How often blocked waits re-check cancellation.
        """
        self.destination = destination
        self.lookup = lookup
        self.cancel = cancel or threading.Event()
        self.handler_timeout = handler_timeout
        self.poll_interval = poll_interval

    @property
    def cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self.cancel.is_set()

    def run(self, root: Container) -> Iterator[SyncEvent]:
        """
        Traverse everything reachable from root.

        Args:
            root: Container seeding the worklist.

        Yields:
            SyncEvent for every synced leaf and every error, in order.
        """
        worklist: deque[Container] = deque([root])

        try:
            while worklist:
                if self.cancelled:
                    logger.info("Sync cancelled with %d container(s) pending", len(worklist))
                    return

                todo = worklist.popleft()
                handler = self.lookup(todo)
                if handler is None:
                    logger.warning("No handler for %s", todo)
                    yield SyncEvent.failed(NoHandlerError(str(todo.locator)), todo.locator)
                    continue

                logger.debug("Expanding %s", todo)
                with closing(self._expand(handler, todo)) as items:
                    for item in items:
                        if isinstance(item, Container):
                            worklist.append(item)
                        elif isinstance(item, Leaf):
                            yield self._write(item)
                        elif isinstance(item, BaseException):
                            yield SyncEvent.failed(item, todo.locator)
                        else:
                            error = TypeError(f"Handler for {todo} produced {type(item).__name__}")
                            yield SyncEvent.failed(error, todo.locator)
        except GeneratorExit:
            self.cancel.set()
            raise

    def _expand(self, handler: Handler, container: Container) -> Iterator[ExpansionItem]:
        """Run one handler and yield what it pushes until it completes."""
        sink = ExpansionSink(container.locator, poll_interval=self.poll_interval)
        start_expansion(handler, container, sink)

        # Only time spent waiting on the handler counts against the timeout,
        # not time spent writing leaves or in the consumer between items.
        waited = 0.0

        try:
            while True:
                if self.cancelled:
                    return

                wait = self.poll_interval
                if self.handler_timeout is not None:
                    remaining = self.handler_timeout - waited
                    if remaining <= 0:
                        logger.warning("Handler for %s timed out", container)
                        yield HandlerTimeoutError(str(container.locator), self.handler_timeout)
                        return
                    wait = min(wait, remaining)

                started = time.monotonic()
                try:
                    item = sink.receive(wait)
                except queue.Empty:
                    continue
                finally:
                    waited += time.monotonic() - started

                if item is DONE:
                    return
                yield item
        finally:
            sink.close()

    def _write(self, leaf: Leaf) -> SyncEvent:
        """Rebase a leaf under the destination and write it."""
        rebased = leaf.rebase(self.destination)
        try:
            outcome = write_local(rebased)
        except Exception as e:
            logger.warning("Failed to write %s: %s", rebased.local_path, e)
            return SyncEvent.failed(e, rebased.locator)
        return SyncEvent.synced(rebased, outcome)


def sync(
    source_root: str,
    destination_root: Union[str, Path],
    lookup: Lookup,
    *,
    cancel: Optional[threading.Event] = None,
    handler_timeout: Optional[float] = None,
) -> Iterator[SyncEvent]:
    """
    Mirror everything reachable from source_root into destination_root.

    The source locator is parsed before anything runs; a malformed one
    is the only fatal error. Everything else is reported as an ERROR
    event and traversal continues.

    Args:
        source_root: Locator string of the root container.
        destination_root: Local directory leaves are written under.
        lookup: Maps a container to its handler, or None.
        cancel: Optional event that stops the run when set.
        handler_timeout: Optional limit in seconds on waiting for a single expansion.

    Returns:
        Iterator of SyncEvents.

    Raises:
        InvalidLocatorError: If source_root cannot be parsed.
    """
    root = Container(Locator.parse(source_root))
    engine = SyncEngine(destination_root, lookup, cancel=cancel, handler_timeout=handler_timeout)
    return engine.run(root)


def run_sync(
    source_root: str,
    destination_root: Union[str, Path],
    lookup: Lookup,
    *,
    cancel: Optional[threading.Event] = None,
    handler_timeout: Optional[float] = None,
    on_event: Optional[Callable[[SyncEvent], None]] = None,
) -> SyncResult:
    """
    Run sync to completion and collect the outcome.

    Args:
        source_root: Locator string of the root container.
        destination_root: Local directory leaves are written under.
        lookup: Maps a container to its handler, or None.
        cancel: Optional event that stops the run when set.
        handler_timeout: Optional limit in seconds on waiting for a single expansion.
        on_event: Optional callback invoked for every event as it arrives.

    Returns:
        SyncResult with synced leaves and errors.
    """
    result = SyncResult()
    for event in sync(source_root, destination_root, lookup, cancel=cancel, handler_timeout=handler_timeout):
        result.add(event)
        if on_event is not None:
            on_event(event)
    if cancel is not None and cancel.is_set():
        result.cancelled = True
    return result

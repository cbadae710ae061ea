"""mirrorsync - incrementally mirror remote, hierarchical content to local storage.

A handler expands a locator into containers and downloadable leaves;
leaves are written to disk only when they are new or newer than the
local copy.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "Locator",
    "Container",
    "Leaf",
    "WriteOutcome",
    "write_local",
    "SyncEngine",
    "SyncEvent",
    "SyncResult",
    "EventType",
    "sync",
    "run_sync",
    "Handler",
    "HandlerRegistry",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("Locator", "Container", "Leaf"):
        from mirrorsync.sync import entry

        return getattr(entry, name)
    if name in ("WriteOutcome", "write_local"):
        from mirrorsync.sync import writer

        return getattr(writer, name)
    if name in ("SyncEngine", "SyncEvent", "SyncResult", "EventType", "sync", "run_sync"):
        from mirrorsync.sync import engine

        return getattr(engine, name)
    if name == "Handler":
        from mirrorsync.handlers.base import Handler

        return Handler
    if name == "HandlerRegistry":
        from mirrorsync.handlers.registry import HandlerRegistry

        return HandlerRegistry
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

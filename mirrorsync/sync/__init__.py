# MirrorSync Sync Module
# Traversal engine, entries and local writer

from mirrorsync.sync.engine import EventType, SyncEngine, SyncEvent, SyncResult, run_sync, sync
from mirrorsync.sync.entry import Container, Entry, Leaf, Locator
from mirrorsync.sync.expansion import ExpansionSink
from mirrorsync.sync.writer import WriteOutcome, is_newer, write_local

__all__ = [
    # Entries
    "Locator",
    "Container",
    "Leaf",
    "Entry",
    # Writer
    "WriteOutcome",
    "write_local",
    "is_newer",
    # Expansion
    "ExpansionSink",
    # Engine
    "SyncEngine",
    "SyncEvent",
    "SyncResult",
    "EventType",
    "sync",
    "run_sync",
]

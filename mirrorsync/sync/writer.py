# MirrorSync Local Writer
# Writes leaves to disk when they are new or newer than the local copy

import logging
import os
import shutil
import stat
from datetime import datetime
from enum import Enum
from typing import Optional

from mirrorsync.sync.entry import Leaf
from mirrorsync.utils.paths import ensure_dir

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 64 * 1024
NS_PER_SECOND = 1_000_000_000


class WriteOutcome(str, Enum):
    """What write_local did with a leaf."""

    WRITTEN = "written"
    SKIPPED = "skipped"


def _to_ns(moment: datetime) -> int:
    return int(round(moment.timestamp() * 1_000_000)) * 1_000


def is_newer(modified_at: datetime, local_mtime_ns: Optional[int]) -> bool:
    """
    Check whether a remote timestamp is strictly after a local one.

    Compared at full precision. A local time on an exact second may have
    been truncated by the file system, so a remote time within that same
    second does not count as newer.

    Args:
        modified_at: Remote modification time.
        local_mtime_ns: Local modification time in nanoseconds, or None if absent.

    Returns:
        True if the leaf should be written.
    """
    if local_mtime_ns is None:
        return True
    remote_ns = _to_ns(modified_at)
    if remote_ns <= local_mtime_ns:
        return False
    truncated = local_mtime_ns % NS_PER_SECOND == 0
    return not (truncated and remote_ns // NS_PER_SECOND == local_mtime_ns // NS_PER_SECOND)


def write_local(leaf: Leaf) -> WriteOutcome:
    """
    Write a rebased leaf to its local path.

    The leaf is written if no local file exists or if its modification
    time is strictly after the local one; otherwise it is skipped.
    Parent directories are created as needed. After copying, access and
    modification times are set to the leaf's timestamp and the file is
    synced to disk. A failed copy may leave a partial file behind.

    Args:
        leaf: Leaf whose locator already points at the local destination.

    Returns:
        WriteOutcome.WRITTEN or WriteOutcome.SKIPPED.

    Raises:
        IsADirectoryError: If the destination is an existing directory.
        OSError: On stat, directory creation, file creation or copy failure.
        Exception: Anything raised by the leaf's content producer.
    """
    path = leaf.local_path

    try:
        st = os.stat(path)
    except FileNotFoundError:
        st = None

    if st is not None and stat.S_ISDIR(st.st_mode):
        raise IsADirectoryError(f"Destination is a directory: {path}")

    if not is_newer(leaf.modified_at, st.st_mtime_ns if st is not None else None):
        logger.debug("Up to date: %s", path)
        return WriteOutcome.SKIPPED

    ensure_dir(path.parent)

    mtime_ns = _to_ns(leaf.modified_at)
    with open(path, "wb") as out:
        with leaf.producer() as stream:
            shutil.copyfileobj(stream, out, COPY_CHUNK_SIZE)
        out.flush()
        # Times are set on the open file so the fsync covers them too
        os.utime(out.fileno(), ns=(mtime_ns, mtime_ns))
        os.fsync(out.fileno())

    logger.debug("Wrote %s", path)
    return WriteOutcome.WRITTEN

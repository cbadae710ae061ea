# MirrorSync Output Module
# Rich console output and logging setup

from mirrorsync.output.console import Console, create_console
from mirrorsync.output.log import setup_logging

__all__ = [
    "Console",
    "create_console",
    "setup_logging",
]

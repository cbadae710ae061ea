"""Click-based CLI for mirrorsync - incremental mirroring of remote trees."""

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import Optional

import click
from rich.syntax import Syntax

from mirrorsync import __version__
from mirrorsync.config import (
    ensure_config_exists,
    get_config_path,
    load_config,
    load_config_or_default,
    validate_config_file,
)
from mirrorsync.config.schema import MirrorConfig
from mirrorsync.errors import ConfigError, InvalidLocatorError
from mirrorsync.handlers.registry import build_registry
from mirrorsync.output import create_console, setup_logging
from mirrorsync.sync.engine import SyncResult, sync as run_engine

console = create_console()


def _load(config_path: Optional[Path]) -> MirrorConfig:
    """Load configuration or exit with an error message."""
    try:
        return load_config_or_default(config_path)
    except ConfigError as e:
        console.print_error(e.message)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="mirrorsync")
def cli() -> None:
    """mirrorsync - incrementally mirror remote trees to local storage.

    Expands a source locator through its handler and writes every file
    that is new or newer than the local copy.

    \b
    Sources:
      /path/to/dir, file:///path/to/dir   local directories
      https://api.tumblr.com              configured Tumblr blogs
      https://api.tumblr.com/<blog>       a single Tumblr blog
    """
    pass


@cli.command()
@click.argument("source")
@click.argument("destination", required=False, type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (default: ~/.config/mirrorsync/config.yaml)",
)
@click.option("--timeout", type=float, default=None, help="Seconds to wait on a single expansion")
@click.option("--verbose", "-v", is_flag=True, help="Show up-to-date files and debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors and the summary")
def sync(
    source: str,
    destination: Optional[Path],
    config_path: Optional[Path],
    timeout: Optional[float],
    verbose: bool,
    quiet: bool,
) -> None:
    """Mirror SOURCE into DESTINATION.

    Files already on disk and not older than the source are left alone.
    DESTINATION defaults to the configured destination.
    """
    config = _load(config_path)
    verbose = verbose or config.output.verbose
    out = create_console(verbose=verbose, colored=config.output.colored, quiet=quiet)
    setup_logging(verbose=verbose, log_file=config.output.log_file)

    dest = destination or Path(config.destination)
    registry = build_registry(config)
    cancel = threading.Event()
    result = SyncResult()

    try:
        try:
            events = run_engine(
                source,
                dest,
                registry.lookup,
                cancel=cancel,
                handler_timeout=timeout if timeout is not None else config.sync.handler_timeout,
            )
        except InvalidLocatorError as e:
            out.print_error(e.message)
            sys.exit(2)

        if not quiet:
            out.print_info(f"Syncing {source} → {dest}")

        try:
            for event in events:
                result.add(event)
                out.print_event(event)
        except KeyboardInterrupt:
            cancel.set()
            events.close()
            result.cancelled = True
    finally:
        registry.close()

    out.print_summary(result, source=source, destination=str(dest))

    if not result.success:
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (default: ~/.config/mirrorsync/config.yaml)",
)
def handlers(config_path: Optional[Path]) -> None:
    """List the handlers locators are routed to."""
    config = _load(config_path)
    console.print_routes(build_registry(config).routes())


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group()
def config() -> None:
    """Configuration file management.

    \b
    The file lives at ~/.config/mirrorsync/config.yaml unless
    MIRRORSYNC_CONFIG points elsewhere.
    """
    pass


@config.command("init")
def config_init() -> None:
    """Create a default configuration file if none exists."""
    path, created = ensure_config_exists()
    if created:
        console.print_success(f"Created {path}")
    else:
        console.print_info(f"Configuration already exists: {path}")


@config.command("path")
def config_path_cmd() -> None:
    """Show where the configuration file is read from."""
    console.print(str(get_config_path()))


@config.command("show")
def config_show() -> None:
    """Show the current configuration."""
    path = get_config_path()
    try:
        load_config(path)
    except FileNotFoundError as e:
        console.print_error(str(e))
        sys.exit(1)
    except ConfigError as e:
        console.print_error(e.message)
        sys.exit(1)

    content = path.read_text(encoding="utf-8")
    console.print(Syntax(content, "yaml", theme="monokai", line_numbers=False))


@config.command("validate")
def config_validate() -> None:
    """Validate the configuration file."""
    valid, errors = validate_config_file()
    if valid:
        console.print_success("Configuration is valid")
        return

    for error in errors:
        console.print_error(error)
    sys.exit(1)


if __name__ == "__main__":
    cli()

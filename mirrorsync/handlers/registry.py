# MirrorSync Handler Registry
# Routes containers to the handler able to expand them

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from mirrorsync.handlers.base import Handler
from mirrorsync.sync.entry import Container, Locator

if TYPE_CHECKING:
    from mirrorsync.config.schema import MirrorConfig


@dataclass(frozen=True)
class Route:
    """A registered (scheme, host) route."""

    scheme: str
    host: Optional[str]
    handler: Handler

    @property
    def pattern(self) -> str:
        """Human-readable route pattern."""
        scheme = f"{self.scheme}://" if self.scheme else "(path)"
        return f"{scheme}{self.host if self.host is not None else '*'}"


class HandlerRegistry:
    """
    Maps locators to handlers.

    A route registered with a host only matches that host; a route
    registered without one matches any host of the scheme. Exact
    host routes win.
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, Optional[str]], Route] = {}

    def register(self, scheme: str, handler: Handler, host: Optional[str] = None) -> None:
        """
        Register a handler.

        Args:
            scheme: URL scheme, "" for bare paths.
            handler: Handler to route to.
            host: Optional host; None matches every host of the scheme.
        """
        key = (scheme.lower(), host.lower() if host is not None else None)
        self._routes[key] = Route(scheme=key[0], host=key[1], handler=handler)

    def resolve(self, locator: Locator) -> Optional[Handler]:
        """Find the handler for a locator."""
        scheme = locator.scheme.lower()
        route = self._routes.get((scheme, locator.host.lower()))
        if route is None:
            route = self._routes.get((scheme, None))
        return route.handler if route is not None else None

    def lookup(self, entry: Container) -> Optional[Handler]:
        """Find the handler for a container, or None if it cannot be routed."""
        return self.resolve(entry.locator)

    def routes(self) -> list[Route]:
        """List registered routes."""
        return sorted(self._routes.values(), key=lambda r: (r.scheme, r.host or ""))

    def close(self) -> None:
        """Close every registered handler once."""
        handlers = {id(route.handler): route.handler for route in self._routes.values()}
        for handler in handlers.values():
            handler.close()

    def __len__(self) -> int:
        return len(self._routes)


def build_registry(config: MirrorConfig) -> HandlerRegistry:
    """
    Build the registry of built-in handlers from configuration.

    Bare paths and file:// locators go to the local directory handler;
    the configured Tumblr API host goes to the Tumblr handler.
    """
    from mirrorsync.handlers.local import LocalHandler
    from mirrorsync.handlers.tumblr import TumblrHandler

    registry = HandlerRegistry()

    local = LocalHandler(exclude=config.sync.exclude)
    registry.register("", local)
    registry.register("file", local)

    api = Locator.parse(config.tumblr.api_host)
    registry.register(api.scheme, TumblrHandler(config.tumblr), host=api.host)

    return registry

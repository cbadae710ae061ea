# MirrorSync Handlers Module
# Source-specific handlers and the registry routing containers to them

from mirrorsync.handlers.base import FunctionHandler, Handler
from mirrorsync.handlers.local import LocalHandler
from mirrorsync.handlers.registry import HandlerRegistry, Route, build_registry
from mirrorsync.handlers.tumblr import TumblrHandler

__all__ = [
    # Base
    "Handler",
    "FunctionHandler",
    # Registry
    "HandlerRegistry",
    "Route",
    "build_registry",
    # Built-in handlers
    "LocalHandler",
    "TumblrHandler",
]

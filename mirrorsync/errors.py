# MirrorSync Errors
# Exception hierarchy shared by the engine, handlers and CLI

from typing import Optional


class MirrorSyncError(Exception):
    """Base exception for all mirrorsync errors."""

    def __init__(self, message: str, locator: Optional[str] = None):
        self.message = message
        self.locator = locator
        super().__init__(message)


class InvalidLocatorError(MirrorSyncError):
    """Raised when a locator string cannot be parsed."""


class NoHandlerError(MirrorSyncError):
    """Raised when the registry has no handler for a locator."""

    def __init__(self, locator: str):
        super().__init__(f"Cannot sync: {locator}", locator=locator)


class HandlerTimeoutError(MirrorSyncError):
    """Raised when a handler does not finish within the configured timeout."""

    def __init__(self, locator: str, timeout: float):
        self.timeout = timeout
        super().__init__(f"Handler for {locator} did not finish within {timeout:g}s", locator=locator)


class ExpansionClosed(MirrorSyncError):
    """Raised inside a handler that pushes to a sink which is already closed."""


class TumblrAPIError(MirrorSyncError):
    """Raised when the Tumblr API returns an error or an unexpected payload."""

    def __init__(self, message: str, locator: Optional[str] = None, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message, locator=locator)


class ConfigError(MirrorSyncError):
    """Raised for unusable configuration."""

"""
Custom exceptions for RadioCore operations.

This module provides custom exception classes for the failures that can
occur while synthesizing an engine program or talking to a running engine.
"""


class RadioCoreError(Exception):
    """Base exception for all RadioCore errors."""

    pass


class StationNotFound(RadioCoreError):
    """Raised when a station id does not resolve to a station."""

    pass


class ConfigWriteFailure(RadioCoreError):
    """Raised when the generated program cannot be persisted."""

    pass


class SchedulingInputError(RadioCoreError, ValueError):
    """Raised when a schedule time code or weekday value is malformed."""

    pass


class UndefinedReferenceError(RadioCoreError):
    """Raised when a program statement references a variable not yet assigned."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Variable '{name}' is referenced before it is assigned")


class ManifestReloadFailure(RadioCoreError):
    """Raised when the engine could not hot-reload a playlist manifest."""

    pass


class ConnectionFailure(RadioCoreError):
    """Raised when the engine control port cannot be reached."""

    pass


class QueueConflict(RadioCoreError):
    """Raised when a manual request is pushed while another is still pending."""

    pass

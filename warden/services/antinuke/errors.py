"""
Warden - Anti-Nuke Errors
=========================

Exceptions raised by the anti-nuke scoring core.

DESIGN:
    Both errors are programming or configuration mistakes, never transient
    failures. They are raised synchronously to the caller and the gateway
    turns them into structured log entries.
"""

from typing import Iterable, List


class WardenError(Exception):
    """Base class for anti-nuke errors."""


class InvalidArgument(WardenError, ValueError):
    """A count, weight, threshold or window is negative, non-finite or not a number."""


class UnsupportedEventType(WardenError, LookupError):
    """
    An event type outside the configured weight table was recorded.

    Attributes:
        event_type: The rejected event name.
        supported: Event names the service accepts.
    """

    def __init__(self, event_type: object, supported: Iterable[str]) -> None:
        self.event_type = str(event_type)
        self.supported: List[str] = list(supported)
        super().__init__(
            f"Unsupported event type: {self.event_type}. "
            f"Supported: {', '.join(self.supported)}"
        )

    def __str__(self) -> str:
        # LookupError would repr() the message otherwise
        return self.args[0]


__all__ = [
    "WardenError",
    "InvalidArgument",
    "UnsupportedEventType",
]

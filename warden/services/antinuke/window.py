"""
Warden - Sliding Window Counter
===============================

Fixed-size time-window event counter keyed by label.

DESIGN:
    Each label keeps a deque of (timestamp, amount) entries in insertion
    order. Reads prune entries that fell out of the window, so expired
    entries are dropped once and never counted again.

    Timestamps come from an injected clock returning milliseconds, which
    keeps window expiry deterministic in tests. An entry stamped exactly
    at `now - window_ms` is outside the window.
"""

import math
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, Iterable, List, Tuple

from .errors import InvalidArgument


Clock = Callable[[], float]
"""Returns the current time in milliseconds."""


def wall_clock_ms() -> float:
    """Default clock: wall-clock time in milliseconds."""
    return time.time() * 1000


def require_non_negative(value: object, name: str) -> float:
    """
    Validate a count, weight or threshold.

    Raises:
        InvalidArgument: If value is not a finite number >= 0.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise InvalidArgument(f"{name} must be finite, got {value}")
    if value < 0:
        raise InvalidArgument(f"{name} must be >= 0, got {value}")
    return float(value)


def require_positive(value: object, name: str) -> float:
    """Like require_non_negative, but zero is rejected too."""
    number = require_non_negative(value, name)
    if number == 0:
        raise InvalidArgument(f"{name} must be > 0")
    return number


# =============================================================================
# Snapshot
# =============================================================================

@dataclass(frozen=True)
class WindowSnapshot:
    """Counts for a set of labels, all read against the same timestamp."""

    ts: float
    window_ms: float
    counts: Dict[str, float] = field(default_factory=dict)


# =============================================================================
# Sliding Window Counter
# =============================================================================

class SlidingWindowCounter:
    """
    Counts events per label over a trailing time window.

    Attributes:
        window_ms: Retained window length in milliseconds. Immutable;
            build a new counter when the window changes.
    """

    def __init__(self, window_ms: float, now: Clock = wall_clock_ms) -> None:
        self._window_ms = require_positive(window_ms, "window_ms")
        self._now = now
        self._entries: Dict[str, Deque[Tuple[float, float]]] = {}

    @property
    def window_ms(self) -> float:
        return self._window_ms

    # =========================================================================
    # Writes
    # =========================================================================

    def increment(self, label: str, amount: float = 1) -> None:
        """
        Record `amount` units for `label` at the current time.

        Raises:
            InvalidArgument: If amount is negative, non-finite or not a number.
        """
        amount = require_non_negative(amount, "amount")
        entries = self._entries.get(label)
        if entries is None:
            entries = self._entries[label] = deque()
        entries.append((self._now(), amount))

    def clear(self) -> None:
        """Drop every recorded entry."""
        self._entries.clear()

    # =========================================================================
    # Reads
    # =========================================================================

    def count(self, label: str) -> float:
        """Sum of amounts recorded for `label` inside the window."""
        return self._count_at(label, self._now())

    def snapshot(self, labels: Iterable[str]) -> WindowSnapshot:
        """Counts for `labels` evaluated against one clock read."""
        now = self._now()
        counts = {label: self._count_at(label, now) for label in labels}
        return WindowSnapshot(ts=now, window_ms=self._window_ms, counts=counts)

    def labels(self) -> List[str]:
        """Labels that still hold entries inside the window."""
        now = self._now()
        return [label for label in list(self._entries) if self._count_at(label, now) > 0]

    def _count_at(self, label: str, now: float) -> float:
        entries = self._entries.get(label)
        if not entries:
            return 0

        cutoff = now - self._window_ms
        while entries and entries[0][0] <= cutoff:
            entries.popleft()

        if not entries:
            del self._entries[label]
            return 0

        # A clock step backwards can leave an expired entry behind a newer one
        return sum(amount for ts, amount in entries if ts > cutoff)

    def __repr__(self) -> str:
        return f"SlidingWindowCounter(window_ms={self._window_ms}, labels={len(self._entries)})"


__all__ = [
    "Clock",
    "wall_clock_ms",
    "require_non_negative",
    "require_positive",
    "WindowSnapshot",
    "SlidingWindowCounter",
]

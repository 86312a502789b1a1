"""
Warden - Anti-Nuke Scoring Service
==================================

Converts windowed event counts into a weighted risk score.

DESIGN:
    One ScoringService exists per guild (see AntiNukeDirector). It owns a
    SlidingWindowCounter and a closed weight table; the table keys are the
    only event types the service will record.

    The score is recomputed from the counter on every status() call, so
    there is no cached score to go stale when events expire.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from .constants import DEFAULT_SCORE_PER_EVENT, DEFAULT_THRESHOLD, DEFAULT_WINDOW_MS
from .events import EventLike, EventType, parse_event_type
from .window import (
    Clock,
    SlidingWindowCounter,
    require_non_negative,
    require_positive,
    wall_clock_ms,
)


# =============================================================================
# Configuration
# =============================================================================

@dataclass(frozen=True)
class ScoringConfig:
    """
    Effective scoring configuration for one guild.

    Attributes:
        window_ms: Trailing window for event counts.
        threshold: Score at or above which the guild is triggered.
        score_per_event: Weight for each recognised event type (read-only;
            one config may be shared by many guilds).
    """

    window_ms: float = DEFAULT_WINDOW_MS
    threshold: float = DEFAULT_THRESHOLD
    score_per_event: Mapping[EventType, float] = field(
        default_factory=lambda: dict(DEFAULT_SCORE_PER_EVENT)
    )

    def __post_init__(self) -> None:
        require_positive(self.window_ms, "window_ms")
        require_non_negative(self.threshold, "threshold")

        weights: Dict[EventType, float] = {}
        for key, weight in self.score_per_event.items():
            event = parse_event_type(key)
            weights[event] = require_non_negative(weight, f"weight[{event.value}]")
        object.__setattr__(self, "score_per_event", MappingProxyType(weights))


DEFAULT_CONFIG = ScoringConfig()


# =============================================================================
# Status
# =============================================================================

@dataclass(frozen=True)
class ScoreStatus:
    """Point-in-time score for one guild."""

    ts: float
    window_ms: float
    counts: Dict[str, float]
    per_event: Dict[str, float]
    score: float
    threshold: float
    triggered: bool

    def to_dict(self) -> Dict[str, Any]:
        """Outbound status shape shared with other subsystems."""
        return {
            "ts": self.ts,
            "windowMs": self.window_ms,
            "counts": dict(self.counts),
            "perEvent": dict(self.per_event),
            "score": self.score,
            "threshold": self.threshold,
            "triggered": self.triggered,
        }


# =============================================================================
# Scoring Service
# =============================================================================

class ScoringService:
    """
    Weighted-threshold scorer over a sliding window.

    Attributes:
        config: Effective configuration, fixed at construction.
        counter: Window counter holding recent events.
    """

    def __init__(
        self,
        config: ScoringConfig = DEFAULT_CONFIG,
        counter: Optional[SlidingWindowCounter] = None,
        now: Optional[Clock] = None,
    ) -> None:
        self.config = config
        self._now = now or wall_clock_ms
        self.counter = counter or SlidingWindowCounter(config.window_ms, now=self._now)
        self._supported: List[EventType] = list(config.score_per_event)

    def supported_events(self) -> List[EventType]:
        """Event types this service records, in weight-table order."""
        return list(self._supported)

    def record(self, event_type: EventLike, count: float = 1) -> None:
        """
        Add `count` occurrences of `event_type` to the window.

        Raises:
            UnsupportedEventType: If the event is not in the weight table.
            InvalidArgument: If count is negative or non-finite.
        """
        event = parse_event_type(event_type, self._supported)
        self.counter.increment(event.value, count)

    def status(self) -> ScoreStatus:
        """Current counts, per-event contributions, score and verdict."""
        snap = self.counter.snapshot(e.value for e in self._supported)

        score = 0.0
        per_event: Dict[str, float] = {}
        for event in self._supported:
            contribution = snap.counts.get(event.value, 0) * self.config.score_per_event[event]
            per_event[event.value] = contribution
            score += contribution

        return ScoreStatus(
            ts=snap.ts,
            window_ms=snap.window_ms,
            counts=snap.counts,
            per_event=per_event,
            score=score,
            threshold=self.config.threshold,
            triggered=score >= self.config.threshold,
        )

    def simulate(self, event_type: EventLike, count: float = 1) -> ScoreStatus:
        """Record an event and return the resulting status."""
        self.record(event_type, count)
        return self.status()

    def __repr__(self) -> str:
        return (
            f"ScoringService(threshold={self.config.threshold}, "
            f"window_ms={self.config.window_ms}, events={len(self._supported)})"
        )


__all__ = [
    "ScoringConfig",
    "DEFAULT_CONFIG",
    "ScoreStatus",
    "ScoringService",
]

"""
Warden - Config Override Merge
==============================

Resolves base scoring config plus a per-guild override into the
effective config for that guild.

DESIGN:
    Pure functions, no I/O and no caching. Reading override files and
    remembering the result belong to OverrideStore and AntiNukeDirector.

    Only the weight table is merged key by key; every other field is
    replaced wholesale when the override sets it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from .events import EventType, parse_event_type
from .service import ScoringConfig
from .window import require_non_negative, require_positive


@dataclass(frozen=True)
class GuildOverride:
    """Partial config for one guild. None means "keep the base value"."""

    threshold: Optional[float] = None
    window_ms: Optional[float] = None
    score_per_event: Optional[Mapping[EventType, float]] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GuildOverride":
        """
        Build from the `{threshold?, windowMs?, scorePerEvent?}` shape.

        Raises:
            UnsupportedEventType: For unknown event names.
            InvalidArgument: For negative or non-finite numbers.
        """
        threshold = data.get("threshold")
        window_ms = data.get("windowMs", data.get("window_ms"))
        raw_weights = data.get("scorePerEvent", data.get("score_per_event"))

        weights: Optional[Dict[EventType, float]] = None
        if raw_weights is not None:
            weights = {
                parse_event_type(key): require_non_negative(value, f"weight[{key}]")
                for key, value in raw_weights.items()
            }

        return cls(
            threshold=require_non_negative(threshold, "threshold") if threshold is not None else None,
            window_ms=require_positive(window_ms, "window_ms") if window_ms is not None else None,
            score_per_event=weights,
        )

    def is_empty(self) -> bool:
        return self.threshold is None and self.window_ms is None and not self.score_per_event


OverrideLike = Union[GuildOverride, Mapping[str, Any], None]


def merge_config(base: ScoringConfig, override: OverrideLike) -> ScoringConfig:
    """
    Apply `override` on top of `base`.

    Args:
        base: Defaults for every guild.
        override: Per-guild override, a mapping in the override-file shape,
            or None.

    Returns:
        New ScoringConfig; `base` is never modified.
    """
    if override is None:
        return base
    if not isinstance(override, GuildOverride):
        override = GuildOverride.from_mapping(override)

    weights = dict(base.score_per_event)
    if override.score_per_event:
        for key, value in override.score_per_event.items():
            weights[parse_event_type(key)] = value

    return ScoringConfig(
        window_ms=override.window_ms if override.window_ms is not None else base.window_ms,
        threshold=override.threshold if override.threshold is not None else base.threshold,
        score_per_event=weights,
    )


__all__ = [
    "GuildOverride",
    "OverrideLike",
    "merge_config",
]

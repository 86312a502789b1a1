"""
Warden - Anti-Nuke Package
==========================

Sliding-window scoring of administrative events per guild, with
edge-triggered alerts when a guild crosses its threshold.
"""

from .constants import (
    DEFAULT_SCORE_PER_EVENT,
    DEFAULT_THRESHOLD,
    DEFAULT_WINDOW_MS,
    LOCKDOWN_HINT,
    UNKNOWN_GUILD,
)
from .director import AntiNukeDirector, normalize_guild_id
from .errors import InvalidArgument, UnsupportedEventType, WardenError
from .events import EventType, parse_event_type
from .gateway import AntiNukeGateway
from .merge import GuildOverride, merge_config
from .notifier import CROSSED, RECOVERED, NotificationSink, ThresholdNotifier
from .overrides import OverrideReport, OverrideStore, validate_overrides
from .service import DEFAULT_CONFIG, ScoreStatus, ScoringConfig, ScoringService
from .window import SlidingWindowCounter, WindowSnapshot, wall_clock_ms


__all__ = [
    # Constants
    "DEFAULT_SCORE_PER_EVENT",
    "DEFAULT_THRESHOLD",
    "DEFAULT_WINDOW_MS",
    "LOCKDOWN_HINT",
    "UNKNOWN_GUILD",
    # Errors
    "WardenError",
    "InvalidArgument",
    "UnsupportedEventType",
    # Events
    "EventType",
    "parse_event_type",
    # Window
    "SlidingWindowCounter",
    "WindowSnapshot",
    "wall_clock_ms",
    # Scoring
    "ScoringConfig",
    "DEFAULT_CONFIG",
    "ScoreStatus",
    "ScoringService",
    # Overrides
    "GuildOverride",
    "merge_config",
    "OverrideStore",
    "OverrideReport",
    "validate_overrides",
    # Director / Notifier / Gateway
    "AntiNukeDirector",
    "normalize_guild_id",
    "NotificationSink",
    "ThresholdNotifier",
    "CROSSED",
    "RECOVERED",
    "AntiNukeGateway",
]

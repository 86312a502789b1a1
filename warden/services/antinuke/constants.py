"""
Warden - Anti-Nuke Constants
============================

Default weights, window and alert strings for anti-nuke scoring.
"""

from .events import EventType

# Trailing window for event counts
DEFAULT_WINDOW_MS = 30_000

# Score at or above which a guild is flagged
DEFAULT_THRESHOLD = 1.0

# Weight per recorded event
DEFAULT_SCORE_PER_EVENT = {
    # Destructive deletes / bans = 0.5 (higher risk)
    EventType.CHANNEL_DELETE: 0.5,
    EventType.ROLE_DELETE: 0.5,
    EventType.WEBHOOK_DELETE: 0.5,
    EventType.GUILD_BAN_ADD: 0.5,
    EventType.EMOJI_DELETE: 0.5,
    # Low-noise signals
    EventType.GUILD_UPDATE: 0.1,
    EventType.ROLE_UPDATE: 0.1,
    # Creations = lower weight
    EventType.CHANNEL_CREATE: 0.2,
    EventType.ROLE_CREATE: 0.2,
    EventType.WEBHOOK_CREATE: 0.2,
    # Permission changes on channels
    EventType.CHANNEL_UPDATE: 0.2,
}

# Guild key used when an event arrives without a guild id
UNKNOWN_GUILD = "unknown"

# Attached to every "crossed" alert
LOCKDOWN_HINT = "consider enabling lockdown mode and reviewing recent audit logs"

# Weights above this are flagged by the override validator
LARGE_WEIGHT_WARNING = 5

# Discord snowflake ids are 17-20 digits
SNOWFLAKE_PATTERN = r"^\d{17,20}$"


__all__ = [
    "DEFAULT_WINDOW_MS",
    "DEFAULT_THRESHOLD",
    "DEFAULT_SCORE_PER_EVENT",
    "UNKNOWN_GUILD",
    "LOCKDOWN_HINT",
    "LARGE_WEIGHT_WARNING",
    "SNOWFLAKE_PATTERN",
]

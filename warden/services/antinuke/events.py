"""
Warden - Anti-Nuke Event Types
==============================

Closed set of administrative events the scorer understands.

DESIGN:
    Values are the camelCase names used in override files and in the
    outbound status payload, so `EventType("channelDelete")` parses the
    wire form directly.
"""

from enum import Enum
from typing import Iterable, List, Union

from .errors import UnsupportedEventType


class EventType(str, Enum):
    """Scored administrative event."""

    # Destructive deletes / bans
    CHANNEL_DELETE = "channelDelete"
    ROLE_DELETE = "roleDelete"
    WEBHOOK_DELETE = "webhookDelete"
    GUILD_BAN_ADD = "guildBanAdd"
    EMOJI_DELETE = "emojiDelete"

    # Low-noise signals
    GUILD_UPDATE = "guildUpdate"
    ROLE_UPDATE = "roleUpdate"

    # Creations
    CHANNEL_CREATE = "channelCreate"
    ROLE_CREATE = "roleCreate"
    WEBHOOK_CREATE = "webhookCreate"

    # Channel permission overwrite changes
    CHANNEL_UPDATE = "channelUpdate"

    def __str__(self) -> str:
        return self.value


EventLike = Union[EventType, str]


def parse_event_type(value: EventLike, supported: Iterable[EventType] = tuple(EventType)) -> EventType:
    """
    Resolve an event name against a supported set.

    Args:
        value: EventType member or its string value.
        supported: Event types the caller accepts.

    Returns:
        The matching EventType.

    Raises:
        UnsupportedEventType: If the name is unknown or not in `supported`.
    """
    allowed: List[EventType] = list(supported)
    try:
        event = EventType(value)
    except ValueError:
        raise UnsupportedEventType(value, [e.value for e in allowed]) from None

    if event not in allowed:
        raise UnsupportedEventType(event.value, [e.value for e in allowed])
    return event


__all__ = [
    "EventType",
    "EventLike",
    "parse_event_type",
]

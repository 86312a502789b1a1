"""
Warden - Anti-Nuke Director
===========================

Hands out one ScoringService per guild.

DESIGN:
    Services are created lazily on first access and memoized for the
    director's lifetime, so every event handler for a guild shares the
    same live counters.

    Overrides are looked up once, when the guild's service is built.
    Editing the override file does not affect guilds already seen; build
    a new director (or restart) to pick the change up.

    There is no eviction. The map grows with the number of guilds the
    bot is in.
"""

from typing import Callable, Dict, List, Optional

from warden.core.logger import logger

from .constants import UNKNOWN_GUILD
from .merge import OverrideLike, merge_config
from .service import DEFAULT_CONFIG, ScoringConfig, ScoringService
from .window import Clock


OverrideLookup = Callable[[str], OverrideLike]
"""Returns the override for a guild id, or None."""


def normalize_guild_id(guild_id: object) -> str:
    """Stringify a guild id, mapping missing ids to the shared sentinel key."""
    return str(guild_id) if guild_id else UNKNOWN_GUILD


class AntiNukeDirector:
    """
    Memoizing factory of per-guild scoring services.

    Attributes:
        base_config: Config every guild starts from before overrides.
    """

    def __init__(
        self,
        base_config: ScoringConfig = DEFAULT_CONFIG,
        lookup_overrides: Optional[OverrideLookup] = None,
        now: Optional[Clock] = None,
    ) -> None:
        self.base_config = base_config
        self._lookup = lookup_overrides
        self._now = now
        self._services: Dict[str, ScoringService] = {}

    def for_guild(self, guild_id: object = UNKNOWN_GUILD) -> ScoringService:
        """
        Return the guild's scoring service, creating it on first access.

        Raises:
            UnsupportedEventType: If the guild's override names an unknown event.
            InvalidArgument: If the override holds invalid numbers.
        """
        key = normalize_guild_id(guild_id)
        service = self._services.get(key)
        if service is not None:
            return service

        override = self._lookup(key) if self._lookup else None
        config = merge_config(self.base_config, override)
        service = ScoringService(config, now=self._now)
        self._services[key] = service

        logger.debug("Anti-Nuke Scorer Created", [
            ("Guild", key),
            ("Threshold", str(config.threshold)),
            ("Window", f"{config.window_ms:.0f}ms"),
            ("Override", "Yes" if override else "No"),
        ])
        return service

    def guild_ids(self) -> List[str]:
        """Guild keys with a live service."""
        return list(self._services)

    def __contains__(self, guild_id: object) -> bool:
        return normalize_guild_id(guild_id) in self._services

    def __len__(self) -> int:
        return len(self._services)


__all__ = [
    "OverrideLookup",
    "normalize_guild_id",
    "AntiNukeDirector",
]

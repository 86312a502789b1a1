"""
Warden - Anti-Nuke Gateway
==========================

Single entry point from Discord event glue into the scoring core.

DESIGN:
    Every scored event goes through handle_event(): record on the guild's
    scorer, log the update, then let the notifier decide on an alert.

    This is the error boundary. A bad event type or count is logged and
    the call returns None, so one misconfigured signal never stops the
    bot from processing the next event.
"""

from typing import Optional

from .director import AntiNukeDirector, normalize_guild_id
from .errors import WardenError
from .events import EventLike
from .notifier import NotificationSink, ThresholdNotifier
from .service import ScoreStatus


class AntiNukeGateway:
    """
    Routes (guild, event, count) triples to the scorer and notifier.

    Attributes:
        director: Per-guild scorer factory.
        notifier: Edge detector for alerts.
        sink: Where updates, alerts and errors are logged.
        enabled: When False, events are ignored.
    """

    def __init__(
        self,
        director: AntiNukeDirector,
        notifier: ThresholdNotifier,
        sink: NotificationSink,
        enabled: bool = True,
    ) -> None:
        self.director = director
        self.notifier = notifier
        self.sink = sink
        self.enabled = enabled

    def handle_event(
        self,
        guild_id: object,
        event_type: EventLike,
        count: float = 1,
        **context: object,
    ) -> Optional[ScoreStatus]:
        """
        Score one administrative event.

        Args:
            guild_id: Guild the event happened in (None maps to "unknown").
            event_type: Scored event name.
            count: Number of occurrences (e.g. permissions granted at once).
            **context: Extra fields for the update log (channel name, user...).

        Returns:
            The guild's status after recording, or None if disabled or failed.
        """
        if not self.enabled:
            return None

        key = normalize_guild_id(guild_id)
        try:
            status = self.director.for_guild(key).simulate(event_type, count)
        except WardenError as e:
            self.sink.error(
                {
                    "evt": str(event_type),
                    "guildId": key,
                    "count": count,
                    "error": str(e),
                    "type": type(e).__name__,
                },
                "AntiNuke event rejected",
            )
            return None

        self.sink.info(
            {
                "evt": str(event_type),
                "guildId": key,
                **context,
                "score": status.score,
                "triggered": status.triggered,
            },
            "AntiNuke updated",
        )
        self.notifier.check_and_log(self.sink, key, status)
        return status

    def status(self, guild_id: object) -> ScoreStatus:
        """Current status for a guild without recording anything."""
        return self.director.for_guild(guild_id).status()

    def check(self, guild_id: object) -> ScoreStatus:
        """Re-read a guild's status and let the notifier see it (emits "recovered" once events expire)."""
        key = normalize_guild_id(guild_id)
        status = self.director.for_guild(key).status()
        self.notifier.check_and_log(self.sink, key, status)
        return status


__all__ = ["AntiNukeGateway"]

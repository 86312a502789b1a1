"""
Warden - Threshold Notifier
===========================

Turns continuous anti-nuke scores into discrete alerts.

DESIGN:
    Per guild, the notifier remembers one bit: whether the last status it
    saw was triggered. It logs only on transitions:

    - Below -> Above: one warn-level "crossed" alert with a lockdown hint
    - Above -> Below: one info-level "recovered" notice
    - no change: nothing, so a guild sitting above threshold for many
      events produces a single alert

    Output goes to an injected sink; the notifier itself decides, it does
    not choose where alerts end up.
"""

from typing import Any, Dict, Optional, Protocol

from .constants import LOCKDOWN_HINT
from .service import ScoreStatus


CROSSED = "crossed"
RECOVERED = "recovered"


class NotificationSink(Protocol):
    """Anything with info/warn/error(payload, message)."""

    def info(self, payload: Dict[str, Any], message: str) -> None: ...

    def warn(self, payload: Dict[str, Any], message: str) -> None: ...

    def error(self, payload: Dict[str, Any], message: str) -> None: ...


class ThresholdNotifier:
    """Edge detector over per-guild triggered state."""

    def __init__(self) -> None:
        self._state: Dict[str, bool] = {}

    def is_triggered(self, guild_id: str) -> bool:
        """Last triggered state seen for the guild (False if never seen)."""
        return self._state.get(guild_id, False)

    def check_and_log(
        self,
        log: NotificationSink,
        guild_id: str,
        status: ScoreStatus,
    ) -> Optional[str]:
        """
        Emit an alert if `status` flips the guild's triggered state.

        Returns:
            "crossed", "recovered", or None when nothing was emitted.
        """
        prev = self._state.get(guild_id, False)
        now = bool(status.triggered)

        if now and not prev:
            log.warn(
                {
                    "evt": "antinuke.threshold",
                    "action": "would-lockdown",
                    "guildId": guild_id,
                    "score": status.score,
                    "threshold": status.threshold,
                    "windowMs": status.window_ms,
                    "counts": status.counts,
                    "hint": LOCKDOWN_HINT,
                    "ts": status.ts,
                },
                "AntiNuke threshold crossed",
            )
            self._state[guild_id] = True
            return CROSSED

        if prev and not now:
            log.info(
                {
                    "evt": "antinuke.threshold.clear",
                    "action": "recovered",
                    "guildId": guild_id,
                    "score": status.score,
                    "threshold": status.threshold,
                    "windowMs": status.window_ms,
                    "counts": status.counts,
                    "ts": status.ts,
                },
                "AntiNuke threshold cleared",
            )
            self._state[guild_id] = False
            return RECOVERED

        return None


__all__ = [
    "CROSSED",
    "RECOVERED",
    "NotificationSink",
    "ThresholdNotifier",
]

"""
Warden - Anti-Nuke Override File
================================

Loads per-guild threshold and weight overrides from JSON.

DESIGN:
    File shape:

        {
          "default": { "threshold": 1, "windowMs": 30000, "weights": { "channelDelete": 0.5 } },
          "guilds": {
            "123456789012345678": { "threshold": 1.5, "scorePerEvent": { "guildBanAdd": 0.6 } }
          }
        }

    Sections may use either "weights" or "scorePerEvent" (the latter wins).
    "windowMs" replaces the window length and must be greater than zero.
    Loading is lenient: bad numbers and unknown event names are dropped so
    one typo never stops the bot from scoring. validate_overrides() reports
    the same problems for operators.

    The raw document is re-read when the file's mtime changes, but the
    director asks only once per guild, so running guilds keep the override
    they started with.
"""

import json
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from warden.core.logger import logger

from .constants import LARGE_WEIGHT_WARNING, SNOWFLAKE_PATTERN
from .events import EventType
from .merge import GuildOverride


_SNOWFLAKE_RE = re.compile(SNOWFLAKE_PATTERN)
_KNOWN_EVENTS = {e.value for e in EventType}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _section_weights(section: Dict[str, Any]) -> Any:
    if isinstance(section.get("scorePerEvent"), dict):
        return section["scorePerEvent"]
    return section.get("weights")


# =============================================================================
# Normalization
# =============================================================================

def normalize_section(section: Any, where: str = "section") -> GuildOverride:
    """
    Reduce a raw override section to its valid parts.

    Args:
        section: Raw JSON object for "default" or one guild.
        where: Label used in warning logs.

    Returns:
        GuildOverride with only valid threshold, window and weights.
    """
    if not isinstance(section, dict):
        return GuildOverride()

    threshold = section.get("threshold")
    if not (_is_number(threshold) and threshold >= 0):
        threshold = None

    window_ms = section.get("windowMs")
    if not (_is_number(window_ms) and window_ms > 0):
        window_ms = None

    weights: Dict[EventType, float] = {}
    raw = _section_weights(section)
    if isinstance(raw, dict):
        dropped = []
        for key, value in raw.items():
            if key not in _KNOWN_EVENTS:
                dropped.append(key)
                continue
            if _is_number(value) and value >= 0:
                weights[EventType(key)] = float(value)

        if dropped:
            logger.warning("Unknown Anti-Nuke Weight Keys Ignored", [
                ("Section", where),
                ("Keys", ", ".join(dropped)),
            ])

    return GuildOverride(
        threshold=float(threshold) if threshold is not None else None,
        window_ms=float(window_ms) if window_ms is not None else None,
        score_per_event=weights or None,
    )


# =============================================================================
# Override Store
# =============================================================================

class OverrideStore:
    """
    Reads override JSON from disk and resolves it per guild.

    Attributes:
        path: Location of the override file.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._cache: Optional[Dict[str, Any]] = None
        self._mtime: float = 0

    def raw(self) -> Optional[Dict[str, Any]]:
        """Parsed file, refreshed when the mtime changes. None if missing or invalid."""
        try:
            mtime = self.path.stat().st_mtime
        except OSError:
            self._cache, self._mtime = None, 0
            return None

        if self._cache is not None and mtime == self._mtime:
            return self._cache

        try:
            data = json.loads(self.path.read_text(encoding="utf-8-sig"))
        except (OSError, ValueError) as e:
            logger.warning("Anti-Nuke Override File Unreadable", [
                ("Path", str(self.path)),
                ("Error", str(e)[:100]),
            ])
            data = None

        self._cache = data if isinstance(data, dict) else None
        self._mtime = mtime
        return self._cache

    def for_guild(self, guild_id: str) -> Optional[GuildOverride]:
        """
        Default section merged with the guild's section.

        Returns:
            GuildOverride, or None when neither section sets anything.
        """
        raw = self.raw()
        if raw is None:
            return None

        default = normalize_section(raw.get("default"), "default")
        guilds = raw.get("guilds") if isinstance(raw.get("guilds"), dict) else {}
        guild = normalize_section(guilds.get(guild_id), f"guilds[{guild_id}]")

        threshold = guild.threshold if guild.threshold is not None else default.threshold
        window_ms = guild.window_ms if guild.window_ms is not None else default.window_ms
        weights = {**(default.score_per_event or {}), **(guild.score_per_event or {})}

        merged = GuildOverride(threshold=threshold, window_ms=window_ms, score_per_event=weights or None)
        return None if merged.is_empty() else merged


# =============================================================================
# Validation
# =============================================================================

@dataclass
class OverrideReport:
    """Result of validate_overrides()."""

    ok: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _validate_threshold(value: Any, where: str, report: OverrideReport) -> None:
    if value is None:
        return
    if not _is_number(value):
        report.errors.append(f"{where}.threshold must be a finite number")
    elif value < 0:
        report.warnings.append(f"{where}.threshold is negative ({value}); consider >= 0")


def _validate_window(value: Any, where: str, report: OverrideReport) -> None:
    if value is None:
        return
    if not _is_number(value):
        report.errors.append(f"{where}.windowMs must be a finite number")
    elif value <= 0:
        report.warnings.append(f"{where}.windowMs must be > 0 ({value}); it will be ignored")


def _validate_weights(weights: Any, where: str, report: OverrideReport) -> None:
    if weights is None:
        return
    if not isinstance(weights, dict):
        report.errors.append(f'{where}: "weights" must be an object')
        return
    if not weights:
        report.warnings.append(f'{where}: "weights" is empty')

    for key, value in weights.items():
        if key not in _KNOWN_EVENTS:
            report.warnings.append(f'{where}: unknown weight key "{key}" (ignored, check for typos)')
        if not _is_number(value):
            report.errors.append(f'{where}: weight "{key}" must be a finite number')
            continue
        if value < 0:
            report.warnings.append(f'{where}: weight "{key}" is negative ({value}); consider >= 0')
        if value > LARGE_WEIGHT_WARNING:
            report.warnings.append(f'{where}: weight "{key}"={value} is large; typical range is 0..1')


def validate_overrides(raw: Any) -> OverrideReport:
    """
    Check a raw override document. Never raises.

    Returns:
        OverrideReport; `ok` is False when there is at least one error.
    """
    report = OverrideReport()

    if raw is None:
        return report
    if not isinstance(raw, dict):
        report.errors.append("top-level: overrides must be an object")
        report.ok = False
        return report

    default = raw.get("default")
    if default is None:
        report.warnings.append("default: missing; built-in threshold and weights apply")
    elif not isinstance(default, dict):
        report.errors.append("default: must be an object")
    else:
        _validate_threshold(default.get("threshold"), "default", report)
        _validate_window(default.get("windowMs"), "default", report)
        _validate_weights(_section_weights(default), "default", report)

    guilds = raw.get("guilds")
    if guilds is not None:
        if not isinstance(guilds, dict):
            report.errors.append("guilds: must be an object mapping guildId -> overrides")
        else:
            for guild_id, section in guilds.items():
                where = f'guilds["{guild_id}"]'
                if not _SNOWFLAKE_RE.match(guild_id):
                    report.warnings.append(f"{where}: not a typical Discord snowflake id (17-20 digits)")
                if not isinstance(section, dict):
                    report.errors.append(f"{where}: override must be an object")
                    continue
                _validate_threshold(section.get("threshold"), where, report)
                _validate_window(section.get("windowMs"), where, report)
                _validate_weights(_section_weights(section), where, report)

    report.ok = not report.errors
    return report


__all__ = [
    "normalize_section",
    "OverrideStore",
    "OverrideReport",
    "validate_overrides",
]

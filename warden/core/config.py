"""
Warden - Configuration Module
=============================

Centralized configuration loaded from environment variables.

DESIGN:
    A single Config dataclass is built from the environment at startup
    and validated once. get_config() memoizes it so every module sees the
    same instance; tests call load_config() directly.

    Anti-nuke settings here are the base for every guild. Per-guild
    thresholds and weights come from the override file.
"""

import math
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Set

from .logger import NY_TZ

if TYPE_CHECKING:
    from warden.services.antinuke import ScoringConfig


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Discord bot token (only needed to connect).
        antinuke_enabled: Master switch for anti-nuke scoring.
        window_ms: Base trailing window for event counts.
        threshold: Base score at which a guild is flagged.
        overrides_path: JSON file with per-guild overrides.
        error_webhook_url: Optional webhook receiving error logs.
        ignored_bot_ids: Bots whose actions are not scored.
    """

    # -------------------------------------------------------------------------
    # Discord
    # -------------------------------------------------------------------------

    discord_token: Optional[str] = None

    # -------------------------------------------------------------------------
    # Anti-Nuke
    # -------------------------------------------------------------------------

    antinuke_enabled: bool = True
    window_ms: int = 30_000
    threshold: float = 1.0
    overrides_path: str = "data/weights.override.json"

    # -------------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None

    # -------------------------------------------------------------------------
    # Exclusions
    # -------------------------------------------------------------------------

    ignored_bot_ids: Set[int] = field(default_factory=set)

    def base_scoring_config(self) -> "ScoringConfig":
        """Built-in weight table with this config's window and threshold."""
        from warden.services import antinuke

        return antinuke.ScoringConfig(window_ms=self.window_ms, threshold=self.threshold)


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Color palette for Discord embeds."""

    GREEN = 0x1F5E2E    # Below threshold
    GOLD = 0xE6B84A     # Warnings
    RED = 0xDC3545      # Threshold crossed


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when an environment variable holds an invalid value."""


def _parse_bool(value: Optional[str], default: bool) -> bool:
    """Truthy strings are 1/true/yes/y/on (any case); unset uses default."""
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "y", "on")


def _parse_int_set(value: Optional[str], name: str) -> Set[int]:
    """Parse comma-separated integers into a set."""
    if not value:
        return set()
    result = set()
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            result.add(int(part))
        except ValueError:
            raise ConfigValidationError(f"Invalid integer in {name}: {part}")
    return result


def _parse_float(value: Optional[str], default: float, name: str, min_val: float = 0) -> float:
    """Parse a finite float >= min_val; unset returns default."""
    if value is None or value.strip() == "":
        return default
    try:
        result = float(value.strip())
    except ValueError:
        raise ConfigValidationError(f"Invalid number for {name}: {value}")
    if not math.isfinite(result) or result < min_val:
        raise ConfigValidationError(f"{name} must be a finite number >= {min_val}, got {value}")
    return result


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Webhook URLs must be https."""
    if not value:
        return None
    value = value.strip()
    if not value.startswith("https://"):
        raise ConfigValidationError(f"{name} must start with https://")
    return value


# =============================================================================
# Loading
# =============================================================================

def load_config() -> Config:
    """
    Build Config from the current environment.

    Raises:
        ConfigValidationError: If any variable is malformed.
    """
    window_ms = _parse_float(os.getenv("ANTINUKE_WINDOW_MS"), 30_000, "ANTINUKE_WINDOW_MS", min_val=1)

    return Config(
        discord_token=os.getenv("DISCORD_TOKEN") or None,
        antinuke_enabled=_parse_bool(os.getenv("ANTINUKE_ENABLED"), True),
        window_ms=int(window_ms),
        threshold=_parse_float(os.getenv("ANTINUKE_THRESHOLD"), 1.0, "ANTINUKE_THRESHOLD"),
        overrides_path=os.getenv("ANTINUKE_OVERRIDES_PATH") or "data/weights.override.json",
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
        ignored_bot_ids=_parse_int_set(os.getenv("IGNORED_BOT_IDS"), "IGNORED_BOT_IDS"),
    )


_config: Optional[Config] = None


def get_config() -> Config:
    """Return the process-wide Config, loading it on first call."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "NY_TZ",
    "load_config",
    "get_config",
]

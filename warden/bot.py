"""
Warden - Main Bot Class
=======================

Discord client that owns the anti-nuke scoring stack.

DESIGN:
    The director, notifier and gateway are built once here and shared by
    reference with every event handler, so all handlers for a guild score
    into the same live counters.

    SERVICE INITIALIZATION ORDER:
    1. __init__: config, override store, director, notifier, gateway
    2. setup_hook: event cogs, command tree sync
"""

from datetime import datetime
from typing import Optional

import discord
from discord.ext import commands

from warden.core.config import Config, get_config
from warden.core.logger import TreeLogSink, logger
from warden.services.antinuke import (
    AntiNukeDirector,
    AntiNukeGateway,
    OverrideStore,
    ThresholdNotifier,
    validate_overrides,
)


EVENT_COGS = [
    "warden.handlers.antinuke",
]
"""Extension modules loaded in setup_hook."""


class WardenBot(commands.Bot):
    """
    Anti-nuke moderation bot.

    Attributes:
        config: Loaded configuration.
        override_store: Per-guild override file reader.
        antinuke_director: One scorer per guild.
        antinuke_notifier: Edge-triggered alert state.
        antinuke_gateway: Entry point used by event cogs.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or get_config()

        intents = discord.Intents.default()
        intents.members = False
        intents.message_content = False

        super().__init__(
            command_prefix="!",
            intents=intents,
            help_command=None,
        )

        self.start_time: datetime = datetime.now()

        self.override_store = OverrideStore(self.config.overrides_path)
        self.antinuke_director = AntiNukeDirector(
            base_config=self.config.base_scoring_config(),
            lookup_overrides=self.override_store.for_guild,
        )
        self.antinuke_notifier = ThresholdNotifier()
        self.antinuke_gateway = AntiNukeGateway(
            director=self.antinuke_director,
            notifier=self.antinuke_notifier,
            sink=TreeLogSink(logger),
            enabled=self.config.antinuke_enabled,
        )

        self._check_override_file()
        logger.info("Bot Instance Created")

    def _check_override_file(self) -> None:
        """Log problems in the override file once at startup."""
        raw = self.override_store.raw()
        if raw is None:
            logger.info("No Anti-Nuke Overrides", [("Path", self.config.overrides_path)])
            return

        report = validate_overrides(raw)
        for problem in report.errors:
            logger.error("Anti-Nuke Override Error", [("Problem", problem)])
        for problem in report.warnings:
            logger.warning("Anti-Nuke Override Warning", [("Problem", problem)])

        logger.tree("Anti-Nuke Overrides Loaded", [
            ("Path", self.config.overrides_path),
            ("Guild Sections", str(len(raw.get("guilds") or {}))),
            ("Errors", str(len(report.errors))),
            ("Warnings", str(len(report.warnings))),
        ], emoji="📄")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Load cogs and sync commands before on_ready."""
        for cog in EVENT_COGS:
            try:
                await self.load_extension(cog)
                logger.info(f"Cog Loaded: {cog.split('.')[-1]}")
            except Exception as e:
                logger.error("Failed to Load Cog", [("Cog", cog), ("Error", str(e))])

        try:
            synced = await self.tree.sync()
            logger.tree("Commands Synced", [("Count", str(len(synced)))], emoji="✅")
        except discord.HTTPException as e:
            logger.error("Command Sync Failed", [("Error", str(e))])

    async def on_ready(self) -> None:
        logger.tree("Warden Ready", [
            ("User", f"{self.user} ({self.user.id})" if self.user else "unknown"),
            ("Guilds", str(len(self.guilds))),
            ("Anti-Nuke", "Enabled" if self.antinuke_gateway.enabled else "Disabled"),
        ], emoji="🛡️")

    async def close(self) -> None:
        await super().close()
        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
            ("Guilds Scored", str(len(self.antinuke_director))),
        ], emoji="🛑")


__all__ = ["WardenBot", "EVENT_COGS"]

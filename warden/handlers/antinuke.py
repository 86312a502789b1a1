"""
Warden - Anti-Nuke Events
=========================

Translates Discord gateway events into anti-nuke scoring calls.

DESIGN:
    Each listener works out (guild, event type, count) and hands it to the
    bot's AntiNukeGateway. Listeners never raise: failures are logged and
    the next event is processed normally.

    Event mapping:
    - channel delete/create      -> channelDelete / channelCreate
    - channel overwrite edits    -> channelUpdate x dangerous allows added
    - role delete/create         -> roleDelete / roleCreate
    - role edits                 -> roleUpdate x (1 + dangerous perms added)
    - guild settings edits       -> guildUpdate
    - member ban                 -> guildBanAdd
    - emoji removals             -> emojiDelete x emojis removed
    - audit log webhook entries  -> webhookCreate / webhookDelete
"""

from typing import TYPE_CHECKING, Optional, Sequence

import discord
from discord import app_commands
from discord.ext import commands

from warden.core.config import EmbedColors, get_config
from warden.core.logger import logger
from warden.services.antinuke import EventType, ScoreStatus
from warden.utils.perm_diff import added_dangerous_channel_allows, added_dangerous_role_perms

if TYPE_CHECKING:
    from warden.bot import WardenBot


_AUDIT_WEBHOOK_EVENTS = {
    discord.AuditLogAction.webhook_create: EventType.WEBHOOK_CREATE,
    discord.AuditLogAction.webhook_delete: EventType.WEBHOOK_DELETE,
}


# =============================================================================
# Status Embed
# =============================================================================

def build_status_embed(guild_name: str, status: ScoreStatus, alerting: bool) -> discord.Embed:
    """Ephemeral /antinuke summary for one guild."""
    embed = discord.Embed(
        title="🛡️ Anti-Nuke Status",
        description=f"**{guild_name}**",
        color=EmbedColors.RED if status.triggered else EmbedColors.GREEN,
    )
    embed.add_field(name="Score", value=f"`{status.score:.2f}` / `{status.threshold:.2f}`", inline=True)
    embed.add_field(name="Window", value=f"`{status.window_ms / 1000:.0f}s`", inline=True)
    embed.add_field(name="Alert", value="🔴 Active" if alerting else "🟢 Clear", inline=True)

    active = [
        f"`{event}` ×{status.counts[event]:g} → {contribution:.2f}"
        for event, contribution in status.per_event.items()
        if status.counts.get(event)
    ]
    embed.add_field(
        name="Recent Events",
        value="\n".join(active) if active else "No scored events in window",
        inline=False,
    )
    return embed


# =============================================================================
# Anti-Nuke Events Cog
# =============================================================================

class AntiNukeEvents(commands.Cog):
    """Routes administrative events to anti-nuke scoring."""

    def __init__(self, bot: "WardenBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.gateway = bot.antinuke_gateway

        logger.tree("Anti-Nuke Events Loaded", [
            ("Scoring", "Enabled" if self.gateway.enabled else "Disabled"),
            ("Threshold", str(self.gateway.director.base_config.threshold)),
            ("Window", f"{self.gateway.director.base_config.window_ms / 1000:.0f}s"),
        ], emoji="🛡️")

    def _score(
        self,
        guild: Optional[discord.Guild],
        event: EventType,
        count: float = 1,
        **context: object,
    ) -> Optional[ScoreStatus]:
        """Forward one event to the gateway, logging instead of raising."""
        if count <= 0:
            return None
        try:
            return self.gateway.handle_event(guild.id if guild else None, event, count, **context)
        except Exception as e:
            logger.error("Anti-Nuke Scoring Failed", [
                ("Guild", str(guild.id) if guild else "unknown"),
                ("Event", event.value),
                ("Error", str(e)[:100]),
                ("Type", type(e).__name__),
            ])
            return None

    # =========================================================================
    # Channel Events
    # =========================================================================

    @commands.Cog.listener()
    async def on_guild_channel_delete(self, channel: discord.abc.GuildChannel) -> None:
        self._score(channel.guild, EventType.CHANNEL_DELETE, channel=channel.name)

    @commands.Cog.listener()
    async def on_guild_channel_create(self, channel: discord.abc.GuildChannel) -> None:
        self._score(channel.guild, EventType.CHANNEL_CREATE, channel=channel.name)

    @commands.Cog.listener()
    async def on_guild_channel_update(
        self,
        before: discord.abc.GuildChannel,
        after: discord.abc.GuildChannel,
    ) -> None:
        """Score newly allowed dangerous overwrite permissions."""
        try:
            added = added_dangerous_channel_allows(before.overwrites, after.overwrites)
        except Exception as e:
            logger.error("Channel Permission Diff Failed", [
                ("Channel", f"{after.name} ({after.id})"),
                ("Error", str(e)[:100]),
            ])
            return

        self._score(
            after.guild,
            EventType.CHANNEL_UPDATE,
            len(added),
            channel=after.name,
            permissions=", ".join(perm for _, perm in added),
        )

    # =========================================================================
    # Role Events
    # =========================================================================

    @commands.Cog.listener()
    async def on_guild_role_delete(self, role: discord.Role) -> None:
        self._score(role.guild, EventType.ROLE_DELETE, role=role.name)

    @commands.Cog.listener()
    async def on_guild_role_create(self, role: discord.Role) -> None:
        self._score(role.guild, EventType.ROLE_CREATE, role=role.name)

    @commands.Cog.listener()
    async def on_guild_role_update(self, before: discord.Role, after: discord.Role) -> None:
        """Every role edit is a low-noise signal; dangerous grants add to it."""
        added = added_dangerous_role_perms(before.permissions, after.permissions)
        self._score(
            after.guild,
            EventType.ROLE_UPDATE,
            1 + len(added),
            role=after.name,
            permissions=", ".join(added) or None,
        )

    # =========================================================================
    # Guild Events
    # =========================================================================

    @commands.Cog.listener()
    async def on_guild_update(self, before: discord.Guild, after: discord.Guild) -> None:
        self._score(after, EventType.GUILD_UPDATE)

    @commands.Cog.listener()
    async def on_member_ban(self, guild: discord.Guild, user: discord.User) -> None:
        self._score(guild, EventType.GUILD_BAN_ADD, user=f"{user} ({user.id})")

    @commands.Cog.listener()
    async def on_guild_emojis_update(
        self,
        guild: discord.Guild,
        before: Sequence[discord.Emoji],
        after: Sequence[discord.Emoji],
    ) -> None:
        """Score each removed emoji."""
        after_ids = {e.id for e in after}
        removed = [e.name for e in before if e.id not in after_ids]
        self._score(guild, EventType.EMOJI_DELETE, len(removed), emojis=", ".join(removed))

    # =========================================================================
    # Audit Log Events
    # =========================================================================

    @commands.Cog.listener()
    async def on_audit_log_entry_create(self, entry: discord.AuditLogEntry) -> None:
        """Webhook create/delete only surface reliably through the audit log."""
        event = _AUDIT_WEBHOOK_EVENTS.get(entry.action)
        if event is None:
            return
        if entry.user_id and entry.user_id in self.config.ignored_bot_ids:
            return
        self._score(entry.guild, event, executor=str(entry.user_id))

    # =========================================================================
    # Status Command
    # =========================================================================

    @app_commands.command(name="antinuke", description="Show Anti-Nuke status (ephemeral)")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.guild_only()
    async def antinuke_status(self, interaction: discord.Interaction) -> None:
        """Reply with the guild's current score and alert state."""
        guild = interaction.guild
        try:
            status = self.gateway.check(guild.id)
            alerting = self.gateway.notifier.is_triggered(str(guild.id))
            embed = build_status_embed(guild.name, status, alerting)
        except Exception as e:
            logger.error("Anti-Nuke Status Failed", [
                ("Guild", f"{guild.name} ({guild.id})"),
                ("Error", str(e)[:100]),
                ("Type", type(e).__name__),
            ])
            await interaction.response.send_message("Could not read anti-nuke status.", ephemeral=True)
            return

        await interaction.response.send_message(embed=embed, ephemeral=True)


async def setup(bot: "WardenBot") -> None:
    """Add the anti-nuke events cog to the bot."""
    await bot.add_cog(AntiNukeEvents(bot))
    logger.debug("Anti-Nuke Events Cog Added")


__all__ = ["AntiNukeEvents", "build_status_embed", "setup"]

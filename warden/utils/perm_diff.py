"""
Warden - Permission Diff Helpers
================================

Detects dangerous permissions newly granted on roles and channel overwrites.

DESIGN:
    Only additions count: a permission that goes from not granted to
    granted. Removals never raise risk. The number of dangerous additions
    becomes the event count fed to the anti-nuke scorer, so granting
    Administrator and Ban Members in one edit scores twice.
"""

from typing import Iterable, List, Mapping, Tuple

import discord


# =============================================================================
# Dangerous Permissions
# =============================================================================

DANGEROUS_ROLE_PERMS = (
    "administrator",
    "manage_guild",
    "manage_roles",
    "manage_channels",
    "manage_webhooks",
    "view_audit_log",
    "kick_members",
    "ban_members",
    "mention_everyone",
    "moderate_members",
    "manage_messages",
    "manage_threads",
)

# Overwrites cannot grant Administrator, but can allow these per channel
DANGEROUS_CHANNEL_PERMS = (
    "manage_channels",
    "manage_roles",
    "manage_webhooks",
    "manage_messages",
    "manage_threads",
    "mention_everyone",
)


# =============================================================================
# Role Diff
# =============================================================================

def _granted(perms: discord.Permissions, names: Iterable[str]) -> List[str]:
    return [name for name in names if getattr(perms, name, False)]


def added_dangerous_role_perms(
    before: discord.Permissions,
    after: discord.Permissions,
) -> List[str]:
    """Dangerous role permissions present in `after` but not in `before`."""
    had = set(_granted(before, DANGEROUS_ROLE_PERMS))
    return [name for name in _granted(after, DANGEROUS_ROLE_PERMS) if name not in had]


# =============================================================================
# Channel Overwrite Diff
# =============================================================================

def added_dangerous_channel_allows(
    before: Mapping[object, discord.PermissionOverwrite],
    after: Mapping[object, discord.PermissionOverwrite],
) -> List[Tuple[int, str]]:
    """
    Dangerous permissions newly ALLOWed by channel overwrites.

    Args:
        before: Channel overwrites before the edit (target -> overwrite).
        after: Channel overwrites after the edit.

    Returns:
        (target_id, permission) pairs, one per newly allowed permission.
    """
    old_allows = {
        getattr(target, "id", target): set(_granted(overwrite.pair()[0], DANGEROUS_CHANNEL_PERMS))
        for target, overwrite in before.items()
    }

    added: List[Tuple[int, str]] = []
    for target, overwrite in after.items():
        target_id = getattr(target, "id", target)
        had = old_allows.get(target_id, set())
        for name in _granted(overwrite.pair()[0], DANGEROUS_CHANNEL_PERMS):
            if name not in had:
                added.append((target_id, name))
    return added


__all__ = [
    "DANGEROUS_ROLE_PERMS",
    "DANGEROUS_CHANNEL_PERMS",
    "added_dangerous_role_perms",
    "added_dangerous_channel_allows",
]

"""
Warden - Anti-Nuke Moderation Bot
=================================

Scores administrative Discord events (channel, role, webhook and emoji
churn, bans, permission edits) per guild over a sliding window and
raises one alert when a guild crosses its threshold.
"""

__version__ = "1.0.0"

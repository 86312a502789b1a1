"""
Warden - Handlers Package
=========================

Discord event cogs. Each module exposes an async setup(bot) so the bot
can load it with load_extension().
"""

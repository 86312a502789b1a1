"""
Warden - Services Package
=========================

Domain services used by the bot's event handlers.
"""

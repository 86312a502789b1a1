"""
Warden - Utilities Package
==========================

Stateless helpers shared by handlers and services.
"""

"""
Soundboard package - plays catalog clips into Discord voice channels.

This package contains the bot, the SQLite-backed audio catalog and
settings stores, per-guild voice sessions and the button/command
handlers that tie them together.
"""

__version__ = "0.1.0"

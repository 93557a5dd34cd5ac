"""
Discord command cogs for the soundboard bot.

Cogs are py-cord's way of organizing commands into modular groups.
Each cog handles a specific category of functionality:
- EventCog: ready / interaction / voice state listeners
- SoundCog: join, leave, sound board, play, stop, pause, resume
- AdminCog: scan, register, volume
"""

from soundboard.commands.base import SoundboardCog
from soundboard.commands.events import EventCog
from soundboard.commands.sound import SoundCog
from soundboard.commands.admin import AdminCog

__all__ = [
    "SoundboardCog",
    "EventCog",
    "SoundCog",
    "AdminCog",
]

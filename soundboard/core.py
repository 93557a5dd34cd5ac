"""
Core Bot class - Main Discord bot instance.

This module provides the Bot class which extends commands.Bot
with the soundboard context and cogs.
"""

import logging

import discord
from discord.ext import commands

from soundboard.context import BotContext
from soundboard.database import ConnectionPool
from soundboard.environment import Environment

logger = logging.getLogger(__name__)


class Bot(commands.Bot):
    """
    Main Discord bot class with custom attributes.
    
    Attributes:
        token: Discord bot token for authentication.
        context: Stores and voice sessions shared by every cog.
        startup_failed: Set when the first ready event could not prepare storage.
    """

    def __init__(self, environment: Environment, pool: ConnectionPool,
                 intents: discord.Intents = None):
        """
        Initialize the bot.
        
        Args:
            environment: Loaded configuration.
            pool: Database connection pool, owned by the bot from now on.
            intents: Discord intents configuration.
        """
        if intents is None:
            intents = discord.Intents(guilds=True, voice_states=True)
        super().__init__(command_prefix=environment.command_prefix, intents=intents)
        self.token = environment.bot_token
        self.context = BotContext.build(self, environment, pool)
        self.startup_failed = False
        self._closed_context = False

        from soundboard.commands import events, sound, admin
        events.setup(self, self.context)
        sound.setup(self, self.context)
        admin.setup(self, self.context)

    async def close(self) -> None:
        """Leave voice channels, disconnect and release the database."""
        if not self._closed_context:
            self._closed_context = True
            logger.info("Shutting down, leaving voice channels")
            await self.context.voice.shutdown()
        await super().close()
        if not self.context.pool.closed:
            self.context.pool.close()

    def run_bot(self) -> None:
        """Start the bot using the configured token."""
        self.run(self.token)

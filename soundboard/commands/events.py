"""
Gateway listeners: ready, interactions and the bot's own voice state.
"""

import logging

import discord
from discord.ext import commands

from soundboard.commands.base import SoundboardCog
from soundboard.errors import StartupError
from soundboard.services.interactions import InteractionRouter

logger = logging.getLogger(__name__)


class EventCog(SoundboardCog):
    """Feeds gateway events into the InteractionRouter."""

    def __init__(self, bot: discord.Bot, context):
        super().__init__(bot, context)
        self.router = InteractionRouter(context)
        self._ready_once = False

    @commands.Cog.listener()
    async def on_ready(self):
        try:
            await self.router.handle_ready(self.bot.user, len(self.bot.guilds))
        except StartupError as e:
            if self._ready_once:
                logger.error(f"Storage check on reconnect failed: {e}")
                return
            logger.critical(f"{e}. Shutting down.")
            self.bot.startup_failed = True
            await self.bot.close()
            return
        self._ready_once = True

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction):
        await self.router.handle_interaction(interaction)

    @commands.Cog.listener()
    async def on_voice_state_update(self, member: discord.Member, before: discord.VoiceState,
                                    after: discord.VoiceState):
        if self.bot.user is None or member.id != self.bot.user.id:
            return
        if before.channel is not None and after.channel is None:
            self.context.voice.mark_disconnected(member.guild.id)
        elif after.channel is not None and before.channel != after.channel:
            self.context.voice.mark_moved(member.guild.id, after.channel.id)


def setup(bot: discord.Bot, context=None):
    """
    Set up the cog.
    
    Args:
        bot: Discord bot instance
        context: BotContext instance (required)
    """
    if context is None:
        raise ValueError("context parameter is required for EventCog")
    bot.add_cog(EventCog(bot, context))

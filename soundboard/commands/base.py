import logging

import discord
from discord.ext import commands

from soundboard.errors import MissingGuildContextError, MissingVoiceChannelError, SoundboardError

logger = logging.getLogger(__name__)


class SoundboardCog(commands.Cog):
    """Shared plumbing: context access and error reporting for slash commands."""

    def __init__(self, bot: discord.Bot, context):
        """
        Args:
            bot: The Discord bot instance
            context: BotContext with stores and voice sessions
        """
        self.bot = bot
        self.context = context

    @staticmethod
    def require_guild(ctx: discord.ApplicationContext) -> int:
        if ctx.guild_id is None:
            raise MissingGuildContextError("This command only works in a server")
        return ctx.guild_id

    @staticmethod
    def author_voice_channel(ctx: discord.ApplicationContext):
        """Voice channel the invoking member is in."""
        voice = getattr(ctx.author, "voice", None)
        if voice is None or voice.channel is None:
            raise MissingVoiceChannelError()
        return voice.channel

    async def cog_command_error(self, ctx: discord.ApplicationContext, error: Exception) -> None:
        """Turn reportable failures into an ephemeral reply; log the rest."""
        original = getattr(error, "original", error)
        command = ctx.command.qualified_name if ctx.command else "?"

        if isinstance(original, SoundboardError):
            logger.warning(f"/{command} failed for {ctx.author} in guild {ctx.guild_id}: {original}")
            message = f"⚠️ {original}"
        else:
            logger.error(f"/{command} crashed in guild {ctx.guild_id}", exc_info=original)
            message = "⚠️ Something went wrong."

        try:
            await ctx.respond(message, ephemeral=True)
        except discord.HTTPException as e:
            logger.warning(f"Could not report error for /{command}: {e}")

"""
Admin slash commands cog.

This cog handles administrative commands including:
- /scan - Import the sounds directory into the catalog
- /register - Re-sync slash commands with Discord
- /volume - Set this server's playback volume
"""

import asyncio
import logging

import discord
from discord.ext import commands

from soundboard import config
from soundboard.commands.base import SoundboardCog
from soundboard.context import VOLUME_SETTING
from soundboard.services.voice import clamp_volume

logger = logging.getLogger(__name__)


class AdminCog(SoundboardCog):
    """Cog for administrative commands."""

    @commands.slash_command(name="scan", description="Scan the sounds folder into the catalog (Admin only)")
    @discord.default_permissions(administrator=True)
    async def scan(
        self,
        ctx: discord.ApplicationContext,
        prune: discord.Option(bool, "Remove sounds whose file is gone", required=False, default=False),
    ):
        await ctx.defer(ephemeral=True)
        logger.info(f"Catalog scan requested by {ctx.author} (prune={prune})")

        result = await asyncio.to_thread(self.context.scanner.scan, prune)
        await ctx.respond(f"📂 Scan finished: {result}", ephemeral=True)

    @commands.slash_command(name="register", description="Re-register slash commands (Admin only)")
    @discord.default_permissions(administrator=True)
    async def register(self, ctx: discord.ApplicationContext):
        await ctx.defer(ephemeral=True)
        logger.info(f"Command registration requested by {ctx.author}")

        await self.bot.sync_commands()
        count = len(self.bot.pending_application_commands)
        await ctx.respond(f"✅ Registered {count} commands", ephemeral=True)

    @commands.slash_command(name="volume", description="Set the playback volume for this server (Admin only)")
    @discord.default_permissions(administrator=True)
    async def volume(
        self,
        ctx: discord.ApplicationContext,
        value: discord.Option(float, "Volume multiplier", min_value=config.MIN_VOLUME,
                              max_value=config.MAX_VOLUME, required=True),
    ):
        guild_id = self.require_guild(ctx)
        value = clamp_volume(value)

        await asyncio.to_thread(self.context.settings_repo.set_setting, VOLUME_SETTING, value, str(guild_id))
        logger.info(f"Volume for guild {guild_id} set to {value:.2f} by {ctx.author}")
        await ctx.respond(f"🔉 Volume set to {value:.2f}", ephemeral=True)


def setup(bot: discord.Bot, context=None):
    """
    Set up the cog.
    
    Args:
        bot: Discord bot instance
        context: BotContext instance (required)
    """
    if context is None:
        raise ValueError("context parameter is required for AdminCog")
    bot.add_cog(AdminCog(bot, context))

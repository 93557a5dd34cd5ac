"""
Sound-related slash commands cog.

This cog handles voice and playback commands including:
- /join - Join the caller's voice channel
- /leave - Leave the voice channel
- /sounds - Post the sound board
- /play - Play a sound by name
- /stop, /pause, /resume - Control the current sound
"""

import asyncio
import logging
import sqlite3

import discord
from discord.ext import commands

from soundboard.commands.base import SoundboardCog
from soundboard.errors import SoundboardError, UnknownAudioTrackError
from soundboard.models.audio import ByName
from soundboard.ui.views.sounds import build_sound_board

logger = logging.getLogger(__name__)


async def _sound_autocomplete(ctx: discord.AutocompleteContext):
    """Autocomplete for sound names."""
    try:
        return await asyncio.to_thread(ctx.bot.context.audio_repo.search_names, ctx.value or "", 25)
    except (sqlite3.Error, SoundboardError) as e:
        logger.warning(f"Autocomplete error: {e}")
        return []


class SoundCog(SoundboardCog):
    """Cog for voice and playback commands."""

    @commands.slash_command(name="join", description="Join your voice channel")
    async def join(self, ctx: discord.ApplicationContext):
        guild_id = self.require_guild(ctx)
        channel = self.author_voice_channel(ctx)
        await ctx.defer(ephemeral=True)

        await self.context.voice.connect(guild_id, channel.id)
        await ctx.respond(f"🔊 Joined {channel.mention}", ephemeral=True)

    @commands.slash_command(name="leave", description="Leave the voice channel")
    async def leave(self, ctx: discord.ApplicationContext):
        guild_id = self.require_guild(ctx)
        await ctx.defer(ephemeral=True)

        if await self.context.voice.leave(guild_id):
            await ctx.respond("👋 Left the voice channel", ephemeral=True)
        else:
            await ctx.respond("I'm not in a voice channel.", ephemeral=True)

    @commands.slash_command(name="sounds", description="Show the sound board")
    async def sounds(self, ctx: discord.ApplicationContext):
        rows = await asyncio.to_thread(self.context.audio_repo.get_all, -1)
        if not rows:
            await ctx.respond("The catalog is empty. An admin can run /scan.", ephemeral=True)
            return

        boards = build_sound_board(rows)
        await ctx.respond(f"🔊 **{len(rows)} sounds** (page 1/{len(boards)})", view=boards[0])
        for page, view in enumerate(boards[1:], start=2):
            await ctx.followup.send(f"page {page}/{len(boards)}", view=view)

    @commands.slash_command(name="play", description="Play a sound by name")
    async def play(
        self,
        ctx: discord.ApplicationContext,
        name: discord.Option(str, "Sound name", required=True, autocomplete=_sound_autocomplete),
    ):
        guild_id = self.require_guild(ctx)
        channel = self.author_voice_channel(ctx)
        await ctx.defer(ephemeral=True)

        selector = ByName(name)
        audio_row = await asyncio.to_thread(self.context.audio_repo.find_audio_row, selector)
        if audio_row is None:
            raise UnknownAudioTrackError(selector)

        logger.info(f"/play '{audio_row.name}' ({audio_row.audio_file}) for {ctx.author} in guild {guild_id}")
        volume = await self.context.guild_volume(guild_id)
        await self.context.voice.play_audio(guild_id, channel.id, audio_row.audio_file, volume=volume)
        await ctx.respond(f"▶️ {audio_row.name}", ephemeral=True)

    @commands.slash_command(name="stop", description="Stop the current sound")
    async def stop(self, ctx: discord.ApplicationContext):
        guild_id = self.require_guild(ctx)
        stopped = await self.context.voice.stop(guild_id)
        await ctx.respond("⏹️ Stopped" if stopped else "Nothing is playing.", ephemeral=True)

    @commands.slash_command(name="pause", description="Pause the current sound")
    async def pause(self, ctx: discord.ApplicationContext):
        guild_id = self.require_guild(ctx)
        paused = await self.context.voice.pause(guild_id)
        await ctx.respond("⏸️ Paused" if paused else "Nothing is playing.", ephemeral=True)

    @commands.slash_command(name="resume", description="Resume a paused sound")
    async def resume(self, ctx: discord.ApplicationContext):
        guild_id = self.require_guild(ctx)
        resumed = await self.context.voice.resume(guild_id)
        await ctx.respond("▶️ Resumed" if resumed else "Nothing is paused.", ephemeral=True)


def setup(bot: discord.Bot, context=None):
    """
    Set up the cog.
    
    Args:
        bot: Discord bot instance
        context: BotContext instance (required)
    """
    if context is None:
        raise ValueError("context parameter is required for SoundCog")
    bot.add_cog(SoundCog(bot, context))

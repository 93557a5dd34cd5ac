"""
Routing of gateway events to catalog lookups and voice playback.

Slash commands reach their cogs through py-cord's own application command
path; this router only handles the ready event and button presses on the
sound board.
"""

import asyncio
import logging
import sqlite3
from typing import Optional, Set

import discord

from soundboard.errors import (
    MissingGuildContextError, PoolTimeoutError, SoundboardError, StartupError,
    UnknownAudioTrackError, UnrecognizedCustomIdError,
)
from soundboard.models.audio import ById
from soundboard.models.button import PlayAudio, UnknownButton, decode_custom_id
from soundboard.models.session import VoiceSession

logger = logging.getLogger(__name__)


class InteractionRouter:
    """
    Dispatches ready and component events.

    A button press is handled in two phases: the interaction is
    acknowledged right away, then the lookup and playback run in their
    own task. Failures of that task are logged and never reach the
    platform or any other interaction.
    """

    def __init__(self, context):
        self.context = context
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending_tasks(self) -> Set[asyncio.Task]:
        return set(self._tasks)

    async def handle_ready(self, user, guild_count: int = 0) -> None:
        """
        Log who we are and make sure the tables exist.

        Raises:
            StartupError: the tables could not be created
        """
        logger.info(
            "Ready info..."
            f"\n\t User Name: {user.name}"
            f"\n\t User Id: {user.id}"
            f"\n\t Is Bot: {user.bot}"
            f"\n\t Guilds: {guild_count}"
            f"\n\t Library: py-cord {discord.__version__}"
        )
        try:
            await asyncio.to_thread(self.context.create_tables)
        except (sqlite3.Error, PoolTimeoutError, RuntimeError) as e:
            raise StartupError(f"Could not create catalog tables: {e}") from e

    async def handle_interaction(self, interaction: discord.Interaction) -> Optional[asyncio.Task]:
        """
        Route an interaction; only button presses are handled here.

        Returns:
            The task doing the work for a button press, otherwise None
        """
        if interaction.type != discord.InteractionType.component:
            return None

        data = interaction.data or {}
        if data.get("component_type") != discord.ComponentType.button.value:
            logger.debug(f"Ignoring component interaction of type {data.get('component_type')}")
            return None

        return await self._handle_button(interaction, data.get("custom_id", ""))

    async def _handle_button(self, interaction: discord.Interaction, custom_id: str) -> asyncio.Task:
        logger.debug(f"Interaction Component Button pressed - '{custom_id}'")

        try:
            await interaction.response.defer()
        except (discord.HTTPException, discord.ClientException) as e:
            logger.warning(f"Could not acknowledge button '{custom_id}': {e}")

        task = asyncio.create_task(
            self._run_button(custom_id, interaction.guild_id, self._target_channel_id(interaction)),
            name=f"button:{custom_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @staticmethod
    def _target_channel_id(interaction: discord.Interaction) -> Optional[int]:
        """
        Voice channel a press plays into.

        A board posted in a voice channel's chat plays there; a board in a
        text channel plays into the presser's current voice channel.
        """
        if isinstance(interaction.channel, (discord.VoiceChannel, discord.StageChannel)):
            return interaction.channel_id
        voice = getattr(interaction.user, "voice", None)
        if voice is not None and voice.channel is not None:
            return voice.channel.id
        return interaction.channel_id

    async def _run_button(self, custom_id: str, guild_id: Optional[int], channel_id: Optional[int]) -> None:
        try:
            await self.dispatch_button(custom_id, guild_id, channel_id)
        except SoundboardError as e:
            logger.warning(
                f"Button '{custom_id}' failed (guild={guild_id}, channel={channel_id}): "
                f"{type(e).__name__}: {e}"
            )
        except Exception:
            logger.exception(
                f"Unexpected error handling button '{custom_id}' (guild={guild_id}, channel={channel_id})"
            )

    async def dispatch_button(self, custom_id: str, guild_id: Optional[int],
                              channel_id: Optional[int]) -> VoiceSession:
        """
        Decode a button custom id and carry out its action.

        Raises:
            UnrecognizedCustomIdError: the custom id is not one of ours
            MissingGuildContextError: the press did not come from a guild
            UnknownAudioTrackError: the catalog row no longer exists
            VoiceError: joining or playing failed
        """
        action = decode_custom_id(custom_id)

        if isinstance(action, PlayAudio):
            return await self._play_audio(action, custom_id, guild_id, channel_id)
        if isinstance(action, UnknownButton):
            raise UnrecognizedCustomIdError(action.raw)
        raise UnrecognizedCustomIdError(custom_id)

    async def _play_audio(self, action: PlayAudio, custom_id: str, guild_id: Optional[int],
                          channel_id: Optional[int]) -> VoiceSession:
        logger.info(f"Play Audio Button Pressed - '{custom_id}'")

        if guild_id is None or channel_id is None:
            raise MissingGuildContextError(f"Button '{custom_id}' was pressed outside a guild")

        selector = ById(action.row_id)
        audio_row = await asyncio.to_thread(self.context.audio_repo.find_audio_row, selector)
        if audio_row is None:
            raise UnknownAudioTrackError(selector)

        logger.info(f"Found audio track. Name: {audio_row.name}, File: {audio_row.audio_file}")

        volume = await self.context.guild_volume(guild_id)
        return await self.context.voice.play_audio(guild_id, channel_id, audio_row.audio_file, volume=volume)


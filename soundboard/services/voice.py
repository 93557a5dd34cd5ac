"""
Per-guild voice sessions.

Each guild has at most one ``VoiceSession``. Every operation on a guild
runs under that guild's lock, so two button presses arriving together
cannot open two connections or interleave two playback starts; the later
request simply preempts the earlier track.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional

import discord

from soundboard import config
from soundboard.errors import VoiceConnectError, VoiceError, VoicePlaybackError
from soundboard.models.session import ConnectionState, PlaybackState, Track, VoiceSession

logger = logging.getLogger(__name__)

# What the transport raises for a refused join / move
_CONNECT_ERRORS = (asyncio.TimeoutError, discord.DiscordException, OSError, RuntimeError)

# What the transport raises when a source cannot be started
_PLAY_ERRORS = (discord.DiscordException, OSError, TypeError)


def clamp_volume(volume: float) -> float:
    return max(config.MIN_VOLUME, min(float(volume), config.MAX_VOLUME))


class VoiceSessionManager:
    """
    Owns the voice connection of every guild the bot is in.

    Attributes:
        bot: Discord bot instance used to resolve guilds and channels
        ffmpeg_path: Path to ffmpeg executable
        connect_timeout: Seconds allowed for a voice handshake
    """

    def __init__(self, bot, ffmpeg_path: str = "ffmpeg",
                 connect_timeout: float = config.VOICE_CONNECT_TIMEOUT):
        self.bot = bot
        self.ffmpeg_path = ffmpeg_path
        self.connect_timeout = connect_timeout
        self._sessions: Dict[int, VoiceSession] = {}
        self._locks: Dict[int, asyncio.Lock] = {}

    def _get_guild_lock(self, guild_id: int) -> asyncio.Lock:
        """Get or create the lock for a guild."""
        # No await between lookup and insert, so concurrent tasks share one lock.
        lock = self._locks.get(guild_id)
        if lock is None:
            lock = self._locks[guild_id] = asyncio.Lock()
        return lock

    def get_session(self, guild_id: int) -> Optional[VoiceSession]:
        return self._sessions.get(guild_id)

    def active_sessions(self) -> List[VoiceSession]:
        return [s for s in self._sessions.values() if s.is_connected]

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    async def connect(self, guild_id: int, channel_id: int) -> VoiceSession:
        """
        Join ``channel_id``, or reuse the guild's connection.

        Connecting again to the same channel is a no-op; a different
        channel moves the existing connection.

        Raises:
            VoiceConnectError: the channel cannot be joined
        """
        async with self._get_guild_lock(guild_id):
            return await self._connect(guild_id, channel_id)

    def _resolve_channel(self, guild_id: int, channel_id: int):
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            raise VoiceConnectError(guild_id, channel_id, "channel not found")
        if not isinstance(channel, (discord.VoiceChannel, discord.StageChannel)):
            raise VoiceConnectError(guild_id, channel_id, "not a voice channel")
        if channel.guild.id != guild_id:
            raise VoiceConnectError(guild_id, channel_id, "channel belongs to another guild")
        return channel

    async def _connect(self, guild_id: int, channel_id: int) -> VoiceSession:
        """Connect under the guild lock, which the caller already holds."""
        session = self._sessions.get(guild_id)

        if session and session.is_connected and session.voice_client.is_connected():
            current = session.voice_client.channel
            if current is not None and current.id != session.channel_id:
                logger.info(f"Voice session in guild {guild_id} was moved to {current.id} by the platform")
                session.channel_id = current.id
            if session.channel_id == channel_id:
                return session
            channel = self._resolve_channel(guild_id, channel_id)
            try:
                await session.voice_client.move_to(channel)
            except _CONNECT_ERRORS as e:
                await self._drop(session)
                raise VoiceConnectError(guild_id, channel_id, str(e) or type(e).__name__) from e
            logger.info(f"Moved voice session in guild {guild_id} from {session.channel_id} to {channel_id}")
            session.channel_id = channel_id
            return session

        if session is not None:
            # Connection dropped underneath us; start over.
            logger.info(f"Voice session in guild {guild_id} is no longer connected, reconnecting")
            await self._drop(session)

        channel = self._resolve_channel(guild_id, channel_id)
        session = VoiceSession(guild_id=guild_id, connection=ConnectionState.CONNECTING)
        self._sessions[guild_id] = session

        try:
            voice_client = channel.guild.voice_client
            if voice_client is not None and voice_client.is_connected():
                logger.info(f"Adopting existing voice client in guild {guild_id}")
                if voice_client.channel is None or voice_client.channel.id != channel_id:
                    await voice_client.move_to(channel)
            else:
                voice_client = await channel.connect(timeout=self.connect_timeout)
        except _CONNECT_ERRORS as e:
            self._sessions.pop(guild_id, None)
            session.connection = ConnectionState.DISCONNECTED
            raise VoiceConnectError(guild_id, channel_id, str(e) or type(e).__name__) from e
        except asyncio.CancelledError:
            self._sessions.pop(guild_id, None)
            session.connection = ConnectionState.DISCONNECTED
            raise

        session.voice_client = voice_client
        session.channel_id = channel_id
        session.connection = ConnectionState.CONNECTED
        session.playback = PlaybackState.IDLE
        session.track = None
        logger.info(f"Connected to voice channel {channel_id} in guild {guild_id}")
        return session

    async def _drop(self, session: VoiceSession) -> None:
        """Forget a session and close its transport, if any."""
        self._sessions.pop(session.guild_id, None)
        session.connection = ConnectionState.DISCONNECTED
        session.playback = PlaybackState.IDLE
        session.track = None
        voice_client, session.voice_client = session.voice_client, None
        if voice_client is None:
            return
        try:
            await voice_client.disconnect(force=True)
        except _CONNECT_ERRORS as e:
            logger.warning(f"Error disconnecting stale voice client in guild {session.guild_id}: {e}")

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    async def play_audio(self, guild_id: int, channel_id: int, file_path,
                         volume: float = config.DEFAULT_VOLUME) -> VoiceSession:
        """
        Play a file in ``channel_id``, replacing whatever is playing.

        Raises:
            VoiceConnectError: the channel cannot be joined
            VoicePlaybackError: the file cannot be opened or streamed
        """
        file_path = Path(file_path)
        volume = clamp_volume(volume)

        async with self._get_guild_lock(guild_id):
            session = await self._connect(guild_id, channel_id)
            voice_client = session.voice_client

            if not file_path.is_file():
                raise VoicePlaybackError(guild_id, file_path, "file not found")

            if voice_client.is_playing() or voice_client.is_paused():
                logger.info(f"Preempting {session.track.file_path if session.track else 'track'} in guild {guild_id}")
                voice_client.stop()
            session.track = None
            session.playback = PlaybackState.IDLE

            track = Track(file_path=file_path, volume=volume)
            try:
                source = self._create_source(file_path, volume)
                voice_client.play(source, after=self._make_after(guild_id, track))
            except _PLAY_ERRORS as e:
                raise VoicePlaybackError(guild_id, file_path, str(e) or type(e).__name__) from e

            session.track = track
            session.playback = PlaybackState.PLAYING
            logger.info(f"Playing {file_path.name} in guild {guild_id} (volume {volume:.2f})")
            return session

    def _create_source(self, file_path: Path, volume: float) -> discord.AudioSource:
        audio_source = discord.FFmpegPCMAudio(
            str(file_path),
            executable=self.ffmpeg_path,
            before_options="-nostdin",
        )
        return discord.PCMVolumeTransformer(audio_source, volume=volume)

    def _make_after(self, guild_id: int, track: Track):
        """Build the transport's end-of-track callback for ``track``."""
        loop = asyncio.get_running_loop()

        def after_playing(error):
            # Runs on the player thread.
            if error:
                logger.error(f"Playback error in guild {guild_id}: {error}")
            if loop.is_closed():
                return
            loop.call_soon_threadsafe(self._on_track_end, guild_id, track)

        return after_playing

    def _on_track_end(self, guild_id: int, track: Track) -> None:
        session = self._sessions.get(guild_id)
        if session is None or session.track is not track:
            logger.debug(f"Ignoring end of preempted track {track.file_path.name} in guild {guild_id}")
            return
        session.track = None
        session.playback = PlaybackState.IDLE
        logger.info(f"Finished {track.file_path.name} in guild {guild_id}")

    async def stop(self, guild_id: int) -> bool:
        """Stop the current track. Returns False if nothing was playing."""
        async with self._get_guild_lock(guild_id):
            session = self._sessions.get(guild_id)
            if session is None or session.track is None:
                return False
            session.voice_client.stop()
            session.playback = PlaybackState.STOPPED
            return True

    async def pause(self, guild_id: int) -> bool:
        async with self._get_guild_lock(guild_id):
            session = self._sessions.get(guild_id)
            if session is None or session.playback is not PlaybackState.PLAYING:
                return False
            session.voice_client.pause()
            session.playback = PlaybackState.PAUSED
            return True

    async def resume(self, guild_id: int) -> bool:
        async with self._get_guild_lock(guild_id):
            session = self._sessions.get(guild_id)
            if session is None or session.playback is not PlaybackState.PAUSED:
                return False
            session.voice_client.resume()
            session.playback = PlaybackState.PLAYING
            return True

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    async def leave(self, guild_id: int) -> bool:
        """
        Disconnect from the guild's voice channel.

        Returns:
            False if the bot was not connected

        Raises:
            VoiceError: the transport failed to disconnect (the session is
                forgotten regardless)
        """
        async with self._get_guild_lock(guild_id):
            session = self._sessions.pop(guild_id, None)
            voice_client = session.voice_client if session else None
            if voice_client is None:
                guild = self.bot.get_guild(guild_id)
                voice_client = guild.voice_client if guild else None

            if session is not None:
                session.voice_client = None
                session.connection = ConnectionState.DISCONNECTED
                session.playback = PlaybackState.IDLE
                session.track = None

            if voice_client is None:
                return False

            try:
                await voice_client.disconnect(force=True)
            except _CONNECT_ERRORS as e:
                raise VoiceError(f"Error leaving voice in guild {guild_id}: {e}") from e
            logger.info(f"Left voice in guild {guild_id}")
            return True

    def mark_disconnected(self, guild_id: int) -> None:
        """Record that the platform dropped the bot from voice."""
        session = self._sessions.get(guild_id)
        if session is not None and session.is_connected:
            logger.info(f"Voice connection in guild {guild_id} was closed by the platform")
            session.connection = ConnectionState.DISCONNECTED
            session.playback = PlaybackState.IDLE
            session.track = None

    def mark_moved(self, guild_id: int, channel_id: int) -> None:
        """Record that the platform moved the bot to another channel."""
        session = self._sessions.get(guild_id)
        if session is not None and session.is_connected and session.channel_id != channel_id:
            logger.info(f"Voice session in guild {guild_id} was moved to {channel_id} by the platform")
            session.channel_id = channel_id

    async def shutdown(self) -> None:
        """Leave every guild."""
        for guild_id in list(self._sessions):
            try:
                await self.leave(guild_id)
            except VoiceError as e:
                logger.warning(str(e))

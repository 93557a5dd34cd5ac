"""
Shared pytest fixtures for soundboard tests.
"""

import os
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import discord
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "data" / "test.db"


@pytest.fixture
def pool(db_path):
    """Open a small connection pool on a throwaway database file."""
    from soundboard.database import open_database

    pool = open_database(db_path, pool_size=2, timeout=1.0)
    yield pool
    pool.close()


@pytest.fixture
def audio_repository(pool):
    from soundboard.repositories.audio import AudioRepository

    repo = AudioRepository(pool)
    repo.create_table()
    return repo


@pytest.fixture
def settings_repository(pool):
    from soundboard.repositories.settings import SettingsRepository

    repo = SettingsRepository(pool)
    repo.create_table()
    return repo


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sounds_dir(tmp_path):
    """A sounds folder with two clips, one nested, and a file the scan must skip."""
    root = tmp_path / "Sounds"
    (root / "memes").mkdir(parents=True)
    (root / "airhorn.mp3").write_bytes(b"ID3")
    (root / "memes" / "bruh.mp3").write_bytes(b"ID3")
    (root / "notes.txt").write_text("not audio")
    return root


@pytest.fixture
def sample_audio(audio_repository, sounds_dir):
    """Insert the sample clips and return {name: AudioRow}."""
    airhorn, _ = audio_repository.upsert("airhorn", sounds_dir / "airhorn.mp3")
    bruh, _ = audio_repository.upsert("memes/bruh", sounds_dir / "memes" / "bruh.mp3")
    return {"airhorn": airhorn, "memes/bruh": bruh}


# ============================================================================
# Voice Transport Fakes
# ============================================================================

class FakeVoiceClient:
    """Stand-in for discord.VoiceClient that records what the manager asks of it."""

    def __init__(self, channel):
        self.channel = channel
        self.connected = True
        self.current = None  # (source, after)
        self.paused = False
        self.sources = []
        self.stopped_callbacks = []
        self.move_to = AsyncMock(side_effect=self._move_to)
        self.disconnect = AsyncMock(side_effect=self._disconnect)

    async def _move_to(self, channel):
        self.channel = channel

    async def _disconnect(self, force=False):
        self.connected = False
        self.current = None
        self.channel.guild.voice_client = None

    def is_connected(self):
        return self.connected

    def is_playing(self):
        return self.current is not None and not self.paused

    def is_paused(self):
        return self.current is not None and self.paused

    def play(self, source, after=None):
        if self.current is not None:
            raise discord.ClientException("Already playing audio.")
        self.current = (source, after)
        self.sources.append(source)

    def stop(self):
        if self.current is not None:
            _, after = self.current
            self.current = None
            self.paused = False
            self.stopped_callbacks.append(after)

    def pause(self):
        self.paused = True

    def resume(self):
        self.paused = False

    @property
    def source(self):
        return self.current[0] if self.current else None

    def finish(self, error=None):
        """Simulate the player thread reaching the end of the track."""
        _, after = self.current
        self.current = None
        after(error)


class FakeGuild:
    def __init__(self, guild_id):
        self.id = guild_id
        self.voice_client = None


def make_voice_channel(channel_id, guild):
    channel = Mock(spec=discord.VoiceChannel)
    channel.id = channel_id
    channel.guild = guild
    channel.mention = f"<#{channel_id}>"

    async def connect(timeout=None, **kwargs):
        client = FakeVoiceClient(channel)
        guild.voice_client = client
        return client

    channel.connect = AsyncMock(side_effect=connect)
    return channel


@pytest.fixture
def guilds():
    return {1: FakeGuild(1), 2: FakeGuild(2)}


@pytest.fixture
def channels(guilds):
    """Voice channels 10/11 in guild 1 and 20 in guild 2."""
    return {
        10: make_voice_channel(10, guilds[1]),
        11: make_voice_channel(11, guilds[1]),
        20: make_voice_channel(20, guilds[2]),
    }


@pytest.fixture
def fake_bot(guilds, channels):
    bot = Mock()
    bot.get_channel = Mock(side_effect=lambda channel_id: channels.get(channel_id))
    bot.get_guild = Mock(side_effect=lambda guild_id: guilds.get(guild_id))
    return bot


@pytest.fixture
def voice_manager(fake_bot, monkeypatch):
    """VoiceSessionManager whose audio sources are plain records instead of ffmpeg processes."""
    from soundboard.services.voice import VoiceSessionManager

    manager = VoiceSessionManager(fake_bot, ffmpeg_path="ffmpeg")
    monkeypatch.setattr(
        manager, "_create_source",
        lambda file_path, volume: SimpleNamespace(file_path=file_path, volume=volume),
    )
    return manager


@pytest.fixture
def bot_context(pool, voice_manager, sounds_dir):
    """BotContext wired to the test database and the fake voice transport."""
    from soundboard.context import BotContext
    from soundboard.repositories.audio import AudioRepository
    from soundboard.repositories.settings import SettingsRepository
    from soundboard.services.catalog import CatalogScanner

    audio_repo = AudioRepository(pool)
    return BotContext(
        environment=Mock(sounds_dir=sounds_dir),
        pool=pool,
        audio_repo=audio_repo,
        settings_repo=SettingsRepository(pool),
        voice=voice_manager,
        scanner=CatalogScanner(audio_repo, sounds_dir),
    )

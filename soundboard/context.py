"""
Process-wide state handed to every cog and the interaction router.
"""

import asyncio
import logging
from dataclasses import dataclass

from soundboard import config
from soundboard.database import ConnectionPool
from soundboard.environment import Environment
from soundboard.repositories.audio import AudioRepository
from soundboard.repositories.settings import SettingsRepository
from soundboard.services.catalog import CatalogScanner
from soundboard.services.voice import VoiceSessionManager

logger = logging.getLogger(__name__)

VOLUME_SETTING = "volume"


@dataclass
class BotContext:
    """
    Everything a handler needs, owned by the bot and passed explicitly.
    
    Attributes:
        environment: Loaded configuration
        pool: Shared SQLite connection pool
        audio_repo: Audio catalog store
        settings_repo: Scoped settings store
        voice: Per-guild voice sessions
        scanner: Catalog scan over the sounds directory
    """
    environment: Environment
    pool: ConnectionPool
    audio_repo: AudioRepository
    settings_repo: SettingsRepository
    voice: VoiceSessionManager
    scanner: CatalogScanner

    @classmethod
    def build(cls, bot, environment: Environment, pool: ConnectionPool) -> "BotContext":
        audio_repo = AudioRepository(pool)
        return cls(
            environment=environment,
            pool=pool,
            audio_repo=audio_repo,
            settings_repo=SettingsRepository(pool),
            voice=VoiceSessionManager(bot, ffmpeg_path=environment.ffmpeg_path),
            scanner=CatalogScanner(audio_repo, environment.sounds_dir),
        )

    def create_tables(self) -> None:
        """Create the catalog and settings tables if they are missing."""
        self.audio_repo.create_table()
        self.settings_repo.create_table()

    async def guild_volume(self, guild_id: int) -> float:
        """Playback volume for a guild, falling back to the global value."""
        value = await asyncio.to_thread(
            self.settings_repo.resolve_setting, VOLUME_SETTING, guild_id, config.DEFAULT_VOLUME
        )
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid volume setting {value!r} for guild {guild_id}")
            return config.DEFAULT_VOLUME

    async def close(self) -> None:
        await self.voice.shutdown()
        self.pool.close()

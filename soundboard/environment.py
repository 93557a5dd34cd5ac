"""
Environment configuration loader.

This module loads environment variables from .env file
for bot configuration.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from soundboard import config


class Environment:
    """
    Environment configuration container.
    
    Loads and provides access to environment variables
    needed for bot operation.
    
    Attributes:
        bot_token: Discord bot authentication token.
        ffmpeg_path: Path to FFmpeg executable.
        command_prefix: Prefix for text commands.
        db_path: SQLite database file.
        sounds_dir: Directory scanned into the audio catalog.
        db_pool_size: Maximum number of pooled database connections.
        log_level: Root logger level name.
        logs_dir: Directory for rotating log files.
    """
    
    def __init__(self, dotenv_path=None):
        """Load environment variables from .env file."""
        load_dotenv(dotenv_path)
        self.bot_token: str = os.getenv('DISCORD_BOT_TOKEN', '')
        self.ffmpeg_path: str = os.getenv('FFMPEG_PATH', 'ffmpeg')
        self.command_prefix: str = os.getenv('COMMAND_PREFIX', config.COMMAND_PREFIX)
        self.db_path: Path = Path(os.getenv('SQLITE_DB_FILE', str(config.DATABASE_PATH)))
        self.sounds_dir: Path = Path(os.getenv('SOUNDS_DIR', str(config.SOUNDS_DIR)))
        self.db_pool_size: int = _int_env('DB_POOL_SIZE', config.DB_POOL_SIZE)
        self.log_level: str = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.logs_dir: Path = Path(os.getenv('LOGS_DIR', str(config.LOGS_DIR)))


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return max(1, int(value))
    except ValueError:
        return default

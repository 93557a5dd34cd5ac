"""
Centralized configuration constants for the soundboard bot.

Values here are defaults; anything deployment specific is read from the
environment by ``soundboard.environment.Environment``.
"""

from pathlib import Path

# ============================================================================
# Paths
# ============================================================================

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.absolute()

# Sound files directory scanned into the catalog
SOUNDS_DIR = PROJECT_ROOT / "Sounds"

# Database path
DATABASE_PATH = PROJECT_ROOT / "database.db"

# Daily rotating logs
LOGS_DIR = PROJECT_ROOT / "Logs"


# ============================================================================
# Discord Configuration
# ============================================================================

# Bot command prefix (for text commands, if any)
COMMAND_PREFIX = "*"

# Buttons per row and rows per message allowed by Discord
BUTTONS_PER_ROW = 5
ROWS_PER_MESSAGE = 5


# ============================================================================
# Storage & Playback
# ============================================================================

# Maximum number of SQLite connections held by the pool
DB_POOL_SIZE = 4

# Seconds a checkout waits for a free connection
DB_POOL_TIMEOUT = 5.0

# Seconds to wait for a voice channel handshake
VOICE_CONNECT_TIMEOUT = 10.0

# Allowed per-guild playback volume
MIN_VOLUME = 0.1
MAX_VOLUME = 2.0
DEFAULT_VOLUME = 1.0

# Files picked up by the catalog scan
AUDIO_EXTENSIONS = (".mp3", ".wav", ".ogg", ".flac", ".m4a")

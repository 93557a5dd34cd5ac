"""
Voice session state, owned by ``VoiceSessionManager``.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional


class ConnectionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class PlaybackState(enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass(eq=False)
class Track:
    """
    Handle for one started playback.

    Compared by identity, so replaying the same file yields a new track
    and a late end notification for the old one can be told apart.
    """
    file_path: Path
    volume: float = 1.0
    started_at: datetime = field(default_factory=datetime.now)


@dataclass
class VoiceSession:
    """
    The single voice connection of one guild.
    
    Attributes:
        guild_id: Guild the session belongs to
        channel_id: Connected voice channel, None while disconnected
        voice_client: Transport handle returned by the platform
        connection: Connection lifecycle state
        playback: Playback state of the current track
        track: Track being played, None when idle
    """
    guild_id: int
    channel_id: Optional[int] = None
    voice_client: Any = None
    connection: ConnectionState = ConnectionState.DISCONNECTED
    playback: PlaybackState = PlaybackState.IDLE
    track: Optional[Track] = None

    @property
    def is_connected(self) -> bool:
        return self.connection is ConnectionState.CONNECTED

    @property
    def is_playing(self) -> bool:
        return self.playback is PlaybackState.PLAYING

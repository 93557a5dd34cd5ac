"""
Exceptions raised while serving interactions.

Everything a single interaction can fail with derives from
``SoundboardError`` so handlers can report it without touching the
rest of the process. ``StartupError`` is the only fatal one.
"""


class SoundboardError(Exception):
    """Base class for reportable, non-fatal failures."""


class UnknownAudioTrackError(SoundboardError):
    """A catalog lookup found no row for the selector."""

    def __init__(self, selector):
        self.selector = selector
        super().__init__(f"No audio track matches {selector}")


class MissingGuildContextError(SoundboardError):
    """The interaction did not originate in a guild."""

    def __init__(self, message: str = "Interaction has no guild to play into"):
        super().__init__(message)


class MissingVoiceChannelError(SoundboardError):
    """The invoking member is not in a voice channel."""

    def __init__(self, message: str = "You need to be in a voice channel"):
        super().__init__(message)


class UnrecognizedCustomIdError(SoundboardError):
    """A button carried a custom id this bot does not understand."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Unrecognized button custom_id for component interaction. Value={value!r}")


class VoiceError(SoundboardError):
    """The voice transport refused a request."""


class VoiceConnectError(VoiceError):
    """Joining or moving to a voice channel failed."""

    def __init__(self, guild_id: int, channel_id: int, reason: str):
        self.guild_id = guild_id
        self.channel_id = channel_id
        self.reason = reason
        super().__init__(f"Could not connect to channel {channel_id} in guild {guild_id}: {reason}")


class VoicePlaybackError(VoiceError):
    """An audio file could not be opened or streamed."""

    def __init__(self, guild_id: int, file_path, reason: str):
        self.guild_id = guild_id
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Could not play {file_path} in guild {guild_id}: {reason}")


class PoolTimeoutError(SoundboardError):
    """No pooled database connection became free in time."""


class StartupError(Exception):
    """The database could not be prepared; the bot must not start."""

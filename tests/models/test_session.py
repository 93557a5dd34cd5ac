"""
Tests for soundboard/models/session.py.
"""

from pathlib import Path

from soundboard.models.session import ConnectionState, PlaybackState, Track, VoiceSession


class TestVoiceSession:

    def test_new_session_is_disconnected_and_idle(self):
        session = VoiceSession(guild_id=1)

        assert session.connection is ConnectionState.DISCONNECTED
        assert session.playback is PlaybackState.IDLE
        assert session.track is None
        assert session.is_connected is False
        assert session.is_playing is False

    def test_tracks_compare_by_identity(self):
        first = Track(file_path=Path("airhorn.mp3"))
        second = Track(file_path=Path("airhorn.mp3"))

        assert first == first
        assert first != second

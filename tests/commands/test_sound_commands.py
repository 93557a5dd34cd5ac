"""
Tests for soundboard/commands - slash command handlers.

Command callbacks are invoked directly with a mocked ApplicationContext.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from soundboard.errors import MissingVoiceChannelError, UnknownAudioTrackError
from soundboard.models.session import PlaybackState


def make_ctx(guild_id=1, voice_channel=None):
    ctx = Mock()
    ctx.guild_id = guild_id
    ctx.author.voice = SimpleNamespace(channel=voice_channel) if voice_channel else None
    ctx.defer = AsyncMock()
    ctx.respond = AsyncMock()
    ctx.followup.send = AsyncMock()
    ctx.command.qualified_name = "play"
    return ctx


@pytest.fixture
def sound_cog(bot_context):
    from soundboard.commands.sound import SoundCog

    bot_context.create_tables()
    return SoundCog(Mock(), bot_context)


@pytest.fixture
def admin_cog(bot_context):
    from soundboard.commands.admin import AdminCog

    bot_context.create_tables()
    return AdminCog(Mock(), bot_context)


class TestSoundCommands:

    @pytest.mark.asyncio
    async def test_play_by_name(self, sound_cog, bot_context, sample_audio, channels):
        ctx = make_ctx(voice_channel=channels[10])

        await sound_cog.play.callback(sound_cog, ctx, "airhorn")

        session = bot_context.voice.get_session(1)
        assert session.playback is PlaybackState.PLAYING
        assert session.track.file_path == sample_audio["airhorn"].audio_file
        ctx.respond.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_play_unknown_name(self, sound_cog, sample_audio, channels):
        ctx = make_ctx(voice_channel=channels[10])

        with pytest.raises(UnknownAudioTrackError):
            await sound_cog.play.callback(sound_cog, ctx, "does-not-exist")

    @pytest.mark.asyncio
    async def test_play_requires_voice_channel(self, sound_cog, sample_audio):
        ctx = make_ctx()

        with pytest.raises(MissingVoiceChannelError):
            await sound_cog.play.callback(sound_cog, ctx, "airhorn")

    @pytest.mark.asyncio
    async def test_join_and_leave(self, sound_cog, bot_context, channels):
        ctx = make_ctx(voice_channel=channels[10])

        await sound_cog.join.callback(sound_cog, ctx)
        assert bot_context.voice.get_session(1).is_connected

        await sound_cog.leave.callback(sound_cog, ctx)
        assert bot_context.voice.get_session(1) is None

    @pytest.mark.asyncio
    async def test_sounds_posts_board(self, sound_cog, sample_audio):
        ctx = make_ctx()

        await sound_cog.sounds.callback(sound_cog, ctx)

        view = ctx.respond.await_args.kwargs["view"]
        assert {item.custom_id for item in view.children} == {
            f"play:{row.id}" for row in sample_audio.values()
        }
        ctx.followup.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stop_when_idle(self, sound_cog):
        ctx = make_ctx()

        await sound_cog.stop.callback(sound_cog, ctx)

        ctx.respond.assert_awaited_once_with("Nothing is playing.", ephemeral=True)

    @pytest.mark.asyncio
    async def test_reportable_error_is_shown_to_user(self, sound_cog):
        ctx = make_ctx()
        error = SimpleNamespace(original=MissingVoiceChannelError())

        await sound_cog.cog_command_error(ctx, error)

        message = ctx.respond.await_args.args[0]
        assert "voice channel" in message
        assert ctx.respond.await_args.kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_unexpected_error_is_hidden(self, sound_cog):
        ctx = make_ctx()
        error = SimpleNamespace(original=KeyError("boom"))

        await sound_cog.cog_command_error(ctx, error)

        ctx.respond.assert_awaited_once_with("⚠️ Something went wrong.", ephemeral=True)


class TestAdminCommands:

    @pytest.mark.asyncio
    async def test_volume_is_stored_per_guild(self, admin_cog, bot_context):
        ctx = make_ctx(guild_id=1)

        await admin_cog.volume.callback(admin_cog, ctx, 5.0)

        assert bot_context.settings_repo.get_setting("volume", scope="1") == 2.0
        assert await bot_context.guild_volume(1) == 2.0
        assert await bot_context.guild_volume(2) == 1.0

    @pytest.mark.asyncio
    async def test_scan_imports_sounds(self, admin_cog, bot_context):
        ctx = make_ctx()

        await admin_cog.scan.callback(admin_cog, ctx, False)

        assert bot_context.audio_repo.count() == 2
        assert "2 added" in ctx.respond.await_args.args[0]

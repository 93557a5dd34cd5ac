"""
Tests for soundboard/ui/views/sounds.py - sound board views.

Views are built inside a coroutine because py-cord views expect a running loop.
"""

from pathlib import Path

import pytest

from soundboard.models.audio import AudioRow
from soundboard.ui.views.sounds import MAX_LABEL_LENGTH, PAGE_SIZE, SoundBoardView, build_sound_board


def make_rows(count):
    return [AudioRow(id=i + 1, name=f"sound{i + 1}", audio_file=Path(f"/sounds/sound{i + 1}.mp3"))
            for i in range(count)]


class TestSoundBoard:

    @pytest.mark.asyncio
    async def test_buttons_carry_play_custom_ids(self):
        view = SoundBoardView(make_rows(3))

        assert [item.custom_id for item in view.children] == ["play:1", "play:2", "play:3"]
        assert [item.label for item in view.children] == ["sound1", "sound2", "sound3"]
        assert view.timeout is None

    @pytest.mark.asyncio
    async def test_five_buttons_per_row(self):
        view = SoundBoardView(make_rows(PAGE_SIZE))

        rows = [item.row for item in view.children]
        assert max(rows) == 4
        assert rows.count(0) == 5

    @pytest.mark.asyncio
    async def test_long_names_are_truncated(self):
        row = AudioRow(id=7, name="x" * 120, audio_file=Path("/sounds/long.mp3"))

        view = SoundBoardView([row])

        assert len(view.children[0].label) == MAX_LABEL_LENGTH

    @pytest.mark.asyncio
    async def test_too_many_rows_for_one_message(self):
        with pytest.raises(ValueError):
            SoundBoardView(make_rows(PAGE_SIZE + 1))

    @pytest.mark.asyncio
    async def test_catalog_is_split_into_pages(self):
        boards = build_sound_board(make_rows(30))

        assert [len(view.children) for view in boards] == [25, 5]
        assert boards[1].children[0].custom_id == "play:26"

    @pytest.mark.asyncio
    async def test_empty_catalog(self):
        assert build_sound_board([]) == []

import discord
from discord.ui import Button, View
from typing import List, Sequence

from soundboard import config
from soundboard.models.audio import AudioRow
from soundboard.models.button import PlayAudio

# Discord caps button labels at 80 characters
MAX_LABEL_LENGTH = 80
PAGE_SIZE = config.BUTTONS_PER_ROW * config.ROWS_PER_MESSAGE


class SoundBoardView(View):
    """
    One message worth of play buttons.

    The buttons carry ``play:<id>`` custom ids and no callback of their
    own; presses are routed by the InteractionRouter, which also works for
    boards posted before a restart.
    """

    def __init__(self, rows: Sequence[AudioRow]):
        super().__init__(timeout=None)
        if len(rows) > PAGE_SIZE:
            raise ValueError(f"A sound board message holds at most {PAGE_SIZE} buttons")
        self.rows = list(rows)

        for index, row in enumerate(self.rows):
            self.add_item(Button(
                label=row.name[:MAX_LABEL_LENGTH],
                custom_id=PlayAudio(row.id).custom_id,
                style=discord.ButtonStyle.secondary,
                row=index // config.BUTTONS_PER_ROW,
            ))


def build_sound_board(rows: Sequence[AudioRow]) -> List[SoundBoardView]:
    """Split the catalog into as many board messages as needed."""
    rows = list(rows)
    return [SoundBoardView(rows[start:start + PAGE_SIZE]) for start in range(0, len(rows), PAGE_SIZE)]

"""
Custom ids carried by sound board buttons.

Buttons are encoded as ``play:<row id>``. Decoding is total: anything that
does not match comes back as ``UnknownButton`` holding the raw text so the
caller decides how to report it.
"""

import re
from dataclasses import dataclass
from typing import Union

PLAY_PREFIX = "play"

_PLAY_RE = re.compile(r"play:([0-9]+)")


@dataclass(frozen=True)
class PlayAudio:
    """Play the catalog row with this id."""
    row_id: int

    @property
    def custom_id(self) -> str:
        return f"{PLAY_PREFIX}:{self.row_id}"


@dataclass(frozen=True)
class UnknownButton:
    """A custom id that is not one of ours."""
    raw: str


ButtonCustomId = Union[PlayAudio, UnknownButton]


def decode_custom_id(raw) -> ButtonCustomId:
    """Parse a button custom id. Never raises."""
    if not isinstance(raw, str):
        return UnknownButton("" if raw is None else str(raw))

    match = _PLAY_RE.fullmatch(raw)
    if match is None:
        return UnknownButton(raw)
    try:
        row_id = int(match.group(1))
    except ValueError:
        # Longer than int() will convert
        return UnknownButton(raw)
    return PlayAudio(row_id)


def encode_custom_id(action: PlayAudio) -> str:
    return action.custom_id

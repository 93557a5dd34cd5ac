"""
Data models (DTOs) for the soundboard bot.

These dataclasses provide type-safe representations of database entities,
voice sessions and button payloads.
"""

from soundboard.models.audio import AudioRow, ById, ByName, AudioSelector
from soundboard.models.button import (
    PlayAudio, UnknownButton, ButtonCustomId, decode_custom_id, encode_custom_id,
)
from soundboard.models.session import ConnectionState, PlaybackState, Track, VoiceSession

__all__ = [
    "AudioRow",
    "ById",
    "ByName",
    "AudioSelector",
    "PlayAudio",
    "UnknownButton",
    "ButtonCustomId",
    "decode_custom_id",
    "encode_custom_id",
    "ConnectionState",
    "PlaybackState",
    "Track",
    "VoiceSession",
]

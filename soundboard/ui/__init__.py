"""
UI components (views and buttons) for the soundboard bot.
"""

from soundboard.ui.views.sounds import SoundBoardView, build_sound_board

__all__ = [
    "SoundBoardView",
    "build_sound_board",
]

"""
Service layer for business logic.

Services compose repositories and the voice transport:
- VoiceSessionManager: one voice connection per guild, playback
- CatalogScanner: fills the audio catalog from the sounds directory
- InteractionRouter: routes ready and button events to the above
"""

from soundboard.services.voice import VoiceSessionManager
from soundboard.services.catalog import CatalogScanner, ScanResult
from soundboard.services.interactions import InteractionRouter

__all__ = [
    "VoiceSessionManager",
    "CatalogScanner",
    "ScanResult",
    "InteractionRouter",
]

"""
Repository layer for data access.

Repositories provide an abstraction over the database, enabling:
- Single Responsibility: Each repository handles one entity type
- Testability: Can be pointed at a throwaway database in unit tests
- Consistency: Standardized query helpers over a shared connection pool
"""

from soundboard.repositories.base import BaseRepository
from soundboard.repositories.audio import AudioRepository
from soundboard.repositories.settings import SettingsRepository, GLOBAL_SCOPE

__all__ = [
    "BaseRepository",
    "AudioRepository",
    "SettingsRepository",
    "GLOBAL_SCOPE",
]

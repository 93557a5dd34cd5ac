"""
Audio catalog models.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class AudioRow:
    """
    Represents a playable clip in the catalog.
    
    Attributes:
        id: Primary key, never reused or changed once assigned
        name: Unique display name, also used for lookup by name
        audio_file: Absolute path of the file on disk
    """
    id: int
    name: str
    audio_file: Path

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ById:
    """Select a catalog row by primary key."""
    id: int

    def __str__(self) -> str:
        return f"id={self.id}"


@dataclass(frozen=True)
class ByName:
    """Select a catalog row by its unique name."""
    name: str

    def __str__(self) -> str:
        return f"name={self.name!r}"


AudioSelector = Union[ById, ByName]

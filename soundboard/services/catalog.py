"""
Catalog scan: mirror the sounds directory into the audio table.
"""

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

from soundboard import config
from soundboard.repositories.audio import AudioRepository, ADDED, UPDATED

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    failed: int = 0
    removed: int = 0

    @property
    def total(self) -> int:
        return self.added + self.updated + self.unchanged

    def __str__(self) -> str:
        return (f"{self.added} added, {self.updated} updated, {self.unchanged} unchanged, "
                f"{self.removed} removed, {self.failed} failed")


class CatalogScanner:
    """
    Walks the sounds directory and upserts one catalog row per audio file.

    Rows are named after the file path relative to the sounds directory,
    without extension (``memes/airhorn``), and keyed by absolute path, so
    re-scanning never changes the id of a known file.
    """

    def __init__(self, audio_repo: AudioRepository, sounds_dir,
                 extensions: Sequence[str] = config.AUDIO_EXTENSIONS):
        self.audio_repo = audio_repo
        self.sounds_dir = Path(sounds_dir)
        self.extensions = tuple(ext.lower() for ext in extensions)

    def iter_audio_files(self) -> Iterator[Path]:
        if not self.sounds_dir.is_dir():
            logger.warning(f"Sounds directory {self.sounds_dir} does not exist")
            return
        for path in sorted(self.sounds_dir.rglob("*")):
            if path.is_file() and path.suffix.lower() in self.extensions:
                yield path

    def name_for(self, path: Path) -> str:
        return path.relative_to(self.sounds_dir).with_suffix("").as_posix()

    def scan(self, prune: bool = False) -> ScanResult:
        """
        Upsert every audio file found on disk.

        Args:
            prune: Also delete rows whose file no longer exists

        Returns:
            Counts of what changed
        """
        result = ScanResult()
        for path in self.iter_audio_files():
            name = self.name_for(path)
            try:
                row, status = self.audio_repo.upsert(name, path.resolve())
            except sqlite3.IntegrityError as e:
                logger.warning(f"Skipping {path}: name '{name}' already taken ({e})")
                result.failed += 1
                continue

            if status == ADDED:
                logger.info(f"Added '{row.name}' (id={row.id})")
                result.added += 1
            elif status == UPDATED:
                logger.info(f"Renamed id={row.id} to '{row.name}'")
                result.updated += 1
            else:
                result.unchanged += 1

        if prune:
            for row in self.audio_repo.get_all(limit=-1):
                if not row.audio_file.is_file():
                    self.audio_repo.delete(row.id)
                    logger.info(f"Removed '{row.name}' (id={row.id}), file is gone")
                    result.removed += 1

        logger.info(f"Catalog scan of {self.sounds_dir}: {result}")
        return result

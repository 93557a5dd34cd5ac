"""
Audio repository for catalog lookups and scan upserts.
"""

from pathlib import Path
from typing import Optional, List, Tuple
import sqlite3

from rapidfuzz import fuzz, process

from soundboard.models.audio import AudioRow, AudioSelector, ById, ByName
from soundboard.repositories.base import BaseRepository

ADDED = "added"
UPDATED = "updated"
UNCHANGED = "unchanged"

# Range of an SQLite INTEGER
SQLITE_MIN_INT = -2 ** 63
SQLITE_MAX_INT = 2 ** 63 - 1


class AudioRepository(BaseRepository[AudioRow]):
    """
    Repository for AudioRow entities.
    
    Handles all database operations related to the catalog, including:
    - Lookup by id or by name
    - Upsert by file path (used by the catalog scan)
    - Fuzzy name search for autocomplete
    """

    def create_table(self) -> None:
        """Create the audio table. Safe to call on every startup."""
        self._execute_script(
            """
            CREATE TABLE IF NOT EXISTS audio (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE COLLATE NOCASE,
                audio_file TEXT NOT NULL UNIQUE
            );
            """
        )

    def _row_to_entity(self, row: sqlite3.Row) -> AudioRow:
        """Convert a database row to an AudioRow entity."""
        return AudioRow(
            id=row['id'],
            name=row['name'],
            audio_file=Path(row['audio_file']),
        )

    def find_audio_row(self, selector: AudioSelector) -> Optional[AudioRow]:
        """
        Look up a single catalog row.
        
        Args:
            selector: ById or ByName
            
        Returns:
            The matching AudioRow, or None when nothing matches
        """
        if isinstance(selector, ById):
            return self.get_by_id(selector.id)
        if isinstance(selector, ByName):
            return self.get_by_name(selector.name)
        raise TypeError(f"Unsupported audio selector: {selector!r}")

    def get_by_id(self, id: int) -> Optional[AudioRow]:
        """Get an audio row by its database ID."""
        if not SQLITE_MIN_INT <= id <= SQLITE_MAX_INT:
            return None
        row = self._execute_one(
            "SELECT * FROM audio WHERE id = ?",
            (id,)
        )
        return self._row_to_entity(row) if row else None

    def get_by_name(self, name: str) -> Optional[AudioRow]:
        """Get an audio row by name, ignoring case."""
        row = self._execute_one(
            "SELECT * FROM audio WHERE name = ?",
            (name.strip(),)
        )
        return self._row_to_entity(row) if row else None

    def get_by_file(self, audio_file) -> Optional[AudioRow]:
        """Get the audio row stored for a file path."""
        row = self._execute_one(
            "SELECT * FROM audio WHERE audio_file = ?",
            (str(audio_file),)
        )
        return self._row_to_entity(row) if row else None

    def get_all(self, limit: int = 100) -> List[AudioRow]:
        """Get catalog rows ordered by name."""
        rows = self._execute(
            "SELECT * FROM audio ORDER BY name LIMIT ?",
            (limit,)
        )
        return [self._row_to_entity(row) for row in rows]

    def count(self) -> int:
        row = self._execute_one("SELECT COUNT(*) AS count FROM audio")
        return row['count'] if row else 0

    def upsert(self, name: str, audio_file) -> Tuple[AudioRow, str]:
        """
        Insert a clip or rename the row already stored for its path.
        
        The id of an existing row never changes.
        
        Returns:
            (row, status) where status is ADDED, UPDATED or UNCHANGED
        
        Raises:
            sqlite3.IntegrityError: another file already uses ``name``
        """
        audio_file = str(audio_file)
        with self._pool.connection() as conn:
            existing = conn.execute(
                "SELECT * FROM audio WHERE audio_file = ?",
                (audio_file,)
            ).fetchone()

            if existing is None:
                cursor = conn.execute(
                    "INSERT INTO audio (name, audio_file) VALUES (?, ?)",
                    (name, audio_file)
                )
                return AudioRow(cursor.lastrowid, name, Path(audio_file)), ADDED

            if existing['name'] == name:
                return self._row_to_entity(existing), UNCHANGED

            conn.execute(
                "UPDATE audio SET name = ? WHERE id = ?",
                (name, existing['id'])
            )
            return AudioRow(existing['id'], name, Path(audio_file)), UPDATED

    def delete(self, audio_id: int) -> bool:
        """Delete a catalog row. Returns True if a row was removed."""
        return self._execute_write("DELETE FROM audio WHERE id = ?", (audio_id,)) > 0

    def search_names(self, query: str, limit: int = 25) -> List[str]:
        """
        Fuzzy-match catalog names for autocomplete.
        
        Args:
            query: What the user typed so far
            limit: Maximum number of names
            
        Returns:
            Names ordered by similarity, best first
        """
        names = [row['name'] for row in self._execute("SELECT name FROM audio ORDER BY name")]
        query = query.strip()
        if not query:
            return names[:limit]

        matches = process.extract(
            query,
            names,
            scorer=fuzz.WRatio,
            processor=str.lower,
            limit=limit,
            score_cutoff=50,
        )
        return [name for name, _score, _index in matches]

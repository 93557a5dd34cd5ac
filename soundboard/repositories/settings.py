"""
Settings repository for scoped key/value configuration.
"""

from typing import Optional, List, Any
import sqlite3

from soundboard.repositories.base import BaseRepository

GLOBAL_SCOPE = "global"


def _convert(value: str) -> Any:
    """Turn a stored text value back into bool/int/float where it looks like one."""
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


class SettingsRepository(BaseRepository[dict]):
    """
    Repository for bot settings.
    
    Settings live under a scope: ``"global"`` for bot-wide values or a
    guild id for per-guild overrides.
    """

    def create_table(self) -> None:
        """Create the settings table. Safe to call on every startup."""
        self._execute_script(
            """
            CREATE TABLE IF NOT EXISTS settings (
                scope TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                PRIMARY KEY (scope, key)
            );
            """
        )

    def _row_to_entity(self, row: sqlite3.Row) -> dict:
        """Convert a database row to a dict."""
        return {
            "scope": row['scope'],
            "key": row['key'],
            "value": _convert(row['value']),
        }

    def get_by_id(self, id: str) -> Optional[dict]:
        """Get a global setting by its key (ID)."""
        row = self._execute_one(
            "SELECT * FROM settings WHERE scope = ? AND key = ?",
            (GLOBAL_SCOPE, id)
        )
        return self._row_to_entity(row) if row else None

    def get_all(self, limit: int = 100) -> List[dict]:
        """Get all settings of every scope."""
        rows = self._execute(
            "SELECT * FROM settings ORDER BY scope, key LIMIT ?",
            (limit,)
        )
        return [self._row_to_entity(row) for row in rows]

    def get_setting(self, key: str, scope: str = GLOBAL_SCOPE, default: Any = None) -> Any:
        """
        Get a setting value by key.
        
        Args:
            key: Setting key
            scope: "global" or a guild id
            default: Default value if not found
            
        Returns:
            Setting value or default
        """
        row = self._execute_one(
            "SELECT value FROM settings WHERE scope = ? AND key = ?",
            (str(scope), key)
        )
        if row:
            return _convert(row['value'])
        return default

    def resolve_setting(self, key: str, guild_id: Optional[int], default: Any = None) -> Any:
        """Look up a guild override first, then the global value, then ``default``."""
        if guild_id is not None:
            value = self.get_setting(key, scope=str(guild_id))
            if value is not None:
                return value
        return self.get_setting(key, scope=GLOBAL_SCOPE, default=default)

    def set_setting(self, key: str, value: Any, scope: str = GLOBAL_SCOPE) -> bool:
        """
        Set a setting value.
        
        Args:
            key: Setting key
            value: Setting value
            scope: "global" or a guild id
            
        Returns:
            True if set successfully
        """
        self._execute_write(
            """
            INSERT INTO settings (scope, key, value) VALUES (?, ?, ?)
            ON CONFLICT(scope, key) DO UPDATE SET value = excluded.value
            """,
            (str(scope), key, str(value))
        )
        return True

    def delete_setting(self, key: str, scope: str = GLOBAL_SCOPE) -> bool:
        """Remove a setting. Returns True if it existed."""
        return self._execute_write(
            "DELETE FROM settings WHERE scope = ? AND key = ?",
            (str(scope), key)
        ) > 0

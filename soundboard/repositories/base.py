"""
Base repository class providing common database operations.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, List
import sqlite3

from soundboard.database import ConnectionPool

T = TypeVar('T')


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base class for all repositories.
    
    Every helper borrows one connection from the pool for the duration of
    a single statement (or batch) and returns it afterwards.
    
    This follows the Repository Pattern, which:
    - Centralizes data access logic
    - Provides a collection-like interface for entities
    - Enables swapping storage backends (e.g., for testing)
    """

    def __init__(self, pool: ConnectionPool):
        """
        Initialize the repository with a connection pool.
        
        Args:
            pool: Pool shared by every repository of the process
        """
        self._pool = pool

    @property
    def pool(self) -> ConnectionPool:
        return self._pool

    def _execute(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        """
        Execute a query and return all results.
        
        Args:
            query: SQL query string
            params: Query parameters
            
        Returns:
            List of Row objects
        """
        with self._pool.connection() as conn:
            return conn.execute(query, params).fetchall()

    def _execute_one(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """
        Execute a query and return the first result.
        
        Args:
            query: SQL query string
            params: Query parameters
            
        Returns:
            Single Row or None
        """
        with self._pool.connection() as conn:
            return conn.execute(query, params).fetchone()

    def _execute_write(self, query: str, params: tuple = ()) -> int:
        """
        Execute a write query (INSERT, UPDATE, DELETE).
        
        Args:
            query: SQL query string
            params: Query parameters
            
        Returns:
            Last row ID for INSERT, or rows affected for UPDATE/DELETE
        """
        with self._pool.connection() as conn:
            cursor = conn.execute(query, params)
            if query.lstrip().upper().startswith("INSERT"):
                return cursor.lastrowid
            return cursor.rowcount

    def _execute_script(self, script: str) -> None:
        """Run DDL statements in one go."""
        with self._pool.connection() as conn:
            conn.executescript(script)

    @abstractmethod
    def create_table(self) -> None:
        """Create the backing table if it does not exist."""
        pass

    @abstractmethod
    def get_by_id(self, id) -> Optional[T]:
        """Get an entity by its ID."""
        pass

    @abstractmethod
    def get_all(self, limit: int = 100) -> List[T]:
        """Get all entities, with optional limit."""
        pass

    @abstractmethod
    def _row_to_entity(self, row: sqlite3.Row) -> T:
        """Convert a database row to an entity object."""
        pass

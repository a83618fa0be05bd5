# Area: Store
"""
team_challenge._store.database — Database Initialization
========================================================

Handles SQLite database initialization and connection management
for match, participant and question-bank persistence.
"""

import json
import sqlite3
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger("team_challenge.store.database")

# Path to schema file
SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def get_connection(db_path: str = "team_challenge.db") -> sqlite3.Connection:
    """
    Get a database connection.

    Args:
        db_path: Path to the SQLite database file

    Returns:
        SQLite connection with row factory set and foreign keys enforced
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_database(db_path: str = "team_challenge.db") -> None:
    """
    Initialize the database with schema.

    Args:
        db_path: Path to the SQLite database file
    """
    conn = get_connection(db_path)
    try:
        with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
            schema = f.read()
        conn.executescript(schema)
        conn.commit()
        logger.info(f"Database initialized at {db_path}")
    finally:
        conn.close()


class BaseRepository:
    """
    Base class for database repositories.

    Provides common database operations, connection management and
    JSON column encoding.
    """

    # Columns stored as JSON text; subclasses override
    JSON_COLUMNS: Iterable[str] = ()

    def __init__(self, db_path: str = "team_challenge.db"):
        """
        Initialize repository.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        """Get a database connection."""
        return get_connection(self.db_path)

    def _execute(
        self, query: str, params: tuple = (), fetch: bool = False
    ) -> Optional[list]:
        """
        Execute a query.

        Args:
            query: SQL query string
            params: Query parameters
            fetch: If True, fetch and return results

        Returns:
            Decoded rows if fetch=True, else None
        """
        conn = self._get_conn()
        try:
            cursor = conn.execute(query, params)
            if fetch:
                return [self._decode(dict(row)) for row in cursor.fetchall()]
            conn.commit()
            return None
        finally:
            conn.close()

    def _execute_one(self, query: str, params: tuple = ()) -> Optional[dict]:
        """Execute query and return single result."""
        results = self._execute(query, params, fetch=True)
        return results[0] if results else None

    def _execute_write(self, query: str, params: tuple = ()) -> int:
        """Execute a write and return the number of affected rows."""
        conn = self._get_conn()
        try:
            cursor = conn.execute(query, params)
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def _encode(self, column: str, value: Any) -> Any:
        if column in self.JSON_COLUMNS and value is not None:
            return json.dumps(value)
        return value

    def _decode(self, row: Dict[str, Any]) -> Dict[str, Any]:
        for column in self.JSON_COLUMNS:
            if isinstance(row.get(column), str):
                row[column] = json.loads(row[column])
        return row

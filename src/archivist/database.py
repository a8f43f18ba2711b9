"""
SQLite-backed user store.

Passed to the job factory as the ``db`` process option so jobs can be
attributed to the user who queued them.
"""

import logging
import sqlite3
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class User(BaseModel):
    """A platform user that can create jobs."""
    id: int = Field(..., description="User identifier")
    username: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = None
    active: bool = True


class Database:
    """Data-access handle for user records."""

    def __init__(self, db_path: str = "archivist.db"):
        self.db_path = db_path

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create the users table if it does not exist."""
        conn = self._get_connection()
        try:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username VARCHAR(100) UNIQUE NOT NULL,
                    email VARCHAR(255),
                    active BOOLEAN DEFAULT TRUE,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            conn.commit()
            logger.info(f"Database initialized at {self.db_path}")
        finally:
            conn.close()

    def add_user(self, username: str, email: Optional[str] = None, active: bool = True) -> int:
        """Insert a user and return its id."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                'INSERT INTO users (username, email, active) VALUES (?, ?, ?)',
                (username, email, active)
            )
            conn.commit()
            return cursor.lastrowid
        finally:
            conn.close()

    def find_user(self, user_id: int) -> Optional[User]:
        """Look up a user by id; None if there is no such user."""
        conn = self._get_connection()
        try:
            row = conn.execute(
                'SELECT id, username, email, active FROM users WHERE id = ?',
                (user_id,)
            ).fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        return User(id=row['id'], username=row['username'], email=row['email'], active=bool(row['active']))

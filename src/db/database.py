"""
Database connection and key-value slot storage
"""
import asyncio
import json
import aiosqlite
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
import logging

logger = logging.getLogger(__name__)


class Database:
    """SQLite backed key-value store, one JSON document per key"""

    def __init__(self, db_path: str = "./data/insight.db"):
        self.db_path = db_path
        self._conn: Optional[aiosqlite.Connection] = None
        # Writers read-modify-write whole documents
        self.write_lock = asyncio.Lock()

        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self):
        """Establish database connection"""
        self._conn = await aiosqlite.connect(self.db_path)
        self._conn.row_factory = aiosqlite.Row
        await self.initialize()

    async def close(self):
        """Close database connection"""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def initialize(self):
        """Create tables if they don't exist"""
        await self._conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        await self._conn.commit()

    async def get(self, key: str) -> Any:
        """Return the decoded JSON value stored under key, or None"""
        cursor = await self.conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return json.loads(row['value'])

    async def set(self, key: str, value: Any):
        """Replace the value stored under key"""
        await self.conn.execute("""
            INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
        """, (key, json.dumps(value, ensure_ascii=False), datetime.now().isoformat()))
        await self.conn.commit()
        logger.debug(f"[STORE] Wrote slot {key}")

    async def delete(self, key: str):
        """Remove a slot"""
        await self.conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        await self.conn.commit()

    @property
    def conn(self) -> aiosqlite.Connection:
        """Get database connection"""
        if self._conn is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._conn

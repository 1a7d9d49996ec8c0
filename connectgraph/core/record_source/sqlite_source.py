"""
SQLite record source implementation.

Stores contents, memos, tags and connections locally using aiosqlite.
Driver failures are logged and re-raised as RecordSourceError.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from connectgraph.core.record_source.base import RecordSource
from connectgraph.models.connection import Connection
from connectgraph.models.entities import Content, EntityKind, Memo, Tag
from connectgraph.utils.exceptions import RecordSourceError
from connectgraph.utils.logger import get_logger

logger = get_logger(__name__)


class SQLiteRecordSource(RecordSource):
    """
    SQLite-based record source.

    Features:
    - Fast local storage
    - JSON columns for tag lists
    - Indexed lookups by connection endpoint
    """

    def __init__(self, db_path: str = "data/connectgraph.db"):
        """
        Initialize SQLite record source.

        Args:
            db_path: Path to SQLite database file (":memory:" for a private in-memory DB)
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            try:
                self.connection = await aiosqlite.connect(self.db_path)
                await self.connection.execute("PRAGMA journal_mode = WAL")
                await self.connection.commit()
            except aiosqlite.Error as e:
                logger.error(f"Failed to open SQLite database {self.db_path}: {e}")
                raise RecordSourceError(
                    f"Failed to connect to SQLite: {e}", context={"db_path": self.db_path}
                ) from e

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()

        statements = [
            """
            CREATE TABLE IF NOT EXISTS contents (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                tags TEXT DEFAULT '[]',
                counterpoint TEXT,
                created_at TEXT NOT NULL
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS memos (
                id TEXT PRIMARY KEY,
                text TEXT NOT NULL,
                tags TEXT DEFAULT '[]',
                created_at TEXT NOT NULL
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS tags (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                count INTEGER DEFAULT 0
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS connections (
                id TEXT PRIMARY KEY,
                source_id TEXT NOT NULL,
                target_id TEXT NOT NULL,
                source_type TEXT NOT NULL,
                target_type TEXT NOT NULL,
                relationship TEXT NOT NULL,
                strength INTEGER NOT NULL,
                created_at TEXT NOT NULL
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_connections_source ON connections(source_id)",
            "CREATE INDEX IF NOT EXISTS idx_connections_target ON connections(target_id)",
            "CREATE INDEX IF NOT EXISTS idx_connections_created ON connections(created_at)",
        ]

        for statement in statements:
            await self._execute(statement)
        await self._commit()
        logger.info(f"SQLite record source ready at {self.db_path}")

    # ═══════════════════════════════════════════════════════════
    # ENTITY SNAPSHOTS
    # ═══════════════════════════════════════════════════════════

    async def list_contents(self) -> list[Content]:
        rows = await self._fetchall("SELECT * FROM contents")
        return [self._row_to_content(row) for row in rows]

    async def get_content(self, content_id: str) -> Content | None:
        row = await self._fetchone("SELECT * FROM contents WHERE id = ?", (content_id,))
        return self._row_to_content(row) if row else None

    async def list_memos(self) -> list[Memo]:
        rows = await self._fetchall("SELECT * FROM memos")
        return [self._row_to_memo(row) for row in rows]

    async def list_tags(self) -> list[Tag]:
        rows = await self._fetchall("SELECT * FROM tags")
        return [Tag(id=row[0], name=row[1], count=row[2]) for row in rows]

    async def put_content(self, content: Content) -> None:
        await self._execute(
            """
            INSERT OR REPLACE INTO contents (id, title, tags, counterpoint, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                content.id,
                content.title,
                json.dumps(content.tags),
                content.counterpoint,
                content.created_at.isoformat(),
            ),
        )
        await self._commit()

    async def put_memo(self, memo: Memo) -> None:
        await self._execute(
            "INSERT OR REPLACE INTO memos (id, text, tags, created_at) VALUES (?, ?, ?, ?)",
            (memo.id, memo.text, json.dumps(memo.tags), memo.created_at.isoformat()),
        )
        await self._commit()

    async def put_tag(self, tag: Tag) -> None:
        await self._execute(
            "INSERT OR REPLACE INTO tags (id, name, count) VALUES (?, ?, ?)",
            (tag.id, tag.name, tag.count),
        )
        await self._commit()

    # ═══════════════════════════════════════════════════════════
    # CONNECTION OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def list_connections(self) -> list[Connection]:
        rows = await self._fetchall("SELECT * FROM connections ORDER BY created_at DESC")
        return [self._row_to_connection(row) for row in rows]

    async def get_connection(self, connection_id: str) -> Connection | None:
        row = await self._fetchone("SELECT * FROM connections WHERE id = ?", (connection_id,))
        return self._row_to_connection(row) if row else None

    async def find_connection(self, source_id: str, target_id: str) -> Connection | None:
        row = await self._fetchone(
            "SELECT * FROM connections WHERE source_id = ? AND target_id = ? LIMIT 1",
            (source_id, target_id),
        )
        return self._row_to_connection(row) if row else None

    async def insert_connection(self, connection: Connection) -> None:
        await self._execute(
            """
            INSERT INTO connections (
                id, source_id, target_id, source_type, target_type,
                relationship, strength, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                connection.id,
                connection.source_id,
                connection.target_id,
                connection.source_type.value,
                connection.target_type.value,
                connection.relationship,
                connection.strength,
                connection.created_at.isoformat(),
            ),
        )
        await self._commit()

    async def save_connection(self, connection: Connection) -> None:
        await self._execute(
            """
            UPDATE connections
            SET source_type = ?, target_type = ?, relationship = ?, strength = ?
            WHERE id = ?
            """,
            (
                connection.source_type.value,
                connection.target_type.value,
                connection.relationship,
                connection.strength,
                connection.id,
            ),
        )
        await self._commit()

    async def remove_connection(self, connection_id: str) -> None:
        await self._execute("DELETE FROM connections WHERE id = ?", (connection_id,))
        await self._commit()

    async def close(self) -> None:
        """Close the connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None

    # ═══════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════

    async def _execute(self, query: str, params: tuple[Any, ...] = ()) -> aiosqlite.Cursor:
        await self.connect()
        try:
            return await self.connection.execute(query, params)
        except aiosqlite.Error as e:
            logger.error(f"SQLite query failed: {e}")
            raise RecordSourceError(f"SQLite query failed: {e}") from e

    async def _commit(self) -> None:
        try:
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.error(f"SQLite commit failed: {e}")
            raise RecordSourceError(f"SQLite commit failed: {e}") from e

    async def _fetchone(self, query: str, params: tuple[Any, ...] = ()) -> tuple | None:
        cursor = await self._execute(query, params)
        return await cursor.fetchone()

    async def _fetchall(self, query: str, params: tuple[Any, ...] = ()) -> list[tuple]:
        cursor = await self._execute(query, params)
        return list(await cursor.fetchall())

    def _row_to_content(self, row: tuple) -> Content:
        """Convert database row to Content object."""
        return Content(
            id=row[0],
            title=row[1],
            tags=json.loads(row[2]) if row[2] else [],
            counterpoint=row[3],
            created_at=datetime.fromisoformat(row[4]),
        )

    def _row_to_memo(self, row: tuple) -> Memo:
        """Convert database row to Memo object."""
        return Memo(
            id=row[0],
            text=row[1],
            tags=json.loads(row[2]) if row[2] else [],
            created_at=datetime.fromisoformat(row[3]),
        )

    def _row_to_connection(self, row: tuple) -> Connection:
        """Convert database row to Connection object."""
        return Connection(
            id=row[0],
            source_id=row[1],
            target_id=row[2],
            source_type=EntityKind(row[3]),
            target_type=EntityKind(row[4]),
            relationship=row[5],
            strength=row[6],
            created_at=datetime.fromisoformat(row[7]),
        )

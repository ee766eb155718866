"""
Base Database - Connection handling and generic record helpers.

Every record table has an integer `id` plus `created_at` / `updated_at`
ISO-8601 UTC timestamps. The helpers here fill those in so the domain
methods in Database only deal with their own columns.
"""

from typing import Any, Optional

import aiosqlite

from income_stream.utils.dates import utc_now_iso


class BaseDatabase:
    """Base class with shared record operations."""

    _connection: Optional[aiosqlite.Connection] = None

    @property
    def conn(self) -> aiosqlite.Connection:
        """Get database connection."""
        if not self._connection:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._connection

    async def _fetch_one(self, query: str, params: tuple = ()) -> Optional[dict]:
        cursor = await self.conn.execute(query, params)
        row = await cursor.fetchone()
        return dict(row) if row else None

    async def _fetch_all(self, query: str, params: tuple | list = ()) -> list[dict]:
        cursor = await self.conn.execute(query, params)
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def _insert(self, table: str, data: dict[str, Any], commit: bool = True) -> int:
        """Insert a record and return its generated id."""
        now = utc_now_iso()
        record = {**data, "created_at": now, "updated_at": now}
        cols = ", ".join(record.keys())
        placeholders = ", ".join("?" * len(record))
        cursor = await self.conn.execute(
            f"INSERT INTO {table} ({cols}) VALUES ({placeholders})",  # noqa: S608
            tuple(record.values()),
        )
        if commit:
            await self.conn.commit()
        return cursor.lastrowid

    async def _update(self, table: str, record_id: int, data: dict[str, Any]) -> bool:
        """Update columns of one record. Returns False if no such record."""
        record = {**data, "updated_at": utc_now_iso()}
        sets = ", ".join(f"{k} = ?" for k in record.keys())
        cursor = await self.conn.execute(
            f"UPDATE {table} SET {sets} WHERE id = ?",  # noqa: S608
            (*record.values(), record_id),
        )
        await self.conn.commit()
        return cursor.rowcount > 0

    async def _delete(self, table: str, record_id: int) -> bool:
        cursor = await self.conn.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))  # noqa: S608
        await self.conn.commit()
        return cursor.rowcount > 0

    async def _count(self, table: str, where: str = "", params: tuple = ()) -> int:
        query = f"SELECT COUNT(*) AS cnt FROM {table}"  # noqa: S608
        if where:
            query += f" WHERE {where}"
        row = await self._fetch_one(query, params)
        return row["cnt"] if row else 0

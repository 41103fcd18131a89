"""SQLite registry store adapter.

Implements RegistryStorePort using SQLite with aiosqlite for async access.
A single connection guarded by one asyncio.Lock serializes every call, so
an admin registration and a detector update never interleave.
"""

import asyncio
import logging
from pathlib import Path

import aiosqlite

from runwatch.core.models import TrackedRunner, TrackedStreamer
from runwatch.core.ports import RegistryStorePort

logger = logging.getLogger(__name__)


class SQLiteRegistryStore(RegistryStorePort):
    """SQLite-backed registry of tracked runners and streamers."""

    def __init__(self, db_path: str):
        """Initialize SQLite store.

        Args:
            db_path: Path to SQLite database file. Parent directories
                are created if missing.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()
        self._schema_initialized = False

    async def _get_connection(self) -> aiosqlite.Connection:
        """Open the connection on first use. Caller must hold the lock."""
        if self._conn is None:
            self._conn = await aiosqlite.connect(str(self.db_path))
        return self._conn

    async def initialize(self) -> None:
        """Initialize database schema.

        Only runs once per instance. Subsequent calls are no-ops.
        """
        async with self._lock:
            if self._schema_initialized:
                return

            conn = await self._get_connection()
            await conn.execute(
                "CREATE TABLE IF NOT EXISTS runners (name TEXT, last_run TEXT)"
            )
            await conn.execute(
                "CREATE TABLE IF NOT EXISTS streamers (name TEXT, streamer_id TEXT)"
            )
            await conn.commit()
            self._schema_initialized = True
            logger.debug(f"Registry schema ready at {self.db_path}")

    async def close(self) -> None:
        """Close the database connection."""
        async with self._lock:
            if self._conn is not None:
                await self._conn.close()
                self._conn = None
            self._schema_initialized = False

    async def list_runners(self) -> list[TrackedRunner]:
        """Return all runners in insertion order."""
        await self.initialize()

        async with self._lock:
            conn = await self._get_connection()
            cursor = await conn.execute(
                "SELECT name, last_run FROM runners ORDER BY rowid"
            )
            rows = await cursor.fetchall()

        runners = []
        for name, last_run in rows:
            try:
                runners.append(
                    TrackedRunner(name=name, last_notified_run_id=last_run or "")
                )
            except ValueError as e:
                logger.warning(f"Skipping malformed runner row {name!r}: {e}")
        return runners

    async def list_streamers(self) -> list[TrackedStreamer]:
        """Return all streamers in insertion order."""
        await self.initialize()

        async with self._lock:
            conn = await self._get_connection()
            cursor = await conn.execute(
                "SELECT name, streamer_id FROM streamers ORDER BY rowid"
            )
            rows = await cursor.fetchall()

        streamers = []
        for name, streamer_id in rows:
            try:
                streamers.append(
                    TrackedStreamer(name=name, platform_user_id=streamer_id)
                )
            except ValueError as e:
                logger.warning(f"Skipping malformed streamer row {name!r}: {e}")
        return streamers

    async def record_runner_notified(self, name: str, run_id: str) -> None:
        """Update the last announced run of a runner."""
        await self.initialize()

        async with self._lock:
            conn = await self._get_connection()
            cursor = await conn.execute(
                "UPDATE runners SET last_run = ? WHERE name = ?", (run_id, name)
            )
            await conn.commit()

        if cursor.rowcount == 0:
            logger.warning(f"No runner row named {name} to update")

    async def add_runner(self, name: str, initial_run_id: str) -> None:
        """Insert a runner row."""
        await self.initialize()

        async with self._lock:
            conn = await self._get_connection()
            await conn.execute(
                "INSERT INTO runners (name, last_run) VALUES (?, ?)",
                (name, initial_run_id),
            )
            await conn.commit()

    async def add_streamer(self, name: str, platform_user_id: str) -> None:
        """Insert a streamer row."""
        await self.initialize()

        async with self._lock:
            conn = await self._get_connection()
            await conn.execute(
                "INSERT INTO streamers (name, streamer_id) VALUES (?, ?)",
                (name, platform_user_id),
            )
            await conn.commit()

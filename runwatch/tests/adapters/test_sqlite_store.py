"""Integration tests for the SQLite registry store."""

import asyncio
import tempfile
from pathlib import Path

import aiosqlite
import pytest

from runwatch.adapters.store.sqlite import SQLiteRegistryStore
from runwatch.core.models import TrackedRunner, TrackedStreamer


@pytest.fixture
async def temp_db() -> tuple[SQLiteRegistryStore, Path]:
    """Create a temporary SQLite registry for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "nested" / "runners.db"
        store = SQLiteRegistryStore(str(db_path))
        await store.initialize()
        yield store, db_path
        await store.close()


@pytest.mark.asyncio
async def test_schema_uses_expected_tables(temp_db) -> None:
    """The registry keeps runners and streamers in two plain tables."""
    store, db_path = temp_db

    async with aiosqlite.connect(str(db_path)) as conn:
        cursor = await conn.execute("PRAGMA table_info(runners)")
        runner_columns = [row[1] for row in await cursor.fetchall()]
        cursor = await conn.execute("PRAGMA table_info(streamers)")
        streamer_columns = [row[1] for row in await cursor.fetchall()]

    assert runner_columns == ["name", "last_run"]
    assert streamer_columns == ["name", "streamer_id"]


@pytest.mark.asyncio
async def test_parent_directory_is_created(temp_db) -> None:
    _, db_path = temp_db
    assert db_path.parent.is_dir()


@pytest.mark.asyncio
async def test_runners_round_trip_in_insertion_order(temp_db) -> None:
    store, _ = temp_db

    await store.add_runner("carol", "c1")
    await store.add_runner("alice", "")

    assert await store.list_runners() == [
        TrackedRunner(name="carol", last_notified_run_id="c1"),
        TrackedRunner(name="alice", last_notified_run_id=""),
    ]


@pytest.mark.asyncio
async def test_streamers_round_trip(temp_db) -> None:
    store, _ = temp_db

    await store.add_streamer("alice", "111")

    assert await store.list_streamers() == [
        TrackedStreamer(name="alice", platform_user_id="111")
    ]


@pytest.mark.asyncio
async def test_record_runner_notified_updates_every_row_with_name(temp_db) -> None:
    store, _ = temp_db
    await store.add_runner("alice", "r1")
    await store.add_runner("alice", "r1")
    await store.add_runner("bob", "b1")

    await store.record_runner_notified("alice", "r2")

    runs = [(r.name, r.last_notified_run_id) for r in await store.list_runners()]
    assert runs == [("alice", "r2"), ("alice", "r2"), ("bob", "b1")]


@pytest.mark.asyncio
async def test_record_for_unknown_runner_is_a_no_op(temp_db, caplog) -> None:
    store, _ = temp_db

    await store.record_runner_notified("ghost", "r1")

    assert await store.list_runners() == []
    assert "ghost" in caplog.text


@pytest.mark.asyncio
async def test_duplicates_are_not_rejected(temp_db) -> None:
    store, _ = temp_db

    await store.add_streamer("alice", "111")
    await store.add_streamer("alice", "111")

    assert len(await store.list_streamers()) == 2


@pytest.mark.asyncio
async def test_malformed_rows_are_skipped(temp_db) -> None:
    store, db_path = temp_db
    await store.add_runner("alice", "r1")

    async with aiosqlite.connect(str(db_path)) as conn:
        await conn.execute("INSERT INTO runners (name, last_run) VALUES ('', 'x')")
        await conn.execute("INSERT INTO runners (name, last_run) VALUES ('bob', NULL)")
        await conn.execute("INSERT INTO streamers (name, streamer_id) VALUES ('eve', NULL)")
        await conn.commit()

    runners = await store.list_runners()

    assert [r.name for r in runners] == ["alice", "bob"]
    assert runners[1].last_notified_run_id == ""
    assert await store.list_streamers() == []


@pytest.mark.asyncio
async def test_data_survives_reopen(temp_db) -> None:
    store, db_path = temp_db
    await store.add_runner("alice", "r1")
    await store.close()

    reopened = SQLiteRegistryStore(str(db_path))
    try:
        runners = await reopened.list_runners()
    finally:
        await reopened.close()

    assert runners == [TrackedRunner(name="alice", last_notified_run_id="r1")]


@pytest.mark.asyncio
async def test_concurrent_writes_are_serialized(temp_db) -> None:
    store, _ = temp_db

    await asyncio.gather(*(store.add_runner(f"runner-{i}", "") for i in range(20)))

    assert len(await store.list_runners()) == 20

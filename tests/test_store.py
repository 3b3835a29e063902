from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from uptime_checker.config import Settings
from uptime_checker.errors import StoreFailure
from uptime_checker.services.store import MemoryStore, SqlStore, create_store


@pytest.mark.asyncio
async def test_sql_store_get_put_overwrite(tmp_path: Path) -> None:
    store = SqlStore(f"sqlite:///{tmp_path / 'kv.db'}")
    await store.init()
    try:
        assert await store.get("websites") is None
        await store.put("websites", "[]")
        await store.put("websites", '[{"id": "a"}]')
        assert await store.get("websites") == '[{"id": "a"}]'
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_sql_store_wraps_database_errors(tmp_path: Path) -> None:
    store = SqlStore(f"sqlite:///{tmp_path / 'no-tables.db'}")
    try:
        with pytest.raises(StoreFailure):
            await store.get("websites")
        with pytest.raises(StoreFailure):
            await store.put("websites", "[]")
    finally:
        await store.close()


def test_create_store_backends(tmp_path: Path) -> None:
    assert isinstance(create_store(Settings(STORE_BACKEND="memory")), MemoryStore)
    sql = create_store(Settings(STORE_BACKEND="sql", DATABASE_URL=f"sqlite:///{tmp_path / 'x.db'}"))
    assert isinstance(sql, SqlStore)
    sql.engine.dispose()
    with pytest.raises(ValueError):
        create_store(Settings(STORE_BACKEND="redis"))


@pytest.mark.asyncio
async def test_sql_store_concurrent_first_writes_to_one_key(tmp_path: Path) -> None:
    store = SqlStore(f"sqlite:///{tmp_path / 'race.db'}")
    await store.init()
    try:
        values = [f'{{"n": {i}}}' for i in range(20)]
        await asyncio.gather(*[store.put("status:new", v) for v in values])
        assert await store.get("status:new") in values
    finally:
        await store.close()

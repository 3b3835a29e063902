"""Key-value store adapters.

Every component talks to the store through ``get(key) -> str | None`` and
``put(key, value)``. Values are JSON text. Single-key operations are atomic,
there are no cross-key transactions, and concurrent writers to the same key
resolve last-write-wins.
"""
import asyncio
from typing import Dict, Optional

import structlog
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.sql import func

from ..config import Settings
from ..db import Base, make_engine, make_session_factory
from ..errors import StoreFailure
from ..models import KVEntry

logger = structlog.get_logger(__name__)

# dialects with INSERT .. ON CONFLICT DO UPDATE
UPSERT_INSERTS = {"sqlite": sqlite_insert, "postgresql": pg_insert}


class KVStore:
    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def put(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def init(self) -> None:
        """Prepare backing storage. No-op by default."""

    async def close(self) -> None:
        """Release backing resources. No-op by default."""


class MemoryStore(KVStore):
    """Process-local store, used for development and tests."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def put(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlStore(KVStore):
    """Store backed by the ``kv_entries`` table. Blocking calls run in worker threads."""

    def __init__(self, database_url: str):
        self.engine = make_engine(database_url)
        self.sessions = make_session_factory(self.engine)

    def _get(self, key: str) -> Optional[str]:
        with self.sessions() as db:
            row = db.get(KVEntry, key)
            return row.value if row is not None else None

    def _put(self, key: str, value: str) -> None:
        dialect = self.engine.dialect.name
        with self.sessions() as db:
            if dialect in UPSERT_INSERTS:
                table = KVEntry.__table__
                stmt = UPSERT_INSERTS[dialect](table).values(key=key, value=value)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[table.c.key],
                    set_={"value": stmt.excluded.value, "updated_at": func.now()},
                )
                db.execute(stmt)
                db.commit()
                return
            db.merge(KVEntry(key=key, value=value))
            try:
                db.commit()
            except IntegrityError:
                # a concurrent first write inserted the row between our select and insert
                db.rollback()
                db.merge(KVEntry(key=key, value=value))
                db.commit()

    async def get(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._get, key)
        except SQLAlchemyError as ex:
            logger.error("store_get_failed", key=key, error=str(ex))
            raise StoreFailure(f"get {key!r} failed: {ex}") from ex

    async def put(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._put, key, value)
        except SQLAlchemyError as ex:
            logger.error("store_put_failed", key=key, error=str(ex))
            raise StoreFailure(f"put {key!r} failed: {ex}") from ex

    async def init(self) -> None:
        try:
            await asyncio.to_thread(Base.metadata.create_all, bind=self.engine)
        except SQLAlchemyError as ex:
            raise StoreFailure(f"could not create tables: {ex}") from ex

    async def close(self) -> None:
        await asyncio.to_thread(self.engine.dispose)


def create_store(settings: Settings) -> KVStore:
    backend = (settings.STORE_BACKEND or "sql").strip().lower()
    if backend == "memory":
        return MemoryStore()
    if backend == "sql":
        return SqlStore(settings.DATABASE_URL)
    raise ValueError(f"unknown STORE_BACKEND: {backend}")

"""Storage backend selection, done once at process start."""
from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings, STORAGE_MEMORY
from app.database import Base, build_engine, build_session_factory
from app.store.base import Store
from app.store.memory import MemoryStore
from app.store.sql import SqlStore

log = logging.getLogger("uvicorn.error")

__all__ = ["Store", "MemoryStore", "SqlStore", "StorageHandle", "init_storage"]


class StorageHandle:
    """Hands out a Store per request. For SQL that is a fresh session; for
    memory it is the single process-wide instance."""

    def __init__(self, backend: str, open_store: Callable[[], Store], degraded: bool = False) -> None:
        self.backend = backend
        self.degraded = degraded
        self._open_store = open_store

    def open(self) -> Store:
        return self._open_store()


def _memory_handle(degraded: bool = False) -> StorageHandle:
    memory = MemoryStore()
    return StorageHandle(STORAGE_MEMORY, lambda: memory, degraded=degraded)


def init_storage(settings: Settings) -> StorageHandle:
    if settings.storage_backend == STORAGE_MEMORY:
        log.info("Storage: in-memory backend selected by configuration")
        return _memory_handle()

    # Import models so Base.metadata has all tables before create_all
    import app.models  # noqa: F401

    try:
        engine = build_engine(settings.database_url)
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        if not settings.storage_fallback_to_memory:
            raise
        log.warning(
            "Database unavailable (%s); falling back to the in-memory store. Data will not survive a restart.",
            e.__class__.__name__,
        )
        return _memory_handle(degraded=True)

    session_factory = build_session_factory(engine)
    log.info("Storage: SQL backend at %s", engine.url.render_as_string(hide_password=True))
    return StorageHandle(settings.storage_backend, lambda: SqlStore(session_factory()))

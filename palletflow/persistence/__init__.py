"""Persistence layer built on async SQLAlchemy."""

from .database import create_schema, dispose_engine, get_async_session, init_engine, metadata
from .errors import StorageError
from .memory import InMemoryWarehouseRepository
from .repository import RecordStore, WarehouseRepository
from .seed import seed_store

__all__ = [
    "init_engine",
    "create_schema",
    "dispose_engine",
    "get_async_session",
    "metadata",
    "RecordStore",
    "StorageError",
    "WarehouseRepository",
    "InMemoryWarehouseRepository",
    "seed_store",
]

"""Dependency providers for the API and gRPC layers."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from fastapi import Depends

from palletflow.enterprise.config.settings import AppSettings, get_settings
from palletflow.enterprise.core import LifecycleRules
from palletflow.persistence import (
    InMemoryWarehouseRepository,
    RecordStore,
    WarehouseRepository,
    get_async_session,
    init_engine,
)
from palletflow.services import InductionEngine, StowEngine

__all__ = [
    "get_app_settings",
    "get_lifecycle_rules",
    "get_memory_repository",
    "get_repository",
    "get_repository_context",
    "get_induction_engine",
    "get_stow_engine",
    "reset_repository",
]


_memory_repo: Optional[InMemoryWarehouseRepository] = None


def get_app_settings() -> AppSettings:
    return get_settings()


def get_lifecycle_rules() -> LifecycleRules:
    return LifecycleRules(max_pallet_weight_lbs=get_settings().operations.max_pallet_weight_lbs)


def get_memory_repository() -> InMemoryWarehouseRepository:
    """Return the process-wide store used while the database is disabled."""

    global _memory_repo
    if _memory_repo is None:
        _memory_repo = InMemoryWarehouseRepository()
    return _memory_repo


@asynccontextmanager
async def get_repository_context() -> AsyncIterator[RecordStore]:
    settings = get_settings()
    if not settings.database.enabled:
        yield get_memory_repository()
        return

    init_engine(settings)
    async with get_async_session() as session:
        yield WarehouseRepository(session)


async def get_repository() -> AsyncGenerator[RecordStore, None]:
    async with get_repository_context() as repo:
        yield repo


def get_induction_engine(
    repo: RecordStore = Depends(get_repository),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
) -> InductionEngine:
    return InductionEngine(repo, rules)


def get_stow_engine(
    repo: RecordStore = Depends(get_repository),
    rules: LifecycleRules = Depends(get_lifecycle_rules),
) -> StowEngine:
    return StowEngine(repo, rules)


def reset_repository() -> None:
    global _memory_repo
    _memory_repo = None

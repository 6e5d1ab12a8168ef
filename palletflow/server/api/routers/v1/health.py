"""Liveness and readiness probes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from palletflow.persistence import RecordStore, StorageError
from palletflow.server.dependencies import get_repository

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready")
async def ready(repo: RecordStore = Depends(get_repository)) -> dict[str, str]:
    try:
        await repo.is_empty()
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Record store unavailable") from exc
    return {"status": "ready"}

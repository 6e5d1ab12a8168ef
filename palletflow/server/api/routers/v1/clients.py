"""Client directory endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from palletflow.persistence import RecordStore
from palletflow.server.api.schemas.records import ClientSchema
from palletflow.server.dependencies import get_repository

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/", response_model=List[ClientSchema])
async def list_clients(repo: RecordStore = Depends(get_repository)) -> List[ClientSchema]:
    return [ClientSchema.from_domain(client) for client in await repo.list_clients()]


@router.get("/{client_id}", response_model=ClientSchema)
async def get_client(client_id: str, repo: RecordStore = Depends(get_repository)) -> ClientSchema:
    client = await repo.get_client(client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return ClientSchema.from_domain(client, await repo.list_packages(client_id=client_id))

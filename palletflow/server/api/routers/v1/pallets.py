"""Pallet queries."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from palletflow.persistence import RecordStore
from palletflow.server.api.schemas.records import PalletDetailSchema, PalletSchema
from palletflow.server.dependencies import get_repository

router = APIRouter(prefix="/pallets", tags=["pallets"])


@router.get("/", response_model=List[PalletSchema])
async def list_pallets(
    warehouse_id: Optional[str] = None,
    repo: RecordStore = Depends(get_repository),
) -> List[PalletSchema]:
    pallets = await repo.list_pallets(warehouse_id=warehouse_id)
    return [PalletSchema.from_domain(pallet) for pallet in pallets]


@router.get("/{pallet_id}", response_model=PalletDetailSchema)
async def get_pallet(pallet_id: str, repo: RecordStore = Depends(get_repository)) -> PalletDetailSchema:
    pallet = await repo.get_pallet(pallet_id)
    if pallet is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pallet not found")
    packages = await repo.list_packages(pallet_id=pallet_id)
    return PalletDetailSchema.from_domain_with_packages(pallet, packages)

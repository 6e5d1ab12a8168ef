"""Warehouse directory endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from palletflow.persistence import RecordStore
from palletflow.server.api.schemas.records import WarehouseSchema
from palletflow.server.dependencies import get_repository

router = APIRouter(prefix="/warehouses", tags=["warehouses"])


@router.get("/", response_model=List[WarehouseSchema])
async def list_warehouses(repo: RecordStore = Depends(get_repository)) -> List[WarehouseSchema]:
    return [WarehouseSchema.from_domain(warehouse) for warehouse in await repo.list_warehouses()]


@router.get("/{warehouse_id}", response_model=WarehouseSchema)
async def get_warehouse(warehouse_id: str, repo: RecordStore = Depends(get_repository)) -> WarehouseSchema:
    warehouse = await repo.get_warehouse(warehouse_id)
    if warehouse is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Warehouse not found")
    return WarehouseSchema.from_domain(
        warehouse,
        pallets=await repo.list_pallets(warehouse_id=warehouse_id),
        packages=await repo.list_packages(warehouse_id=warehouse_id),
    )

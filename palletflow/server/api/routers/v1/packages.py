"""Package queries and the induct/stow batch operations."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from palletflow.persistence import RecordStore
from palletflow.server.api.schemas.operations import (
    InductPayloadSchema,
    InductRequestSchema,
    StowPayloadSchema,
    StowRequestSchema,
)
from palletflow.server.api.schemas.records import PackageSchema
from palletflow.server.dependencies import get_induction_engine, get_repository, get_stow_engine
from palletflow.services import InductionEngine, StowEngine

router = APIRouter(prefix="/packages", tags=["packages"])


@router.get("/", response_model=List[PackageSchema])
async def list_packages(
    client_id: Optional[str] = None,
    warehouse_id: Optional[str] = None,
    pallet_id: Optional[str] = None,
    repo: RecordStore = Depends(get_repository),
) -> List[PackageSchema]:
    packages = await repo.list_packages(client_id=client_id, warehouse_id=warehouse_id, pallet_id=pallet_id)
    return [PackageSchema.from_domain(pkg) for pkg in packages]


@router.get("/{package_id}", response_model=PackageSchema)
async def get_package(package_id: str, repo: RecordStore = Depends(get_repository)) -> PackageSchema:
    package = await repo.get_package(package_id)
    if package is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Package not found")
    return PackageSchema.from_domain(package)


@router.post("/induct", response_model=InductPayloadSchema)
async def induct_packages(
    payload: InductRequestSchema,
    engine: InductionEngine = Depends(get_induction_engine),
) -> InductPayloadSchema:
    outcomes = await engine.induct(payload.package_ids, payload.client_id, payload.warehouse_id)
    return InductPayloadSchema.from_outcomes(outcomes)


@router.post("/stow", response_model=StowPayloadSchema)
async def stow_packages(
    payload: StowRequestSchema,
    engine: StowEngine = Depends(get_stow_engine),
) -> StowPayloadSchema:
    outcomes = await engine.stow(payload.package_ids, payload.warehouse_id, payload.pallet_id)
    return StowPayloadSchema.from_outcomes(outcomes)

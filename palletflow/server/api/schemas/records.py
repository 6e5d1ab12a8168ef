"""Pydantic schemas for the read-only record endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from palletflow.enterprise.core import Client, Package, Pallet, Warehouse


class PackageSchema(BaseModel):
    id: str
    weight_lbs: float
    status: str
    service_date: Optional[date]
    received_ts: Optional[datetime]
    client_id: str
    warehouse_id: Optional[str]
    pallet_id: Optional[str]

    @classmethod
    def from_domain(cls, package: Package) -> "PackageSchema":
        return cls(
            id=package.id,
            weight_lbs=package.weight_lbs,
            status=package.status.value,
            service_date=package.service_date,
            received_ts=package.received_ts,
            client_id=package.client_id,
            warehouse_id=package.warehouse_id,
            pallet_id=package.pallet_id,
        )


class PalletSchema(BaseModel):
    id: str
    warehouse_id: str
    label: Optional[str]
    storage_location: Optional[str]
    stowed_ts: Optional[datetime]
    staged_ts: Optional[datetime]
    picked_ts: Optional[datetime]

    @classmethod
    def from_domain(cls, pallet: Pallet) -> "PalletSchema":
        return cls(**pallet.model_dump())


class PalletDetailSchema(PalletSchema):
    total_weight_lbs: float = 0.0
    packages: List[PackageSchema] = Field(default_factory=list)

    @classmethod
    def from_domain_with_packages(cls, pallet: Pallet, packages: List[Package]) -> "PalletDetailSchema":
        return cls(
            **pallet.model_dump(),
            total_weight_lbs=sum(pkg.weight_lbs for pkg in packages),
            packages=[PackageSchema.from_domain(pkg) for pkg in packages],
        )


class ClientSchema(BaseModel):
    id: str
    name: str
    email: Optional[str]
    packages: List[PackageSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, client: Client, packages: Optional[List[Package]] = None) -> "ClientSchema":
        return cls(
            **client.model_dump(),
            packages=[PackageSchema.from_domain(pkg) for pkg in packages or []],
        )


class WarehouseSchema(BaseModel):
    id: str
    name: str
    location: Optional[str]
    pallets: List[PalletSchema] = Field(default_factory=list)
    packages: List[PackageSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(
        cls,
        warehouse: Warehouse,
        pallets: Optional[List[Pallet]] = None,
        packages: Optional[List[Package]] = None,
    ) -> "WarehouseSchema":
        return cls(
            **warehouse.model_dump(),
            pallets=[PalletSchema.from_domain(pallet) for pallet in pallets or []],
            packages=[PackageSchema.from_domain(pkg) for pkg in packages or []],
        )

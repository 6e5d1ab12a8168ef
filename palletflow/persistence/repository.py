"""Repository helpers for reading and mutating warehouse records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Protocol, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from palletflow.enterprise.core import Client, Package, Pallet, Warehouse

from .errors import StorageError
from .models import ClientRecord, PackageRecord, PalletRecord, WarehouseRecord


class RecordStore(Protocol):
    """Operations the lifecycle engines and the gateways rely on."""

    def now(self) -> datetime: ...

    async def get_package(self, package_id: str) -> Optional[Package]: ...

    async def get_pallet(self, pallet_id: str) -> Optional[Pallet]: ...

    async def get_client(self, client_id: str) -> Optional[Client]: ...

    async def get_warehouse(self, warehouse_id: str) -> Optional[Warehouse]: ...

    async def packages_by_ids(self, package_ids: Sequence[str]) -> list[Package]: ...

    async def list_packages(
        self,
        *,
        client_id: Optional[str] = None,
        warehouse_id: Optional[str] = None,
        pallet_id: Optional[str] = None,
    ) -> list[Package]: ...

    async def list_pallets(self, *, warehouse_id: Optional[str] = None) -> list[Pallet]: ...

    async def list_clients(self) -> list[Client]: ...

    async def list_warehouses(self) -> list[Warehouse]: ...

    async def pallet_weight(self, pallet_id: str) -> Optional[float]: ...

    async def insert_warehouse(self, warehouse: Warehouse) -> None: ...

    async def insert_client(self, client: Client) -> None: ...

    async def insert_package(self, package: Package) -> None: ...

    async def insert_pallet(self, pallet: Pallet) -> None: ...

    async def update_package(self, package_id: str, **changes: Any) -> None: ...

    async def update_pallet(self, pallet_id: str, **changes: Any) -> None: ...

    async def is_empty(self) -> bool: ...


class WarehouseRepository:
    """SQL-backed record store.

    Every mutation is committed on its own, so a batch that fails half way
    leaves the earlier items applied.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def _scalars(self, stmt) -> list[Any]:
        try:
            result = await self.session.execute(stmt.execution_options(populate_existing=True))
        except SQLAlchemyError as exc:
            raise StorageError(f"Query failed: {exc}") from exc
        return list(result.scalars())

    async def _get(self, record_type, key: str):
        try:
            return await self.session.get(record_type, key, populate_existing=True)
        except SQLAlchemyError as exc:
            raise StorageError(f"Lookup failed: {exc}", table=record_type.__tablename__, key=key) from exc

    async def get_package(self, package_id: str) -> Optional[Package]:
        record = await self._get(PackageRecord, package_id)
        return Package.model_validate(record) if record else None

    async def get_pallet(self, pallet_id: str) -> Optional[Pallet]:
        record = await self._get(PalletRecord, pallet_id)
        return Pallet.model_validate(record) if record else None

    async def get_client(self, client_id: str) -> Optional[Client]:
        record = await self._get(ClientRecord, client_id)
        return Client.model_validate(record) if record else None

    async def get_warehouse(self, warehouse_id: str) -> Optional[Warehouse]:
        record = await self._get(WarehouseRecord, warehouse_id)
        return Warehouse.model_validate(record) if record else None

    async def packages_by_ids(self, package_ids: Sequence[str]) -> list[Package]:
        if not package_ids:
            return []
        stmt = select(PackageRecord).where(PackageRecord.id.in_(set(package_ids)))
        return [Package.model_validate(record) for record in await self._scalars(stmt)]

    async def list_packages(
        self,
        *,
        client_id: Optional[str] = None,
        warehouse_id: Optional[str] = None,
        pallet_id: Optional[str] = None,
    ) -> list[Package]:
        stmt = select(PackageRecord).order_by(PackageRecord.id)
        if client_id is not None:
            stmt = stmt.where(PackageRecord.client_id == client_id)
        if warehouse_id is not None:
            stmt = stmt.where(PackageRecord.warehouse_id == warehouse_id)
        if pallet_id is not None:
            stmt = stmt.where(PackageRecord.pallet_id == pallet_id)
        return [Package.model_validate(record) for record in await self._scalars(stmt)]

    async def list_pallets(self, *, warehouse_id: Optional[str] = None) -> list[Pallet]:
        stmt = select(PalletRecord).order_by(PalletRecord.id)
        if warehouse_id is not None:
            stmt = stmt.where(PalletRecord.warehouse_id == warehouse_id)
        return [Pallet.model_validate(record) for record in await self._scalars(stmt)]

    async def list_clients(self) -> list[Client]:
        stmt = select(ClientRecord).order_by(ClientRecord.id)
        return [Client.model_validate(record) for record in await self._scalars(stmt)]

    async def list_warehouses(self) -> list[Warehouse]:
        stmt = select(WarehouseRecord).order_by(WarehouseRecord.id)
        return [Warehouse.model_validate(record) for record in await self._scalars(stmt)]

    async def pallet_weight(self, pallet_id: str) -> Optional[float]:
        stmt = select(func.sum(PackageRecord.weight_lbs)).where(PackageRecord.pallet_id == pallet_id)
        try:
            total = (await self.session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageError(f"Aggregate failed: {exc}", table="packages", key=pallet_id) from exc
        return float(total) if total is not None else None

    async def _add(self, record, table: str, key: str) -> None:
        self.session.add(record)
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StorageError(f"Insert into {table} failed: {exc}", table=table, key=key) from exc

    async def insert_warehouse(self, warehouse: Warehouse) -> None:
        await self._add(WarehouseRecord(**warehouse.model_dump()), "warehouses", warehouse.id)

    async def insert_client(self, client: Client) -> None:
        await self._add(ClientRecord(**client.model_dump()), "clients", client.id)

    async def insert_package(self, package: Package) -> None:
        values = package.model_dump(exclude_none=True)
        await self._add(PackageRecord(**values), "packages", package.id)

    async def insert_pallet(self, pallet: Pallet) -> None:
        await self._add(PalletRecord(**pallet.model_dump()), "pallets", pallet.id)

    async def _update(self, record_type, key: str, changes: dict[str, Any]) -> None:
        table = record_type.__tablename__
        stmt = update(record_type).where(record_type.id == key).values(**changes)
        try:
            result = await self.session.execute(stmt)
            if result.rowcount == 0:
                await self.session.rollback()
                raise StorageError(f"No {table} row with id {key}", table=table, key=key)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StorageError(f"Update of {table} failed: {exc}", table=table, key=key) from exc

    async def update_package(self, package_id: str, **changes: Any) -> None:
        await self._update(PackageRecord, package_id, changes)

    async def update_pallet(self, pallet_id: str, **changes: Any) -> None:
        await self._update(PalletRecord, pallet_id, changes)

    async def is_empty(self) -> bool:
        stmt = select(func.count()).select_from(WarehouseRecord)
        try:
            count = (await self.session.execute(stmt)).scalar_one()
        except SQLAlchemyError as exc:
            raise StorageError(f"Query failed: {exc}", table="warehouses") from exc
        return count == 0

"""In-memory record store used when the database is disabled."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from palletflow.enterprise.core import Client, Package, Pallet, Warehouse

from .errors import StorageError


class InMemoryWarehouseRepository:
    """Keeps entities in process memory while enforcing the SQL constraints.

    Foreign keys and primary keys are checked on every write so that the
    engines see the same :class:`StorageError` failures the SQL store raises.
    """

    def __init__(self) -> None:
        self.warehouses: Dict[str, Warehouse] = {}
        self.clients: Dict[str, Client] = {}
        self.pallets: Dict[str, Pallet] = {}
        self.packages: Dict[str, Package] = {}

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def get_package(self, package_id: str) -> Optional[Package]:
        return self.packages.get(package_id)

    async def get_pallet(self, pallet_id: str) -> Optional[Pallet]:
        return self.pallets.get(pallet_id)

    async def get_client(self, client_id: str) -> Optional[Client]:
        return self.clients.get(client_id)

    async def get_warehouse(self, warehouse_id: str) -> Optional[Warehouse]:
        return self.warehouses.get(warehouse_id)

    async def packages_by_ids(self, package_ids: Sequence[str]) -> list[Package]:
        return [self.packages[pid] for pid in dict.fromkeys(package_ids) if pid in self.packages]

    async def list_packages(
        self,
        *,
        client_id: Optional[str] = None,
        warehouse_id: Optional[str] = None,
        pallet_id: Optional[str] = None,
    ) -> list[Package]:
        packages = sorted(self.packages.values(), key=lambda pkg: pkg.id)
        if client_id is not None:
            packages = [pkg for pkg in packages if pkg.client_id == client_id]
        if warehouse_id is not None:
            packages = [pkg for pkg in packages if pkg.warehouse_id == warehouse_id]
        if pallet_id is not None:
            packages = [pkg for pkg in packages if pkg.pallet_id == pallet_id]
        return packages

    async def list_pallets(self, *, warehouse_id: Optional[str] = None) -> list[Pallet]:
        pallets = sorted(self.pallets.values(), key=lambda pallet: pallet.id)
        if warehouse_id is not None:
            pallets = [pallet for pallet in pallets if pallet.warehouse_id == warehouse_id]
        return pallets

    async def list_clients(self) -> list[Client]:
        return sorted(self.clients.values(), key=lambda client: client.id)

    async def list_warehouses(self) -> list[Warehouse]:
        return sorted(self.warehouses.values(), key=lambda warehouse: warehouse.id)

    async def pallet_weight(self, pallet_id: str) -> Optional[float]:
        weights = [pkg.weight_lbs for pkg in self.packages.values() if pkg.pallet_id == pallet_id]
        return sum(weights) if weights else None

    def _require(self, table: Dict[str, Any], name: str, key: Optional[str], nullable: bool = False) -> None:
        if key is None and nullable:
            return
        if key not in table:
            raise StorageError(f"Foreign key violation: no {name} row with id {key}", table=name, key=key)

    def _reject_duplicate(self, table: Dict[str, Any], name: str, key: str) -> None:
        if key in table:
            raise StorageError(f"Duplicate primary key {key} in {name}", table=name, key=key)

    async def insert_warehouse(self, warehouse: Warehouse) -> None:
        self._reject_duplicate(self.warehouses, "warehouses", warehouse.id)
        self.warehouses[warehouse.id] = warehouse

    async def insert_client(self, client: Client) -> None:
        self._reject_duplicate(self.clients, "clients", client.id)
        self.clients[client.id] = client

    async def insert_package(self, package: Package) -> None:
        self._reject_duplicate(self.packages, "packages", package.id)
        self._check_package_references(package)
        now = self.now()
        self.packages[package.id] = package.model_copy(
            update={
                "created_at": package.created_at or now,
                "updated_at": package.updated_at or now,
            }
        )

    async def insert_pallet(self, pallet: Pallet) -> None:
        self._reject_duplicate(self.pallets, "pallets", pallet.id)
        self._require(self.warehouses, "warehouses", pallet.warehouse_id)
        self.pallets[pallet.id] = pallet

    def _check_package_references(self, package: Package) -> None:
        self._require(self.clients, "clients", package.client_id)
        self._require(self.warehouses, "warehouses", package.warehouse_id, nullable=True)
        self._require(self.pallets, "pallets", package.pallet_id, nullable=True)

    async def update_package(self, package_id: str, **changes: Any) -> None:
        current = self.packages.get(package_id)
        if current is None:
            raise StorageError(f"No packages row with id {package_id}", table="packages", key=package_id)
        updated = current.model_copy(update={**changes, "updated_at": self.now()})
        self._check_package_references(updated)
        self.packages[package_id] = updated

    async def update_pallet(self, pallet_id: str, **changes: Any) -> None:
        current = self.pallets.get(pallet_id)
        if current is None:
            raise StorageError(f"No pallets row with id {pallet_id}", table="pallets", key=pallet_id)
        updated = current.model_copy(update=changes)
        self._require(self.warehouses, "warehouses", updated.warehouse_id)
        self.pallets[pallet_id] = updated

    async def is_empty(self) -> bool:
        return not self.warehouses

    def reset(self) -> None:
        self.warehouses.clear()
        self.clients.clear()
        self.pallets.clear()
        self.packages.clear()

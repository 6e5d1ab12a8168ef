"""Fixture data for a freshly created record store."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

import structlog

from palletflow.enterprise.config.settings import SeedSettings
from palletflow.enterprise.core import Client, Package, PackageStatus, Warehouse

from .repository import RecordStore

logger = structlog.get_logger(__name__)

WAREHOUSE_IDS = (
    "00000000-0000-0000-0000-000000000001",
    "00000000-0000-0000-0000-000000000002",
    "00000000-0000-0000-0000-000000000003",
)

CLIENT_IDS = (
    "00000000-0000-0000-0000-000000000011",
    "00000000-0000-0000-0000-000000000012",
    "00000000-0000-0000-0000-000000000013",
)


def package_id_for(index: int) -> str:
    return f"00000000-0000-0000-0000-{1000 + index:012d}"


@dataclass
class SeedData:
    warehouses: List[Warehouse] = field(default_factory=list)
    clients: List[Client] = field(default_factory=list)
    packages: List[Package] = field(default_factory=list)


def build_seed_data(settings: SeedSettings, today: Optional[date] = None) -> SeedData:
    """Generate warehouses, clients and PENDING packages."""

    rng = random.Random(settings.random_seed)
    start = today or date.today()

    warehouses = [
        Warehouse(id=WAREHOUSE_IDS[0], name="Warehouse A", location="New York"),
        Warehouse(id=WAREHOUSE_IDS[1], name="Warehouse B", location="Chicago"),
        Warehouse(id=WAREHOUSE_IDS[2], name="Warehouse C", location="Los Angeles"),
    ]
    clients = [
        Client(id=CLIENT_IDS[0], name="Client One", email="one@example.com"),
        Client(id=CLIENT_IDS[1], name="Client Two", email="two@example.com"),
        Client(id=CLIENT_IDS[2], name="Client Three", email="three@example.com"),
    ]
    packages = [
        Package(
            id=package_id_for(idx),
            weight_lbs=round(rng.random() * 50 + 1, 2),
            status=PackageStatus.PENDING,
            service_date=start + timedelta(days=rng.randrange(settings.service_window_days)),
            client_id=CLIENT_IDS[idx % len(CLIENT_IDS)],
        )
        for idx in range(settings.package_count)
    ]
    return SeedData(warehouses=warehouses, clients=clients, packages=packages)


async def seed_store(store: RecordStore, settings: SeedSettings, today: Optional[date] = None) -> bool:
    """Load fixture rows when the store has no warehouses yet.

    Returns ``True`` when rows were written.
    """

    if not settings.enabled or not await store.is_empty():
        return False

    data = build_seed_data(settings, today=today)
    for warehouse in data.warehouses:
        await store.insert_warehouse(warehouse)
    for client in data.clients:
        await store.insert_client(client)
    for package in data.packages:
        await store.insert_package(package)

    logger.info(
        "record_store_seeded",
        warehouses=len(data.warehouses),
        clients=len(data.clients),
        packages=len(data.packages),
    )
    return True

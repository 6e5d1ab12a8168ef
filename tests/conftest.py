from datetime import date
from typing import Optional

import pytest
import pytest_asyncio

from palletflow.enterprise.config.settings import AppSettings, DatabaseSettings, get_settings
from palletflow.enterprise.core import Client, LifecycleRules, Package, PackageStatus, Warehouse
from palletflow.persistence import (
    InMemoryWarehouseRepository,
    create_schema,
    dispose_engine,
    get_async_session,
    init_engine,
)

WAREHOUSE_A = "00000000-0000-0000-0000-000000000001"
WAREHOUSE_B = "00000000-0000-0000-0000-000000000002"
CLIENT_ONE = "00000000-0000-0000-0000-000000000011"
CLIENT_TWO = "00000000-0000-0000-0000-000000000012"


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def rules() -> LifecycleRules:
    return LifecycleRules(max_pallet_weight_lbs=500)


def make_package(
    package_id: str,
    weight: float = 10.0,
    status: PackageStatus = PackageStatus.PENDING,
    service_date: Optional[date] = None,
    client_id: str = CLIENT_ONE,
    warehouse_id: Optional[str] = None,
) -> Package:
    return Package(
        id=package_id,
        weight_lbs=weight,
        status=status,
        service_date=service_date,
        client_id=client_id,
        warehouse_id=warehouse_id,
    )


def directory_rows() -> tuple[list[Warehouse], list[Client]]:
    warehouses = [
        Warehouse(id=WAREHOUSE_A, name="Warehouse A", location="New York"),
        Warehouse(id=WAREHOUSE_B, name="Warehouse B", location="Chicago"),
    ]
    clients = [
        Client(id=CLIENT_ONE, name="Client One", email="one@example.com"),
        Client(id=CLIENT_TWO, name="Client Two", email="two@example.com"),
    ]
    return warehouses, clients


def populate(repo: InMemoryWarehouseRepository) -> InMemoryWarehouseRepository:
    warehouses, clients = directory_rows()
    repo.warehouses.update({warehouse.id: warehouse for warehouse in warehouses})
    repo.clients.update({client.id: client for client in clients})
    return repo


@pytest.fixture
def store() -> InMemoryWarehouseRepository:
    return populate(InMemoryWarehouseRepository())


def put(repo: InMemoryWarehouseRepository, *packages: Package) -> None:
    for package in packages:
        repo.packages[package.id] = package


@pytest_asyncio.fixture
async def sql_session(tmp_path):
    settings = AppSettings(
        database=DatabaseSettings(enabled=True, url=f"sqlite+aiosqlite:///{tmp_path / 'palletflow.db'}")
    )
    engine = init_engine(settings)
    await create_schema(engine)
    try:
        async with get_async_session() as session:
            yield session
    finally:
        await dispose_engine()

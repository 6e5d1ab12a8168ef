from datetime import date

import pytest

from palletflow.enterprise.core import FailureKind, PackageStatus, Pallet
from palletflow.persistence import InMemoryWarehouseRepository, StorageError, WarehouseRepository
from palletflow.services import InductionEngine, StowEngine

from .conftest import CLIENT_ONE, CLIENT_TWO, WAREHOUSE_A, WAREHOUSE_B, directory_rows, make_package


async def load_directory(repo) -> None:
    warehouses, clients = directory_rows()
    for warehouse in warehouses:
        await repo.insert_warehouse(warehouse)
    for client in clients:
        await repo.insert_client(client)


@pytest.mark.asyncio
async def test_memory_store_enforces_foreign_keys():
    repo = InMemoryWarehouseRepository()
    await load_directory(repo)

    with pytest.raises(StorageError):
        await repo.insert_package(make_package("p1", client_id="nobody"))
    with pytest.raises(StorageError):
        await repo.insert_pallet(Pallet(id="pal", warehouse_id="nowhere"))

    await repo.insert_package(make_package("p1"))
    with pytest.raises(StorageError):
        await repo.update_package("p1", pallet_id="missing-pallet")
    with pytest.raises(StorageError):
        await repo.update_package("ghost", status=PackageStatus.INDUCTED)


@pytest.mark.asyncio
async def test_memory_store_rejects_duplicate_ids():
    repo = InMemoryWarehouseRepository()
    await load_directory(repo)
    await repo.insert_pallet(Pallet(id="pal", warehouse_id=WAREHOUSE_A))

    with pytest.raises(StorageError) as excinfo:
        await repo.insert_pallet(Pallet(id="pal", warehouse_id=WAREHOUSE_B))

    assert excinfo.value.table == "pallets"
    assert excinfo.value.key == "pal"


@pytest.mark.asyncio
async def test_memory_store_filters_and_weights():
    repo = InMemoryWarehouseRepository()
    assert await repo.is_empty()
    await load_directory(repo)
    await repo.insert_pallet(Pallet(id="pal", warehouse_id=WAREHOUSE_A))
    await repo.insert_package(make_package("p1", weight=12.5, warehouse_id=WAREHOUSE_A))
    await repo.insert_package(make_package("p2", weight=7.5, client_id=CLIENT_TWO, warehouse_id=WAREHOUSE_A))
    await repo.insert_package(make_package("p3"))
    await repo.update_package("p1", pallet_id="pal")
    await repo.update_package("p2", pallet_id="pal")

    assert not await repo.is_empty()
    assert [pkg.id for pkg in await repo.list_packages(client_id=CLIENT_ONE)] == ["p1", "p3"]
    assert [pkg.id for pkg in await repo.list_packages(warehouse_id=WAREHOUSE_A)] == ["p1", "p2"]
    assert [pkg.id for pkg in await repo.packages_by_ids(["p2", "p2", "ghost"])] == ["p2"]
    assert await repo.pallet_weight("pal") == 20.0
    assert await repo.pallet_weight("empty") is None
    assert (await repo.get_package("p1")).updated_at is not None


@pytest.mark.asyncio
async def test_sql_store_round_trips_records(sql_session):
    repo = WarehouseRepository(sql_session)
    assert await repo.is_empty()
    await load_directory(repo)
    await repo.insert_package(make_package("p1", weight=21.5, service_date=date(2025, 7, 1)))

    package = await repo.get_package("p1")

    assert package.status == PackageStatus.PENDING
    assert package.service_date == date(2025, 7, 1)
    assert package.created_at is not None
    assert [warehouse.id for warehouse in await repo.list_warehouses()] == [WAREHOUSE_A, WAREHOUSE_B]
    assert [client.id for client in await repo.list_clients()] == [CLIENT_ONE, CLIENT_TWO]
    assert await repo.get_client("nobody") is None


@pytest.mark.asyncio
async def test_sql_store_surfaces_constraint_failures(sql_session):
    repo = WarehouseRepository(sql_session)
    await load_directory(repo)

    with pytest.raises(StorageError):
        await repo.insert_pallet(Pallet(id="pal", warehouse_id="nowhere"))
    with pytest.raises(StorageError):
        await repo.update_package("ghost", status=PackageStatus.INDUCTED)

    # The session stays usable after a rolled back failure.
    await repo.insert_pallet(Pallet(id="pal", warehouse_id=WAREHOUSE_A))
    assert (await repo.get_pallet("pal")).warehouse_id == WAREHOUSE_A


@pytest.mark.asyncio
async def test_engines_run_against_sql_store(sql_session, rules):
    repo = WarehouseRepository(sql_session)
    await load_directory(repo)
    for index, weight in enumerate((200, 200, 150)):
        await repo.insert_package(make_package(f"p{index}", weight=weight, service_date=date(2025, 7, 1)))

    inducted = await InductionEngine(repo, rules).induct(["p0", "p1", "p2"], CLIENT_ONE, WAREHOUSE_A)
    assert all(outcome.success for outcome in inducted)

    stowed = await StowEngine(repo, rules).stow(["p0", "p1", "p2"], WAREHOUSE_A)

    assert all(outcome.success for outcome in stowed)
    pallets = {outcome.pallet_id for outcome in stowed}
    assert len(pallets) == 2
    for pallet_id in pallets:
        assert await repo.pallet_weight(pallet_id) <= rules.max_pallet_weight_lbs
    assert {pkg.status for pkg in await repo.list_packages()} == {PackageStatus.STOWED}
    assert len(await repo.list_pallets(warehouse_id=WAREHOUSE_A)) == 2


@pytest.mark.asyncio
async def test_sql_stow_aborts_when_pallet_cannot_be_created(sql_session, rules):
    repo = WarehouseRepository(sql_session)
    await load_directory(repo)

    outcomes = await StowEngine(repo, rules).stow(["p1"], "nowhere")

    assert [outcome.kind for outcome in outcomes] == [FailureKind.PRE_CREATION_ABORT]
    assert await repo.list_pallets() == []

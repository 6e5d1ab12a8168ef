from datetime import date, timedelta

import pytest

from palletflow.enterprise.config.settings import SeedSettings
from palletflow.enterprise.core import PackageStatus
from palletflow.persistence import InMemoryWarehouseRepository, seed_store
from palletflow.persistence.seed import CLIENT_IDS, WAREHOUSE_IDS, build_seed_data, package_id_for


def test_seed_data_shape():
    today = date(2025, 7, 1)
    data = build_seed_data(SeedSettings(package_count=12, service_window_days=10, random_seed=7), today=today)

    assert [warehouse.id for warehouse in data.warehouses] == list(WAREHOUSE_IDS)
    assert [client.id for client in data.clients] == list(CLIENT_IDS)
    assert len(data.packages) == 12
    assert data.packages[0].id == package_id_for(0) == "00000000-0000-0000-0000-000000001000"
    for index, package in enumerate(data.packages):
        assert package.status == PackageStatus.PENDING
        assert package.warehouse_id is None
        assert package.client_id == CLIENT_IDS[index % 3]
        assert 1 <= package.weight_lbs <= 51
        assert today <= package.service_date < today + timedelta(days=10)


def test_seed_is_reproducible_with_a_fixed_seed():
    settings = SeedSettings(random_seed=42)

    first = build_seed_data(settings, today=date(2025, 1, 1))
    second = build_seed_data(settings, today=date(2025, 1, 1))

    assert first.packages == second.packages


@pytest.mark.asyncio
async def test_seed_store_only_fills_an_empty_store():
    repo = InMemoryWarehouseRepository()
    settings = SeedSettings(package_count=5)

    assert await seed_store(repo, settings) is True
    assert len(repo.packages) == 5
    assert await seed_store(repo, settings) is False
    assert len(repo.packages) == 5


@pytest.mark.asyncio
async def test_disabled_seed_writes_nothing():
    repo = InMemoryWarehouseRepository()

    assert await seed_store(repo, SeedSettings(enabled=False)) is False
    assert await repo.is_empty()

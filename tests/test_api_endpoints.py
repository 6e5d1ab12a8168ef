import pytest
from fastapi.testclient import TestClient

from palletflow.persistence import StorageError
from palletflow.persistence.seed import CLIENT_IDS, WAREHOUSE_IDS, package_id_for
from palletflow.server.app import app
from palletflow.server.dependencies import get_memory_repository, reset_repository


@pytest.fixture
def client():
    reset_repository()
    with TestClient(app) as test_client:
        yield test_client
    reset_repository()


def induct(client, package_ids, client_id=CLIENT_IDS[0], warehouse_id=WAREHOUSE_IDS[0]):
    return client.post(
        "/api/v1/packages/induct",
        json={"package_ids": package_ids, "client_id": client_id, "warehouse_id": warehouse_id},
    )


def test_health_endpoints(client) -> None:
    live = client.get("/api/v1/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["status"] == "ready"


def test_startup_seeds_directory(client) -> None:
    warehouses = client.get("/api/v1/warehouses/").json()
    assert [warehouse["id"] for warehouse in warehouses] == list(WAREHOUSE_IDS)

    clients = client.get("/api/v1/clients/").json()
    assert [entry["name"] for entry in clients] == ["Client One", "Client Two", "Client Three"]

    packages = client.get("/api/v1/packages/", params={"client_id": CLIENT_IDS[1]}).json()
    assert packages
    assert {pkg["status"] for pkg in packages} == {"PENDING"}


def test_induct_then_stow(client) -> None:
    package_ids = [package_id_for(index) for index in (0, 3, 6)]

    inducted = induct(client, package_ids)
    assert inducted.status_code == 200
    results = inducted.json()["results"]
    assert [result["package_id"] for result in results] == package_ids
    assert all(result["success"] for result in results)
    assert results[0]["message"] == "Package INDUCTED successfully"
    assert results[0]["error"] is None

    stowed = client.post(
        "/api/v1/packages/stow",
        json={"package_ids": package_ids, "warehouse_id": WAREHOUSE_IDS[0]},
    )
    assert stowed.status_code == 200
    stow_results = stowed.json()["results"]
    assert all(result["success"] for result in stow_results)
    pallet_id = stow_results[0]["pallet_id"]
    assert pallet_id

    pallet = client.get(f"/api/v1/pallets/{pallet_id}").json()
    assert pallet["warehouse_id"] == WAREHOUSE_IDS[0]
    assert sorted(pkg["id"] for pkg in pallet["packages"]) == package_ids
    assert pallet["total_weight_lbs"] <= 500

    package = client.get(f"/api/v1/packages/{package_ids[0]}").json()
    assert package["status"] == "STOWED"
    assert package["pallet_id"] == pallet_id
    assert package["received_ts"] is not None


def test_induct_reports_foreign_packages(client) -> None:
    response = induct(client, [package_id_for(1), "missing"])

    results = response.json()["results"]
    assert response.status_code == 200
    assert [result["success"] for result in results] == [False, False]
    assert {result["error"] for result in results} == {"not_found_or_foreign"}
    assert {result["message"] for result in results} == {"Package ID not found"}


def test_stow_pending_package_is_rejected(client) -> None:
    response = client.post(
        "/api/v1/packages/stow",
        json={"package_ids": [package_id_for(0)], "warehouse_id": WAREHOUSE_IDS[0], "pallet_id": "dock-1"},
    )

    [result] = response.json()["results"]
    assert result["success"] is False
    assert result["error"] == "invalid_state"
    assert result["message"] == "Cannot stow package with status PENDING"
    # The requested starting pallet is created even though nothing landed on it.
    assert client.get("/api/v1/pallets/dock-1").status_code == 200


def test_stow_into_unknown_warehouse_aborts(client) -> None:
    response = client.post(
        "/api/v1/packages/stow",
        json={"package_ids": [package_id_for(0)], "warehouse_id": "nowhere", "pallet_id": "dock-2"},
    )

    assert response.status_code == 200
    assert response.json()["results"] == [
        {
            "package_id": None,
            "success": False,
            "message": "Server error while attempt INSERT or UPDATE pallet",
            "error": "pre_creation_abort",
            "pallet_id": "dock-2",
        }
    ]


def test_request_validation(client) -> None:
    empty = client.post(
        "/api/v1/packages/induct",
        json={"package_ids": [], "client_id": CLIENT_IDS[0], "warehouse_id": WAREHOUSE_IDS[0]},
    )
    assert empty.status_code == 422

    missing = client.post("/api/v1/packages/stow", json={"package_ids": ["a"]})
    assert missing.status_code == 422


def test_unknown_records_return_404(client) -> None:
    assert client.get("/api/v1/packages/nope").status_code == 404
    assert client.get("/api/v1/pallets/nope").status_code == 404
    assert client.get("/api/v1/clients/nope").status_code == 404
    assert client.get("/api/v1/warehouses/nope").status_code == 404


def test_storage_failure_maps_to_503(client, monkeypatch) -> None:
    async def broken(**_filters):
        raise StorageError("connection reset")

    monkeypatch.setattr(get_memory_repository(), "list_packages", broken)

    response = client.get("/api/v1/packages/")
    assert response.status_code == 503
    assert response.json()["detail"] == "Record store unavailable"


def test_observability_metrics(client) -> None:
    induct(client, [package_id_for(0)])

    response = client.get("/api/v1/observability/metrics")
    assert response.status_code == 200
    assert "palletflow_api_requests_total" in response.text
    assert 'palletflow_package_outcomes_total{operation="induct",result="accepted"}' in response.text

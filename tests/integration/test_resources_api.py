import pytest

pytestmark = pytest.mark.integration

CITIZEN = "citizen@example.com"
COORDINATOR = "coordinator@example.com"
AGENCY = "agency@example.com"


def _h(email: str):
    return {"x-auth-request-user": email.split("@")[0], "x-auth-request-email": email}


def _resource_payload(**overrides):
    payload = {
        "name": "Sandbags",
        "type": "supplies",
        "category": "flood",
        "quantity": 100,
        "available": 100,
        "organization": "Public Works",
    }
    payload.update(overrides)
    return payload


def test_list_and_filter_resources(client):
    assert len(client.get("/resources").json()) == 2
    fire = client.get("/resources", params={"organization": "Fire Department"}).json()
    assert [r["name"] for r in fire] == ["Fire Truck #1"]
    assert client.get("/resources", params={"status": "deployed"}).json() == []
    assert client.get("/resources/1").json()["type"] == "vehicle"
    assert client.get("/resources/missing").status_code == 404


def test_create_update_delete_resource(client):
    r = client.post("/resources", json=_resource_payload(), headers=_h(COORDINATOR))
    assert r.status_code == 201, r.text
    resource_id = r.json()["id"]

    r = client.patch(f"/resources/{resource_id}", json={"available": 80}, headers=_h(COORDINATOR))
    assert r.status_code == 200
    assert r.json()["available"] == 80

    assert client.delete(f"/resources/{resource_id}", headers=_h(COORDINATOR)).status_code == 204
    assert client.get(f"/resources/{resource_id}").status_code == 404
    assert client.delete(f"/resources/{resource_id}", headers=_h(COORDINATOR)).status_code == 404


def test_resource_management_is_coordinator_only(client):
    assert client.post("/resources", json=_resource_payload(), headers=_h(AGENCY)).status_code == 403
    assert client.patch("/resources/1", json={"status": "maintenance"}, headers=_h(CITIZEN)).status_code == 403


def test_available_cannot_exceed_quantity(client):
    r = client.post("/resources", json=_resource_payload(available=101), headers=_h(COORDINATOR))
    assert r.status_code == 400
    r = client.patch("/resources/2", json={"available": 6}, headers=_h(COORDINATOR))
    assert r.status_code == 400


def test_negative_counts_rejected(client):
    r = client.post("/resources", json=_resource_payload(quantity=-1), headers=_h(COORDINATOR))
    assert r.status_code == 422


def test_allocation_lifecycle(client):
    h = _h(COORDINATOR)
    r = client.post("/allocations", json={"resource_id": "2", "incident_id": "1", "quantity": 5}, headers=h)
    assert r.status_code == 201, r.text
    allocation = r.json()
    resource = client.get("/resources/2").json()
    assert resource["available"] == 0
    assert resource["status"] == "deployed"

    # nothing left to hand out
    r = client.post("/allocations", json={"resource_id": "2", "incident_id": "2", "quantity": 1}, headers=h)
    assert r.status_code == 409

    # outstanding allocations block deletion
    assert client.delete("/resources/2", headers=h).status_code == 409

    r = client.post(f"/allocations/{allocation['id']}/return", headers=h)
    assert r.status_code == 200
    assert r.json()["status"] == "returned"
    resource = client.get("/resources/2").json()
    assert resource["available"] == 5
    assert resource["status"] == "available"

    assert client.post(f"/allocations/{allocation['id']}/return", headers=h).status_code == 409
    assert client.get("/allocations", params={"incident_id": "1"}).json()[0]["id"] == allocation["id"]


def test_over_allocation_conflict(client):
    r = client.post(
        "/allocations",
        json={"resource_id": "1", "incident_id": "1", "quantity": 2},
        headers=_h(COORDINATOR),
    )
    assert r.status_code == 409
    assert client.get("/resources/1").json()["available"] == 1


def test_agency_allocation_scope(client):
    h = _h(AGENCY)
    r = client.post("/allocations", json={"resource_id": "1", "incident_id": "1"}, headers=h)
    assert r.status_code == 201
    r = client.post("/allocations", json={"resource_id": "2", "incident_id": "1"}, headers=h)
    assert r.status_code == 403
    r = client.post("/allocations", json={"resource_id": "1", "incident_id": "1"}, headers=_h(CITIZEN))
    assert r.status_code == 403


def test_allocation_lookup_errors(client):
    h = _h(COORDINATOR)
    assert client.post("/allocations", json={"resource_id": "9", "incident_id": "1"}, headers=h).status_code == 404
    assert client.post("/allocations/nope/return", headers=h).status_code == 404
    assert client.patch("/allocations/nope", json={"status": "lost"}, headers=h).status_code == 404


def test_mark_allocation_lost(client):
    h = _h(COORDINATOR)
    allocation = client.post(
        "/allocations", json={"resource_id": "2", "incident_id": "1", "quantity": 1}, headers=h
    ).json()
    r = client.patch(f"/allocations/{allocation['id']}", json={"status": "lost"}, headers=h)
    assert r.status_code == 200
    assert r.json()["status"] == "lost"
    assert client.get("/resources/2").json()["available"] == 4


def _allocation(client, allocation_id):
    return next(a for a in client.get("/allocations").json() if a["id"] == allocation_id)


def _outstanding(client, resource_id):
    allocations = client.get("/allocations", params={"resource_id": resource_id}).json()
    return sum(a["quantity"] for a in allocations if a["status"] == "allocated")


def test_allocation_patch_cannot_resize_or_reopen(client, any_backend):
    h = _h(COORDINATOR)
    allocation = client.post(
        "/allocations", json={"resource_id": "2", "incident_id": "1", "quantity": 2}, headers=h
    ).json()
    path = f"/allocations/{allocation['id']}"

    # quantity is not part of the PATCH body
    assert client.patch(path, json={"quantity": 1}, headers=h).status_code == 422
    assert _allocation(client, allocation["id"])["quantity"] == 2

    # only the return endpoint settles an allocation
    assert client.patch(path, json={"status": "returned"}, headers=h).status_code == 409
    assert client.post(f"{path}/return", headers=h).status_code == 200
    assert client.get("/resources/2").json()["available"] == 5

    for status in ("allocated", "lost"):
        r = client.patch(path, json={"status": status}, headers=h)
        assert r.status_code == 409
    assert _allocation(client, allocation["id"])["status"] == "returned"

    # a second allocation still sees the full stock and no phantom claims
    r = client.post("/allocations", json={"resource_id": "2", "incident_id": "2", "quantity": 5}, headers=h)
    assert r.status_code == 201
    resource = client.get("/resources/2").json()
    assert resource["available"] + _outstanding(client, "2") == resource["quantity"]


def test_lost_units_stay_out_of_stock(client):
    h = _h(COORDINATOR)
    allocation = client.post(
        "/allocations", json={"resource_id": "2", "incident_id": "1", "quantity": 3}, headers=h
    ).json()
    path = f"/allocations/{allocation['id']}"
    assert client.patch(path, json={"status": "lost"}, headers=h).status_code == 200
    assert client.post(f"{path}/return", headers=h).status_code == 409

    resource = client.get("/resources/2").json()
    assert resource["available"] == 2
    assert resource["available"] + _outstanding(client, "2") <= resource["quantity"]


def test_null_for_required_resource_field_is_unprocessable(client, any_backend):
    r = client.patch("/resources/2", json={"quantity": None}, headers=_h(COORDINATOR))
    assert r.status_code == 422
    assert "quantity cannot be null" in r.text
    assert client.get("/resources/2").json()["quantity"] == 5

"""HTTP contract of the product, knife and tool routes."""

from __future__ import annotations

import re

from storefront.core.oauth import OAUTH_COOKIE_NAME, issue_oauth_session

from conftest import ADMIN_EMAIL


def _create(c, payload):
    response = c.post("/api/products", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_requires_admin(client, knife_payload):
    response = client.post("/api/products", json=knife_payload)

    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized"}


def test_create_then_get_test_knife(admin_client, knife_payload):
    created = _create(admin_client, knife_payload)

    assert re.match(r"^k_[0-9a-z]+$", created["id"])
    assert created["createdAt"] == created["updatedAt"]
    assert created["createdBy"] == {"email": "", "name": "admin"}
    assert created["updatedBy"] == created["createdBy"]
    assert admin_client.get(f"/api/products/{created['id']}").json() == created


def test_create_ignores_client_ids_and_timestamps(admin_client, knife_payload):
    knife_payload.update({"id": "k_mine", "createdAt": "2000-01-01T00:00:00.000Z"})

    created = _create(admin_client, knife_payload)

    assert created["id"] != "k_mine"
    assert created["createdAt"] != "2000-01-01T00:00:00.000Z"


def test_create_reports_every_missing_field(admin_client):
    response = admin_client.post("/api/products", json={"title": "Half done", "price": "abc"})

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail.startswith("Missing required fields:")
    for field in ("price", "category", "steel", "handleMaterial", "bladeLengthCm", "images"):
        assert field in detail
    assert "title" not in detail


def test_get_unknown_product_is_404(client):
    response = client.get("/api/products/k_missing")

    assert response.status_code == 404


def test_update_merges_and_records_editor(admin_client, knife_payload):
    created = _create(admin_client, knife_payload)

    response = admin_client.put(f"/api/products/{created['id']}", json={"price": 125000, "createdAt": "x"})
    updated = response.json()

    assert response.status_code == 200
    assert updated["price"] == 125000
    assert updated["steel"] == "D2"
    assert updated["createdAt"] == created["createdAt"]
    assert updated["createdBy"] == created["createdBy"]
    assert updated["updatedBy"]["name"] == "admin"


def test_update_validation_and_not_found(admin_client, knife_payload):
    created = _create(admin_client, knife_payload)

    blanked = admin_client.put(f"/api/products/{created['id']}", json={"title": "", "steel": ""})
    missing = admin_client.put("/api/products/k_nope", json={"price": 1})

    assert blanked.status_code == 400
    assert "title" in blanked.json()["detail"]
    assert "steel" in blanked.json()["detail"]
    assert missing.status_code == 404


def test_delete_then_404(admin_client, knife_payload):
    created = _create(admin_client, knife_payload)

    assert admin_client.delete(f"/api/products/{created['id']}").json() == {"success": True, "id": created["id"]}
    assert admin_client.get(f"/api/products/{created['id']}").status_code == 404
    assert admin_client.delete(f"/api/products/{created['id']}").status_code == 404


def test_list_filters_and_sorting(admin_client, knife_payload):
    _create(admin_client, knife_payload)
    _create(admin_client, {**knife_payload, "title": "Camp Axe", "type": "tool", "category": "Axe", "price": 90000})
    _create(admin_client, {**knife_payload, "title": "Big Chef", "price": 300000})

    everything = admin_client.get("/api/products").json()
    tools = admin_client.get("/api/products", params={"type": "tool"}).json()
    by_title = admin_client.get("/api/products", params={"sortBy": "title", "sortOrder": "desc"}).json()

    assert everything["total"] == 3
    assert [p["price"] for p in everything["products"]] == [90000, 100000, 300000]
    assert [p["title"] for p in tools["products"]] == ["Camp Axe"]
    assert tools["filters"]["type"] == "tool"
    assert [p["title"] for p in by_title["products"]] == ["Test Knife", "Camp Axe", "Big Chef"]


def test_inverted_price_range_returns_nothing(admin_client, knife_payload):
    _create(admin_client, knife_payload)

    body = admin_client.get("/api/products", params={"minPrice": 500000, "maxPrice": 1000}).json()

    assert body["products"] == []
    assert body["total"] == 0


def test_invalid_sort_key_is_rejected(client):
    assert client.get("/api/products", params={"sortBy": "weight"}).status_code == 422


def test_version_one_serves_legacy_shape(admin_client, knife_payload):
    created = _create(admin_client, knife_payload)

    legacy = admin_client.get(f"/api/products/{created['id']}", headers={"X-API-Version": "1"}).json()

    assert legacy == {
        "id": created["id"], "title": "Test Knife", "price": 100000, "category": "Kitchen",
        "image": "/a.jpg", "steel": "D2", "handleMaterial": "G10", "bladeLength": 15.0,
        "handleLength": 10.0, "bladeStyle": "Drop Point", "handleStyle": "Ergonomic",
    }


def test_legacy_clients_can_write(admin_client, knife_payload):
    legacy_body = {k: v for k, v in knife_payload.items() if k not in ("type", "images", "bladeLengthCm", "handleLengthCm")}
    legacy_body.update({"image": "/l.jpg", "bladeLength": 13, "handleLength": 9, "category": "Dapur"})
    headers = {"X-API-Version": "v1"}

    created = admin_client.post("/api/products", json=legacy_body, headers=headers)
    updated = admin_client.put(f"/api/products/{created.json()['id']}", json={"bladeLength": 14}, headers=headers)
    unified = admin_client.get(f"/api/products/{created.json()['id']}").json()

    assert created.status_code == 201
    assert updated.json()["bladeLength"] == 14
    assert unified["type"] == "knife"
    assert unified["images"] == ["/l.jpg"]
    assert unified["bladeLengthCm"] == 14


def test_knife_and_tool_routes(admin_client, knife_payload):
    knife = _create(admin_client, knife_payload)
    tool = _create(admin_client, {**knife_payload, "title": "Parang", "category": "Machete", "type": "tool"})

    assert [p["id"] for p in admin_client.get("/api/knives").json()["products"]] == [knife["id"]]
    assert [p["id"] for p in admin_client.get("/api/tools").json()["products"]] == [tool["id"]]
    assert admin_client.get(f"/api/tools/{tool['id']}").json()["title"] == "Parang"
    assert admin_client.get(f"/api/tools/{knife['id']}").status_code == 404
    assert admin_client.get(f"/api/knives/{tool['id']}").status_code == 404


def test_oauth_admin_is_recorded_as_maker(client, settings, knife_payload):
    client.cookies.set(OAUTH_COOKIE_NAME, issue_oauth_session(ADMIN_EMAIL, "Owner", settings))

    created = _create(client, knife_payload)
    by_maker = client.get("/api/products", params={"maker": ADMIN_EMAIL}).json()

    assert created["createdBy"] == {"email": ADMIN_EMAIL, "name": "Owner"}
    assert by_maker["total"] == 1


def test_huge_numbers_are_rejected_not_crashing(admin_client, knife_payload):
    created = _create(admin_client, {**knife_payload, "weightGr": 10 ** 400, "specs": {"hrc": 10 ** 400}})

    too_big = admin_client.post("/api/products", json={**knife_payload, "price": 10 ** 400})
    put = admin_client.put(f"/api/products/{created['id']}", json={"price": 10 ** 400})

    assert created["weightGr"] is None
    assert created["specs"] == {"hrc": str(10 ** 400)}
    assert too_big.status_code == 400
    assert too_big.json()["detail"] == "Missing required fields: price"
    assert put.status_code == 400
    assert "price" in put.json()["detail"]


def test_two_updates_keep_created_at(admin_client, knife_payload):
    created = _create(admin_client, knife_payload)

    first = admin_client.put(f"/api/products/{created['id']}", json={"price": 110000}).json()
    second = admin_client.put(f"/api/products/{created['id']}", json={"steel": "M390"}).json()

    assert first["createdAt"] == second["createdAt"] == created["createdAt"]
    assert created["updatedAt"] <= first["updatedAt"] <= second["updatedAt"]
    assert second["price"] == 110000

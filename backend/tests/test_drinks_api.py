"""Drink catalogue API tests."""

from beermachine.models import Drink


def test_list_is_public(client, drink):
    resp = client.get("/api/v1/drinks")
    assert resp.status_code == 200
    assert resp.get_json()["drinks"][0]["name"] == "Pils"


def test_get_missing(client, db_session):
    assert client.get("/api/v1/drinks/999").status_code == 404


def test_create(client, admin_headers):
    resp = client.post(
        "/api/v1/drinks",
        json={"name": "Radler", "price": 3, "stock": 12},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    body = resp.get_json()["drink"]
    assert body["price"] == 3
    assert body["stock"] == 12
    assert body["category"] == "beverage"
    assert body["is_active"] is True


def test_create_duplicate_name(client, admin_headers, drink):
    resp = client.post("/api/v1/drinks", json={"name": "Pils", "price": 3}, headers=admin_headers)
    assert resp.status_code == 409


def test_create_rejects_zero_price(client, admin_headers):
    resp = client.post("/api/v1/drinks", json={"name": "Free", "price": 0}, headers=admin_headers)
    assert resp.status_code == 400


def test_create_rejects_unknown_field(client, admin_headers):
    resp = client.post(
        "/api/v1/drinks",
        json={"name": "Hacked", "price": 3, "version_id": 9},
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_create_requires_name(client, admin_headers):
    resp = client.post("/api/v1/drinks", json={"price": 3}, headers=admin_headers)
    assert resp.status_code == 400


def test_update(client, admin_headers, drink):
    resp = client.put(f"/api/v1/drinks/{drink.id}", json={"price": 6}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["drink"]["price"] == 6


def test_add_stock(client, admin_headers, drink):
    resp = client.post(f"/api/v1/drinks/{drink.id}/add-stock", json={"quantity": 24}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["drink"]["stock"] == 27


def test_add_stock_rejects_zero(client, admin_headers, drink):
    resp = client.post(f"/api/v1/drinks/{drink.id}/add-stock", json={"quantity": 0}, headers=admin_headers)
    assert resp.status_code == 400


def test_add_stock_rejects_oversized_quantity(client, admin_headers, db_session, drink):
    resp = client.post(f"/api/v1/drinks/{drink.id}/add-stock", json={"quantity": 10**20}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["details"] == {"quantity": 10**20}
    db_session.refresh(drink)
    assert drink.stock == 3


def test_add_stock_missing_drink(client, admin_headers):
    resp = client.post("/api/v1/drinks/999/add-stock", json={"quantity": 5}, headers=admin_headers)
    assert resp.status_code == 404


def test_delete_is_soft(client, admin_headers, db_session, drink):
    resp = client.delete(f"/api/v1/drinks/{drink.id}", headers=admin_headers)
    assert resp.status_code == 200
    assert db_session.get(Drink, drink.id).is_active is False

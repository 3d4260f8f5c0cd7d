"""Leaderboard API tests."""

from beermachine.time_utils import utcnow


def test_monthly_defaults_to_current_month(client, seller_headers, admin, member, drink):
    client.post(
        "/api/v1/sales/sell",
        json={"user_id": member.id, "drink_id": drink.id, "quantity": 2},
        headers=seller_headers,
    )

    resp = client.get("/api/v1/leaderboard/monthly", headers=seller_headers)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["period"]["month"] == utcnow().month
    assert body["leaderboard"][0]["username"] == "alice"
    assert body["leaderboard"][0]["total_drinks"] == 2


def test_invalid_month(client, seller_headers):
    resp = client.get("/api/v1/leaderboard/monthly?year=2024&month=13", headers=seller_headers)
    assert resp.status_code == 400


def test_non_numeric_year(client, seller_headers):
    resp = client.get("/api/v1/leaderboard/monthly?year=soon", headers=seller_headers)
    assert resp.status_code == 400


def test_rank_without_purchases(client, seller_headers, member):
    resp = client.get(f"/api/v1/leaderboard/rank/{member.id}?year=2020&month=1", headers=seller_headers)
    assert resp.status_code == 200
    assert resp.get_json() == {"user_id": member.id, "rank": None, "total_drinks": 0, "total_users": 0}

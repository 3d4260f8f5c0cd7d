"""
Authentication API tests.

Verifies:
- Only staff with a password can log in
- Tokens authorize requests until logout or deactivation
- Role gates return 401 / 403
"""

from datetime import timedelta

import pytest

from beermachine.models import SessionToken
from beermachine.services import session_service
from beermachine.time_utils import utcnow
from conftest import STAFF_PASSWORD, auth_headers, get_auth_token


class TestLogin:

    def test_admin_login(self, client, admin):
        resp = client.post("/api/v1/auth/login", json={"username": "admin", "password": STAFF_PASSWORD})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["user"]["user_type"] == "admin"
        assert len(body["token"]) == 64
        assert "password_hash" not in body["user"]

    def test_wrong_password(self, client, admin):
        resp = client.post("/api/v1/auth/login", json={"username": "admin", "password": "nope-nope"})
        assert resp.status_code == 401

    def test_member_cannot_login(self, client, member):
        resp = client.post("/api/v1/auth/login", json={"username": "alice", "password": "anything"})
        assert resp.status_code == 401

    def test_inactive_staff_cannot_login(self, client, make_user):
        make_user("gone", user_type="seller", is_active=False)
        assert get_auth_token(client, "gone") is None

    def test_missing_fields(self, client, db_session):
        resp = client.post("/api/v1/auth/login", json={"username": "admin"})
        assert resp.status_code == 400


class TestSession:

    def test_me(self, client, seller_headers):
        resp = client.get("/api/v1/auth/me", headers=seller_headers)
        assert resp.status_code == 200
        assert resp.get_json()["user"]["username"] == "bartender"

    def test_logout_revokes_token(self, client, admin_headers):
        assert client.post("/api/v1/auth/logout", headers=admin_headers).status_code == 200
        assert client.get("/api/v1/auth/me", headers=admin_headers).status_code == 401

    def test_garbage_token(self, client, db_session):
        resp = client.get("/api/v1/auth/me", headers=auth_headers("not-a-token"))
        assert resp.status_code == 401

    def test_missing_header(self, client, db_session):
        resp = client.get("/api/v1/auth/me")
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Access token required"

    def test_idle_session_is_revoked(self, client, db_session, admin):
        token = get_auth_token(client, admin.username)
        session = db_session.query(SessionToken).filter_by(
            token_hash=session_service.hash_token(token)
        ).one()
        session.last_used_at = utcnow() - timedelta(hours=3)
        db_session.commit()

        assert client.get("/api/v1/auth/me", headers=auth_headers(token)).status_code == 401
        db_session.refresh(session)
        assert session.is_revoked
        assert session.revoked_reason == "Idle timeout"

    def test_deactivated_user_loses_session(self, client, db_session, seller, seller_headers):
        seller.is_active = False
        db_session.commit()
        assert client.get("/api/v1/auth/me", headers=seller_headers).status_code == 401


class TestRoleGates:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/v1/users"),
            ("POST", "/api/v1/sales/sell"),
            ("GET", "/api/v1/sales/history"),
            ("GET", "/api/v1/sales/stats"),
            ("DELETE", "/api/v1/sales/undo/1"),
            ("POST", "/api/v1/drinks"),
            ("GET", "/api/v1/leaderboard/monthly"),
            ("GET", "/api/v1/admin"),
            ("GET", "/api/v1/passkeys"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/v1/sales/stats"),
            ("DELETE", "/api/v1/sales/undo/1"),
            ("POST", "/api/v1/drinks"),
            ("POST", "/api/v1/drinks/1/add-stock"),
            ("POST", "/api/v1/users"),
            ("GET", "/api/v1/admin"),
            ("GET", "/api/v1/passkeys"),
        ],
    )
    def test_seller_denied_admin_operations(self, client, seller_headers, method, path):
        resp = getattr(client, method.lower())(path, headers=seller_headers)
        assert resp.status_code == 403, f"{method} {path} returned {resp.status_code}"

"""
Pytest fixtures for beer machine backend tests.

Provides the test app (in-memory SQLite), a per-test table wipe, account
and drink factories, and auth header helpers.
"""

import pytest

from beermachine import create_app
from beermachine.config import TestConfig
from beermachine.extensions import db
from beermachine.models import User, Drink
from beermachine.services.auth_service import hash_password

STAFF_PASSWORD = "secret123"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_user(db_session):
    """Factory for ledger accounts and staff. Staff get STAFF_PASSWORD."""
    def _make(username, credits=0, user_type="member", is_active=True):
        user = User(
            username=username,
            credits=credits,
            user_type=user_type,
            is_active=is_active,
            password_hash=hash_password(STAFF_PASSWORD) if user_type in ("admin", "seller") else None,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture(scope='function')
def make_drink(db_session):
    def _make(name, price=5, stock=3, is_active=True):
        drink = Drink(name=name, price=price, stock=stock, is_active=is_active)
        db_session.add(drink)
        db_session.commit()
        return drink
    return _make


@pytest.fixture(scope='function')
def admin(make_user):
    return make_user("admin", user_type="admin")


@pytest.fixture(scope='function')
def seller(make_user):
    return make_user("bartender", user_type="seller")


@pytest.fixture(scope='function')
def member(make_user):
    return make_user("alice", credits=20)


@pytest.fixture(scope='function')
def drink(make_drink):
    return make_drink("Pils", price=5, stock=3)


def get_auth_token(client, username: str, password: str = STAFF_PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/v1/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin):
    return auth_headers(get_auth_token(client, admin.username))


@pytest.fixture(scope='function')
def seller_headers(client, seller):
    return auth_headers(get_auth_token(client, seller.username))

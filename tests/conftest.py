"""
Shared fixtures: a throwaway SQLite store and a Flask test client.
"""

import pytest
from sqlalchemy import create_engine

from relief.api import auth as api_auth
from relief.api.app import create_app
from relief.database import create_schema, user_roles, users
from relief.models import Identity


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'relief.db'}", future=True)
    create_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def make_user(engine):
    """Insert a user with roles; returns (Identity, api_key)."""
    counter = {"n": 0}

    def _make(roles=(), email=None, active=True):
        counter["n"] += 1
        n = counter["n"]
        email = email or f"user{n}@relief.org"
        api_key = f"relief_test_key_{n}"
        with engine.begin() as conn:
            result = conn.execute(users.insert().values(
                email=email, display_name=f"User {n}", api_key=api_key, is_active=active,
            ))
            user_id = result.inserted_primary_key[0]
            for role in roles:
                conn.execute(user_roles.insert().values(user_id=user_id, role=role))
        return Identity(id=user_id, email=email, display_name=f"User {n}"), api_key

    return _make


@pytest.fixture
def resource_payload():
    return {
        "name": "Central Shelter",
        "type": "shelter",
        "description": "Cots and blankets",
        "location_name": "Lincoln High School",
        "address": "100 Main St, Springfield",
        "latitude": 39.7817,
        "longitude": -89.6501,
        "status": "available",
        "quantity": 120,
        "contact_name": "Dana Reyes",
        "contact_phone": "555-0100",
        "contact_email": "dana@relief.org",
    }


@pytest.fixture(autouse=True)
def _clear_sessions():
    api_auth.sessions.clear()
    yield
    api_auth.sessions.clear()


@pytest.fixture
def app(engine):
    flask_app = create_app(engine)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()

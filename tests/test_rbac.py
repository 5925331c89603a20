"""
Unit tests for RBAC – identity lookup, role resolution and the edit/delete
authorization rule.
"""

import pytest

from relief.config import get_env
from relief.models import Identity, Resource
from relief.rbac import can_mutate, describe_capability, has_role, load_identity, load_roles


# ── Helpers / Fakes ──────────────────────────────────────────────────

class FakeResult:
    """Mimic SQLAlchemy Result with .mappings().first() / .all()."""
    def __init__(self, rows):
        self._rows = rows

    def mappings(self):
        return self

    def first(self):
        return self._rows[0] if self._rows else None

    def all(self):
        return list(self._rows)


class FakeConn:
    def __init__(self, rows=None, error=None):
        self._rows = rows or []
        self._error = error
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self._error:
            raise self._error
        return FakeResult(self._rows)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakeEngine:
    """Mimic engine.connect() context manager."""
    def __init__(self, rows=None, error=None):
        self._rows = rows
        self._error = error
        self.connect_calls = 0
        self.last_conn = None

    def connect(self):
        self.connect_calls += 1
        self.last_conn = FakeConn(self._rows, self._error)
        return self.last_conn


def _resource(created_by="owner-1"):
    return Resource(
        id="r-1", name="Central Shelter", type="shelter",
        location_name="Gym", address="1 Main St",
        latitude=1.0, longitude=2.0, status="available",
        created_by=created_by,
    )


OWNER = Identity(id="owner-1", email="owner@relief.org")
STRANGER = Identity(id="someone-else", email="other@relief.org")


# ── Tests: get_env ───────────────────────────────────────────────────

def test_get_env_ok(monkeypatch):
    monkeypatch.setenv("X", "123")
    assert get_env("X") == "123"


def test_get_env_missing_exits(monkeypatch, capsys):
    monkeypatch.delenv("MISSING_ENV", raising=False)
    with pytest.raises(SystemExit) as e:
        get_env("MISSING_ENV")
    assert e.value.code == 1
    err = capsys.readouterr().err
    assert "ERROR: env var MISSING_ENV is not set" in err


# ── Tests: load_identity ─────────────────────────────────────────────

def test_load_identity_ok():
    engine = FakeEngine([{"id": "u-1", "email": "a@relief.org", "display_name": "A"}])
    identity = load_identity(engine, api_key="k")
    assert identity == Identity(id="u-1", email="a@relief.org", display_name="A")
    _sql, params = engine.last_conn.executed[0]
    assert params == {"k": "k", "active": True}


def test_load_identity_invalid_key():
    engine = FakeEngine([])
    with pytest.raises(ValueError, match="Invalid key"):
        load_identity(engine, api_key="bad")


# ── Tests: load_roles ────────────────────────────────────────────────

def test_load_roles_returns_set():
    engine = FakeEngine([{"role": "admin"}, {"role": "volunteer"}, {"role": "admin"}])
    assert load_roles(engine, "u-1") == {"admin", "volunteer"}
    _sql, params = engine.last_conn.executed[0]
    assert params == {"uid": "u-1"}


def test_load_roles_no_rows_is_empty():
    assert load_roles(FakeEngine([]), "u-1") == set()


def test_load_roles_normalizes_and_ignores_unknown():
    engine = FakeEngine([{"role": " Volunteer "}, {"role": "superuser"}])
    assert load_roles(engine, "u-1") == {"volunteer"}


def test_load_roles_failure_degrades_to_empty(capsys):
    engine = FakeEngine(error=RuntimeError("connection reset"))
    assert load_roles(engine, "u-1") == set()
    err = capsys.readouterr().err
    assert "[WARN] Error fetching user roles" in err
    assert "connection reset" in err


def test_has_role():
    engine = FakeEngine([{"role": "volunteer"}])
    assert has_role(engine, "u-1", "volunteer") is True
    assert has_role(engine, "u-1", "admin") is False


# ── Tests: can_mutate ────────────────────────────────────────────────

@pytest.mark.parametrize("created_by", ["owner-1", "someone-else", None])
def test_admin_can_mutate_anything(created_by):
    assert can_mutate(_resource(created_by), STRANGER, {"admin"}) is True


def test_volunteer_can_mutate_others_resources():
    assert can_mutate(_resource("owner-1"), STRANGER, {"volunteer"}) is True


def test_no_roles_only_owner():
    assert can_mutate(_resource("owner-1"), OWNER, set()) is True
    assert can_mutate(_resource("owner-1"), STRANGER, set()) is False


def test_public_role_only_owner():
    assert can_mutate(_resource("owner-1"), OWNER, {"public"}) is True
    assert can_mutate(_resource("owner-1"), STRANGER, {"public"}) is False


def test_resource_without_creator_needs_role():
    assert can_mutate(_resource(None), OWNER, set()) is False


def test_can_mutate_accepts_any_iterable():
    assert can_mutate(_resource(), STRANGER, ["public", "admin"]) is True


# ── Tests: describe_capability ───────────────────────────────────────

def test_describe_capability():
    assert describe_capability(set()) == "public"
    assert describe_capability({"volunteer", "admin"}) == "admin, volunteer"

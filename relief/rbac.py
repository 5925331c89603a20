"""
Role-Based Access Control – loading identities and role assignments, and
deciding who may edit or delete a resource.
"""

import sys
from typing import Iterable, Set

from sqlalchemy import text

from relief.config import MUTATING_ROLES, ROLES
from relief.models import Identity, Resource


def load_identity(engine, api_key: str) -> Identity:
    """Look up an active user by API key and return their Identity."""
    sql = text("""
        SELECT id, email, display_name
        FROM users
        WHERE api_key = :k AND is_active = :active
    """)
    with engine.connect() as conn:
        row = conn.execute(sql, {"k": api_key, "active": True}).mappings().first()

    if not row:
        raise ValueError("Invalid key or user inactive (no match in users).")

    return Identity(
        id=str(row["id"]),
        email=str(row["email"]),
        display_name=row["display_name"],
    )


def load_roles(engine, user_id: str) -> Set[str]:
    """
    Return the roles assigned to *user_id*.

    A failed lookup is logged and treated as "no roles", so callers fall back
    to public capability instead of failing the whole request.
    """
    sql = text("SELECT role FROM user_roles WHERE user_id = :uid")
    try:
        with engine.connect() as conn:
            rows = conn.execute(sql, {"uid": user_id}).mappings().all()
    except Exception as e:
        print(f"[WARN] Error fetching user roles for {user_id}: {e}", file=sys.stderr)
        return set()

    roles = set()
    for row in rows:
        role = str(row["role"]).strip().lower()
        if role in ROLES:
            roles.add(role)
    return roles


def has_role(engine, user_id: str, role: str) -> bool:
    return role in load_roles(engine, user_id)


def can_mutate(resource: Resource, identity: Identity, roles: Iterable[str]) -> bool:
    """
    Decide whether *identity* may edit or delete *resource*.

    Admins and volunteers may change any resource; everyone else only the
    ones they created.
    """
    if MUTATING_ROLES.intersection(roles):
        return True
    return identity is not None and resource.created_by == identity.id


def describe_capability(roles: Iterable[str]) -> str:
    """Role label for display, e.g. "admin, volunteer" or "public"."""
    held = set(roles)
    return ", ".join(r for r in ROLES if r in held) or "public"

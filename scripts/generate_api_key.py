#!/usr/bin/env python3
"""
Generate API keys for dashboard users.
Creates secure random API keys that can be inserted into the users table,
together with the role rows that go with them.
"""

import secrets
import string
import uuid


def generate_api_key(prefix="relief", length=32):
    """Generate a secure random API key."""
    chars = string.ascii_letters + string.digits
    random_part = ''.join(secrets.choice(chars) for _ in range(length))
    return f"{prefix}_{random_part}"


def generate_multiple_keys(count=5):
    return [generate_api_key() for _ in range(count)]


def insert_statements(display_name, email, roles):
    """SQL that creates one user with the given roles."""
    user_id = str(uuid.uuid4())
    api_key = generate_api_key()
    lines = [
        "INSERT INTO users (id, email, display_name, api_key, is_active)",
        f"VALUES ('{user_id}', '{email}', '{display_name}', '{api_key}', TRUE);",
    ]
    for role in roles:
        lines.append(f"INSERT INTO user_roles (user_id, role) VALUES ('{user_id}', '{role}');")
    return "\n".join(lines)


if __name__ == "__main__":
    print("=" * 70)
    print("Relief API Key Generator")
    print("=" * 70)
    print()

    print("Multiple API Keys (5):")
    print("-" * 70)
    for i, key in enumerate(generate_multiple_keys(5), 1):
        print(f"  {i}. {key}")
    print()

    print("=" * 70)
    print("SQL Insert Example:")
    print("=" * 70)
    print("\n-- For an Admin:")
    print(insert_statements("System Admin", "admin@example.org", ["admin"]))
    print("\n-- For a Volunteer:")
    print(insert_statements("Field Volunteer", "volunteer@example.org", ["volunteer"]))
    print("\n-- For a Public viewer (no role rows needed):")
    print(insert_statements("Public Viewer", "viewer@example.org", []))
    print()
    print("=" * 70)
    print("Note: Run these SQL statements in your database to create users.")
    print("=" * 70)

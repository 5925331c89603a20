"""
Seed the store with fake users, role assignments and relief resources.
Usage: DB_URI=sqlite:///relief.db python -m scripts.seed_data
"""

import random
from datetime import datetime, timedelta, timezone

from faker import Faker

from relief.config import RESOURCE_STATUSES, RESOURCE_TYPES
from relief.database import create_schema, init_engine, resources, user_roles, users
from relief.validation import validate_resource
from scripts.generate_api_key import generate_api_key

# --------------------------------------------------------------------
# CONFIG
# --------------------------------------------------------------------
NUM_RESOURCES = 40

SEED_USERS = [
    # (display name, email, roles)
    ("System Admin", "admin@relief.example.org", ["admin"]),
    ("Field Volunteer", "volunteer@relief.example.org", ["volunteer"]),
    ("Public Viewer", "viewer@relief.example.org", ["public"]),
    ("Unassigned User", "guest@relief.example.org", []),
]

NAME_TEMPLATES = {
    "shelter": ["{city} Emergency Shelter", "{street} Community Center"],
    "food": ["{city} Food Bank", "{street} Meal Distribution"],
    "medical": ["{city} Field Clinic", "{street} First Aid Post"],
    "logistics": ["{city} Supply Depot", "{street} Staging Area"],
    "water": ["Water Station {letter}", "{city} Water Point"],
    "clothing": ["{city} Clothing Drive", "{street} Donation Center"],
}

# --------------------------------------------------------------------
# SETUP
# --------------------------------------------------------------------
fake = Faker("en_US")
random.seed(42)
Faker.seed(42)


# --------------------------------------------------------------------
# HELPERS
# --------------------------------------------------------------------
def random_bool(p_true=0.5):
    return random.random() < p_true


def random_datetime_within(days_back=30):
    now = datetime.now(timezone.utc)
    delta = timedelta(days=random.randint(0, days_back), seconds=random.randint(0, 86400))
    return now - delta


# --------------------------------------------------------------------
# SEED FUNCTIONS
# --------------------------------------------------------------------
def seed_users(conn):
    """Insert the seed users and their roles; return {email: (id, api_key)}."""
    created = {}
    for display_name, email, roles in SEED_USERS:
        api_key = generate_api_key()
        result = conn.execute(users.insert().values(
            email=email, display_name=display_name, api_key=api_key, is_active=True,
        ))
        user_id = result.inserted_primary_key[0]
        for role in roles:
            conn.execute(user_roles.insert().values(user_id=user_id, role=role))
        created[email] = (user_id, api_key)
    return created


def seed_resources(conn, user_ids, n=NUM_RESOURCES):
    rows = []
    for _ in range(n):
        rtype = random.choice(RESOURCE_TYPES)
        template = random.choice(NAME_TEMPLATES[rtype])
        created_at = random_datetime_within()
        lat, lon = fake.local_latlng(country_code="US", coords_only=True)
        payload = {
            "name": template.format(
                city=fake.city(), street=fake.street_name(), letter=fake.random_uppercase_letter(),
            ),
            "type": rtype,
            "description": fake.sentence(nb_words=12) if random_bool(0.7) else None,
            "location_name": fake.company(),
            "address": fake.street_address() + ", " + fake.city(),
            "latitude": float(lat),
            "longitude": float(lon),
            "status": random.choice(RESOURCE_STATUSES),
            "quantity": random.randint(0, 500) if random_bool(0.8) else None,
            "contact_name": fake.name() if random_bool(0.6) else None,
            "contact_phone": fake.numerify("###-###-####") if random_bool(0.6) else None,
            "contact_email": fake.email() if random_bool(0.5) else None,
        }
        record = validate_resource(payload).to_record()
        record.update(created_by=random.choice(user_ids), created_at=created_at, updated_at=created_at)
        rows.append(record)
    conn.execute(resources.insert(), rows)
    return len(rows)


# --------------------------------------------------------------------
# MAIN
# --------------------------------------------------------------------
def main():
    engine = init_engine()
    create_schema(engine)

    with engine.begin() as conn:
        print("Seeding users and roles...")
        created = seed_users(conn)

        print("Seeding resources...")
        count = seed_resources(conn, [uid for uid, _ in created.values()])
        print(f"  {count} resources")

    print("\nAPI keys:")
    for email, (_uid, api_key) in created.items():
        print(f"  {email:<32} {api_key}")
    print("Done!")


if __name__ == "__main__":
    main()

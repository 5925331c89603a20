"""
Centralised configuration constants and environment helpers.
"""

import os
import sys

from dotenv import load_dotenv

load_dotenv()

# ── Closed value sets ────────────────────────────────────────────────
RESOURCE_TYPES = ("shelter", "food", "medical", "logistics", "water", "clothing")
RESOURCE_STATUSES = ("available", "low_stock", "out_of_stock", "unavailable")
ROLES = ("admin", "volunteer", "public")

# Roles that may edit or delete any resource, not only their own.
MUTATING_ROLES = {"admin", "volunteer"}

# Filter value meaning "do not filter on this field".
FILTER_ALL = "all"

# ── Field limits ─────────────────────────────────────────────────────
MAX_NAME_LEN = 200
MAX_DESCRIPTION_LEN = 1000
MAX_LOCATION_NAME_LEN = 200
MAX_ADDRESS_LEN = 300
MAX_CONTACT_NAME_LEN = 100
MAX_CONTACT_PHONE_LEN = 20
MAX_CONTACT_EMAIL_LEN = 255

# ── Map view ─────────────────────────────────────────────────────────
STATUS_COLORS = {
    "available": "#10b981",
    "low_stock": "#f59e0b",
    "out_of_stock": "#ef4444",
}
DEFAULT_MARKER_COLOR = "#6b7280"
MAP_CENTER = (37.0902, -95.7129)
MAP_ZOOM = 4

# ── Terminal preview ─────────────────────────────────────────────────
MAX_PREVIEW_ROWS = 20

# ── API server ───────────────────────────────────────────────────────
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
TOKEN_EXPIRY_HOURS = 24
API_URL = os.getenv("RELIEF_API_URL", "http://localhost:8000")


def get_env(name: str) -> str:
    """Return an environment variable or exit with an error message."""
    value = os.getenv(name)
    if not value:
        print(f"ERROR: env var {name} is not set", file=sys.stderr)
        sys.exit(1)
    return value

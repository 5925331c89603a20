"""
JWT authentication helpers and middleware for the Flask API.
"""

import secrets
import threading
from datetime import datetime, timedelta
from functools import wraps
from typing import Dict, Any, Optional

import jwt
from flask import request, jsonify

from relief.config import SECRET_KEY, TOKEN_EXPIRY_HOURS
from relief.models import Identity

# In-memory session store (use Redis in production)
# Structure: {token: {"identity": Identity, "roles": set, "created_at": datetime, ...}}
sessions: Dict[str, Dict[str, Any]] = {}


def generate_token(identity: Identity) -> str:
    """Generate a JWT token for an authenticated user."""
    payload = {
        "user_id": identity.id,
        "email": identity.email,
        "jti": secrets.token_hex(8),
        "iat": datetime.utcnow(),
        "exp": datetime.utcnow() + timedelta(hours=TOKEN_EXPIRY_HOURS),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm="HS256")


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a JWT token and return the decoded payload (or None)."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def token_required(f):
    """Decorator that protects endpoints with JWT authentication."""
    @wraps(f)
    def decorated(*args, **kwargs):
        token = None

        # Check Authorization header (Bearer token)
        if "Authorization" in request.headers:
            auth_header = request.headers["Authorization"]
            try:
                token = auth_header.split(" ")[1]
            except IndexError:
                return jsonify({"error": "Invalid authorization header format"}), 401

        # Fallback: check token in query params
        if not token:
            token = request.args.get("token")

        if not token:
            return jsonify({"error": "Authentication token is missing"}), 401

        payload = verify_token(token)
        if not payload:
            return jsonify({"error": "Invalid or expired token"}), 401

        if token not in sessions:
            return jsonify({"error": "Session not found. Please login again."}), 401

        # Attach session data to the request context
        request.session_data = sessions[token]
        request.token = token

        return f(*args, **kwargs)

    return decorated


class InFlightGuard:
    """Tracks which sessions currently have a write request running."""

    def __init__(self):
        self._lock = threading.Lock()
        self._active = set()

    def acquire(self, key: str) -> bool:
        with self._lock:
            if key in self._active:
                return False
            self._active.add(key)
            return True

    def release(self, key: str) -> None:
        with self._lock:
            self._active.discard(key)

    def __len__(self):
        return len(self._active)


mutation_guard = InFlightGuard()


def single_flight(f):
    """
    Reject a write while another write from the same session is in flight.
    Must be applied inside ``token_required``.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        token = request.token
        if not mutation_guard.acquire(token):
            return jsonify({"error": "A previous request is still in progress"}), 409
        try:
            return f(*args, **kwargs)
        finally:
            mutation_guard.release(token)

    return decorated


def cleanup_expired_sessions():
    """Remove sessions that have been inactive beyond TOKEN_EXPIRY_HOURS."""
    now = datetime.utcnow()
    expired = [
        tok for tok, data in sessions.items()
        if (now - data["last_activity"]).total_seconds() > TOKEN_EXPIRY_HOURS * 3600
    ]
    for tok in expired:
        del sessions[tok]
    if expired:
        print(f"[cleanup] Removed {len(expired)} expired sessions")
    return len(expired)

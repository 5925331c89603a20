"""
Flask route handlers for the REST API.
"""

import sys
import traceback
from datetime import datetime, timedelta

from flask import request, jsonify

from relief.analysis import summarize_resources
from relief.config import FILTER_ALL, RESOURCE_STATUSES, RESOURCE_TYPES, TOKEN_EXPIRY_HOURS
from relief.filtering import FilterCriteria
from relief.rbac import load_identity, load_roles, can_mutate, describe_capability
from relief.repository import (
    RepositoryError,
    ResourceNotFound,
    create_resource,
    delete_resource,
    get_resource,
    list_resources,
    update_resource,
)
from relief.validation import ResourceValidationError, validate_resource
from relief.views import to_geojson
from relief.api.auth import (
    cleanup_expired_sessions,
    mutation_guard,
    sessions,
    generate_token,
    single_flight,
    token_required,
)


def _read_filters() -> FilterCriteria:
    """Build filter criteria from the query string; raise ValueError on unknown values."""
    type_filter = request.args.get("type", FILTER_ALL).strip() or FILTER_ALL
    status_filter = request.args.get("status", FILTER_ALL).strip() or FILTER_ALL
    if type_filter != FILTER_ALL and type_filter not in RESOURCE_TYPES:
        raise ValueError(f"Unknown type filter '{type_filter}'")
    if status_filter != FILTER_ALL and status_filter not in RESOURCE_STATUSES:
        raise ValueError(f"Unknown status filter '{status_filter}'")
    return FilterCriteria(
        query=request.args.get("q", ""),
        type_filter=type_filter,
        status_filter=status_filter,
    )


def _user_payload(identity, roles):
    return {
        "id": identity.id,
        "email": identity.email,
        "display_name": identity.display_name,
        "roles": sorted(roles),
        "capability": describe_capability(roles),
    }


def _backend_error(e: RepositoryError, message: str):
    print(f"[ERROR] {message}: {e}", file=sys.stderr)
    return jsonify({"success": False, "error": message, "details": str(e)}), 502


def _validation_error(e: ResourceValidationError):
    return jsonify({
        "success": False,
        "error": "Validation Error",
        "field": e.field,
        "details": e.message,
    }), 400


def register_routes(app, engine):
    """Register all API routes on the Flask *app*."""

    # ── Health / info ────────────────────────────────────────────────

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({
            "service": "Disaster Relief Resources API",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "auth": "/api/auth/login",
                "resources": "/api/resources",
                "map": "/api/resources/map",
                "summary": "/api/resources/summary",
                "profile": "/api/user/profile",
                "logout": "/api/auth/logout",
                "health": "/health",
            },
        })

    @app.route("/health", methods=["GET"])
    def health():
        from sqlalchemy import text as sa_text

        checks = {"database": False}
        try:
            if engine:
                with engine.connect() as conn:
                    conn.execute(sa_text("SELECT 1"))
                checks["database"] = True
        except Exception as e:
            print(f"[WARN] Health check failed: {e}", file=sys.stderr)

        all_healthy = all(checks.values())
        return jsonify({
            "status": "healthy" if all_healthy else "unhealthy",
            "checks": checks,
            "active_sessions": len(sessions),
            "writes_in_flight": len(mutation_guard),
        }), 200 if all_healthy else 503

    # ── Auth ─────────────────────────────────────────────────────────

    @app.route("/api/auth/login", methods=["POST"])
    def login():
        if not request.is_json:
            return jsonify({"error": "Content-Type must be application/json"}), 400

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400

        api_key = data.get("api_key")
        if api_key is not None and not isinstance(api_key, str):
            return jsonify({"error": "api_key must be a string"}), 400
        api_key = (api_key or "").strip()
        if not api_key:
            return jsonify({"error": "api_key is required"}), 400

        cleanup_expired_sessions()

        try:
            identity = load_identity(engine, api_key)
        except ValueError as e:
            return jsonify({"error": f"Authentication failed: {str(e)}"}), 401
        except Exception as e:
            print(f"[ERROR] Login error: {e}", file=sys.stderr)
            traceback.print_exc()
            return jsonify({"error": "Internal server error during login"}), 500

        roles = load_roles(engine, identity.id)
        token = generate_token(identity)
        sessions[token] = {
            "identity": identity,
            "roles": roles,
            "created_at": datetime.utcnow(),
            "last_activity": datetime.utcnow(),
        }
        print(f"[auth] Logged in: {identity.email} ({describe_capability(roles)})")

        return jsonify({
            "success": True,
            "token": token,
            "user": _user_payload(identity, roles),
            "expires_at": (datetime.utcnow() + timedelta(hours=TOKEN_EXPIRY_HOURS)).isoformat(),
        }), 200

    @app.route("/api/auth/logout", methods=["POST"])
    @token_required
    def logout():
        token = request.token
        if token in sessions:
            del sessions[token]
        return jsonify({"success": True, "message": "Logged out successfully"}), 200

    @app.route("/api/user/profile", methods=["GET"])
    @token_required
    def get_profile():
        session_data = request.session_data
        return jsonify({
            "success": True,
            "user": _user_payload(session_data["identity"], session_data["roles"]),
            "session": {
                "created_at": session_data["created_at"].isoformat(),
                "last_activity": session_data["last_activity"].isoformat(),
            },
        }), 200

    # ── Resources: read ──────────────────────────────────────────────

    @app.route("/api/resources", methods=["GET"])
    @token_required
    def get_resources():
        session_data = request.session_data
        session_data["last_activity"] = datetime.utcnow()
        identity = session_data["identity"]
        roles = session_data["roles"]

        try:
            criteria = _read_filters()
        except ValueError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        try:
            everything = list_resources(engine)
        except RepositoryError as e:
            return _backend_error(e, "Failed to fetch resources")

        visible = criteria.apply(everything)
        items = []
        for r in visible:
            item = r.to_dict()
            item["can_edit"] = can_mutate(r, identity, roles)
            items.append(item)

        return jsonify({
            "success": True,
            "resources": items,
            "total": len(everything),
            "showing": len(visible),
            "filters": {
                "q": criteria.query,
                "type": criteria.type_filter,
                "status": criteria.status_filter,
            },
        }), 200

    @app.route("/api/resources/map", methods=["GET"])
    @token_required
    def get_resource_map():
        try:
            criteria = _read_filters()
        except ValueError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        try:
            everything = list_resources(engine)
        except RepositoryError as e:
            return _backend_error(e, "Failed to fetch resources")

        return jsonify(to_geojson(criteria.apply(everything))), 200

    @app.route("/api/resources/summary", methods=["GET"])
    @token_required
    def get_resource_summary():
        try:
            everything = list_resources(engine)
        except RepositoryError as e:
            return _backend_error(e, "Failed to fetch resources")
        return jsonify({"success": True, "summary": summarize_resources(everything)}), 200

    @app.route("/api/resources/<resource_id>", methods=["GET"])
    @token_required
    def get_one_resource(resource_id):
        session_data = request.session_data
        try:
            resource = get_resource(engine, resource_id)
        except ResourceNotFound as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except RepositoryError as e:
            return _backend_error(e, "Failed to fetch resource")

        item = resource.to_dict()
        item["can_edit"] = can_mutate(resource, session_data["identity"], session_data["roles"])
        return jsonify({"success": True, "resource": item}), 200

    # ── Resources: write ─────────────────────────────────────────────

    @app.route("/api/resources", methods=["POST"])
    @token_required
    @single_flight
    def post_resource():
        if not request.is_json:
            return jsonify({"error": "Content-Type must be application/json"}), 400

        session_data = request.session_data
        session_data["last_activity"] = datetime.utcnow()

        try:
            data = validate_resource(request.json)
        except ResourceValidationError as e:
            return _validation_error(e)

        try:
            created = create_resource(engine, data, session_data["identity"])
        except RepositoryError as e:
            return _backend_error(e, "Failed to save resource")

        return jsonify({
            "success": True,
            "message": "The resource has been successfully created.",
            "resource": created.to_dict(),
        }), 201

    @app.route("/api/resources/<resource_id>", methods=["PUT"])
    @token_required
    @single_flight
    def put_resource(resource_id):
        if not request.is_json:
            return jsonify({"error": "Content-Type must be application/json"}), 400

        session_data = request.session_data
        session_data["last_activity"] = datetime.utcnow()

        try:
            existing = get_resource(engine, resource_id)
        except ResourceNotFound as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except RepositoryError as e:
            return _backend_error(e, "Failed to fetch resource")

        if not can_mutate(existing, session_data["identity"], session_data["roles"]):
            return jsonify({"success": False, "error": "Not allowed to edit this resource"}), 403

        try:
            data = validate_resource(request.json)
        except ResourceValidationError as e:
            return _validation_error(e)

        try:
            updated = update_resource(engine, resource_id, data)
        except ResourceNotFound as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except RepositoryError as e:
            return _backend_error(e, "Failed to save resource")

        return jsonify({
            "success": True,
            "message": "The resource has been successfully updated.",
            "resource": updated.to_dict(),
        }), 200

    @app.route("/api/resources/<resource_id>", methods=["DELETE"])
    @token_required
    @single_flight
    def remove_resource(resource_id):
        session_data = request.session_data
        session_data["last_activity"] = datetime.utcnow()

        try:
            existing = get_resource(engine, resource_id)
        except ResourceNotFound as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except RepositoryError as e:
            return _backend_error(e, "Failed to fetch resource")

        if not can_mutate(existing, session_data["identity"], session_data["roles"]):
            return jsonify({"success": False, "error": "Not allowed to delete this resource"}), 403

        try:
            delete_resource(engine, resource_id)
        except ResourceNotFound as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except RepositoryError as e:
            return _backend_error(e, "Failed to delete resource")

        return jsonify({"success": True, "message": "The resource has been removed."}), 200

    # ── Error handlers ───────────────────────────────────────────────

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Endpoint not found", "message": str(e)}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed", "message": str(e)}), 405

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({"error": "Internal server error", "message": str(e)}), 500

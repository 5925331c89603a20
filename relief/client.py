"""
HTTP client for the Disaster Relief Resources API.
"""

from typing import Any, Dict, List, Optional

import requests

from relief.config import API_URL
from relief.models import Identity, Resource


class ApiError(Exception):
    """The API answered with an error status (or could not be reached)."""

    def __init__(self, status: int, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.field = field


class AuthError(ApiError):
    pass


class ReliefClient:
    """Thin wrapper over the REST endpoints; holds the session token."""

    def __init__(self, base_url: str = API_URL, session: requests.Session = None):
        self.base_url = base_url.rstrip("/")
        self.http = session or requests.Session()
        self.token: Optional[str] = None

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self.http.request(method, f"{self.base_url}{path}", headers=headers, **kwargs)
        except requests.RequestException as e:
            raise ApiError(0, f"Could not reach API: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code == 401:
            raise AuthError(401, data.get("error", "Not authenticated"))
        if response.status_code >= 400:
            message = data.get("details") or data.get("error") or f"HTTP {response.status_code}"
            raise ApiError(response.status_code, message, data.get("field"))
        return data

    # ── Auth ─────────────────────────────────────────────────────────

    def login(self, api_key: str) -> Dict[str, Any]:
        data = self._request("POST", "/api/auth/login", json={"api_key": api_key})
        self.token = data["token"]
        return data["user"]

    def logout(self) -> None:
        if not self.token:
            return
        try:
            self._request("POST", "/api/auth/logout")
        finally:
            self.token = None

    def profile(self) -> Dict[str, Any]:
        return self._request("GET", "/api/user/profile")["user"]

    # ── Resources ────────────────────────────────────────────────────

    def list_resources(self) -> List[Resource]:
        """Fetch the full, unfiltered list (newest first)."""
        data = self._request("GET", "/api/resources")
        return [Resource.from_dict(_strip_flags(item)) for item in data["resources"]]

    def create_resource(self, payload: Dict[str, Any]) -> Resource:
        data = self._request("POST", "/api/resources", json=payload)
        return Resource.from_dict(data["resource"])

    def update_resource(self, resource_id: str, payload: Dict[str, Any]) -> Resource:
        data = self._request("PUT", f"/api/resources/{resource_id}", json=payload)
        return Resource.from_dict(data["resource"])

    def delete_resource(self, resource_id: str) -> None:
        self._request("DELETE", f"/api/resources/{resource_id}")

    def summary(self) -> Dict[str, Any]:
        return self._request("GET", "/api/resources/summary")["summary"]


def _strip_flags(item: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in item.items() if k != "can_edit"}


def identity_from_user(user: Dict[str, Any]) -> Identity:
    return Identity(id=user["id"], email=user["email"], display_name=user.get("display_name"))

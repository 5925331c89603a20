"""
CRUD access to the ``resources`` table.

Each write runs in its own transaction, so a failed call never leaves a
partially applied change behind. Callers are expected to re-fetch the full
list after any successful mutation.
"""

from typing import List

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from relief.database import resources
from relief.models import Identity, Resource
from relief.validation import ResourceInput


class RepositoryError(RuntimeError):
    """The backend store rejected or failed an operation."""

    def __init__(self, message: str, operation: str):
        super().__init__(message)
        self.operation = operation


class ResourceNotFound(RepositoryError):
    def __init__(self, resource_id: str, operation: str):
        super().__init__(f"Resource {resource_id} not found", operation)
        self.resource_id = resource_id


def _require_validated(data) -> None:
    if not isinstance(data, ResourceInput):
        raise TypeError("payload must be validated with validate_resource() first")


def _fetch_one(conn, resource_id: str):
    stmt = select(resources).where(resources.c.id == resource_id)
    return conn.execute(stmt).mappings().first()


def list_resources(engine) -> List[Resource]:
    """Return every resource, newest first."""
    stmt = select(resources).order_by(resources.c.created_at.desc())
    try:
        with engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to fetch resources: {e}", "list") from e
    return [Resource.from_row(row) for row in rows]


def get_resource(engine, resource_id: str) -> Resource:
    try:
        with engine.connect() as conn:
            row = _fetch_one(conn, resource_id)
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to fetch resource: {e}", "get") from e
    if row is None:
        raise ResourceNotFound(resource_id, "get")
    return Resource.from_row(row)


def create_resource(engine, data: ResourceInput, identity: Identity) -> Resource:
    """Insert a validated resource owned by *identity*."""
    _require_validated(data)
    record = data.to_record()
    record["created_by"] = identity.id
    try:
        with engine.begin() as conn:
            result = conn.execute(insert(resources).values(**record))
            row = _fetch_one(conn, result.inserted_primary_key[0])
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to create resource: {e}", "create") from e
    return Resource.from_row(row)


def update_resource(engine, resource_id: str, data: ResourceInput) -> Resource:
    """Overwrite the editable fields of a resource. ``created_by`` is left alone."""
    _require_validated(data)
    stmt = (
        update(resources)
        .where(resources.c.id == resource_id)
        .values(**data.to_record())
    )
    try:
        with engine.begin() as conn:
            result = conn.execute(stmt)
            if result.rowcount == 0:
                raise ResourceNotFound(resource_id, "update")
            row = _fetch_one(conn, resource_id)
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to update resource: {e}", "update") from e
    return Resource.from_row(row)


def delete_resource(engine, resource_id: str) -> None:
    stmt = delete(resources).where(resources.c.id == resource_id)
    try:
        with engine.begin() as conn:
            result = conn.execute(stmt)
            if result.rowcount == 0:
                raise ResourceNotFound(resource_id, "delete")
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to delete resource: {e}", "delete") from e

"""
Domain dataclasses used across the application.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Literal, Mapping, Optional

ResourceType = Literal["shelter", "food", "medical", "logistics", "water", "clothing"]
ResourceStatus = Literal["available", "low_stock", "out_of_stock", "unavailable"]


@dataclass(frozen=True)
class Identity:
    """The authenticated user, as read from the auth store."""
    id: str
    email: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class Resource:
    """One unit of relief aid at a physical location."""
    id: str
    name: str
    type: str                       # one of config.RESOURCE_TYPES
    location_name: str
    address: str
    latitude: float
    longitude: float
    status: str                     # one of config.RESOURCE_STATUSES
    created_by: Optional[str]
    description: Optional[str] = None
    quantity: Optional[int] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Resource":
        """Build a Resource from a database row mapping."""
        return cls(
            id=str(row["id"]),
            name=row["name"],
            type=row["type"],
            location_name=row["location_name"],
            address=row["address"],
            latitude=float(row["latitude"]),
            longitude=float(row["longitude"]),
            status=row["status"],
            created_by=str(row["created_by"]) if row["created_by"] is not None else None,
            description=row.get("description"),
            quantity=int(row["quantity"]) if row.get("quantity") is not None else None,
            contact_name=row.get("contact_name"),
            contact_phone=row.get("contact_phone"),
            contact_email=row.get("contact_email"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Resource":
        """Build a Resource from its JSON form (ISO timestamps)."""
        row = dict(data)
        for key in ("created_at", "updated_at"):
            if isinstance(row.get(key), str):
                row[key] = datetime.fromisoformat(row[key])
        return cls.from_row(row)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("created_at", "updated_at"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data

"""
Schema validation for resource payloads submitted by clients.

Every create/update goes through ``validate_resource`` before it reaches the
repository. Fields are checked in declaration order and only the first
failing field is reported back, with a message meant for the person filling
in the form.
"""

from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from relief.config import (
    MAX_ADDRESS_LEN,
    MAX_CONTACT_EMAIL_LEN,
    MAX_CONTACT_NAME_LEN,
    MAX_CONTACT_PHONE_LEN,
    MAX_DESCRIPTION_LEN,
    MAX_LOCATION_NAME_LEN,
    MAX_NAME_LEN,
    RESOURCE_STATUSES,
    RESOURCE_TYPES,
)
from relief.models import ResourceStatus, ResourceType

FIELD_LABELS = {
    "name": "Name",
    "type": "Type",
    "description": "Description",
    "location_name": "Location name",
    "address": "Address",
    "latitude": "Latitude",
    "longitude": "Longitude",
    "status": "Status",
    "quantity": "Quantity",
    "contact_name": "Contact name",
    "contact_phone": "Phone",
    "contact_email": "Email",
}

OPTIONAL_TEXT_FIELDS = ("description", "contact_name", "contact_phone", "contact_email")


class ResourceValidationError(ValueError):
    """Raised for the first field of a payload that fails validation."""

    def __init__(self, field: Optional[str], message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ResourceInput(BaseModel):
    """A validated, normalized resource payload ready for the store."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore", frozen=True)

    name: str = Field(min_length=1, max_length=MAX_NAME_LEN)
    type: ResourceType
    description: Optional[str] = Field(default=None, max_length=MAX_DESCRIPTION_LEN)
    location_name: str = Field(min_length=1, max_length=MAX_LOCATION_NAME_LEN)
    address: str = Field(min_length=1, max_length=MAX_ADDRESS_LEN)
    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False, strict=True)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False, strict=True)
    status: ResourceStatus
    quantity: Optional[int] = Field(default=None, ge=0, strict=True)
    contact_name: Optional[str] = Field(default=None, max_length=MAX_CONTACT_NAME_LEN)
    contact_phone: Optional[str] = Field(default=None, max_length=MAX_CONTACT_PHONE_LEN)
    contact_email: Optional[str] = Field(default=None, max_length=MAX_CONTACT_EMAIL_LEN)

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # Empty form inputs mean "not provided".
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("contact_email")
    @classmethod
    def _check_email_shape(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError("Invalid email") from e
        return value

    def to_record(self) -> Dict[str, Any]:
        """Plain dict of the editable columns, as written to the store."""
        return self.model_dump()


def _message_for(error: Dict[str, Any]) -> str:
    """Turn a pydantic error entry into a form-friendly message."""
    loc = error.get("loc") or ()
    field = loc[0] if loc else None
    label = FIELD_LABELS.get(field, "Resource")
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind in ("missing", "string_too_short"):
        return f"{label} is required"
    if kind == "string_too_long":
        return f"{label} too long"
    if kind == "string_type":
        return f"{label} must be text"
    if kind == "literal_error":
        choices = RESOURCE_TYPES if field == "type" else RESOURCE_STATUSES
        return f"{label} must be one of: {', '.join(choices)}"
    if kind == "finite_number":
        return f"{label} must be a finite number"
    if kind in ("greater_than_equal", "less_than_equal"):
        if field == "quantity":
            return "Quantity cannot be negative"
        bound = 90 if field == "latitude" else 180
        return f"{label} must be between -{bound} and {bound}"
    if kind.startswith("int_"):
        return f"{label} must be a whole number"
    if kind.startswith("float_"):
        return f"{label} must be a number"
    if kind == "value_error" and "error" in ctx:
        return str(ctx["error"])
    if kind == "model_type":
        return "Resource payload must be an object"
    return f"{label}: {error.get('msg', 'invalid value')}"


def validate_resource(payload: Any) -> ResourceInput:
    """
    Validate a candidate resource payload.
    Returns a ResourceInput or raises ResourceValidationError for the first
    failing field.
    """
    try:
        return ResourceInput.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        loc = first.get("loc") or ()
        field = str(loc[0]) if loc else None
        raise ResourceValidationError(field, _message_for(first)) from None

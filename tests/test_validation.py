"""
Unit tests for resource payload validation.
"""

import math

import pytest

from relief.validation import ResourceInput, ResourceValidationError, validate_resource


def _fails_on(payload):
    with pytest.raises(ResourceValidationError) as e:
        validate_resource(payload)
    return e.value


# ── Tests: valid payloads ────────────────────────────────────────────

def test_valid_payload_returns_typed_record(resource_payload):
    data = validate_resource(resource_payload)
    assert isinstance(data, ResourceInput)
    assert data.to_record() == resource_payload


def test_strings_are_trimmed(resource_payload):
    resource_payload["name"] = "  Central Shelter  "
    resource_payload["address"] = "\t100 Main St, Springfield "
    data = validate_resource(resource_payload)
    assert data.name == "Central Shelter"
    assert data.address == "100 Main St, Springfield"


def test_optional_fields_may_be_omitted(resource_payload):
    for key in ("description", "quantity", "contact_name", "contact_phone", "contact_email"):
        del resource_payload[key]
    data = validate_resource(resource_payload)
    assert data.quantity is None
    assert data.contact_email is None


def test_blank_optional_strings_become_none(resource_payload):
    resource_payload.update(description="", contact_name="   ", contact_email="")
    data = validate_resource(resource_payload)
    assert data.description is None
    assert data.contact_name is None
    assert data.contact_email is None


def test_boundary_coordinates_accepted(resource_payload):
    resource_payload.update(latitude=-90, longitude=180)
    data = validate_resource(resource_payload)
    assert data.latitude == -90.0
    assert data.longitude == 180.0


def test_extra_keys_are_dropped(resource_payload):
    resource_payload["created_by"] = "someone-else"
    resource_payload["id"] = "abc"
    record = validate_resource(resource_payload).to_record()
    assert "created_by" not in record
    assert "id" not in record


# ── Tests: first failing field ───────────────────────────────────────

def test_latitude_out_of_range(resource_payload):
    resource_payload["latitude"] = 95
    err = _fails_on(resource_payload)
    assert err.field == "latitude"
    assert err.message == "Latitude must be between -90 and 90"


def test_longitude_out_of_range(resource_payload):
    resource_payload["longitude"] = -180.5
    err = _fails_on(resource_payload)
    assert err.field == "longitude"
    assert "between -180 and 180" in err.message


@pytest.mark.parametrize("bad", [math.inf, -math.inf, math.nan])
def test_non_finite_latitude_rejected(resource_payload, bad):
    resource_payload["latitude"] = bad
    err = _fails_on(resource_payload)
    assert err.field == "latitude"
    assert "finite" in err.message


def test_blank_name_is_required(resource_payload):
    resource_payload["name"] = "   "
    err = _fails_on(resource_payload)
    assert err.field == "name"
    assert err.message == "Name is required"


def test_missing_address_is_required(resource_payload):
    del resource_payload["address"]
    err = _fails_on(resource_payload)
    assert err.field == "address"
    assert err.message == "Address is required"


def test_name_too_long(resource_payload):
    resource_payload["name"] = "x" * 201
    err = _fails_on(resource_payload)
    assert err.field == "name"
    assert err.message == "Name too long"


def test_description_too_long(resource_payload):
    resource_payload["description"] = "d" * 1001
    err = _fails_on(resource_payload)
    assert err.field == "description"
    assert err.message == "Description too long"


def test_unknown_type(resource_payload):
    resource_payload["type"] = "boats"
    err = _fails_on(resource_payload)
    assert err.field == "type"
    assert "shelter" in err.message


def test_unknown_status(resource_payload):
    resource_payload["status"] = "gone"
    err = _fails_on(resource_payload)
    assert err.field == "status"


def test_negative_quantity(resource_payload):
    resource_payload["quantity"] = -1
    err = _fails_on(resource_payload)
    assert err.field == "quantity"
    assert err.message == "Quantity cannot be negative"


def test_fractional_quantity(resource_payload):
    resource_payload["quantity"] = 2.5
    err = _fails_on(resource_payload)
    assert err.field == "quantity"
    assert err.message == "Quantity must be a whole number"


@pytest.mark.parametrize("field,bad", [
    ("latitude", True),
    ("latitude", "12.5"),
    ("longitude", "12"),
    ("longitude", None),
])
def test_coordinates_must_be_numbers(resource_payload, field, bad):
    resource_payload[field] = bad
    err = _fails_on(resource_payload)
    assert err.field == field
    assert "must be a number" in err.message


@pytest.mark.parametrize("bad", [True, "40", 4.0])
def test_quantity_must_be_an_integer(resource_payload, bad):
    resource_payload["quantity"] = bad
    err = _fails_on(resource_payload)
    assert err.field == "quantity"
    assert err.message == "Quantity must be a whole number"


def test_integer_coordinates_accepted(resource_payload):
    resource_payload.update(latitude=40, longitude=-90)
    data = validate_resource(resource_payload)
    assert data.latitude == 40.0


def test_phone_too_long(resource_payload):
    resource_payload["contact_phone"] = "1" * 21
    err = _fails_on(resource_payload)
    assert err.field == "contact_phone"
    assert err.message == "Phone too long"


def test_invalid_email(resource_payload):
    resource_payload["contact_email"] = "not-an-email"
    err = _fails_on(resource_payload)
    assert err.field == "contact_email"
    assert err.message == "Invalid email"


def test_first_failure_wins_in_declaration_order(resource_payload):
    resource_payload.update(name="", latitude=500, contact_email="nope")
    err = _fails_on(resource_payload)
    assert err.field == "name"


def test_earlier_field_reported_before_later_one(resource_payload):
    resource_payload.update(longitude=999, status="gone")
    err = _fails_on(resource_payload)
    assert err.field == "longitude"


def test_non_mapping_payload():
    err = _fails_on(["not", "a", "dict"])
    assert err.field is None
    assert "object" in err.message


def test_error_is_a_value_error(resource_payload):
    resource_payload["latitude"] = 95
    with pytest.raises(ValueError):
        validate_resource(resource_payload)

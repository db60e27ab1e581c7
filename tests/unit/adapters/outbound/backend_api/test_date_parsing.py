"""Unit tests for backend timestamp normalization."""

from datetime import datetime, timedelta, timezone

import pytest

from app.adapters.outbound.backend_api.date_parsing import parse_backend_datetime
from app.adapters.outbound.backend_api.models import LeadPayload


def test_missing_values_are_none():
    assert parse_backend_datetime(None) is None
    assert parse_backend_datetime("") is None


def test_full_array_with_nanoseconds():
    """Test the 7-element array form with a 1-based month."""
    parsed = parse_backend_datetime([2024, 3, 15, 14, 30, 5, 123456789])

    assert parsed == datetime(2024, 3, 15, 14, 30, 5, 123456, tzinfo=timezone.utc)


def test_array_truncated_after_day():
    assert parse_backend_datetime([2024, 1, 31]) == datetime(2024, 1, 31, tzinfo=timezone.utc)


def test_array_truncated_after_minute():
    assert parse_backend_datetime([2024, 1, 31, 9, 45]) == datetime(2024, 1, 31, 9, 45, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [[2024, 1], [2024, 1, 2, 3, 4, 5, 6, 7], {"year": 2024}, 1700000000])
def test_unsupported_shapes_raise(value):
    with pytest.raises(ValueError):
        parse_backend_datetime(value)


def test_iso_string_with_z_suffix():
    assert parse_backend_datetime("2024-03-15T14:30:05Z") == datetime(
        2024, 3, 15, 14, 30, 5, tzinfo=timezone.utc
    )


def test_naive_iso_string_is_taken_as_utc():
    assert parse_backend_datetime("2024-03-15T14:30:05") == datetime(
        2024, 3, 15, 14, 30, 5, tzinfo=timezone.utc
    )


def test_offset_iso_string_is_converted_to_utc():
    parsed = parse_backend_datetime("2024-03-15T10:30:05-04:00")

    assert parsed == datetime(2024, 3, 15, 14, 30, 5, tzinfo=timezone.utc)
    assert parsed.utcoffset() == timedelta(0)


def test_lead_payload_accepts_both_timestamp_shapes():
    """Test a backend lead with array and string timestamps."""
    payload = LeadPayload.model_validate(
        {
            "id": 42,
            "businessName": "City Auto Repair",
            "phoneNumber": "+1 (555) 045-6789",
            "status": "APPROVED",
            "source": "ADS",
            "validatedAt": [2024, 3, 15, 14, 30, 5, 0],
            "validatedByFirstName": "Sam",
            "validatedByLastName": "Carter",
            "createdAt": "2024-03-14T09:00:00Z",
            "contactMethodDetails": "",
        }
    )

    lead = payload.to_entity()

    assert lead.id == "42"
    assert lead.validated_at == datetime(2024, 3, 15, 14, 30, 5, tzinfo=timezone.utc)
    assert lead.validated_by_name == "Sam Carter"
    assert lead.created_at == datetime(2024, 3, 14, 9, tzinfo=timezone.utc)
    assert lead.contact_method_details is None
    assert lead.street_name == ""

"""Unit tests for field formatters and validators."""

import pytest

from app.domain.value_objects.field_formats import (
    format_phone_number,
    format_postal_code,
    format_street_number,
    validate_email,
    validate_phone_number,
    validate_postal_code,
    validate_street_number,
)
from app.domain.value_objects.page import Page, PageParams


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", ""),
        ("l4c2n8", "L4C 2N8"),
        ("L4C-2N8", "L4C 2N8"),
        ("l4c", "L4C"),
    ],
)
def test_format_postal_code(raw, expected):
    assert format_postal_code(raw) == expected


@pytest.mark.parametrize("value", ["L4C 2N8", "l4c2n8", "K1A 0B1"])
def test_valid_postal_codes(value):
    assert validate_postal_code(value) is True


@pytest.mark.parametrize("value", ["", "12345", "L4C 2N", "LLC 2N8"])
def test_invalid_postal_codes(value):
    assert validate_postal_code(value) is False


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("5550456789", "+1 (555) 045-6789"),
        ("15550456789", "+1 (555) 045-6789"),
        ("555045", "+1 (555) 045"),
        ("555", "+1 (555)"),
        ("55", "+1 (55"),
    ],
)
def test_format_phone_number(raw, expected):
    """Test full and partial phone input formatting."""
    assert format_phone_number(raw) == expected


def test_phone_validation_accepts_ten_or_country_prefixed_eleven_digits():
    assert validate_phone_number("+1 (555) 045-6789") is True
    assert validate_phone_number("555-045-6789") is True
    assert validate_phone_number("25550456789") is False
    assert validate_phone_number("555-0123") is False


def test_street_number_is_digits_only():
    assert format_street_number("12a-b") == "12"
    assert validate_street_number("456") is True
    assert validate_street_number("45B") is False
    assert validate_street_number("") is False


@pytest.mark.parametrize(
    "value, expected",
    [
        ("info@acme.ca", True),
        ("a.b@c.co.uk", True),
        ("info@acme", False),
        ("info acme@x.ca", False),
        ("", False),
    ],
)
def test_validate_email(value, expected):
    assert validate_email(value) is expected


def test_page_params_bounds():
    """Test page parameters are range checked."""
    with pytest.raises(ValueError):
        PageParams(page=-1)
    with pytest.raises(ValueError):
        PageParams(size=0)
    with pytest.raises(ValueError):
        PageParams(direction="up")


def test_page_params_query_omits_empty_values():
    params = PageParams(page=2, size=5)

    assert params.to_query(status="CONTACTED") == {
        "page": 2,
        "size": 5,
        "sortBy": "createdAt",
        "direction": "desc",
        "status": "CONTACTED",
    }


def test_page_from_items_slices_and_flags():
    page = Page.from_items(list(range(12)), PageParams(page=1, size=5))

    assert page.content == [5, 6, 7, 8, 9]
    assert page.total_elements == 12
    assert page.total_pages == 3
    assert page.first is False
    assert page.last is False

    last = Page.from_items(list(range(12)), PageParams(page=2, size=5))
    assert last.content == [10, 11]
    assert last.last is True

    empty = Page.from_items([], PageParams())
    assert empty.empty is True
    assert empty.last is True

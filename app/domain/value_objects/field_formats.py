"""Field formatters and format validators for address and contact input."""

import re

_POSTAL_CODE_RE = re.compile(r"^[A-Z]\d[A-Z]\s?\d[A-Z]\d$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def format_postal_code(raw: str) -> str:
    """
    Format a postal code to the Canadian ``A1A 1A1`` layout.

    Args:
        raw: Raw postal code input

    Returns:
        Upper-cased postal code, split after the third character once complete
    """
    if not raw:
        return ""
    cleaned = re.sub(r"[^A-Za-z0-9]", "", raw).upper()
    if len(cleaned) >= 6:
        return f"{cleaned[:3]} {cleaned[3:6]}"
    return cleaned


def validate_postal_code(value: str) -> bool:
    """Check a Canadian postal code (A1A 1A1, space optional)."""
    if not value:
        return False
    return bool(_POSTAL_CODE_RE.match(value.upper()))


def format_phone_number(raw: str) -> str:
    """
    Format a phone number as ``+1 (XXX) XXX-XXXX``.

    Partial input is formatted as far as it goes.

    Args:
        raw: Raw phone number input

    Returns:
        Formatted phone number
    """
    if not raw:
        return ""
    digits = re.sub(r"\D", "", raw)
    if digits.startswith("1") and len(digits) == 11:
        digits = digits[1:]

    if len(digits) >= 10:
        return f"+1 ({digits[:3]}) {digits[3:6]}-{digits[6:10]}"
    if len(digits) >= 6:
        return f"+1 ({digits[:3]}) {digits[3:6]}"
    if len(digits) >= 3:
        return f"+1 ({digits[:3]})"
    return f"+1 ({digits}"


def validate_phone_number(value: str) -> bool:
    """Check for 10 digits, or 11 digits with a leading country code 1."""
    if not value:
        return False
    digits = re.sub(r"\D", "", value)
    if len(digits) == 11 and digits.startswith("1"):
        return True
    return len(digits) == 10


def format_street_number(raw: str) -> str:
    """Keep digits only."""
    if not raw:
        return ""
    return re.sub(r"\D", "", raw)


def validate_street_number(value: str) -> bool:
    """Check that a street number is made of digits only."""
    if not value:
        return False
    return bool(re.fullmatch(r"[0-9]+", value))


def validate_email(value: str) -> bool:
    """Check an email address has a local part, a domain and a dot-suffix."""
    if not value:
        return False
    return bool(_EMAIL_RE.match(value))

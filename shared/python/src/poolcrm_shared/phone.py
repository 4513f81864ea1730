"""
phone.py — Phone number normalization for duplicate detection and search.

Customers are keyed on an E.164 form of their phone number
(``phone_normalized``) so "(555) 123-4567", "555.123.4567" and
"+1 555 123 4567" all collide.

Usage:
    from poolcrm_shared.phone import normalize_phone, format_phone

    normalize_phone("(555) 123-4567")   # "+15551234567"
    format_phone("+12125551234")         # "(212) 555-1234"
"""

from __future__ import annotations

import re

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat

DEFAULT_REGION = "US"

_NON_DIGITS = re.compile(r"\D")


def extract_digits(phone: str | None) -> str:
    """Strip everything but 0-9."""
    return _NON_DIGITS.sub("", phone or "")


def _parse_valid(phone: str, region: str) -> phonenumbers.PhoneNumber | None:
    try:
        parsed = phonenumbers.parse(phone, region)
    except NumberParseException:
        return None
    return parsed if phonenumbers.is_valid_number(parsed) else None


def normalize_phone(phone: str | None, region: str = DEFAULT_REGION) -> str:
    """
    Normalize a phone number to E.164.

    Falls back to "+1" + digits for 10-digit numbers and "+" + digits for
    11-digit numbers starting with 1 when the library rejects the number
    (e.g. 555 exchange codes used in testing). Anything else is returned
    trimmed and unchanged.
    """
    trimmed = (phone or "").strip()
    if not trimmed:
        return ""

    parsed = _parse_valid(trimmed, region)
    if parsed is not None:
        return phonenumbers.format_number(parsed, PhoneNumberFormat.E164)

    digits = extract_digits(trimmed)
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"
    return trimmed


def is_valid_phone(phone: str | None, region: str = DEFAULT_REGION) -> bool:
    trimmed = (phone or "").strip()
    if not trimmed:
        return False
    if _parse_valid(trimmed, region) is not None:
        return True
    return _parse_valid(f"+1{extract_digits(trimmed)}", region) is not None


def format_phone(phone: str | None, region: str = DEFAULT_REGION) -> str:
    """National format for US numbers, international for everything else."""
    if not phone:
        return ""
    parsed = _parse_valid(phone, region)
    if parsed is None:
        return phone
    if phonenumbers.region_code_for_number(parsed) == "US":
        return phonenumbers.format_number(parsed, PhoneNumberFormat.NATIONAL)
    return phonenumbers.format_number(parsed, PhoneNumberFormat.INTERNATIONAL)


def phones_match(first: str | None, second: str | None) -> bool:
    if not first or not second:
        return False
    return normalize_phone(first) == normalize_phone(second)


def format_for_search(phone: str | None) -> str:
    """Digits of a phone number without the US country code."""
    digits = extract_digits(phone)
    if len(digits) == 11 and digits.startswith("1"):
        return digits[1:]
    return digits

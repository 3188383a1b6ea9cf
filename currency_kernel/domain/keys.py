"""
Keys -- canonical lookup keys for the currency table.

Responsibility:
    Converts heterogeneous identifier inputs (text, bytes, enum members,
    numbers, handles) into the canonical lowercase key used by the primary
    index, and numeric or numeric-text input into the integer key used by
    the ISO numeric index.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O, no imports from the rest of
    the kernel.

Invariants enforced:
    - Canonical keys are stripped and lowercase.
    - Normalization is total: malformed input yields None, never an
      exception, so lookups built on it are total as well.
"""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

_DIGITS = re.compile(r"[0-9]+")


def normalize_key(identifier: Any) -> str | None:
    """
    Return the canonical lowercase key for *identifier*, or None.

    Enum members contribute their value when it is text, otherwise their
    name. Anything else is converted with ``str()``, which for a
    CurrencyHandle yields its uppercased id.
    """
    if identifier is None:
        return None
    if isinstance(identifier, Enum):
        identifier = identifier.value if isinstance(identifier.value, str) else identifier.name
    if isinstance(identifier, (bytes, bytearray)):
        try:
            identifier = identifier.decode("ascii")
        except UnicodeDecodeError:
            return None
    try:
        text = str(identifier)
    except Exception:
        return None
    key = text.strip().lower()
    return key or None


def normalize_iso_numeric(value: Any) -> int | None:
    """
    Return the integer ISO numeric key for *value*, or None.

    Accepts non-negative ints, integral floats and Decimals, and digit-only
    strings (``"978"``, ``"001"``). Booleans are rejected even though they
    are ints.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        if not value.is_integer() or value < 0:
            return None
        return int(value)
    if isinstance(value, Decimal):
        try:
            if not value.is_finite() or value != value.to_integral_value() or value < 0:
                return None
        except InvalidOperation:
            return None
        return int(value)
    if isinstance(value, (bytes, bytearray)):
        try:
            value = value.decode("ascii")
        except UnicodeDecodeError:
            return None
    if isinstance(value, str):
        text = value.strip()
        if not _DIGITS.fullmatch(text):
            return None
        return int(text)
    return None


def format_iso_numeric(value: Any) -> str | None:
    """Zero-padded three digit form of an ISO numeric code, or None."""
    number = normalize_iso_numeric(value)
    if number is None:
        return None
    return f"{number:03d}"

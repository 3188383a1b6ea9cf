"""
CurrencyRecord -- Immutable attribute set describing one currency.

Responsibility:
    Holds a currency's display and arithmetic rules (symbol, subunit ratio,
    separators, exponent) and builds itself from a raw attribute bag.  Every
    registration path, including inheritance and seeding, goes through
    ``CurrencyRecord.from_attributes``.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Imported by
    currency_table and currency_handle.

Invariants enforced:
    - id is the canonical lowercase key, taken from ``id`` or ``iso_code``.
    - subunit_to_unit > 0 (defaults to 1 when absent).
    - iso_numeric, when present, is a zero-padded three digit string.
    - exponent is round-half-up of log10(subunit_to_unit), except for the
      historical overrides in EXPONENT_OVERRIDES.

Failure modes:
    - MissingCurrencyKeyError when neither ``id`` nor ``iso_code`` is present.
    - InvalidCurrencyAttributeError when a present attribute is malformed.
    Missing optional attributes never fail here; they fail lazily on access
    through CurrencyHandle.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from currency_kernel.domain.keys import format_iso_numeric, normalize_key
from currency_kernel.exceptions import (
    InvalidCurrencyAttributeError,
    MissingCurrencyKeyError,
)

Number = int | float | Decimal

# Historical exceptions: exponent 1 regardless of subunit_to_unit.
EXPONENT_OVERRIDES: dict[str, int] = {
    "mga": 1,  # Malagasy ariary
    "mru": 1,  # Mauritanian ouguiya
}

ATTRIBUTE_ALIASES: dict[str, str] = {
    "separator": "decimal_mark",
    "delimiter": "thousands_separator",
}

RECOGNIZED_ATTRIBUTES: tuple[str, ...] = (
    "id",
    "priority",
    "iso_code",
    "iso_numeric",
    "name",
    "symbol",
    "disambiguate_symbol",
    "alternate_symbols",
    "html_entity",
    "subunit",
    "subunit_to_unit",
    "decimal_mark",
    "thousands_separator",
    "symbol_first",
    "smallest_denomination",
    "format",
)


def compute_exponent(currency_id: str, subunit_to_unit: Number) -> int:
    """Base-10 exponent of the subunit ratio, honouring EXPONENT_OVERRIDES."""
    if currency_id in EXPONENT_OVERRIDES:
        return EXPONENT_OVERRIDES[currency_id]
    log = Decimal(repr(math.log10(subunit_to_unit)))
    return int(log.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def normalize_attribute_names(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map aliases to canonical names and drop unrecognized keys.

    When both an alias and its canonical name are present, the canonical
    name wins.
    """
    normalized: dict[str, Any] = {}
    for raw_key, value in attributes.items():
        key = str(raw_key)
        canonical = ATTRIBUTE_ALIASES.get(key, key)
        if canonical not in RECOGNIZED_ATTRIBUTES:
            continue
        if canonical != key and canonical in attributes:
            continue
        normalized[canonical] = value
    return normalized


@dataclass(frozen=True, slots=True)
class CurrencyRecord:
    """
    One currency's attributes.

    Contract:
        Immutable once constructed.  Optional fields are None when absent;
        alternate_symbols is an empty tuple when absent.

    Guarantees:
        - id is non-empty, stripped and lowercase.
        - subunit_to_unit is a positive number.
        - iso_code, when present, is stripped and uppercase.

    Non-goals:
        - Does NOT check uniqueness of id or iso_numeric; that is the
          table's job.
    """

    id: str
    priority: Number | None = None
    iso_code: str | None = None
    iso_numeric: str | None = None
    name: str | None = None
    symbol: str | None = None
    disambiguate_symbol: str | None = None
    alternate_symbols: tuple[str, ...] = field(default_factory=tuple)
    html_entity: str | None = None
    subunit: str | None = None
    subunit_to_unit: Number = 1
    decimal_mark: str | None = None
    thousands_separator: str | None = None
    symbol_first: bool | None = None
    smallest_denomination: Number | None = None
    format: str | None = None

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, Any]) -> CurrencyRecord:
        """
        Build a record from a raw attribute bag.

        Raises:
            MissingCurrencyKeyError: neither ``id`` nor ``iso_code`` usable.
            InvalidCurrencyAttributeError: a present value is malformed.
        """
        attrs = normalize_attribute_names(attributes)

        currency_id = normalize_key(attrs.get("id")) or normalize_key(attrs.get("iso_code"))
        if currency_id is None:
            raise MissingCurrencyKeyError(sorted(str(k) for k in attributes))

        subunit_to_unit = _number(currency_id, "subunit_to_unit", attrs.get("subunit_to_unit"))
        if subunit_to_unit is None:
            subunit_to_unit = 1
        elif subunit_to_unit <= 0:
            raise InvalidCurrencyAttributeError(
                currency_id, "subunit_to_unit", subunit_to_unit, "must be greater than zero"
            )

        raw_numeric = attrs.get("iso_numeric")
        iso_numeric = None
        if raw_numeric is not None and raw_numeric != "":
            iso_numeric = format_iso_numeric(raw_numeric)
            if iso_numeric is None:
                raise InvalidCurrencyAttributeError(
                    currency_id, "iso_numeric", raw_numeric, "must be a non-negative integer code"
                )

        iso_code = _text(attrs.get("iso_code"))

        return cls(
            id=currency_id,
            priority=_number(currency_id, "priority", attrs.get("priority")),
            iso_code=iso_code.upper() if iso_code else None,
            iso_numeric=iso_numeric,
            name=_text(attrs.get("name")),
            symbol=_text(attrs.get("symbol")),
            disambiguate_symbol=_text(attrs.get("disambiguate_symbol")),
            alternate_symbols=_symbols(currency_id, attrs.get("alternate_symbols")),
            html_entity=_text(attrs.get("html_entity")),
            subunit=_text(attrs.get("subunit")),
            subunit_to_unit=subunit_to_unit,
            decimal_mark=_text(attrs.get("decimal_mark")),
            thousands_separator=_text(attrs.get("thousands_separator")),
            symbol_first=_flag(currency_id, "symbol_first", attrs.get("symbol_first")),
            smallest_denomination=_number(
                currency_id, "smallest_denomination", attrs.get("smallest_denomination")
            ),
            format=_text(attrs.get("format")),
        )

    def to_attributes(self) -> dict[str, Any]:
        """Attribute bag for this record, present fields only, canonical names."""
        attrs: dict[str, Any] = {}
        for name in RECOGNIZED_ATTRIBUTES:
            value = getattr(self, name)
            if value is None or value == ():
                continue
            attrs[name] = list(value) if name == "alternate_symbols" else value
        return attrs

    @property
    def exponent(self) -> int:
        return compute_exponent(self.id, self.subunit_to_unit)


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def _text(value: Any) -> str | None:
    # Empty strings are meaningful for separators (e.g. no thousands mark).
    if value is None:
        return None
    return str(value)


def _number(currency_id: str, attribute: str, value: Any) -> Number | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidCurrencyAttributeError(currency_id, attribute, value, "must be numeric")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidCurrencyAttributeError(currency_id, attribute, value, "must be finite")
        return value
    if isinstance(value, (Decimal, str)):
        try:
            number = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation:
            raise InvalidCurrencyAttributeError(
                currency_id, attribute, value, "must be numeric"
            ) from None
        if not number.is_finite():
            raise InvalidCurrencyAttributeError(currency_id, attribute, value, "must be finite")
        return int(number) if number == number.to_integral_value() else number
    raise InvalidCurrencyAttributeError(currency_id, attribute, value, "must be numeric")


def _flag(currency_id: str, attribute: str, value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise InvalidCurrencyAttributeError(currency_id, attribute, value, "must be a boolean")


def _symbols(currency_id: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    if isinstance(value, Iterable):
        return tuple(str(v) for v in value if v)
    raise InvalidCurrencyAttributeError(
        currency_id, "alternate_symbols", value, "must be a string or a list of strings"
    )

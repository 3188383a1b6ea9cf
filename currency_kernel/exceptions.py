"""
Typed Exception Hierarchy for the Currency Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the registry need to tell "the user typed an unknown code" apart
from "a custom currency was registered without a field the caller relies on".
Parsing message strings for that is fragile, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        currency = table.wrap(user_input)
    except UnknownCurrencyError as e:
        api_response(code=e.code, identifier=e.identifier)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    CurrencyKernelError (base)
    |
    +-- CurrencyError
    |   +-- UnknownCurrencyError
    |   +-- MissingAttributeError
    |   +-- MissingCurrencyKeyError
    |   +-- InvalidCurrencyAttributeError
    |   +-- DuplicateIsoNumericError
    |
    +-- SeedSourceError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Currency        | UNKNOWN_CURRENCY            | wrap()/inherit()/table[...] miss, stale handle
                | MISSING_ATTRIBUTE           | Strict accessor on an absent field
                | MISSING_CURRENCY_KEY        | Attribute bag has neither id nor iso_code
                | INVALID_CURRENCY_ATTRIBUTE  | Present attribute has an invalid value
                | DUPLICATE_ISO_NUMERIC       | Numeric code held by another currency
----------------|-----------------------------|-----------------------------------------
Seed            | SEED_SOURCE_ERROR           | Seed data is structurally malformed

Lookups (find, find_by_iso_numeric) never raise for unknown input; they
return None. Register/unregister never raise for "already exists" or
"does not exist".
"""


class CurrencyKernelError(Exception):
    """
    Base exception for all currency kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "CURRENCY_KERNEL_ERROR"


# Currency-related exceptions


class CurrencyError(CurrencyKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class UnknownCurrencyError(CurrencyError):
    """Identifier does not resolve to a live currency."""

    code: str = "UNKNOWN_CURRENCY"

    def __init__(self, identifier: object):
        self.identifier = identifier
        super().__init__(f"Unknown currency '{identifier}'")


class MissingAttributeError(CurrencyError):
    """
    Accessor requires a field the currency record does not carry.

    Raised lazily at access time, never at registration, so incomplete
    custom currencies can still be registered and used for everything
    that does not need the missing field.
    """

    code: str = "MISSING_ATTRIBUTE"

    def __init__(self, method: str, currency_id: str, attribute: str):
        self.method = method
        self.currency_id = currency_id
        self.attribute = attribute
        super().__init__(
            f"Can't call Currency.{method} - currency '{currency_id}' "
            f"is missing the attribute '{attribute}'"
        )


class MissingCurrencyKeyError(CurrencyError):
    """Attribute bag carries neither an `id` nor an `iso_code`."""

    code: str = "MISSING_CURRENCY_KEY"

    def __init__(self, attribute_names: list[str]):
        self.attribute_names = attribute_names
        super().__init__(
            "Currency attributes must include 'id' or 'iso_code'; "
            f"got keys {attribute_names}"
        )


class InvalidCurrencyAttributeError(CurrencyError):
    """A present attribute has a value the registry cannot accept."""

    code: str = "INVALID_CURRENCY_ATTRIBUTE"

    def __init__(self, currency_id: str, attribute: str, value: object, reason: str):
        self.currency_id = currency_id
        self.attribute = attribute
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value {value!r} for '{attribute}' on currency "
            f"'{currency_id}': {reason}"
        )


class DuplicateIsoNumericError(CurrencyError):
    """ISO numeric code is already held by a different live currency."""

    code: str = "DUPLICATE_ISO_NUMERIC"

    def __init__(self, iso_numeric: str, existing_id: str, currency_id: str):
        self.iso_numeric = iso_numeric
        self.existing_id = existing_id
        self.currency_id = currency_id
        super().__init__(
            f"ISO numeric code {iso_numeric} is already registered to "
            f"'{existing_id}', cannot assign it to '{currency_id}'"
        )


# Seed-related exceptions


class SeedSourceError(CurrencyKernelError):
    """Seed data could not be turned into attribute bags."""

    code: str = "SEED_SOURCE_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Seed source '{source}' is malformed: {reason}")

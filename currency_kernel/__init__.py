"""
Currency Kernel

An in-memory registry of currency metadata with:
- Canonical, case-insensitive lookup by code or ISO numeric code
- Immutable records with lazily validated optional fields
- Registration, inheritance and removal of custom currencies
- Atomic, reader-safe mutation and reset to the seeded state
"""

__version__ = "0.1.0"

from currency_kernel.domain import (
    CurrencyHandle,
    CurrencyRecord,
    CurrencyTable,
    SeedSource,
    StaticSeedSource,
)
from currency_kernel.exceptions import (
    CurrencyError,
    CurrencyKernelError,
    DuplicateIsoNumericError,
    InvalidCurrencyAttributeError,
    MissingAttributeError,
    MissingCurrencyKeyError,
    SeedSourceError,
    UnknownCurrencyError,
)

__all__ = [
    "CurrencyTable",
    "CurrencyHandle",
    "CurrencyRecord",
    "SeedSource",
    "StaticSeedSource",
    "CurrencyKernelError",
    "CurrencyError",
    "UnknownCurrencyError",
    "MissingAttributeError",
    "MissingCurrencyKeyError",
    "InvalidCurrencyAttributeError",
    "DuplicateIsoNumericError",
    "SeedSourceError",
]

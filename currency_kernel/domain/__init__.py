"""
Pure domain layer.

This module contains the currency registry and its value types with NO
dependencies on:
- ORM (SQLAlchemy)
- Database
- Files or other I/O

Records are immutable; the table is the only mutable object.
"""

from currency_kernel.domain.currency_handle import CurrencyHandle
from currency_kernel.domain.currency_record import (
    ATTRIBUTE_ALIASES,
    EXPONENT_OVERRIDES,
    RECOGNIZED_ATTRIBUTES,
    CurrencyRecord,
    compute_exponent,
)
from currency_kernel.domain.currency_table import CurrencyTable
from currency_kernel.domain.keys import (
    format_iso_numeric,
    normalize_iso_numeric,
    normalize_key,
)
from currency_kernel.domain.seed import SeedSource, StaticSeedSource

__all__ = [
    # Registry
    "CurrencyTable",
    "CurrencyHandle",
    "CurrencyRecord",
    # Seed
    "SeedSource",
    "StaticSeedSource",
    # Keys
    "normalize_key",
    "normalize_iso_numeric",
    "format_iso_numeric",
    # Attributes
    "ATTRIBUTE_ALIASES",
    "RECOGNIZED_ATTRIBUTES",
    "EXPONENT_OVERRIDES",
    "compute_exponent",
]

"""ORM models for the currency kernel."""

from currency_kernel.models.currency_definition import CurrencyDefinition

__all__ = [
    "CurrencyDefinition",
]

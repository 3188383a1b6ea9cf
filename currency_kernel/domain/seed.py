"""
Seed -- Contract for the data source that populates a CurrencyTable.

A seed source is an opaque, ordered, finite sequence of attribute bags.  The
table calls ``load()`` once at construction and again on every ``reset()``,
so implementations must be re-readable.  File and database backed sources
live in ``currency_config``; this module only defines the protocol and an
in-memory implementation.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SeedSource(Protocol):
    """Anything with a ``name`` and a re-readable ``load()``."""

    name: str

    def load(self) -> Iterable[Mapping[str, Any]]:
        ...


class StaticSeedSource:
    """Seed source over an in-memory sequence of attribute bags."""

    def __init__(self, records: Iterable[Mapping[str, Any]] = (), name: str = "static") -> None:
        # Callers keep no references into the stored bags.
        self._records = tuple(copy.deepcopy(dict(r)) for r in records)
        self.name = name

    def load(self) -> Iterable[Mapping[str, Any]]:
        return [copy.deepcopy(r) for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"StaticSeedSource(name={self.name!r}, records={len(self._records)})"

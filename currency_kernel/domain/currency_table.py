"""
CurrencyTable -- Registry of currency definitions and its lookup indices.

Responsibility:
    Owns the mapping canonical id -> CurrencyRecord and the secondary index
    ISO numeric code -> canonical id.  All registration, inheritance and
    removal logic lives here.  Lookups return CurrencyHandle references.

Architecture position:
    Kernel > Domain -- in-memory, zero I/O.  The seed source it is built
    from is injected; the process-wide instance is owned by
    ``currency_config.get_active_table()``.  Tests construct their own.

Invariants enforced:
    - id is unique across live records (canonical lowercase key).
    - iso_numeric is unique across live records; re-registering an id
      moves its numeric entry, assigning a numeric code held by another id
      is rejected.
    - Both indices change together: every mutation builds a new immutable
      generation and publishes it with one reference assignment under the
      writer lock.  Readers load the generation once per call, so they never
      see a record in one index but not the other.
    - Registration order is preserved; re-registering an id keeps its
      position.

Failure modes:
    - find / find_by_iso_numeric / unregister never raise for unknown input.
    - wrap / inherit / table[...] raise UnknownCurrencyError on a miss.
    - register raises MissingCurrencyKeyError, InvalidCurrencyAttributeError
      or DuplicateIsoNumericError and leaves the table unchanged.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from currency_kernel.domain.currency_handle import CurrencyHandle
from currency_kernel.domain.currency_record import CurrencyRecord, normalize_attribute_names
from currency_kernel.domain.keys import normalize_iso_numeric, normalize_key
from currency_kernel.domain.seed import SeedSource, StaticSeedSource
from currency_kernel.exceptions import DuplicateIsoNumericError, UnknownCurrencyError
from currency_kernel.logging_config import LogContext, get_logger

logger = get_logger("domain.currency_table")

# Fields that identify the parent rather than describe it; not inherited by a
# child with a different id.
_IDENTITY_ATTRIBUTES = ("id", "iso_numeric")


@dataclass(frozen=True)
class _Generation:
    """One immutable snapshot of both indices."""

    number: int
    records: Mapping[str, CurrencyRecord]
    numeric_index: Mapping[int, str]


class CurrencyTable:
    """
    Mutable registry of currencies.

    Contract:
        ``find``/``find_by_iso_numeric`` are total lookups returning a
        CurrencyHandle or None.  ``register``, ``inherit``, ``unregister``
        and ``reset`` are the only mutations.

    Guarantees:
        - A single writer at a time; readers never block.
        - ``reset()`` restores exactly what the seed source yields.

    Non-goals:
        - Does NOT format or convert amounts.
        - Does NOT persist runtime registrations.
    """

    def __init__(self, seed_source: SeedSource | None = None) -> None:
        if seed_source is None:
            seed_source = StaticSeedSource(name="empty")
        self._seed_source: SeedSource = seed_source
        self._write_lock = threading.Lock()
        self._generation = _Generation(0, MappingProxyType({}), MappingProxyType({}))
        self.reset()

    # -----------------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------------

    def find(self, identifier: Any) -> CurrencyHandle | None:
        """Handle for *identifier*, or None if unknown or malformed."""
        key = normalize_key(identifier)
        if key is None or key not in self._generation.records:
            return None
        return CurrencyHandle(self, key)

    def find_by_iso_numeric(self, num: Any) -> CurrencyHandle | None:
        """Handle for an ISO numeric code (978, "978", "001"), or None."""
        number = normalize_iso_numeric(num)
        if number is None:
            return None
        key = self._generation.numeric_index.get(number)
        if key is None:
            return None
        return CurrencyHandle(self, key)

    def wrap(self, value: Any) -> CurrencyHandle | None:
        """
        Coerce *value* into a handle.

        None passes through, a handle is returned unchanged, anything else
        is resolved with ``find``.

        Raises:
            UnknownCurrencyError: *value* does not resolve.
        """
        if value is None:
            return None
        if isinstance(value, CurrencyHandle):
            return value
        handle = self.find(value)
        if handle is None:
            raise UnknownCurrencyError(value)
        return handle

    def get_record(self, identifier: Any) -> CurrencyRecord | None:
        key = normalize_key(identifier)
        if key is None:
            return None
        return self._generation.records.get(key)

    def all_currencies(self) -> list[CurrencyHandle]:
        """Every live currency in registration order."""
        return [CurrencyHandle(self, key) for key in self._generation.records]

    def iso_codes(self) -> list[str]:
        """ISO codes of ISO-compliant currencies, in registration order."""
        return [
            record.iso_code
            for record in self._generation.records.values()
            if record.iso_code is not None
        ]

    def ids(self) -> frozenset[str]:
        return frozenset(self._generation.records)

    @property
    def generation(self) -> int:
        """Incremented by every successful mutation."""
        return self._generation.number

    @property
    def seed_source(self) -> SeedSource:
        return self._seed_source

    def __getitem__(self, identifier: Any) -> CurrencyHandle:
        handle = self.find(identifier)
        if handle is None:
            raise UnknownCurrencyError(identifier)
        return handle

    def __contains__(self, identifier: Any) -> bool:
        key = normalize_key(identifier)
        return key is not None and key in self._generation.records

    def __iter__(self) -> Iterator[CurrencyHandle]:
        return iter(self.all_currencies())

    def __len__(self) -> int:
        return len(self._generation.records)

    def __repr__(self) -> str:
        return (
            f"CurrencyTable(seed_source={self._seed_source.name!r}, "
            f"currencies={len(self)}, generation={self.generation})"
        )

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    def register(self, attributes: Mapping[str, Any]) -> CurrencyHandle:
        """
        Register (or replace) a currency from an attribute bag.

        Preconditions:
            - *attributes* contains ``id`` or ``iso_code``.
        Postconditions:
            - ``find(id)`` returns a handle whose present attributes equal
              the input's.
            - A previous record with the same id is replaced in place and its
              numeric index entry updated.
        """
        record = CurrencyRecord.from_attributes(attributes)
        with self._write_lock:
            current = self._generation
            records = dict(current.records)
            numeric_index = dict(current.numeric_index)
            replaced = _install(records, numeric_index, record)
            self._publish(records, numeric_index)
            generation = self._generation.number

        logger.info(
            "currency_registered",
            extra={
                "currency_id": record.id,
                "iso_numeric": record.iso_numeric,
                "replaced": replaced,
                "generation": generation,
            },
        )
        return CurrencyHandle(self, record.id)

    def inherit(self, parent: Any, attributes: Mapping[str, Any]) -> CurrencyHandle:
        """
        Register a currency derived from an existing one.

        The parent's attributes are copied and the child's attributes
        overlaid on them.  When the child names a different currency the
        parent's id and numeric code are left behind; when it names the
        parent itself (or names nothing) the parent keeps both, as a plain
        re-registration would.  The result goes through the ordinary
        ``register`` path; there is no link back to the parent afterwards.

        Raises:
            UnknownCurrencyError: *parent* is not registered.
        """
        parent_record = self.get_record(parent)
        if parent_record is None:
            raise UnknownCurrencyError(parent)

        child = normalize_attribute_names(attributes)
        child_key = normalize_key(child.get("id")) or normalize_key(child.get("iso_code"))

        merged = parent_record.to_attributes()
        if child_key is not None and child_key != parent_record.id:
            merged = {
                name: value
                for name, value in merged.items()
                if name not in _IDENTITY_ATTRIBUTES
            }
        merged.update(child)

        handle = self.register(merged)
        logger.info(
            "currency_inherited",
            extra={"currency_id": handle.id, "parent_id": parent_record.id},
        )
        return handle

    def unregister(self, identifier_or_attributes: Any) -> bool:
        """
        Remove a currency from both indices.

        Accepts an identifier, a handle, or an attribute bag carrying
        ``id`` or ``iso_code``.  Returns True if a record was removed.
        """
        key = _key_for_removal(identifier_or_attributes)
        if key is None:
            return False

        with self._write_lock:
            current = self._generation
            record = current.records.get(key)
            if record is None:
                return False
            records = dict(current.records)
            numeric_index = dict(current.numeric_index)
            del records[key]
            _drop_numeric(numeric_index, record)
            self._publish(records, numeric_index)
            generation = self._generation.number

        logger.info(
            "currency_unregistered",
            extra={"currency_id": key, "generation": generation},
        )
        return True

    def reset(self) -> None:
        """Discard runtime changes and reload the seed source."""
        source_name = getattr(self._seed_source, "name", type(self._seed_source).__name__)
        with LogContext.bind(seed_source=source_name):
            records: dict[str, CurrencyRecord] = {}
            numeric_index: dict[int, str] = {}
            for attributes in self._seed_source.load():
                _install(records, numeric_index, CurrencyRecord.from_attributes(attributes))

            with self._write_lock:
                first_load = self._generation.number == 0
                self._publish(records, numeric_index)
                generation = self._generation.number

            logger.info(
                "currency_table_seeded" if first_load else "currency_table_reset",
                extra={"currency_count": len(records), "generation": generation},
            )

    def _publish(self, records: dict[str, CurrencyRecord], numeric_index: dict[int, str]) -> None:
        # Caller holds the write lock.
        self._generation = _Generation(
            self._generation.number + 1,
            MappingProxyType(records),
            MappingProxyType(numeric_index),
        )


# ---------------------------------------------------------------------------
# Index helpers (operate on private working copies)
# ---------------------------------------------------------------------------


def _install(
    records: dict[str, CurrencyRecord],
    numeric_index: dict[int, str],
    record: CurrencyRecord,
) -> bool:
    """Insert or replace *record*; returns True if an id was replaced."""
    if record.iso_numeric is not None:
        number = int(record.iso_numeric)
        holder = numeric_index.get(number)
        if holder is not None and holder != record.id:
            raise DuplicateIsoNumericError(record.iso_numeric, holder, record.id)

    previous = records.get(record.id)
    if previous is not None:
        _drop_numeric(numeric_index, previous)
    records[record.id] = record
    if record.iso_numeric is not None:
        numeric_index[int(record.iso_numeric)] = record.id
    return previous is not None


def _drop_numeric(numeric_index: dict[int, str], record: CurrencyRecord) -> None:
    if record.iso_numeric is None:
        return
    number = int(record.iso_numeric)
    if numeric_index.get(number) == record.id:
        del numeric_index[number]


def _key_for_removal(value: Any) -> str | None:
    if isinstance(value, CurrencyHandle):
        return value.id
    if isinstance(value, Mapping):
        return normalize_key(value.get("id")) or normalize_key(value.get("iso_code"))
    return normalize_key(value)

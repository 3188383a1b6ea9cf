"""
CurrencyHandle -- Comparable, hashable reference to a registered currency.

Responsibility:
    Wraps a canonical currency id and the table it lives in.  Every accessor
    dereferences the table's *current* record, so a handle observes
    re-registrations made after it was obtained.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Created only by
    CurrencyTable lookups.

Invariants enforced:
    - Equality and hashing use the canonical id alone.
    - Ordering uses the record's priority alone.

    These two relations are deliberately NOT consistent with each other:
    ``a == b`` does not imply ``a.compare(b) == 0`` and vice versa.  Sorting
    handles groups them by priority for display; equality identifies the
    currency.  Do not decorate this class with functools.total_ordering,
    which would derive ``<=`` and ``>=`` partly from ``__eq__``.

Failure modes:
    - UnknownCurrencyError when the id has been unregistered since the
      handle was obtained.
    - MissingAttributeError from the strict accessors (iso_code,
      iso_numeric, smallest_denomination) when the field is absent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from currency_kernel.domain.currency_record import CurrencyRecord, Number, compute_exponent
from currency_kernel.exceptions import MissingAttributeError, UnknownCurrencyError

if TYPE_CHECKING:
    from currency_kernel.domain.currency_table import CurrencyTable


class CurrencyHandle:
    """
    Lightweight reference to a currency in a CurrencyTable.

    Contract:
        Pass-through read access to every CurrencyRecord field, plus the
        derived values (code, exponent, is_iso).

    Guarantees:
        - Hashable and usable as a dict key; two handles for "EUR" and
          "eur" are equal and hash alike.
        - Sorting a list of handles orders them by ascending priority.
          Currencies without a priority sort last.  Ties are left in their
          incoming order by ``sorted``.

    Non-goals:
        - Does NOT snapshot the record.  Use ``handle.record`` to capture
          the attributes at a point in time.
    """

    __slots__ = ("_id", "_table")

    def __init__(self, table: CurrencyTable, currency_id: str) -> None:
        self._table = table
        self._id = currency_id

    # -----------------------------------------------------------------------
    # Dereference
    # -----------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def record(self) -> CurrencyRecord:
        """The current record for this id in the owning table."""
        record = self._table.get_record(self._id)
        if record is None:
            raise UnknownCurrencyError(self._id)
        return record

    def to_attributes(self) -> dict[str, Any]:
        return self.record.to_attributes()

    # -----------------------------------------------------------------------
    # Pass-through accessors
    # -----------------------------------------------------------------------

    @property
    def priority(self) -> Number | None:
        return self.record.priority

    @property
    def name(self) -> str | None:
        return self.record.name

    @property
    def symbol(self) -> str | None:
        return self.record.symbol

    @property
    def disambiguate_symbol(self) -> str | None:
        return self.record.disambiguate_symbol

    @property
    def alternate_symbols(self) -> tuple[str, ...]:
        return self.record.alternate_symbols

    @property
    def html_entity(self) -> str | None:
        return self.record.html_entity

    @property
    def subunit(self) -> str | None:
        return self.record.subunit

    @property
    def subunit_to_unit(self) -> Number:
        return self.record.subunit_to_unit

    @property
    def decimal_mark(self) -> str | None:
        return self.record.decimal_mark

    separator = decimal_mark

    @property
    def thousands_separator(self) -> str | None:
        return self.record.thousands_separator

    delimiter = thousands_separator

    @property
    def symbol_first(self) -> bool | None:
        return self.record.symbol_first

    @property
    def format(self) -> str | None:
        return self.record.format

    # -----------------------------------------------------------------------
    # Strict accessors
    # -----------------------------------------------------------------------

    @property
    def iso_code(self) -> str:
        return self._require("iso_code", "iso_code")

    @property
    def iso_numeric(self) -> str:
        return self._require("iso_numeric", "iso_numeric")

    @property
    def smallest_denomination(self) -> Number:
        return self._require("smallest_denomination", "smallest_denomination")

    def _require(self, method: str, attribute: str) -> Any:
        value = getattr(self.record, attribute)
        if value is None:
            raise MissingAttributeError(method, self._id, attribute)
        return value

    # -----------------------------------------------------------------------
    # Derived values
    # -----------------------------------------------------------------------

    @property
    def upper_id(self) -> str:
        """Uppercased id, the symbol-like form of the currency."""
        return self._id.upper()

    @property
    def code(self) -> str:
        """Display symbol, falling back to the uppercase ISO code or id."""
        record = self.record
        if record.symbol:
            return record.symbol
        return (record.iso_code or self._id).upper()

    @property
    def is_iso(self) -> bool:
        return self.record.iso_code is not None

    @property
    def exponent(self) -> int:
        return compute_exponent(self._id, self.record.subunit_to_unit)

    decimal_places = exponent

    @property
    def cents_based(self) -> bool:
        return self.record.subunit_to_unit == 100

    # -----------------------------------------------------------------------
    # Equality (by id) and ordering (by priority)
    # -----------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurrencyHandle):
            return NotImplemented
        return self._id == other._id

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, CurrencyHandle):
            return NotImplemented
        return self._id != other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def _priority_key(self) -> tuple[int, Number]:
        priority = self.record.priority
        return (1, 0) if priority is None else (0, priority)

    def compare(self, other: CurrencyHandle) -> int:
        """Three-way comparison by priority: -1, 0 or 1."""
        mine, theirs = self._priority_key(), other._priority_key()
        return (mine > theirs) - (mine < theirs)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CurrencyHandle):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, CurrencyHandle):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, CurrencyHandle):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, CurrencyHandle):
            return NotImplemented
        return self.compare(other) >= 0

    # -----------------------------------------------------------------------
    # Representation
    # -----------------------------------------------------------------------

    def __str__(self) -> str:
        return self.upper_id

    def __repr__(self) -> str:
        return f"CurrencyHandle({self._id!r})"

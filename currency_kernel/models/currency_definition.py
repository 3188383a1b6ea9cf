"""
Module: currency_kernel.models.currency_definition
Responsibility: ORM persistence for seed currency definitions -- one row per
    attribute bag that a database-backed seed source feeds into a
    CurrencyTable.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/currency_record.py (for attribute names only).
    MUST NOT import from domain/currency_table.py or outer layers.

Invariants enforced:
    - id is the canonical lowercase key (primary key).
    - position fixes the registration order reproduced on load.
    - Rows are seed data: runtime registrations on a CurrencyTable are never
      written back here.

Failure modes:
    - IntegrityError on duplicate id.
"""

from typing import Any

from sqlalchemy import JSON, Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from currency_kernel.db.base import Base
from currency_kernel.domain.currency_record import normalize_attribute_names
from currency_kernel.domain.keys import format_iso_numeric, normalize_key


class CurrencyDefinition(Base):
    """
    Seed row for one currency.

    Contract:
        Stores the raw attribute bag columns; validation happens when the
        bag is registered, not here.

    Non-goals:
        - Numeric columns are integers.  Fractional priorities or ratios
          belong in YAML seeds.
    """

    __tablename__ = "currency_definitions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    priority: Mapped[int | None] = mapped_column(Integer, nullable=True)
    iso_code: Mapped[str | None] = mapped_column(String(3), nullable=True)
    iso_numeric: Mapped[str | None] = mapped_column(String(3), nullable=True, unique=True)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    symbol: Mapped[str | None] = mapped_column(String(16), nullable=True)
    disambiguate_symbol: Mapped[str | None] = mapped_column(String(16), nullable=True)
    alternate_symbols: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    html_entity: Mapped[str | None] = mapped_column(String(32), nullable=True)
    subunit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    subunit_to_unit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    decimal_mark: Mapped[str | None] = mapped_column(String(4), nullable=True)
    thousands_separator: Mapped[str | None] = mapped_column(String(4), nullable=True)
    symbol_first: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    smallest_denomination: Mapped[int | None] = mapped_column(Integer, nullable=True)
    format: Mapped[str | None] = mapped_column(String(32), nullable=True)

    _ATTRIBUTE_COLUMNS = (
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

    @classmethod
    def from_attributes(cls, attributes: dict[str, Any], position: int) -> "CurrencyDefinition":
        """Build a row from an attribute bag; id defaults to the iso_code."""
        attrs = normalize_attribute_names(attributes)
        currency_id = normalize_key(attrs.get("id")) or normalize_key(attrs.get("iso_code"))
        if currency_id is None:
            raise ValueError(f"Currency definition needs 'id' or 'iso_code': {sorted(attributes)}")
        values = {name: attrs.get(name) for name in cls._ATTRIBUTE_COLUMNS}
        values["iso_numeric"] = format_iso_numeric(values["iso_numeric"])
        if values["alternate_symbols"] is not None:
            values["alternate_symbols"] = list(values["alternate_symbols"])
        return cls(id=currency_id, position=position, **values)

    def to_attributes(self) -> dict[str, Any]:
        """Attribute bag for this row, omitting NULL columns."""
        attrs: dict[str, Any] = {"id": self.id}
        for name in self._ATTRIBUTE_COLUMNS:
            value = getattr(self, name)
            if value is not None:
                attrs[name] = value
        return attrs

    def __repr__(self) -> str:
        return f"<CurrencyDefinition {self.id} #{self.position}>"

"""
SQL seed source (``currency_config.sql_source``).

Reads seed currency definitions from the ``currency_definitions`` table and
writes attribute bags into it.  Like the YAML loader this is seeding
tooling: a ``CurrencyTable`` built from it never writes runtime changes back.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, sessionmaker

from currency_kernel.logging_config import get_logger
from currency_kernel.models.currency_definition import CurrencyDefinition

logger = get_logger("config.sql_source")


class SqlSeedSource:
    """
    Seed source backed by the ``currency_definitions`` table.

    Contract:
        ``load()`` opens a short-lived session per call and yields rows in
        ``position`` order.
    """

    def __init__(self, session_factory: sessionmaker[Session], name: str = "sql") -> None:
        self._session_factory = session_factory
        self.name = name

    def load(self) -> list[dict[str, Any]]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(CurrencyDefinition).order_by(CurrencyDefinition.position)
            ).all()
            bags = [row.to_attributes() for row in rows]
        logger.debug("sql_seed_loaded", extra={"seed_source": self.name, "row_count": len(bags)})
        return bags


def store_definitions(
    session: Session,
    definitions: Iterable[Mapping[str, Any]],
    *,
    replace: bool = False,
) -> int:
    """
    Append attribute bags to ``currency_definitions``.

    Positions continue after the highest existing one.  With
    ``replace=True`` existing rows are deleted first.  The caller owns the
    transaction (use ``session_scope()``).

    Returns:
        Number of rows written.
    """
    if replace:
        session.execute(delete(CurrencyDefinition))
        start = 0
    else:
        highest = session.scalar(select(func.max(CurrencyDefinition.position)))
        start = 0 if highest is None else highest + 1

    count = 0
    for offset, attributes in enumerate(definitions):
        session.add(CurrencyDefinition.from_attributes(dict(attributes), start + offset))
        count += 1
    session.flush()

    logger.info("currency_definitions_stored", extra={"row_count": count, "replace": replace})
    return count

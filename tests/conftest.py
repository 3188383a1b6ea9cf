"""
Pytest configuration and shared fixtures for currency kernel tests.

Tables built here are private to each test: nothing touches the process-wide
table except tests that ask for ``active_table``.
"""

import json
import logging
from io import StringIO

import pytest

from currency_config import reset_active_table
from currency_kernel.db.engine import create_tables, get_session_factory, init_engine_from_url, reset_engine
from currency_kernel.domain.currency_table import CurrencyTable
from currency_kernel.domain.seed import StaticSeedSource
from currency_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# Small seed set covering the behaviours the tests exercise: ISO and
# custom currencies, a missing priority, exponent overrides, aliases.
SAMPLE_SEED = (
    {
        "id": "usd",
        "priority": 1,
        "iso_code": "USD",
        "iso_numeric": "840",
        "name": "United States Dollar",
        "symbol": "$",
        "disambiguate_symbol": "US$",
        "alternate_symbols": ["US$"],
        "html_entity": "$",
        "subunit": "Cent",
        "subunit_to_unit": 100,
        "decimal_mark": ".",
        "thousands_separator": ",",
        "symbol_first": True,
        "smallest_denomination": 1,
    },
    {
        "id": "eur",
        "priority": 2,
        "iso_code": "EUR",
        "iso_numeric": "978",
        "name": "Euro",
        "symbol": "€",
        "alternate_symbols": [],
        "html_entity": "&#x20AC;",
        "subunit": "Cent",
        "subunit_to_unit": 100,
        "separator": ",",
        "delimiter": ".",
        "symbol_first": True,
        "smallest_denomination": 1,
    },
    {
        "id": "gbp",
        "priority": 3,
        "iso_code": "GBP",
        "iso_numeric": "826",
        "name": "British Pound",
        "symbol": "£",
        "subunit": "Penny",
        "subunit_to_unit": 100,
        "decimal_mark": ".",
        "thousands_separator": ",",
        "symbol_first": True,
        "smallest_denomination": 1,
    },
    {
        "id": "jpy",
        "priority": 6,
        "iso_code": "JPY",
        "iso_numeric": "392",
        "name": "Japanese Yen",
        "symbol": "¥",
        "disambiguate_symbol": "JPY",
        "subunit_to_unit": 1,
        "decimal_mark": ".",
        "thousands_separator": ",",
        "symbol_first": True,
        "smallest_denomination": 1,
    },
    {
        "id": "kwd",
        "priority": 100,
        "iso_code": "KWD",
        "iso_numeric": "414",
        "name": "Kuwaiti Dinar",
        "symbol": "د.ك",
        "subunit": "Fils",
        "subunit_to_unit": 1000,
        "smallest_denomination": 5,
    },
    {
        "id": "mga",
        "priority": 100,
        "iso_code": "MGA",
        "iso_numeric": "969",
        "name": "Malagasy Ariary",
        "symbol": "Ar",
        "subunit": "Iraimbilanja",
        "subunit_to_unit": 5,
        "smallest_denomination": 1,
    },
    {
        "id": "mru",
        "priority": 100,
        "iso_code": "MRU",
        "iso_numeric": "929",
        "name": "Mauritanian Ouguiya",
        "symbol": "UM",
        "subunit": "Khoums",
        "subunit_to_unit": 5,
        "smallest_denomination": 1,
    },
    {
        "id": "xau",
        "priority": 100,
        "iso_code": "XAU",
        "iso_numeric": "959",
        "name": "Gold (Troy Ounce)",
        "symbol": "oz t",
        "subunit_to_unit": 1,
    },
    {
        "id": "btc",
        "priority": 100,
        "name": "Bitcoin",
        "symbol": "₿",
        "subunit": "Satoshi",
        "subunit_to_unit": 100000000,
        "symbol_first": True,
    },
    {
        "id": "xfu",
        "name": "UIC Franc",
        "subunit_to_unit": 100,
    },
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture currency_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, table):
            table.register({"id": "xyz"})
            logs = captured_logs()
            assert any(r["message"] == "currency_registered" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("currency_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records
    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Table fixtures
# =============================================================================


@pytest.fixture
def sample_seed():
    """Fresh copy of the sample attribute bags."""
    return [dict(bag) for bag in SAMPLE_SEED]


@pytest.fixture
def seed_source(sample_seed):
    return StaticSeedSource(sample_seed, name="sample")


@pytest.fixture
def table(seed_source):
    """A private table seeded with SAMPLE_SEED."""
    return CurrencyTable(seed_source)


@pytest.fixture
def empty_table():
    return CurrencyTable()


@pytest.fixture
def active_table():
    """The process-wide table built from the bundled seeds, dropped afterwards."""
    from currency_config import get_active_table

    reset_active_table()
    yield get_active_table()
    reset_active_table()


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session_factory():
    """In-memory SQLite with the currency_definitions table created."""
    init_engine_from_url("sqlite://")
    create_tables()
    yield get_session_factory()
    reset_engine()

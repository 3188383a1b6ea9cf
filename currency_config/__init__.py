"""
currency_config -- single public entrypoint for the process-wide currency table.

Responsibility:
    Provides the ONLY way to obtain the production ``CurrencyTable`` through
    ``get_active_table()``.  No other component reads seed files.  Tests and
    tools that need isolation construct their own ``CurrencyTable`` instead.

Architecture position:
    Configuration -- YAML seed data and seed sources.  This package sits
    above ``currency_kernel``; the kernel MUST NEVER import from
    ``currency_config``.

Invariants enforced:
    - One process-wide table, built once (thread-safe) from the bundled
      seed set, unless ``reset_active_table()`` drops it.
    - Seed files are read in a fixed order: ISO, non-ISO, then backwards
      compatible definitions.

Failure modes:
    - ``FileNotFoundError`` -- a seed file is missing from the directory.
    - ``SeedSourceError`` -- a seed file is structurally malformed.
    - ``CurrencyError`` subclasses -- a seed entry fails registration
      (e.g. duplicate ISO numeric code).

Audit relevance:
    Every table build emits a ``CURRENCY_SEED_TRACE`` log entry with the seed
    files, currency count and seed checksum, tying the registry contents to
    the exact seed data that produced them.
"""

from __future__ import annotations

import threading
from pathlib import Path

from currency_config.loader import YamlSeedSource
from currency_kernel.domain.currency_table import CurrencyTable
from currency_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default seed directory
DEFAULT_SEED_DIR = Path(__file__).parent / "seeds"

SEED_FILES: tuple[str, ...] = (
    "currency_iso.yaml",
    "currency_non_iso.yaml",
    "currency_backwards_compatible.yaml",
)

_active_table: CurrencyTable | None = None
_active_lock = threading.Lock()


def seed_source_for(seed_dir: Path | None = None) -> YamlSeedSource:
    """YAML seed source over the standard seed files in *seed_dir*."""
    directory = seed_dir or DEFAULT_SEED_DIR
    return YamlSeedSource((directory / name for name in SEED_FILES), name=f"yaml:{directory.name}")


def build_table(seed_dir: Path | None = None) -> CurrencyTable:
    """
    Build a fresh table from a seed directory.

    Postconditions:
        - A ``CURRENCY_SEED_TRACE`` log entry has been emitted; its checksum
          covers the bags the table was built from (the files are read once).
    """
    source = seed_source_for(seed_dir)
    table = CurrencyTable(source)

    _logger.info(
        "CURRENCY_SEED_TRACE",
        extra={
            "trace_type": "CURRENCY_SEED_TRACE",
            "seed_files": [str(p) for p in source.paths],
            "currency_count": len(table),
            "checksum": source.last_checksum,
        },
    )
    return table


def get_active_table(seed_dir: Path | None = None) -> CurrencyTable:
    """The ONLY public entrypoint for the process-wide currency table.

    Contract:
        The first call builds the table from *seed_dir* (default: the
        bundled ``seeds/`` directory).  Later calls return the same instance
        and ignore *seed_dir*.

    Non-goals:
        - Does NOT reload seed files on later calls; call ``reset()`` on the
          returned table to discard runtime changes.
    """
    global _active_table
    if _active_table is not None:
        return _active_table
    with _active_lock:
        if _active_table is None:
            _active_table = build_table(seed_dir)
        return _active_table


def reset_active_table() -> None:
    """Drop the process-wide table. FOR TESTING ONLY."""
    global _active_table
    with _active_lock:
        _active_table = None


__all__ = [
    "DEFAULT_SEED_DIR",
    "SEED_FILES",
    "build_table",
    "get_active_table",
    "reset_active_table",
    "seed_source_for",
]

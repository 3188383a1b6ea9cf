"""
Seed Loader (``currency_config.loader``).

Responsibility
--------------
Loads YAML seed files and turns them into the ordered attribute bags a
``CurrencyTable`` is built from.  Services should not call this directly;
the runtime entry point is ``currency_config.get_active_table()``.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on
``currency_kernel`` for the seed protocol and error types; the kernel never
imports from here.

File format
-----------
Each file is a YAML mapping of currency id to attribute bag::

    usd:
      priority: 1
      iso_code: USD
      iso_numeric: "840"
      ...

Bags without an explicit ``id`` get the mapping key.  Files are read in
the order given and bags are yielded in file order.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Top level not a mapping, or an entry not a mapping  -> ``SeedSourceError``.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import yaml

from currency_kernel.exceptions import SeedSourceError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Postconditions:
        - Returns a ``dict`` (empty if the YAML is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        SeedSourceError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SeedSourceError(str(path), f"top level must be a mapping, got {type(data).__name__}")
    return data


def parse_seed_entries(data: dict[str, Any], source: str) -> list[dict[str, Any]]:
    """Turn a ``{id: bag}`` mapping into attribute bags, id filled in."""
    bags: list[dict[str, Any]] = []
    for key, entry in data.items():
        if not isinstance(entry, dict):
            raise SeedSourceError(source, f"entry {key!r} must be a mapping, got {type(entry).__name__}")
        bag = dict(entry)
        bag.setdefault("id", str(key))
        bags.append(bag)
    return bags


def compute_checksum(data: Any) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


class YamlSeedSource:
    """
    Seed source over one or more YAML files.

    Contract:
        ``load()`` re-reads the files every call, so a table reset picks up
        the files as they are on disk at that moment.
    """

    def __init__(self, paths: Iterable[Path], name: str = "yaml") -> None:
        self.paths: Sequence[Path] = tuple(Path(p) for p in paths)
        self.name = name
        self.last_checksum: str | None = None

    def load(self) -> list[dict[str, Any]]:
        """Parse every file; ``last_checksum`` then describes exactly these bags."""
        bags: list[dict[str, Any]] = []
        for path in self.paths:
            bags.extend(parse_seed_entries(load_yaml_file(path), str(path)))
        self.last_checksum = compute_checksum(bags)
        return bags

    def checksum(self) -> str:
        """Checksum of the bags the files currently produce."""
        return compute_checksum(self.load())

    def __repr__(self) -> str:
        return f"YamlSeedSource(name={self.name!r}, files={[p.name for p in self.paths]})"

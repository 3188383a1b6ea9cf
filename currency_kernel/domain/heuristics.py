"""
Heuristics -- Advisory classification of currency handles.

Responsibility:
    Best-effort rules layered over already-resolved records: ISO compliance
    partitioning, symbol grouping, and spotting currencies mentioned in free
    text.  Results are hints for UI and import tooling, never inputs to
    registry correctness.

Architecture position:
    Kernel > Domain -- stateless functions over CurrencyHandle, zero I/O.
    Never mutates a CurrencyTable.

Failure modes:
    (none -- a handle whose currency was unregistered mid-scan is skipped
    and logged at DEBUG)
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from currency_kernel.domain.currency_handle import CurrencyHandle
from currency_kernel.domain.currency_record import CurrencyRecord
from currency_kernel.exceptions import UnknownCurrencyError
from currency_kernel.logging_config import get_logger

logger = get_logger("domain.heuristics")

_ISO_ALPHA = re.compile(r"[A-Z]{3}")
_ISO_NUMERIC = re.compile(r"[0-9]{3}")
_WORD = re.compile(r"(?<![A-Za-z])[A-Za-z]{3}(?![A-Za-z])")


def _resolved(handles: Iterable[CurrencyHandle]) -> Iterator[tuple[CurrencyHandle, CurrencyRecord]]:
    for handle in handles:
        try:
            yield handle, handle.record
        except UnknownCurrencyError:
            logger.debug("heuristics_skipped_stale_handle", extra={"currency_id": handle.id})


def partition_by_iso(
    handles: Iterable[CurrencyHandle],
) -> tuple[list[CurrencyHandle], list[CurrencyHandle]]:
    """Split into (ISO currencies, custom currencies), input order kept."""
    iso: list[CurrencyHandle] = []
    custom: list[CurrencyHandle] = []
    for handle, record in _resolved(handles):
        (iso if record.iso_code is not None else custom).append(handle)
    return iso, custom


def is_likely_iso_compliant(handle: CurrencyHandle) -> bool:
    """
    Stricter than ``handle.is_iso``: the code must look like a real ISO 4217
    entry (three uppercase letters matching the id, three digit numeric code).
    """
    resolved = next(_resolved([handle]), None)
    if resolved is None:
        return False
    record = resolved[1]
    if record.iso_code is None or not _ISO_ALPHA.fullmatch(record.iso_code):
        return False
    if record.iso_code.lower() != record.id:
        return False
    return record.iso_numeric is not None and bool(_ISO_NUMERIC.fullmatch(record.iso_numeric))


def group_by_symbol(handles: Iterable[CurrencyHandle]) -> dict[str, list[CurrencyHandle]]:
    """Map each display symbol to the currencies using it."""
    groups: dict[str, list[CurrencyHandle]] = {}
    for handle, record in _resolved(handles):
        if record.symbol:
            groups.setdefault(record.symbol, []).append(handle)
    return groups


def ambiguous_symbols(handles: Iterable[CurrencyHandle]) -> dict[str, list[CurrencyHandle]]:
    """Symbols shared by more than one currency ("$", "kr", ...)."""
    return {
        symbol: members
        for symbol, members in group_by_symbol(handles).items()
        if len(members) > 1
    }


def analyze(text: str, handles: Iterable[CurrencyHandle]) -> list[CurrencyHandle]:
    """
    Currencies that *text* plausibly refers to.

    A currency matches when its ISO code appears as a standalone word
    (case-insensitive), or when its symbol, disambiguation symbol or an
    alternate symbol appears anywhere.  Results are sorted by priority;
    ties keep input order.
    """
    if not text:
        return []
    words = {w.upper() for w in _WORD.findall(text)}

    matches: list[tuple[CurrencyHandle, CurrencyRecord]] = []
    for handle, record in _resolved(handles):
        if record.iso_code is not None and record.iso_code in words:
            matches.append((handle, record))
            continue
        markers = [record.symbol, record.disambiguate_symbol, *record.alternate_symbols]
        if any(marker and marker in text for marker in markers):
            matches.append((handle, record))

    logger.debug("heuristics_analyzed", extra={"match_count": len(matches)})
    matches.sort(key=lambda pair: _priority_key(pair[1]))
    return [handle for handle, _ in matches]


def _priority_key(record: CurrencyRecord) -> tuple:
    return (1, 0) if record.priority is None else (0, record.priority)

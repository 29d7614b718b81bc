"""Duplicate filter over the identifier column of the lead table."""

from __future__ import annotations

from collections.abc import Iterable, Sequence


def is_duplicate(unique_id: str, seen: set[str]) -> bool:
    return unique_id in seen


def seen_identifiers(
    column: Iterable[Sequence[str]],
    header_label: str | None = None,
) -> set[str]:
    """Build the seen set from a ``values.get`` column read.

    Sheets returns one list per row and omits trailing empty cells, so a
    blank row comes back as ``[]``.  The header label and blanks are
    skipped.
    """
    seen: set[str] = set()
    for row in column:
        if not row:
            continue
        value = str(row[0]).strip()
        if not value or value == header_label:
            continue
        seen.add(value)
    return seen

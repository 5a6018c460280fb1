"""Search box filtering.

Filtering never removes drawers from the grid; it only decides which cells
are highlighted and which are dimmed.
"""

from __future__ import annotations

from typing import Iterable

from .drawer import Drawer


def normalize_query(query: str | None) -> str:
    return (query or "").strip().casefold()


def matches(record: Drawer, query: str | None) -> bool:
    """Return ``True`` when ``record`` should stay highlighted for ``query``.

    An empty query matches everything.  Otherwise the query is looked up as a
    case-insensitive substring of the name, the title and every keyword.
    """

    needle = normalize_query(query)
    if not needle:
        return True
    haystack = [record.name or "", record.title, *record.keywords]
    return any(needle in value.casefold() for value in haystack)


def matching_ids(records: Iterable[Drawer], query: str | None) -> list[str]:
    return [record.id for record in records if matches(record, query)]


def visibility(records: Iterable[Drawer], query: str | None) -> dict[str, bool]:
    """Map every drawer id to whether it matches ``query``."""

    return {record.id: matches(record, query) for record in records}

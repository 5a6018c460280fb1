"""Drawer layout engine.

The cabinet is a fixed grid and every column of every row belongs to exactly
one drawer.  Resizing a drawer therefore always touches its right-hand
neighbours: growing absorbs the columns that follow it and shrinking hands the
freed columns back as fresh default drawers.  :func:`resize_row` implements
that transition for a single row and :class:`CabinetLayout` applies it to the
whole cabinet.

All functions here are pure.  A request that cannot be honoured never raises;
it yields a :class:`ResizeResult` with ``outcome == REJECTED`` and the input
records unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Mapping, Optional, Sequence

from .coordinates import (
    DrawerSize,
    InvalidCoordinateError,
    Section,
    default_size_for,
    format_cell,
    max_column_for_section,
    parse_drawer_id,
    parse_size,
    section_columns,
    section_of,
    span_for,
)
from .drawer import Drawer
from .layout_config import COLUMN_COUNT, ROW_LABELS

logger = logging.getLogger(__name__)


class LayoutInvariantError(ValueError):
    """Raised when a set of drawers does not tile the cabinet exactly."""


class ResizeRejectedError(ValueError):
    """Raised by :meth:`ResizeResult.raise_for_rejection`."""

    def __init__(self, drawer_id: str, reason: str) -> None:
        super().__init__(f"Cannot resize {drawer_id}: {reason}")
        self.drawer_id = drawer_id
        self.reason = reason


class ResizeOutcome(str, Enum):
    APPLIED = "APPLIED"
    UNCHANGED = "UNCHANGED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class ResizeResult:
    """Outcome of a single resize request for one row."""

    drawer_id: str
    outcome: ResizeOutcome
    records: tuple[Drawer, ...]
    reason: str = ""
    removed: tuple[str, ...] = ()
    created: tuple[str, ...] = ()

    @property
    def applied(self) -> bool:
        return self.outcome is ResizeOutcome.APPLIED

    @property
    def rejected(self) -> bool:
        return self.outcome is ResizeOutcome.REJECTED

    def raise_for_rejection(self) -> "ResizeResult":
        if self.rejected:
            raise ResizeRejectedError(self.drawer_id, self.reason)
        return self


def default_drawer(row: str, column: int) -> Drawer:
    """Return an unnamed single-column drawer for ``row``/``column``."""

    return Drawer(row, column, default_size_for(section_of(column)))


def default_row(row: str) -> tuple[Drawer, ...]:
    return tuple(default_drawer(row, column) for column in range(1, COLUMN_COUNT + 1))


def check_row_coverage(row: str, records: Iterable[Drawer]) -> None:
    """Raise :class:`LayoutInvariantError` unless ``records`` tile ``row``."""

    owners: dict[int, str] = {}
    for record in records:
        if record.row != row:
            raise LayoutInvariantError(f"Drawer {record.id} does not belong to row {row}")
        for column in record.positions:
            if column in owners:
                raise LayoutInvariantError(
                    f"Column {format_cell(row, column)} is covered by both "
                    f"{owners[column]} and {record.id}"
                )
            owners[column] = record.id
    missing = [format_cell(row, col) for col in range(1, COLUMN_COUNT + 1) if col not in owners]
    if missing:
        raise LayoutInvariantError(f"Uncovered cells: {', '.join(missing)}")


def _rejected(drawer_id: str, records: tuple[Drawer, ...], reason: str) -> ResizeResult:
    logger.debug("Rejected resize of %s: %s", drawer_id, reason)
    return ResizeResult(drawer_id, ResizeOutcome.REJECTED, records, reason=reason)


def resize_row(
    records: Sequence[Drawer], drawer_id: str, new_size: DrawerSize | str
) -> ResizeResult:
    """Resize ``drawer_id`` within its row.

    ``records`` must be the complete, valid set of drawers of a single row.
    The returned records are ordered by starting column.
    """

    current = tuple(sorted(records))
    try:
        size = parse_size(new_size)
    except InvalidCoordinateError as exc:
        return _rejected(drawer_id, current, str(exc))

    drawer = next((record for record in current if record.id == drawer_id), None)
    if drawer is None:
        return _rejected(drawer_id, current, "drawer not found in row")
    if drawer.size is size:
        return ResizeResult(drawer_id, ResizeOutcome.UNCHANGED, current)

    section = drawer.section
    start = drawer.start_column
    old_span = len(drawer.positions)
    new_span = span_for(section, size)
    new_end = start + new_span - 1
    if new_end > max_column_for_section(section):
        return _rejected(
            drawer_id,
            current,
            f"{size.value} needs columns {start}-{new_end} but the "
            f"{section.value.lower()} section ends at column {max_column_for_section(section)}",
        )

    resized = drawer.with_size(size)
    removed: list[str] = []
    created: list[Drawer] = []

    if new_span > old_span:
        # Absorb everything overlapping the newly claimed columns and give back
        # whatever those neighbours covered beyond the new end.
        claimed = range(start + old_span, new_end + 1)
        for record in current:
            if record is drawer or not any(col in claimed for col in record.positions):
                continue
            removed.append(record.id)
            for column in record.positions:
                if column > new_end:
                    created.append(default_drawer(drawer.row, column))
    elif new_span < old_span:
        for column in range(new_end + 1, start + old_span):
            created.append(default_drawer(drawer.row, column))

    kept = [record for record in current if record is not drawer and record.id not in removed]
    updated = tuple(sorted([*kept, resized, *created]))
    logger.debug(
        "Resized %s %s -> %s (removed=%s, created=%s)",
        drawer_id,
        drawer.size.value,
        size.value,
        removed,
        [record.id for record in created],
    )
    return ResizeResult(
        drawer_id,
        ResizeOutcome.APPLIED,
        updated,
        removed=tuple(removed),
        created=tuple(record.id for record in created),
    )


def repair_row(row: str, records: Iterable[Drawer]) -> tuple[Drawer, ...]:
    """Return a valid tiling of ``row`` built from ``records``.

    Records are taken in column order; a record overlapping an earlier one is
    dropped and any column left uncovered receives a default drawer.
    """

    taken: set[int] = set()
    kept: list[Drawer] = []
    for record in sorted(records):
        if record.row != row:
            continue
        if taken.intersection(record.positions):
            logger.warning("Dropping drawer %s overlapping another drawer", record.id)
            continue
        kept.append(record)
        taken.update(record.positions)
    for column in range(1, COLUMN_COUNT + 1):
        if column not in taken:
            logger.warning("Filling uncovered cell %s with a default drawer", format_cell(row, column))
            kept.append(default_drawer(row, column))
    return tuple(sorted(kept))


class CabinetLayout:
    """Immutable snapshot of every drawer in the cabinet."""

    def __init__(self, rows: Mapping[str, Sequence[Drawer]]) -> None:
        self._rows: dict[str, tuple[Drawer, ...]] = {
            row: tuple(sorted(rows.get(row, ()))) for row in ROW_LABELS
        }
        self._index: dict[str, Drawer] = {
            record.id: record for records in self._rows.values() for record in records
        }

    @classmethod
    def default(cls) -> "CabinetLayout":
        """Left columns as ``SMALL`` drawers, right columns as ``MEDIUM``."""

        return cls({row: default_row(row) for row in ROW_LABELS})

    @classmethod
    def from_records(cls, records: Iterable[Drawer], *, repair: bool = True) -> "CabinetLayout":
        """Group ``records`` by row.

        With ``repair`` overlapping records are dropped and gaps are filled
        with default drawers; without it an invalid set raises
        :class:`LayoutInvariantError`.
        """

        grouped: dict[str, list[Drawer]] = {row: [] for row in ROW_LABELS}
        for record in records:
            grouped[record.row].append(record)
        if repair:
            return cls({row: repair_row(row, items) for row, items in grouped.items()})
        layout = cls(grouped)
        layout.check_coverage()
        return layout

    def __iter__(self) -> Iterator[Drawer]:
        for row in ROW_LABELS:
            yield from self._rows[row]

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, drawer_id: object) -> bool:
        return drawer_id in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CabinetLayout):
            return NotImplemented
        return [r.to_dict() for r in self] == [r.to_dict() for r in other]

    def records(self) -> list[Drawer]:
        return list(self)

    def rows(self) -> dict[str, tuple[Drawer, ...]]:
        return dict(self._rows)

    def row(self, row: str) -> tuple[Drawer, ...]:
        try:
            return self._rows[row]
        except KeyError:
            raise InvalidCoordinateError(f"Unknown row: {row!r}") from None

    def get(self, drawer_id: str) -> Optional[Drawer]:
        return self._index.get(drawer_id)

    def owner_of(self, row: str, column: int) -> Drawer:
        """Return the drawer covering ``row``/``column``."""

        for record in self.row(row):
            if record.covers(column):
                return record
        raise LayoutInvariantError(f"Cell {format_cell(row, column)} is not covered")

    def section(self, row: str, section: Section) -> tuple[Drawer, ...]:
        columns = section_columns(section)
        return tuple(record for record in self.row(row) if record.start_column in columns)

    def check_coverage(self) -> None:
        for row in ROW_LABELS:
            check_row_coverage(row, self._rows[row])

    def with_row(self, row: str, records: Sequence[Drawer]) -> "CabinetLayout":
        rows = dict(self._rows)
        rows[row] = tuple(records)
        return CabinetLayout(rows)

    def resize(
        self, drawer_id: str, new_size: DrawerSize | str
    ) -> tuple["CabinetLayout", ResizeResult]:
        """Return the layout after resizing ``drawer_id`` and the row result."""

        try:
            row, _ = parse_drawer_id(drawer_id)
        except InvalidCoordinateError as exc:
            return self, ResizeResult(drawer_id, ResizeOutcome.REJECTED, (), reason=str(exc))
        result = resize_row(self._rows[row], drawer_id, new_size)
        if not result.applied:
            return self, result
        return self.with_row(row, result.records), result

    def update_details(
        self,
        drawer_id: str,
        name: Optional[str] = None,
        keywords: Iterable[str] | str | None = None,
    ) -> "CabinetLayout":
        """Return the layout with ``drawer_id`` renamed and re-tagged."""

        drawer = self.get(drawer_id)
        if drawer is None:
            raise KeyError(drawer_id)
        updated = drawer.with_details(name, keywords)
        records = [updated if record is drawer else record for record in self._rows[drawer.row]]
        return self.with_row(drawer.row, records)

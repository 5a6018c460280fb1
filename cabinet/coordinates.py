"""Addressing helpers for the cabinet grid.

Drawers are identified by their row letter followed by the number of the
first column they cover, e.g. ``"A1"`` or ``"B12"``.  Individual cells are
displayed with a zero padded column (``"A01"``).
"""

from __future__ import annotations

import re
from enum import Enum

from .layout_config import (
    LEFT_DEFAULT_SIZE,
    LEFT_FIRST_COLUMN,
    LEFT_LAST_COLUMN,
    LEFT_SPANS,
    RIGHT_DEFAULT_SIZE,
    RIGHT_FIRST_COLUMN,
    RIGHT_LAST_COLUMN,
    RIGHT_SPANS,
    ROW_LABELS,
)

DRAWER_ID_PATTERN = re.compile(r"([A-Z])([1-9]\d?)")


class InvalidCoordinateError(ValueError):
    """Raised for drawer ids, rows, columns or sizes outside the cabinet."""


class Section(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class DrawerSize(str, Enum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


_SPANS: dict[Section, dict[str, int]] = {
    Section.LEFT: LEFT_SPANS,
    Section.RIGHT: RIGHT_SPANS,
}


def parse_size(value: DrawerSize | str) -> DrawerSize:
    """Return ``value`` as a :class:`DrawerSize`.

    Names are matched case-insensitively so ``"medium"`` is accepted.
    """

    if isinstance(value, DrawerSize):
        return value
    try:
        return DrawerSize(str(value or "").strip().upper())
    except ValueError:
        raise InvalidCoordinateError(f"Unknown drawer size: {value!r}") from None


def validate_row(row: str) -> str:
    if row not in ROW_LABELS:
        raise InvalidCoordinateError(f"Unknown row: {row!r}")
    return row


def validate_column(column: int) -> int:
    if isinstance(column, bool) or not isinstance(column, int):
        raise InvalidCoordinateError(f"Column must be an integer: {column!r}")
    if not LEFT_FIRST_COLUMN <= column <= RIGHT_LAST_COLUMN:
        raise InvalidCoordinateError(f"Column out of range: {column}")
    return column


def parse_drawer_id(drawer_id: str) -> tuple[str, int]:
    """Split ``drawer_id`` into ``(row, start_column)``.

    Raises :class:`InvalidCoordinateError` when the id is malformed or points
    outside the cabinet.  Leading zeros are rejected because ids are never
    padded.
    """

    match = DRAWER_ID_PATTERN.fullmatch(str(drawer_id or ""))
    if not match:
        raise InvalidCoordinateError(f"Malformed drawer id: {drawer_id!r}")
    row = validate_row(match.group(1))
    column = validate_column(int(match.group(2)))
    return row, column


def row_of(drawer_id: str) -> str:
    return parse_drawer_id(drawer_id)[0]


def start_column_of(drawer_id: str) -> int:
    return parse_drawer_id(drawer_id)[1]


def format_drawer_id(row: str, column: int) -> str:
    return f"{validate_row(row)}{validate_column(column)}"


def format_cell(row: str, column: int) -> str:
    """Return the display label of a single cell, e.g. ``"A01"``."""

    return f"{validate_row(row)}{validate_column(column):02d}"


def is_right_section(column: int) -> bool:
    return validate_column(column) >= RIGHT_FIRST_COLUMN


def section_of(column: int) -> Section:
    return Section.RIGHT if is_right_section(column) else Section.LEFT


def min_column_for_section(section: Section) -> int:
    return RIGHT_FIRST_COLUMN if Section(section) is Section.RIGHT else LEFT_FIRST_COLUMN


def max_column_for_section(section: Section) -> int:
    return RIGHT_LAST_COLUMN if Section(section) is Section.RIGHT else LEFT_LAST_COLUMN


def section_columns(section: Section) -> range:
    return range(min_column_for_section(section), max_column_for_section(section) + 1)


def span_for(section: Section, size: DrawerSize | str) -> int:
    """Return the number of columns a drawer of ``size`` covers in ``section``."""

    return _SPANS[Section(section)][parse_size(size).value]


def default_size_for(section: Section) -> DrawerSize:
    if Section(section) is Section.RIGHT:
        return DrawerSize(RIGHT_DEFAULT_SIZE)
    return DrawerSize(LEFT_DEFAULT_SIZE)

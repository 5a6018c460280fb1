"""Drawer records.

A :class:`Drawer` covers one or more adjacent columns of a single row.  Only
the row, starting column and size are chosen by callers; the id, title,
covered positions, section flag and rendering spacing are always derived
from them so the record cannot drift out of sync with the grid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .coordinates import (
    DrawerSize,
    Section,
    format_cell,
    format_drawer_id,
    max_column_for_section,
    parse_drawer_id,
    parse_size,
    section_of,
    span_for,
    validate_column,
    validate_row,
)
from .layout_config import LEFT_MEDIUM_SPACING, RIGHT_SMALL_SPACING


class InvalidDrawerError(ValueError):
    """Raised when a drawer would not fit inside its section."""


def spacing_for(is_right_section: bool, size: DrawerSize | str) -> int:
    """Return the trailing pixel gap rendered after a drawer cell."""

    size = parse_size(size)
    if is_right_section and size is DrawerSize.SMALL:
        return RIGHT_SMALL_SPACING
    if not is_right_section and size is DrawerSize.MEDIUM:
        return LEFT_MEDIUM_SPACING
    return 0


def normalize_keywords(keywords: Iterable[str] | str | None) -> tuple[str, ...]:
    """Return trimmed, de-duplicated keywords in their original order.

    A plain string is treated as a comma separated list, which is how the
    edit dialog collects them.
    """

    if keywords is None:
        return ()
    if isinstance(keywords, str):
        keywords = keywords.split(",")
    result: list[str] = []
    for keyword in keywords:
        value = str(keyword or "").strip()
        if value and value not in result:
            result.append(value)
    return tuple(result)


@dataclass(frozen=True, eq=False)
class Drawer:
    """A named region of one cabinet row."""

    row: str
    start_column: int
    size: DrawerSize
    name: Optional[str] = None
    keywords: tuple[str, ...] = ()

    id: str = field(init=False)
    title: str = field(init=False)
    positions: tuple[int, ...] = field(init=False)
    is_right_section: bool = field(init=False)
    spacing: int = field(init=False)

    def __post_init__(self) -> None:
        row = validate_row(self.row)
        start = validate_column(self.start_column)
        size = parse_size(self.size)
        section = section_of(start)
        end = start + span_for(section, size) - 1
        if end > max_column_for_section(section):
            raise InvalidDrawerError(
                f"{size.value} drawer at {row}{start} would extend past column "
                f"{max_column_for_section(section)}"
            )
        positions = tuple(range(start, end + 1))
        name = self.name if self.name and self.name.strip() else None

        set_ = object.__setattr__
        set_(self, "size", size)
        set_(self, "name", name)
        set_(self, "keywords", normalize_keywords(self.keywords))
        set_(self, "id", format_drawer_id(row, start))
        set_(self, "title", ",".join(format_cell(row, col) for col in positions))
        set_(self, "positions", positions)
        set_(self, "is_right_section", section is Section.RIGHT)
        set_(self, "spacing", spacing_for(section is Section.RIGHT, size))

    @classmethod
    def create(
        cls,
        row: str,
        start_column: int,
        size: DrawerSize | str,
        section: Section | None = None,
        *,
        name: Optional[str] = None,
        keywords: Iterable[str] | str | None = (),
    ) -> "Drawer":
        """Build a drawer, optionally asserting which section it belongs to."""

        if section is not None and section_of(validate_column(start_column)) is not Section(section):
            raise InvalidDrawerError(
                f"Column {start_column} is not part of the {Section(section).value} section"
            )
        return cls(row, start_column, parse_size(size), name, normalize_keywords(keywords))

    @classmethod
    def from_id(
        cls,
        drawer_id: str,
        size: DrawerSize | str,
        *,
        name: Optional[str] = None,
        keywords: Iterable[str] | str | None = (),
    ) -> "Drawer":
        row, column = parse_drawer_id(drawer_id)
        return cls.create(row, column, size, name=name, keywords=keywords)

    @property
    def section(self) -> Section:
        return Section.RIGHT if self.is_right_section else Section.LEFT

    @property
    def end_column(self) -> int:
        return self.positions[-1]

    @property
    def display_text(self) -> str:
        """Text shown on the cell and printed on the label."""

        return self.name or self.title

    def covers(self, column: int) -> bool:
        return self.start_column <= column <= self.end_column

    def with_size(self, size: DrawerSize | str) -> "Drawer":
        return Drawer(self.row, self.start_column, parse_size(size), self.name, self.keywords)

    def with_details(
        self,
        name: Optional[str] = None,
        keywords: Iterable[str] | str | None = None,
    ) -> "Drawer":
        """Return a copy with a new name and keywords.

        ``None`` keeps the current keywords; pass an empty list to clear them.
        """

        if keywords is None:
            keywords = self.keywords
        return Drawer(self.row, self.start_column, self.size, name, normalize_keywords(keywords))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "size": self.size.value,
            "title": self.title,
            "name": self.name,
            "positions": list(self.positions),
            "is_right_section": self.is_right_section,
            "keywords": list(self.keywords),
            "spacing": self.spacing,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Drawer):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: "Drawer") -> bool:
        return (self.row, self.start_column) < (other.row, other.start_column)

    def __repr__(self) -> str:
        return f"Drawer({self.id!r}, {self.size.value}, positions={list(self.positions)})"

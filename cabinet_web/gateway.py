"""Persistence gateway for the drawer layout.

The layout is always written as a whole: :meth:`DrawerGateway.replace_all`
deletes every stored drawer and inserts the new set inside one transaction,
so a failure half way through leaves the previous layout in place.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
from typing import Any, Iterable, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from cabinet.drawer import Drawer

from . import models
from .database import session_scope

logger = logging.getLogger(__name__)

PRINTER_CONFIG_ID = 1
PRINTER_CONFIG_FIELDS = ("name", "host", "port", "queue_name", "virtual_printing")


class PersistenceError(RuntimeError):
    """Raised when the store cannot be read or written."""


class MalformedDrawerError(ValueError):
    """Raised for a stored drawer row that cannot be turned into a record."""


def _parse_json_list(raw: Any, field: str) -> list:
    if isinstance(raw, list):
        return raw
    try:
        value = json.loads(raw or "[]")
    except (TypeError, ValueError) as exc:
        raise MalformedDrawerError(f"{field} is not valid JSON: {raw!r}") from exc
    if not isinstance(value, list):
        raise MalformedDrawerError(f"{field} must be a JSON array: {raw!r}")
    return value


def drawer_from_fields(
    drawer_id: str,
    size: str,
    positions: Any,
    *,
    name: Optional[str] = None,
    keywords: Any = "[]",
) -> Drawer:
    """Rebuild a :class:`Drawer` from its stored or transmitted fields.

    ``positions`` and ``keywords`` may be JSON strings or lists.  The stored
    positions must agree with what the id and size imply; the title, section
    flag and spacing are always recomputed.
    """

    position_values = _parse_json_list(positions, "positions")
    keyword_values = _parse_json_list(keywords, "keywords")
    if not all(isinstance(value, int) and not isinstance(value, bool) for value in position_values):
        raise MalformedDrawerError(f"positions must be integers: {position_values!r}")
    if not all(isinstance(value, str) for value in keyword_values):
        raise MalformedDrawerError(f"keywords must be strings: {keyword_values!r}")
    try:
        drawer = Drawer.from_id(drawer_id, size, name=name, keywords=keyword_values)
    except ValueError as exc:
        raise MalformedDrawerError(str(exc)) from exc
    if list(drawer.positions) != position_values:
        raise MalformedDrawerError(
            f"positions {position_values!r} do not match {drawer.size.value} drawer {drawer.id}"
        )
    return drawer


def drawer_from_row(row: models.DrawerRow) -> Drawer:
    return drawer_from_fields(
        row.id, row.size, row.positions, name=row.name, keywords=row.keywords
    )


def drawer_to_row(drawer: Drawer, now: dt.datetime | None = None) -> models.DrawerRow:
    now = now or dt.datetime.now(dt.timezone.utc)
    return models.DrawerRow(
        id=drawer.id,
        size=drawer.size.value,
        title=drawer.title,
        name=drawer.name,
        positions=json.dumps(list(drawer.positions)),
        is_right_section=drawer.is_right_section,
        keywords=json.dumps(list(drawer.keywords)),
        spacing=drawer.spacing,
        created_at=now,
        updated_at=now,
    )


class DrawerGateway:
    """Load and replace the stored drawer layout."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def load_all(self) -> list[Drawer]:
        """Return every stored drawer ordered by row and column.

        Rows that cannot be parsed are logged and skipped so a single corrupt
        entry does not prevent the rest of the layout from loading.
        """

        try:
            with session_scope(self.engine) as session:
                rows = session.exec(select(models.DrawerRow)).all()
                records: list[Drawer] = []
                for row in rows:
                    try:
                        records.append(drawer_from_row(row))
                    except MalformedDrawerError as exc:
                        logger.warning("Skipping malformed drawer %r: %s", row.id, exc)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to load drawers: {exc}") from exc
        return sorted(records)

    def replace_all(self, records: Iterable[Drawer]) -> int:
        """Atomically replace the stored layout with ``records``.

        Returns the number of stored drawers.
        """

        now = dt.datetime.now(dt.timezone.utc)
        rows = [drawer_to_row(record, now) for record in records]
        try:
            with session_scope(self.engine) as session:
                for existing in session.exec(select(models.DrawerRow)).all():
                    session.delete(existing)
                session.flush()
                session.add_all(rows)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to replace drawers: {exc}") from exc
        logger.info("Stored %s drawers", len(rows))
        return len(rows)

    def count(self) -> int:
        try:
            with session_scope(self.engine) as session:
                return len(session.exec(select(models.DrawerRow.id)).all())
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to count drawers: {exc}") from exc

    def get_printer_config(self) -> dict[str, Any]:
        """Return the printer settings, creating the default row if needed."""

        try:
            with session_scope(self.engine) as session:
                config = session.get(models.PrinterConfig, PRINTER_CONFIG_ID)
                if config is None:
                    config = models.PrinterConfig(id=PRINTER_CONFIG_ID)
                    session.add(config)
                    session.flush()
                return {field: getattr(config, field) for field in PRINTER_CONFIG_FIELDS}
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to load printer config: {exc}") from exc

    def save_printer_config(self, **changes: Any) -> dict[str, Any]:
        """Update the given printer fields; ``None`` values are ignored."""

        unknown = set(changes) - set(PRINTER_CONFIG_FIELDS)
        if unknown:
            raise ValueError(f"Unknown printer settings: {', '.join(sorted(unknown))}")
        try:
            with session_scope(self.engine) as session:
                config = session.get(models.PrinterConfig, PRINTER_CONFIG_ID)
                if config is None:
                    config = models.PrinterConfig(id=PRINTER_CONFIG_ID)
                for field, value in changes.items():
                    if value is not None:
                        setattr(config, field, value)
                config.updated_at = dt.datetime.now(dt.timezone.utc)
                session.add(config)
                session.flush()
                return {field: getattr(config, field) for field in PRINTER_CONFIG_FIELDS}
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to save printer config: {exc}") from exc

"""Database models for the web API."""

import datetime as dt
from typing import Optional

from sqlmodel import Field, SQLModel


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class DrawerRow(SQLModel, table=True):
    """Stored drawer; ``positions`` and ``keywords`` hold JSON arrays."""

    __tablename__ = "drawer"

    id: str = Field(primary_key=True)
    size: str = Field(index=True)
    title: str = Field(index=True)
    name: Optional[str] = Field(default=None)
    positions: str = Field(default="[]")
    is_right_section: bool = Field(default=False, index=True)
    keywords: str = Field(default="[]")
    spacing: int = Field(default=0, ge=0)
    created_at: dt.datetime = Field(default_factory=_utcnow)
    updated_at: dt.datetime = Field(default_factory=_utcnow)


class PrinterConfig(SQLModel, table=True):
    """Label printer settings; the table only ever holds the row ``id == 1``."""

    id: Optional[int] = Field(default=1, primary_key=True)
    name: str = Field(default="Default Printer")
    host: str = Field(default="localhost")
    port: int = Field(default=631, ge=1, le=65535)
    queue_name: str = Field(default="")
    virtual_printing: bool = Field(default=False)
    created_at: dt.datetime = Field(default_factory=_utcnow)
    updated_at: dt.datetime = Field(default_factory=_utcnow)

"""Pydantic/SQLModel schemas for the web API."""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Union

from sqlmodel import Field, SQLModel

from cabinet.drawer import Drawer


class DrawerRead(SQLModel):
    """Drawer as exchanged with the UI; list fields are JSON encoded strings."""

    id: str
    size: str
    title: str
    name: Optional[str] = None
    positions: str
    is_right_section: bool
    keywords: str
    spacing: int

    @classmethod
    def from_drawer(cls, drawer: Drawer) -> "DrawerRead":
        return cls(
            id=drawer.id,
            size=drawer.size.value,
            title=drawer.title,
            name=drawer.name,
            positions=json.dumps(list(drawer.positions)),
            is_right_section=drawer.is_right_section,
            keywords=json.dumps(list(drawer.keywords)),
            spacing=drawer.spacing,
        )


class DrawerWrite(SQLModel):
    """Drawer sent for a full replace.

    ``title``, ``is_right_section`` and ``spacing`` are accepted for
    compatibility but recomputed on the server.
    """

    id: str
    size: str
    title: Optional[str] = None
    name: Optional[str] = None
    positions: Union[str, List[int]]
    is_right_section: Optional[bool] = None
    keywords: Union[str, List[str]] = "[]"
    spacing: Optional[int] = None


class DrawerUpdate(SQLModel):
    name: Optional[str] = None
    keywords: Optional[Union[List[str], str]] = None


class ResizeRequest(SQLModel):
    size: str


class ResizeResponse(SQLModel):
    outcome: str
    drawer: DrawerRead
    removed: List[str] = Field(default_factory=list)
    created: List[str] = Field(default_factory=list)


class ReplaceResponse(SQLModel):
    success: bool = True
    count: int


class SearchResponse(SQLModel):
    query: str
    matches: List[str] = Field(default_factory=list)
    visibility: Dict[str, bool] = Field(default_factory=dict)


class FlushResponse(SQLModel):
    saved: bool
    pending: bool


class PrinterConfigRead(SQLModel):
    name: str
    host: str
    port: int
    queue_name: str
    virtual_printing: bool


class PrinterConfigUpdate(SQLModel):
    name: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    queue_name: Optional[str] = None
    virtual_printing: Optional[bool] = None


class PrintRequest(SQLModel):
    text: str


class PrintResponse(SQLModel):
    success: bool
    virtual: bool
    text: str

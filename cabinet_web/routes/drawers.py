"""Drawer layout API routes."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from cabinet.coordinates import InvalidCoordinateError, parse_drawer_id
from cabinet.drawer import Drawer
from cabinet.layout import LayoutInvariantError, ResizeRejectedError
from cabinet.search import matching_ids

from .. import schemas
from ..gateway import DrawerGateway, MalformedDrawerError, PersistenceError, drawer_from_fields
from ..service import LayoutSession, get_gateway, get_layout_session
from .printer import send_label

router = APIRouter(prefix="/drawers", tags=["drawers"])


def _get_drawer(layout_session: LayoutSession, drawer_id: str) -> Drawer:
    try:
        parse_drawer_id(drawer_id)
    except InvalidCoordinateError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    drawer = layout_session.layout.get(drawer_id)
    if drawer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Drawer not found")
    return drawer


@router.get("", response_model=List[schemas.DrawerRead])
async def list_drawers(layout_session: LayoutSession = Depends(get_layout_session)):
    return [schemas.DrawerRead.from_drawer(drawer) for drawer in layout_session.layout]


@router.put("", response_model=schemas.ReplaceResponse)
async def replace_drawers(
    payload: List[schemas.DrawerWrite],
    layout_session: LayoutSession = Depends(get_layout_session),
):
    records: list[Drawer] = []
    seen: set[str] = set()
    for item in payload:
        if item.id in seen:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Duplicate drawer id {item.id}",
            )
        seen.add(item.id)
        try:
            records.append(
                drawer_from_fields(
                    item.id, item.size, item.positions, name=item.name, keywords=item.keywords
                )
            )
        except MalformedDrawerError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Invalid drawer {item.id}: {exc}",
            ) from exc
    try:
        count = await layout_session.replace(records)
    except LayoutInvariantError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return schemas.ReplaceResponse(success=True, count=count)


@router.get("/search", response_model=schemas.SearchResponse)
async def search_drawers(
    q: str = "",
    layout_session: LayoutSession = Depends(get_layout_session),
):
    return schemas.SearchResponse(
        query=q,
        matches=matching_ids(layout_session.layout, q),
        visibility=layout_session.search(q),
    )


@router.post("/flush", response_model=schemas.FlushResponse)
async def flush_drawers(layout_session: LayoutSession = Depends(get_layout_session)):
    try:
        await layout_session.flush()
    except PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Saving drawers failed: {exc}",
        ) from exc
    return schemas.FlushResponse(saved=True, pending=layout_session.save_pending)


@router.get("/{drawer_id}", response_model=schemas.DrawerRead)
async def read_drawer(
    drawer_id: str, layout_session: LayoutSession = Depends(get_layout_session)
):
    return schemas.DrawerRead.from_drawer(_get_drawer(layout_session, drawer_id))


@router.patch("/{drawer_id}", response_model=schemas.DrawerRead)
async def update_drawer(
    drawer_id: str,
    payload: schemas.DrawerUpdate,
    layout_session: LayoutSession = Depends(get_layout_session),
):
    drawer = _get_drawer(layout_session, drawer_id)
    fields = payload.model_dump(exclude_unset=True)
    name = fields.get("name", drawer.name)
    updated = await layout_session.update_details(drawer_id, name, fields.get("keywords"))
    return schemas.DrawerRead.from_drawer(updated)


@router.post("/{drawer_id}/resize", response_model=schemas.ResizeResponse)
async def resize_drawer(
    drawer_id: str,
    payload: schemas.ResizeRequest,
    layout_session: LayoutSession = Depends(get_layout_session),
):
    _get_drawer(layout_session, drawer_id)
    result = await layout_session.resize(drawer_id, payload.size)
    try:
        result.raise_for_rejection()
    except ResizeRejectedError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.reason) from exc
    return schemas.ResizeResponse(
        outcome=result.outcome.value,
        drawer=schemas.DrawerRead.from_drawer(layout_session.layout.get(drawer_id)),
        removed=list(result.removed),
        created=list(result.created),
    )


@router.post("/{drawer_id}/print", response_model=schemas.PrintResponse)
async def print_drawer_label(
    drawer_id: str,
    request: Request,
    layout_session: LayoutSession = Depends(get_layout_session),
    gateway: DrawerGateway = Depends(get_gateway),
):
    drawer = _get_drawer(layout_session, drawer_id)
    return await send_label(request, gateway, drawer.display_text)

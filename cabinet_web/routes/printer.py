"""Printer configuration and label printing routes."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from printer_client import PrinterClient, PrinterError

from .. import schemas
from ..gateway import DrawerGateway, PersistenceError
from ..service import get_gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["printer"])


def _print_label(gateway: DrawerGateway, text: str, timeout: float) -> dict:
    config = gateway.get_printer_config()
    client = PrinterClient.from_config(config, timeout=timeout)
    try:
        return client.print_text(text)
    finally:
        client.close()


async def send_label(request: Request, gateway: DrawerGateway, text: str) -> schemas.PrintResponse:
    """Print ``text`` with the stored printer settings.

    Configuration problems map to ``400`` and printer failures to ``502``.
    """

    timeout = request.app.state.settings.printer_timeout
    try:
        result = await asyncio.to_thread(_print_label, gateway, text, timeout)
    except PrinterError as exc:
        logger.warning("Printing %r failed: %s", text, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return schemas.PrintResponse(
        success=result["success"], virtual=result["virtual"], text=result["text"]
    )


@router.get("/printer", response_model=schemas.PrinterConfigRead)
def read_printer_config(gateway: DrawerGateway = Depends(get_gateway)):
    try:
        return gateway.get_printer_config()
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.put("/printer", response_model=schemas.PrinterConfigRead)
def update_printer_config(
    payload: schemas.PrinterConfigUpdate,
    gateway: DrawerGateway = Depends(get_gateway),
):
    changes = payload.model_dump(exclude_unset=True)
    for field in ("name", "host", "queue_name"):
        if isinstance(changes.get(field), str):
            changes[field] = changes[field].strip()
    try:
        return gateway.save_printer_config(**changes)
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.post("/print", response_model=schemas.PrintResponse)
async def print_text(
    payload: schemas.PrintRequest,
    request: Request,
    gateway: DrawerGateway = Depends(get_gateway),
):
    return await send_label(request, gateway, payload.text)

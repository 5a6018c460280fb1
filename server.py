"""FastAPI entry point for the drawer cabinet API."""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

load_dotenv(Path(__file__).resolve().with_name(".env"))

from cabinet_web.config import Settings
from cabinet_web.database import create_db_engine, init_db
from cabinet_web.gateway import DrawerGateway
from cabinet_web.routes import drawers, printer
from cabinet_web.service import LayoutSession

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject strict security headers for every HTTP response."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        return response


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its own engine, gateway and layout session."""

    settings = settings or Settings.from_env()

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_db_engine(settings.database_url)
        init_db(engine)
        gateway = DrawerGateway(engine)
        layout_session = LayoutSession(gateway, save_delay=settings.save_delay)
        await layout_session.load()
        app.state.gateway = gateway
        app.state.layout_session = layout_session
        try:
            yield
        finally:
            await layout_session.close()
            engine.dispose()
            logger.info("Drawer layout session closed")

    app = FastAPI(title="Drawer Cabinet", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(SecurityHeadersMiddleware)
    app.include_router(drawers.router)
    app.include_router(printer.router)
    return app


app = create_app()


def run() -> None:
    """Helper to run the development server."""

    import uvicorn

    settings = Settings.from_env()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    run()

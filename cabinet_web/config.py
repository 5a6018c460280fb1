"""Runtime settings for the cabinet web API.

Values come from ``CABINET_*`` environment variables, which ``server.py``
may populate from a ``.env`` file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./cabinet.db"
DEFAULT_SAVE_DELAY = 1.0
DEFAULT_PRINTER_TIMEOUT = 15.0


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    save_delay: float = DEFAULT_SAVE_DELAY
    printer_timeout: float = DEFAULT_PRINTER_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("CABINET_DATABASE_URL", "").strip() or DEFAULT_DATABASE_URL,
            save_delay=_float_env("CABINET_SAVE_DELAY", DEFAULT_SAVE_DELAY),
            printer_timeout=_float_env("CABINET_PRINTER_TIMEOUT", DEFAULT_PRINTER_TIMEOUT),
            log_level=os.getenv("CABINET_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )

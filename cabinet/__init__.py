from .coordinates import DrawerSize, InvalidCoordinateError, Section
from .drawer import Drawer, InvalidDrawerError
from .layout import (
    CabinetLayout,
    LayoutInvariantError,
    ResizeOutcome,
    ResizeRejectedError,
    ResizeResult,
    resize_row,
)
from .search import matches

__all__ = [
    "CabinetLayout",
    "Drawer",
    "DrawerSize",
    "InvalidCoordinateError",
    "InvalidDrawerError",
    "LayoutInvariantError",
    "ResizeOutcome",
    "ResizeRejectedError",
    "ResizeResult",
    "Section",
    "matches",
    "resize_row",
]

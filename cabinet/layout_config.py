"""Shared configuration for the drawer cabinet.

This module centralizes the cabinet geometry used by the layout engine, the
persistence layer and the web API.  Adjust the values here to match the
physical cabinet and all modules will pick up the changes automatically.
"""

from __future__ import annotations

# Rows -----------------------------------------------------------------------

# Rows are labelled with consecutive capital letters starting at ``A``.
ROW_COUNT = 12
ROW_LABELS: tuple[str, ...] = tuple(chr(ord("A") + i) for i in range(ROW_COUNT))

# Columns --------------------------------------------------------------------

# Every row spans the same columns.  The left section holds the narrow drawers
# and the right section the wide ones; a drawer never crosses between them.
COLUMN_COUNT = 15
LEFT_FIRST_COLUMN = 1
LEFT_LAST_COLUMN = 9
RIGHT_FIRST_COLUMN = 10
RIGHT_LAST_COLUMN = COLUMN_COUNT

# Drawer sizes ---------------------------------------------------------------

# Number of columns covered by each size.  The right section has a wider
# baseline, so its ``SMALL`` and ``MEDIUM`` drawers both occupy one column.
LEFT_SPANS: dict[str, int] = {"SMALL": 1, "MEDIUM": 2, "LARGE": 3}
RIGHT_SPANS: dict[str, int] = {"SMALL": 1, "MEDIUM": 1, "LARGE": 2}

# Size given to freshly created drawers in each section.
LEFT_DEFAULT_SIZE = "SMALL"
RIGHT_DEFAULT_SIZE = "MEDIUM"

# Rendering ------------------------------------------------------------------

# Pixel width of a single cell.  Only used to derive the trailing spacer that
# keeps grid columns aligned when a drawer is narrower than its slot.
LEFT_CELL_WIDTH = 64
RIGHT_CELL_WIDTH = 96

# A left ``MEDIUM`` drawer is one and a half cells wide inside a two cell slot.
LEFT_MEDIUM_SPACING = LEFT_CELL_WIDTH // 2
# A right ``SMALL`` drawer is three quarters of the baseline width.
RIGHT_SMALL_SPACING = RIGHT_CELL_WIDTH // 4

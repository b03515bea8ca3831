from __future__ import annotations

import logging
import threading
from typing import List, Optional

from ..config import VENDORS
from ..processing.palette import GridCell
from ..processing.pipeline import Grid, eyedrop, paint_cell, vendor_labels

logger = logging.getLogger(__name__)


class GridSession:
    """View state over the last built grid.

    Each build request takes a generation token from :meth:`begin`; a result
    is only stored when its token is still the newest one, so a slow build
    finishing after a newer request is discarded.
    """

    def __init__(self, vendor: str = VENDORS[0]) -> None:
        self._default_vendor = self._validate_vendor(vendor)
        self.vendor = self._default_vendor
        self.grid: Optional[Grid] = None
        self.generation = 0
        self._lock = threading.Lock()

    @staticmethod
    def _validate_vendor(vendor: str) -> str:
        if vendor not in VENDORS:
            raise ValueError(f"Unknown vendor {vendor!r}; expected one of {', '.join(VENDORS)}")
        return vendor
    def begin(self) -> int:
        with self._lock:
            self.generation += 1
            return self.generation

    def accept(self, token: int, grid: Grid) -> bool:
        with self._lock:
            if token != self.generation:
                logger.debug("Discarding stale grid from generation %d (current %d)", token, self.generation)
                return False
            self.grid = grid
            return True

    def select_vendor(self, vendor: str) -> None:
        self.vendor = self._validate_vendor(vendor)

    def _require_grid(self) -> Grid:
        if self.grid is None:
            raise LookupError("No grid has been built yet")
        return self.grid

    def paint(self, row: int, col: int, cell: GridCell) -> None:
        with self._lock:
            self.grid = paint_cell(self._require_grid(), row, col, cell)

    def eyedrop(self, row: int, col: int) -> GridCell:
        return eyedrop(self._require_grid(), row, col)

    def labels(self) -> List[List[str]]:
        return vendor_labels(self._require_grid(), self.vendor)

    def reset(self) -> None:
        with self._lock:
            self.generation += 1
            self.grid = None
            self.vendor = self._default_vendor

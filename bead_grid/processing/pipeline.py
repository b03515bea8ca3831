from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple, Union

from PIL import Image

from ..config import DEFAULT_TONE, ToneSettings
from ..infrastructure.decode import ImageSource, decode_image
from ..infrastructure.network import SourceFetcher
from .enhance import is_opaque, tone_map_surface
from .filters import FilterStyle, filter_palette
from .palette import EMPTY_CELL, RGB, GridCell, PaletteEntry, find_nearest_color
from .sampling import ScalingPolicy, render_sample_surface

logger = logging.getLogger(__name__)

Grid = List[List[GridCell]]

DEFAULT_GRID_SIZE = 50


def _check_size(size: int) -> None:
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise ValueError(f"Grid size must be a positive integer, got {size!r}")


def grid_from_image(
    image: Image.Image,
    palette: Sequence[PaletteEntry],
    size: int = DEFAULT_GRID_SIZE,
    style: Union[FilterStyle, str] = FilterStyle.NONE,
    policy: Union[ScalingPolicy, str] = ScalingPolicy.CONTAIN,
    tone: ToneSettings = DEFAULT_TONE,
) -> Grid:
    """Sample, tone-map and match a decoded image into a ``size``x``size`` grid.

    Rows are emitted top to bottom and cells left to right, so the result is
    indexed ``grid[row][col]``.
    """

    _check_size(size)
    policy = ScalingPolicy(policy)
    surface = tone_map_surface(render_sample_surface(image, size, policy), policy, tone)
    candidates = filter_palette(palette, style)
    logger.debug(
        "Matching %dx%d samples against %d/%d palette colors (style=%s, policy=%s)",
        size,
        size,
        len(candidates),
        len(palette),
        FilterStyle(style).value,
        policy.value,
    )

    matched: Dict[RGB, GridCell] = {}
    pixels = surface.load()
    grid: Grid = []
    for y in range(size):
        row: List[GridCell] = []
        for x in range(size):
            r, g, b, a = pixels[x, y]
            if policy is ScalingPolicy.CONTAIN and not is_opaque(a, tone):
                row.append(EMPTY_CELL)
                continue
            rgb = (r, g, b)
            cell = matched.get(rgb)
            if cell is None:
                cell = matched[rgb] = find_nearest_color(candidates, rgb)
            row.append(cell)
        grid.append(row)
    return grid


async def build_grid(
    source: ImageSource,
    palette: Sequence[PaletteEntry],
    size: int = DEFAULT_GRID_SIZE,
    style: Union[FilterStyle, str] = FilterStyle.NONE,
    policy: Union[ScalingPolicy, str] = ScalingPolicy.CONTAIN,
    tone: ToneSettings = DEFAULT_TONE,
    fetcher: Optional[SourceFetcher] = None,
) -> Grid:
    """Decode ``source`` and build its bead grid.

    Decoding is the only await; everything after it runs to completion
    before returning. Raises ``DecodeError`` or ``SurfaceUnavailableError``
    without producing a partial grid.
    """

    _check_size(size)
    image = await asyncio.to_thread(decode_image, source, fetcher)
    return grid_from_image(image, palette, size, style, policy, tone)


def build_grid_sync(
    source: ImageSource,
    palette: Sequence[PaletteEntry],
    size: int = DEFAULT_GRID_SIZE,
    style: Union[FilterStyle, str] = FilterStyle.NONE,
    policy: Union[ScalingPolicy, str] = ScalingPolicy.CONTAIN,
    tone: ToneSettings = DEFAULT_TONE,
    fetcher: Optional[SourceFetcher] = None,
) -> Grid:
    return asyncio.run(build_grid(source, palette, size, style, policy, tone, fetcher))


def _check_position(grid: Grid, row: int, col: int) -> None:
    if not (0 <= row < len(grid) and 0 <= col < len(grid[row])):
        raise IndexError(f"Cell ({row}, {col}) is outside the {len(grid)}x{len(grid)} grid")


def paint_cell(grid: Grid, row: int, col: int, cell: GridCell) -> Grid:
    """Return a copy of ``grid`` with one cell replaced; ``grid`` is untouched."""

    _check_position(grid, row, col)
    painted = [list(cells) for cells in grid]
    painted[row][col] = cell
    return painted


def eyedrop(grid: Grid, row: int, col: int) -> GridCell:
    _check_position(grid, row, col)
    return grid[row][col]


def grid_to_dict(grid: Grid) -> Dict[str, object]:
    return {
        "size": len(grid),
        "rows": [[cell.to_dict() for cell in row] for row in grid],
    }


def vendor_labels(grid: Grid, vendor: str) -> List[List[str]]:
    # Missing vendor coverage renders as an empty label.
    return [[cell.codes.get(vendor) or "" for cell in row] for row in grid]


def count_colors(grid: Grid) -> List[Tuple[GridCell, int]]:
    """Bead usage per color, most used first, background cells excluded."""

    counts: Counter = Counter()
    cells: Dict[str, GridCell] = {}
    for row in grid:
        for cell in row:
            if cell.is_empty:
                continue
            counts[cell.hex] += 1
            cells.setdefault(cell.hex, cell)
    return [(cells[hex_value], total) for hex_value, total in counts.most_common()]

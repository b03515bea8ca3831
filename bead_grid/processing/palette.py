from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..config import DEFAULT_PALETTE_PATH, VENDORS

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

_HEX_PATTERN = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


@dataclass(frozen=True)
class PaletteEntry:
    hex: str
    r: int
    g: int
    b: int
    codes: Mapping[str, str] = field(default_factory=dict)

    @property
    def rgb(self) -> RGB:
        return self.r, self.g, self.b


@dataclass(frozen=True)
class GridCell:
    hex: str
    codes: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.hex == EMPTY_HEX

    def to_dict(self) -> Dict[str, object]:
        return {"hex": self.hex, "codes": dict(self.codes)}


EMPTY_HEX = "transparent"
EMPTY_CELL = GridCell(EMPTY_HEX, MappingProxyType({vendor: "" for vendor in VENDORS}))
FALLBACK_CELL = GridCell("#FFFFFF", MappingProxyType({vendor: "-" for vendor in VENDORS}))


def hex_to_rgb(value: str) -> Optional[RGB]:
    match = _HEX_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if not match:
        return None
    red, green, blue = match.groups()
    return int(red, 16), int(green, 16), int(blue, 16)


def create_palette_entries(mapping: Mapping[str, Mapping[str, str]]) -> List[PaletteEntry]:
    """Build palette entries from a ``hex -> vendor codes`` table.

    Keys that are not six hex digits (optionally ``#``-prefixed) are skipped
    without raising; the remaining entries keep the table's order.
    """

    entries: List[PaletteEntry] = []
    for hex_key, codes in mapping.items():
        rgb = hex_to_rgb(hex_key)
        if rgb is None:
            logger.debug("Skipping palette key %r: not a 6-digit hex color", hex_key)
            continue
        entries.append(PaletteEntry(hex_key, *rgb, codes=MappingProxyType(dict(codes))))
    return entries


@lru_cache(maxsize=8)
def _load_palette_file(path: str) -> Tuple[PaletteEntry, ...]:
    with open(path, "r", encoding="utf-8") as handle:
        mapping = json.load(handle)
    if not isinstance(mapping, dict):
        raise ValueError(f"Palette file {path} must hold a JSON object of hex -> codes")
    entries = create_palette_entries(mapping)
    logger.info("Loaded %d palette colors from %s", len(entries), path)
    return tuple(entries)


def load_palette(path: Union[str, Path, None] = None) -> List[PaletteEntry]:
    return list(_load_palette_file(str(path or DEFAULT_PALETTE_PATH)))


def color_distance_sq(a: RGB, b: RGB) -> int:
    dr = a[0] - b[0]
    dg = a[1] - b[1]
    db = a[2] - b[2]
    return dr * dr + dg * dg + db * db


def find_nearest_color(candidates: Iterable[PaletteEntry], rgb: RGB) -> GridCell:
    best: Optional[PaletteEntry] = None
    best_distance = float("inf")
    for entry in candidates:
        distance = color_distance_sq(rgb, entry.rgb)
        if distance < best_distance:
            best_distance = distance
            best = entry

    if best is None:
        return FALLBACK_CELL
    return GridCell(best.hex, best.codes)

from __future__ import annotations

import math
from enum import Enum
from typing import List, Sequence, Tuple, Union

from .palette import PaletteEntry

_ALWAYS_KEEP_CANDY = ((255, 255, 255), (0, 0, 0))


class FilterStyle(str, Enum):
    NONE = "none"
    CANDY = "candy"
    GRAYSCALE = "grayscale"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[int, int, int]:
    """Return ``(hue 0-360, saturation 0-100, lightness 0-100)``, each rounded."""

    red, green, blue = r / 255.0, g / 255.0, b / 255.0
    high = max(red, green, blue)
    low = min(red, green, blue)
    lightness = (high + low) / 2.0

    if high == low:
        hue = saturation = 0.0
    else:
        delta = high - low
        saturation = delta / (2.0 - high - low) if lightness > 0.5 else delta / (high + low)
        if high == red:
            hue = (green - blue) / delta + (6.0 if green < blue else 0.0)
        elif high == green:
            hue = (blue - red) / delta + 2.0
        else:
            hue = (red - green) / delta + 4.0
        hue *= 60.0

    return _round_half_up(hue), _round_half_up(saturation * 100), _round_half_up(lightness * 100)


def _keep_candy(entry: PaletteEntry) -> bool:
    if entry.rgb in _ALWAYS_KEEP_CANDY:
        return True
    _, saturation, lightness = rgb_to_hsl(*entry.rgb)
    # Pastels survive on light colors; darker ones must be vivid.
    if lightness > 70:
        return saturation > 10
    return saturation > 40


def _keep_grayscale(entry: PaletteEntry) -> bool:
    _, saturation, _ = rgb_to_hsl(*entry.rgb)
    return saturation < 5


_RULES = {
    FilterStyle.CANDY: _keep_candy,
    FilterStyle.GRAYSCALE: _keep_grayscale,
}


def filter_palette(
    entries: Sequence[PaletteEntry], style: Union[FilterStyle, str] = FilterStyle.NONE
) -> List[PaletteEntry]:
    """Narrow ``entries`` to the subset matching ``style``.

    ``none`` returns the palette unchanged. If a rule set rejects every entry
    the full palette is returned so matching always has candidates.
    """

    style = FilterStyle(style)
    if style is FilterStyle.NONE:
        return list(entries)

    keep = _RULES[style]
    filtered = [entry for entry in entries if keep(entry)]
    return filtered or list(entries)

from __future__ import annotations

import math
from typing import Tuple, Union

from PIL import Image

from ..config import DEFAULT_TONE, ToneSettings
from .sampling import ScalingPolicy

OPAQUE_WHITE = (255, 255, 255, 255)


def clamp_channel(value: float) -> int:
    # Round half up before clamping, like the browser's Math.round.
    return max(0, min(255, int(math.floor(value + 0.5))))


def tone_map_pixel(r: float, g: float, b: float, tone: ToneSettings = DEFAULT_TONE) -> Tuple[int, int, int]:
    """Apply contrast, saturation and shadow/highlight compression to one pixel."""

    r = (r - 128) * tone.contrast + 128
    g = (g - 128) * tone.contrast + 128
    b = (b - 128) * tone.contrast + 128

    gray = 0.299 * r + 0.587 * g + 0.114 * b
    r = gray + (r - gray) * tone.saturation
    g = gray + (g - gray) * tone.saturation
    b = gray + (b - gray) * tone.saturation

    k = tone.compression
    if gray < tone.dark_threshold:
        r, g, b = r * k, g * k, b * k
    elif gray > tone.light_threshold:
        r = 255 - (255 - r) * k
        g = 255 - (255 - g) * k
        b = 255 - (255 - b) * k

    return clamp_channel(r), clamp_channel(g), clamp_channel(b)


def is_opaque(alpha: int, tone: ToneSettings = DEFAULT_TONE) -> bool:
    return alpha >= tone.opaque_alpha


def tone_map_surface(
    surface: Image.Image,
    policy: Union[ScalingPolicy, str] = ScalingPolicy.CONTAIN,
    tone: ToneSettings = DEFAULT_TONE,
) -> Image.Image:
    """Return a tone-mapped copy of an RGBA sample surface.

    Translucent samples are left alone under ``contain`` so they read as
    background, and forced to opaque white under ``stretch``.
    """

    policy = ScalingPolicy(policy)
    out = surface.convert("RGBA")
    width, height = out.size
    pixels = out.load()

    for y in range(height):
        for x in range(width):
            r, g, b, a = pixels[x, y]
            if not is_opaque(a, tone):
                if policy is ScalingPolicy.STRETCH:
                    pixels[x, y] = OPAQUE_WHITE
                continue
            pixels[x, y] = (*tone_map_pixel(r, g, b, tone), a)

    return out

from __future__ import annotations

from enum import Enum
from typing import Tuple, Union

from PIL import Image

from ..errors import DecodeError, SurfaceUnavailableError


class ScalingPolicy(str, Enum):
    STRETCH = "stretch"
    CONTAIN = "contain"


def new_surface(size: int) -> Image.Image:
    try:
        return Image.new("RGBA", (size, size), (0, 0, 0, 0))
    except (ValueError, MemoryError) as exc:
        raise SurfaceUnavailableError(f"Cannot allocate a {size}x{size} sample surface") from exc


def contain_box(width: int, height: int, size: int) -> Tuple[int, int, int, int]:
    """Return ``(x, y, w, h)`` fitting ``width``x``height`` centered in ``size``."""

    scale = min(size / width, size / height)
    draw_w = max(1, min(size, int(round(width * scale))))
    draw_h = max(1, min(size, int(round(height * scale))))
    return (size - draw_w) // 2, (size - draw_h) // 2, draw_w, draw_h


def render_sample_surface(
    image: Image.Image, size: int, policy: Union[ScalingPolicy, str] = ScalingPolicy.CONTAIN
) -> Image.Image:
    """Draw ``image`` onto a transparent ``size``x``size`` RGBA surface.

    Nearest-neighbour resampling is used so no blended edge colors appear.
    """

    if size < 1:
        raise ValueError(f"Grid size must be positive, got {size}")
    policy = ScalingPolicy(policy)
    width, height = image.size
    if width == 0 or height == 0:
        raise DecodeError("Image has no pixels")

    src = image.convert("RGBA")
    surface = new_surface(size)
    if policy is ScalingPolicy.STRETCH:
        x, y, draw_w, draw_h = 0, 0, size, size
    else:
        x, y, draw_w, draw_h = contain_box(width, height, size)

    scaled = src.resize((draw_w, draw_h), Image.Resampling.NEAREST)
    surface.paste(scaled, (x, y))
    return surface

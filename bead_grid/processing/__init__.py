"""Image-to-bead-grid processing components."""

from .enhance import tone_map_pixel, tone_map_surface
from .filters import FilterStyle, filter_palette, rgb_to_hsl
from .palette import (
    EMPTY_CELL,
    FALLBACK_CELL,
    GridCell,
    PaletteEntry,
    color_distance_sq,
    create_palette_entries,
    find_nearest_color,
    hex_to_rgb,
    load_palette,
)
from .pipeline import (
    Grid,
    build_grid,
    build_grid_sync,
    count_colors,
    eyedrop,
    grid_from_image,
    grid_to_dict,
    paint_cell,
    vendor_labels,
)
from .sampling import ScalingPolicy, render_sample_surface

__all__ = [
    "tone_map_pixel",
    "tone_map_surface",
    "FilterStyle",
    "filter_palette",
    "rgb_to_hsl",
    "EMPTY_CELL",
    "FALLBACK_CELL",
    "GridCell",
    "PaletteEntry",
    "color_distance_sq",
    "create_palette_entries",
    "find_nearest_color",
    "hex_to_rgb",
    "load_palette",
    "Grid",
    "build_grid",
    "build_grid_sync",
    "count_colors",
    "eyedrop",
    "grid_from_image",
    "grid_to_dict",
    "paint_cell",
    "vendor_labels",
    "ScalingPolicy",
    "render_sample_surface",
]

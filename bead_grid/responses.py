from __future__ import annotations

import io
from typing import Tuple

from flask import jsonify, send_file
from PIL import Image, ImageDraw, ImageFont

from .processing.palette import hex_to_rgb
from .processing.pipeline import Grid

BACKGROUND = (210, 210, 210)
GRID_LINE = (190, 190, 190)


def _text_color(rgb: Tuple[int, int, int]) -> Tuple[int, int, int]:
    luminance = 0.299 * rgb[0] + 0.587 * rgb[1] + 0.114 * rgb[2]
    return (0, 0, 0) if luminance > 128 else (255, 255, 255)


def render_grid_image(grid: Grid, vendor: str | None = None, cell_size: int = 16) -> Image.Image:
    """Draw ``grid`` as colored cells, labelled with ``vendor`` codes if given."""

    size = len(grid)
    img = Image.new("RGB", (size * cell_size, size * cell_size), BACKGROUND)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default() if vendor else None

    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            left, top = x * cell_size, y * cell_size
            box = (left, top, left + cell_size - 1, top + cell_size - 1)
            rgb = None if cell.is_empty else hex_to_rgb(cell.hex)
            draw.rectangle(box, fill=rgb or BACKGROUND, outline=GRID_LINE)
            if font is None or rgb is None:
                continue
            label = cell.codes.get(vendor) or ""
            if not label:
                continue
            x0, y0, x1, y1 = draw.textbbox((0, 0), label, font=font)
            draw.text(
                (left + (cell_size - (x1 - x0)) / 2 - x0, top + (cell_size - (y1 - y0)) / 2 - y0),
                label,
                fill=_text_color(rgb),
                font=font,
            )
    return img


def send_png(img: Image.Image):
    buffer = io.BytesIO()
    img.save(buffer, "PNG", optimize=True)
    buffer.seek(0)
    return send_file(buffer, mimetype="image/png")


def error_response(message: str, status: int):
    return jsonify(error=message), status

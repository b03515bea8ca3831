from __future__ import annotations

import base64
import binascii
import io
from pathlib import Path
from typing import BinaryIO, Union
from urllib.parse import unquote_to_bytes

from PIL import Image, ImageOps, UnidentifiedImageError

from ..errors import DecodeError
from .network import FETCHER, SourceFetcher

ImageSource = Union[Image.Image, bytes, bytearray, BinaryIO, str, Path]


def parse_data_url(url: str) -> bytes:
    """Return the payload of a ``data:`` URL."""

    header, sep, payload = url.partition(",")
    if not sep or not header.lower().startswith("data:"):
        raise DecodeError("Malformed data URL")
    if header.lower().endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise DecodeError("Data URL payload is not valid base64") from exc
    return unquote_to_bytes(payload)


def _open(data: Union[bytes, BinaryIO, Path]) -> Image.Image:
    stream = io.BytesIO(data) if isinstance(data, (bytes, bytearray)) else data
    try:
        img = Image.open(stream)
        img.load()
        # Apply the EXIF orientation tag so camera photos come out upright.
        return ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Cannot decode image: {exc}") from exc


def decode_image(source: ImageSource, fetcher: SourceFetcher | None = None) -> Image.Image:
    """Decode ``source`` into a fully loaded ``PIL.Image``.

    Accepts decoded images, raw bytes, binary streams, filesystem paths,
    ``data:`` URLs and ``http(s)://`` URLs.
    """

    if isinstance(source, Image.Image):
        return source
    if isinstance(source, (bytes, bytearray)):
        return _open(bytes(source))
    if isinstance(source, Path):
        return _open(source)
    if isinstance(source, str):
        lowered = source[:8].lower()
        if lowered.startswith("data:"):
            return _open(parse_data_url(source))
        if lowered.startswith(("http://", "https://")):
            return _open((fetcher or FETCHER).fetch_bytes(source))
        return _open(Path(source))
    if hasattr(source, "read"):
        return _open(source)
    raise DecodeError(f"Unsupported image source type: {type(source).__name__}")

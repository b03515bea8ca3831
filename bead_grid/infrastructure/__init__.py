"""Infrastructure helpers for image sources and session state."""

from .decode import ImageSource, decode_image, parse_data_url
from .network import FETCHER, SourceFetcher

__all__ = [
    "ImageSource",
    "decode_image",
    "parse_data_url",
    "FETCHER",
    "SourceFetcher",
]

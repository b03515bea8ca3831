import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple


VENDORS: Tuple[str, ...] = ("MARD", "COCO", "漫漫", "盼盼", "咪小窝")

DEFAULT_PALETTE_PATH = Path(__file__).parent / "data" / "palette.json"


@dataclass(frozen=True)
class ToneSettings:
    contrast: float = 1.25
    saturation: float = 1.2
    dark_threshold: float = 100.0
    light_threshold: float = 155.0
    compression: float = 0.4
    opaque_alpha: int = 250


DEFAULT_TONE = ToneSettings()


@dataclass
class GridSettings:
    port: int
    grid_size: int
    grid_min: int
    grid_max: int
    filter_style: str
    scaling_policy: str
    palette_path: str
    default_vendor: str
    timeout: float
    retries: int
    max_upload_bytes: int
    log_level: str

    @classmethod
    def from_env(cls) -> "GridSettings":
        return cls(
            port=int(os.getenv("PORT", "5500")),
            grid_size=int(os.getenv("GRID_SIZE", "50")),
            grid_min=int(os.getenv("GRID_MIN", "5")),
            grid_max=int(os.getenv("GRID_MAX", "64")),
            filter_style=os.getenv("FILTER_STYLE", "none").lower(),
            scaling_policy=os.getenv("SCALING_POLICY", "contain").lower(),
            palette_path=os.getenv("PALETTE_PATH", str(DEFAULT_PALETTE_PATH)),
            default_vendor=os.getenv("DEFAULT_VENDOR", VENDORS[0]),
            timeout=float(os.getenv("SOURCE_TIMEOUT", "10.0")),
            retries=int(os.getenv("SOURCE_RETRIES", "2")),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(8 * 1024 * 1024))),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


SETTINGS = GridSettings.from_env()


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level)
    return logging.getLogger("bead-grid")

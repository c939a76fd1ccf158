"""
Centralized configuration for the puzzle maker.
Image limits, default difficulty and file locations live here.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple


# --- Difficulty ---
# Grid used when no difficulty has been saved yet.
DEFAULT_ROWS = 3
DEFAULT_COLUMNS = 3

# Range of piece counts offered by the difficulty selector.
MIN_PIECES = 4
MAX_PIECES = 81

# --- File & Directory Paths ---
DATA_DIR = Path("data")
SETTINGS_PATH = DATA_DIR / "settings.json"
ASSETS_DIR = Path("assets")


@dataclass
class ImageConfig:
    """
    Limits applied when turning a source photo into a working bitmap.

    Attributes:
        max_dimension: Cap on the long edge after optimization (pixels)
        jpeg_quality: Quality used when re-encoding JPEG bytes
        supported_formats: Lowercase Pillow format names accepted on decode
    """
    max_dimension: int = 1024
    jpeg_quality: int = 85
    supported_formats: Tuple[str, ...] = ("jpeg", "mpo", "png", "webp", "bmp")

    def __post_init__(self):
        if self.max_dimension < 1:
            raise ValueError(f"max_dimension must be positive, got {self.max_dimension}")
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError(f"jpeg_quality must be in [1, 100], got {self.jpeg_quality}")
        self.supported_formats = tuple(f.lower() for f in self.supported_formats)

    @classmethod
    def from_env(cls) -> 'ImageConfig':
        """Build a config, letting PUZZLE_MAX_DIMENSION / PUZZLE_JPEG_QUALITY override defaults."""
        kwargs = {}
        for field_name, env_name in (("max_dimension", "PUZZLE_MAX_DIMENSION"),
                                     ("jpeg_quality", "PUZZLE_JPEG_QUALITY")):
            raw = os.environ.get(env_name)
            if not raw:
                continue
            try:
                kwargs[field_name] = int(raw)
            except ValueError:
                raise ValueError(f"{env_name} must be an integer, got {raw!r}")
        return cls(**kwargs)


DEFAULT_IMAGE_CONFIG = ImageConfig()


def available_grid_specs() -> List[Tuple[int, int]]:
    """
    List (rows, columns) presets for a difficulty selector.

    Square grids plus grids with one extra row, limited to
    MIN_PIECES..MAX_PIECES pieces, ordered by piece count.
    """
    presets = []
    for size in range(2, 10):
        for rows, cols in ((size, size), (size + 1, size)):
            if MIN_PIECES <= rows * cols <= MAX_PIECES:
                presets.append((rows, cols))
    return sorted(presets, key=lambda rc: (rc[0] * rc[1], rc[0]))

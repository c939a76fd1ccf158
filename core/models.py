"""Data model for processed images, grid shapes and pieces."""

import numbers

import numpy as np
from dataclasses import dataclass, field
from typing import Tuple

import config
from .errors import InvalidGridSpec


@dataclass(frozen=True)
class GridSpec:
    """
    Puzzle shape.

    A 1x1 grid is allowed; it yields a single piece and a board that is
    solved from the start.
    """
    rows: int
    columns: int

    def __post_init__(self):
        for name in ("rows", "columns"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidGridSpec(f"{name} must be an int, got {value!r}")
            if value < 1:
                raise InvalidGridSpec(f"{name} must be >= 1, got {value}")
            object.__setattr__(self, name, int(value))

    @property
    def piece_count(self) -> int:
        return self.rows * self.columns

    @property
    def is_standard_difficulty(self) -> bool:
        return config.MIN_PIECES <= self.piece_count <= config.MAX_PIECES

    @classmethod
    def default(cls) -> 'GridSpec':
        return cls(config.DEFAULT_ROWS, config.DEFAULT_COLUMNS)

    def __str__(self):
        return f"{self.rows}x{self.columns}"


@dataclass(frozen=True)
class PuzzleImage:
    """
    Optimized source artwork.

    Attributes:
        pixels: RGB image as (H, W, 3) uint8 array
        source_label: Display name / attribution, not parsed
    """
    pixels: np.ndarray = field(repr=False)
    source_label: str = ""

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class Piece:
    """
    One extracted sub-image.

    Attributes:
        index: Identity in solved order (row * columns + col)
        row, col: Grid position in the solved picture
        box: (x0, y0, x1, y1) half-open pixel extent in the source
        bitmap: Copy of the source pixels inside box
    """
    index: int
    row: int
    col: int
    box: Tuple[int, int, int, int]
    bitmap: np.ndarray = field(repr=False, compare=False)

    @property
    def width(self) -> int:
        return self.box[2] - self.box[0]

    @property
    def height(self) -> int:
        return self.box[3] - self.box[1]

    @property
    def is_empty(self) -> bool:
        """True for the zero-area pieces of a grid finer than its image."""
        return self.width < 1 or self.height < 1

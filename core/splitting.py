"""Image splitting into puzzle pieces."""

from typing import List, Tuple

from .errors import InvalidGridSpec
from .models import GridSpec, Piece, PuzzleImage


def piece_boxes(width: int, height: int, grid: GridSpec) -> List[Tuple[int, int, int, int]]:
    """
    Compute the pixel extent of every piece in row-major order.

    Interior pieces are (width // columns) x (height // rows). The last
    column and the last row run to the image edge, so they absorb any
    remainder and the boxes tile the image with no gap or overlap. A grid
    finer than the image gives zero-width (or zero-height) interior boxes.

    Args:
        width, height: Image dimensions
        grid: Requested grid

    Returns:
        List of (x0, y0, x1, y1) half-open boxes
    """
    if grid.rows < 1 or grid.columns < 1:
        raise InvalidGridSpec(f"Grid must have at least one row and column, got {grid}")

    base_w = width // grid.columns
    base_h = height // grid.rows

    boxes = []
    for row in range(grid.rows):
        y_start = row * base_h
        y_end = height if row == grid.rows - 1 else (row + 1) * base_h
        for col in range(grid.columns):
            x_start = col * base_w
            x_end = width if col == grid.columns - 1 else (col + 1) * base_w
            boxes.append((x_start, y_start, x_end, y_end))
    return boxes


def partition(image: PuzzleImage, grid: GridSpec) -> List[Piece]:
    """
    Split image into grid.rows x grid.columns pieces.

    Args:
        image: Optimized source image
        grid: Requested grid

    Returns:
        List of pieces in row-major order, piece.index == row * columns + col
    """
    boxes = piece_boxes(image.width, image.height, grid)

    pieces = []
    for idx, (x0, y0, x1, y1) in enumerate(boxes):
        row, col = divmod(idx, grid.columns)
        section = image.pixels[y0:y1, x0:x1].copy()
        pieces.append(Piece(index=idx, row=row, col=col, box=(x0, y0, x1, y1), bitmap=section))

    return pieces


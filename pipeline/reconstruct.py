"""Compose the current board arrangement into a single image."""

from typing import Sequence

import cv2
import numpy as np

from core.models import GridSpec, Piece
from core.splitting import piece_boxes
from game.board import BoardState


def render_board(pieces: Sequence[Piece], board: BoardState, grid: GridSpec,
                 width: int, height: int, show_numbers: bool = False) -> np.ndarray:
    """
    Paint every piece into the slot it currently occupies.

    Slots in the last row/column are larger than interior ones, so a piece
    is resized to its slot box when the two differ. Zero-area slots are
    skipped, and an empty piece leaves its slot black.

    Args:
        pieces: Pieces in piece-index order
        board: Current arrangement
        grid: Puzzle grid
        width, height: Size of the source image
        show_numbers: Overlay each piece's index on its slot

    Returns:
        RGB image of shape (height, width, 3)
    """
    if len(pieces) != board.piece_count:
        raise ValueError(f"Board has {board.piece_count} slots but {len(pieces)} pieces were given")

    boxes = piece_boxes(width, height, grid)
    output = np.zeros((height, width, 3), dtype=np.uint8)

    for slot, piece_id in enumerate(board.slot_to_piece):
        x1, y1, x2, y2 = boxes[slot]
        piece = pieces[piece_id]
        if x2 <= x1 or y2 <= y1 or piece.is_empty:
            continue
        bitmap = piece.bitmap
        if bitmap.shape[:2] != (y2 - y1, x2 - x1):
            bitmap = cv2.resize(bitmap, (x2 - x1, y2 - y1), interpolation=cv2.INTER_AREA)
        output[y1:y2, x1:x2] = bitmap

    if show_numbers:
        for slot, piece_id in enumerate(board.slot_to_piece):
            x1, y1, x2, y2 = boxes[slot]
            if x2 <= x1 or y2 <= y1:
                continue
            center_x = (x1 + x2) // 2
            center_y = (y1 + y2) // 2

            text = str(piece_id)
            font = cv2.FONT_HERSHEY_SIMPLEX
            font_scale = max(0.3, min(x2 - x1, y2 - y1) / 80.0)
            thickness = max(1, int(font_scale * 2))

            (text_w, text_h), _ = cv2.getTextSize(text, font, font_scale, thickness)
            text_x = center_x - text_w // 2
            text_y = center_y + text_h // 2

            cv2.putText(output, text, (text_x, text_y), font, font_scale, (0, 0, 0), thickness + 2)
            cv2.putText(output, text, (text_x, text_y), font, font_scale, (255, 255, 255), thickness)

    return output

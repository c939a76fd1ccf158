"""Display utilities for puzzle boards (images are RGB)."""

import matplotlib.pyplot as plt
import numpy as np
from typing import List, Optional, Sequence
from pathlib import Path

from core.models import Piece


def _board_figure(board_image: np.ndarray, reference: Optional[np.ndarray],
                  title_board: str, title_reference: str, figsize: tuple):
    if reference is None:
        fig, ax = plt.subplots(1, 1, figsize=(figsize[0] / 2, figsize[1]))
        ax.imshow(board_image)
        ax.set_title(title_board)
        ax.axis('off')
        return fig

    fig, axes = plt.subplots(1, 2, figsize=figsize)
    axes[0].imshow(board_image)
    axes[0].set_title(title_board)
    axes[0].axis('off')

    axes[1].imshow(reference)
    axes[1].set_title(title_reference)
    axes[1].axis('off')
    return fig


def display_board(board_image: np.ndarray, reference: Optional[np.ndarray] = None,
                  title_board: str = "Shuffled",
                  title_reference: str = "Solved",
                  figsize: tuple = (12, 6)):
    """
    Show the current board, optionally next to the solved picture.

    Args:
        board_image: Rendered arrangement (see pipeline.render_board)
        reference: Optional solved image shown on the right
        title_board: Title for the board
        title_reference: Title for the reference image
        figsize: Figure size
    """
    _board_figure(board_image, reference, title_board, title_reference, figsize)
    plt.tight_layout()
    plt.show()


def save_board(board_image: np.ndarray, output_path: str,
               reference: Optional[np.ndarray] = None,
               title_board: str = "Shuffled",
               title_reference: str = "Solved",
               dpi: int = 150):
    """
    Save the board preview figure to file.

    Args:
        board_image: Rendered arrangement
        output_path: Path to save the figure
        reference: Optional solved image shown on the right
        dpi: Output DPI
    """
    fig = _board_figure(board_image, reference, title_board, title_reference, (12, 6))
    plt.tight_layout()

    output_dir = Path(output_path).parent
    if output_dir and str(output_dir) != '.':
        output_dir.mkdir(parents=True, exist_ok=True)

    fig.savefig(output_path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)


def display_pieces(pieces: Sequence[Piece], columns: int,
                   order: Optional[List[int]] = None,
                   figsize: tuple = (8, 8)):
    """
    Display pieces in a grid with index labels.

    Args:
        pieces: Pieces in piece-index order
        columns: Grid columns
        order: Piece index per slot (defaults to solved order)
        figsize: Figure size
    """
    order = list(order) if order is not None else list(range(len(pieces)))
    rows = (len(order) + columns - 1) // columns

    fig, axes = plt.subplots(rows, columns, figsize=figsize, squeeze=False)

    for slot, piece_id in enumerate(order):
        ax = axes[slot // columns, slot % columns]
        ax.imshow(pieces[piece_id].bitmap)
        ax.axis('off')
        ax.set_title(f"Piece {piece_id}", fontsize=8)

    plt.tight_layout()
    plt.show()

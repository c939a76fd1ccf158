"""Visualization utilities for puzzle boards."""
from .display import (
    display_board,
    display_pieces,
    save_board
)

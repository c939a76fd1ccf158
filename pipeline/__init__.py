"""
Pipeline orchestration modules.

Session flow:
1. PuzzleSession.load() - source -> optimize -> partition -> shuffle
2. PuzzleSession.swap() - player moves, tracked until solved
3. render_board() - compose the current arrangement for display
"""
from .session import PuzzleSession
from .metrics import ProcessingReport, image_entropy, complexity_level
from .reconstruct import render_board

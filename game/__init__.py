"""Shuffling and board state tracking."""
from .shuffle import shuffle_arrangement, is_identity, MAX_SHUFFLE_ATTEMPTS
from .board import BoardState, swap
from .tracker import PuzzleTracker, BoardEvent

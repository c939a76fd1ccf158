"""Puzzle tracker: owns the board for one session and notifies listeners."""

import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

from .board import BoardState, swap

logger = logging.getLogger(__name__)

STARTED = "started"
MOVED = "moved"
SOLVED = "solved"
RESHUFFLED = "reshuffled"
RESTARTED = "restarted"


@dataclass(frozen=True)
class BoardEvent:
    kind: str
    board: BoardState


Listener = Callable[[BoardEvent], None]


class PuzzleTracker:
    """
    Holds the current BoardState and applies swaps to it.

    Args:
        piece_count: Number of pieces on the board
        rng: Random source for shuffling
        shuffle: Start from a shuffled board (False starts solved)
    """

    def __init__(self, piece_count: int, rng: Optional[random.Random] = None,
                 shuffle: bool = True):
        self._rng = rng
        if shuffle:
            self._board = BoardState.shuffled(piece_count, rng)
        else:
            self._board = BoardState.solved(piece_count)
        self._opening = self._board
        self._listeners: List[Listener] = []

    @property
    def board(self) -> BoardState:
        return self._board

    @property
    def is_solved(self) -> bool:
        return self._board.is_solved

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: str) -> None:
        event = BoardEvent(kind, self._board)
        for listener in list(self._listeners):
            listener(event)

    def announce(self) -> None:
        """Tell listeners about the starting board."""
        self._emit(STARTED)
        if self._board.is_solved:
            self._emit(SOLVED)

    def swap(self, slot_a: int, slot_b: int) -> BoardState:
        """Swap two slots; emits 'moved' and, on completion, 'solved'."""
        was_solved = self._board.is_solved
        updated = swap(self._board, slot_a, slot_b)
        if updated is self._board:
            return updated

        self._board = updated
        self._emit(MOVED)
        if updated.is_solved and not was_solved:
            logger.info("Puzzle solved in %d moves", updated.move_count)
            self._emit(SOLVED)
        return updated

    def reshuffle(self) -> BoardState:
        """Deal a fresh shuffle and reset the move counter."""
        self._board = BoardState.shuffled(self._board.piece_count, self._rng)
        self._opening = self._board
        self._emit(RESHUFFLED)
        return self._board

    def restart(self) -> BoardState:
        """Return to the opening arrangement with zero moves."""
        self._board = self._opening
        self._emit(RESTARTED)
        return self._board

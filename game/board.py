"""
Board state.

BoardState is immutable: the only way to move pieces is swap(), which
returns a new board. Exchanging two entries of a permutation yields a
permutation, so slot_to_piece is always a valid arrangement.
"""

import random
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from core.errors import InvalidSlot
from .shuffle import shuffle_arrangement


@dataclass(frozen=True)
class BoardState:
    """
    Attributes:
        slot_to_piece: Entry s is the index of the piece occupying slot s
        move_count: Number of accepted swaps
    """
    slot_to_piece: Tuple[int, ...]
    move_count: int = 0

    def __post_init__(self):
        arrangement = tuple(self.slot_to_piece)
        if sorted(arrangement) != list(range(len(arrangement))):
            raise ValueError(f"Not a permutation of 0..{len(arrangement) - 1}: {list(arrangement)}")
        if self.move_count < 0:
            raise ValueError(f"move_count must be >= 0, got {self.move_count}")
        object.__setattr__(self, "slot_to_piece", arrangement)

    @classmethod
    def solved(cls, piece_count: int) -> 'BoardState':
        return cls(tuple(range(piece_count)))

    @classmethod
    def from_arrangement(cls, arrangement: Sequence[int], move_count: int = 0) -> 'BoardState':
        return cls(tuple(arrangement), move_count)

    @classmethod
    def shuffled(cls, piece_count: int, rng: Optional[random.Random] = None) -> 'BoardState':
        return cls(tuple(shuffle_arrangement(piece_count, rng)))

    @property
    def piece_count(self) -> int:
        return len(self.slot_to_piece)

    @property
    def is_solved(self) -> bool:
        return all(piece == slot for slot, piece in enumerate(self.slot_to_piece))

    @property
    def correct_count(self) -> int:
        return sum(1 for slot, piece in enumerate(self.slot_to_piece) if piece == slot)

    @property
    def completion_percentage(self) -> float:
        if not self.slot_to_piece:
            return 100.0
        return 100.0 * self.correct_count / self.piece_count

    def misplaced_slots(self) -> List[int]:
        return [slot for slot, piece in enumerate(self.slot_to_piece) if piece != slot]

    def slot_of(self, piece_index: int) -> int:
        """Slot currently holding piece_index."""
        return self.slot_to_piece.index(piece_index)

    def same_arrangement(self, other: 'BoardState') -> bool:
        return self.slot_to_piece == other.slot_to_piece


def _check_slot(board: BoardState, slot) -> None:
    if isinstance(slot, bool) or not isinstance(slot, int):
        raise InvalidSlot(f"Slot must be an int, got {slot!r}")
    if not 0 <= slot < board.piece_count:
        raise InvalidSlot(f"Slot {slot} out of range [0, {board.piece_count})")


def swap(board: BoardState, slot_a: int, slot_b: int) -> BoardState:
    """
    Exchange the pieces in two slots.

    Args:
        board: Current board
        slot_a, slot_b: Slots to exchange

    Returns:
        New board with move_count + 1. Swapping a slot with itself is
        ignored: the same board is returned and no move is counted.

    Raises:
        InvalidSlot: If either slot is outside [0, piece_count)
    """
    _check_slot(board, slot_a)
    _check_slot(board, slot_b)
    if slot_a == slot_b:
        return board

    arrangement = list(board.slot_to_piece)
    arrangement[slot_a], arrangement[slot_b] = arrangement[slot_b], arrangement[slot_a]
    return replace(board, slot_to_piece=tuple(arrangement), move_count=board.move_count + 1)

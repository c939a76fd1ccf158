"""Random piece arrangements."""

import random
from typing import List, Optional

MAX_SHUFFLE_ATTEMPTS = 100


def is_identity(arrangement) -> bool:
    return all(piece == slot for slot, piece in enumerate(arrangement))


def shuffle_arrangement(piece_count: int, rng: Optional[random.Random] = None) -> List[int]:
    """
    Produce a uniformly random permutation of 0..piece_count-1 that is not
    the solved order.

    Args:
        piece_count: Number of pieces on the board
        rng: Random source (module-level random if None)

    Returns:
        List where entry s is the piece placed in slot s. For piece_count <= 1
        the only permutation ([0] or []) is returned.
    """
    if piece_count < 0:
        raise ValueError(f"piece_count must be >= 0, got {piece_count}")

    rng = rng or random
    arrangement = list(range(piece_count))
    if piece_count <= 1:
        return arrangement

    for _ in range(MAX_SHUFFLE_ATTEMPTS):
        # Fisher-Yates over the full range
        rng.shuffle(arrangement)
        if not is_identity(arrangement):
            return arrangement

    arrangement[0], arrangement[1] = arrangement[1], arrangement[0]
    return arrangement

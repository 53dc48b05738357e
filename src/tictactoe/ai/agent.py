from __future__ import annotations

import logging
import random
from typing import Optional, Protocol, Sequence, TypeVar

from tictactoe.engine import (
    CENTER,
    CORNERS,
    Board,
    Mark,
    RoundState,
    check_board,
    empty_cells,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RandomSource(Protocol):
    def choice(self, seq: Sequence[T]) -> T: ...


def _completes_line(board: Board, index: int, mark: Mark) -> bool:
    trial = list(board)
    trial[index] = mark
    return check_board(tuple(trial)).winner is mark


def choose_move(board: Board, rng: RandomSource, mark: Mark = Mark.O) -> int:
    """Greedy one-ply pick: win, block, center, a corner, then anything left."""
    open_cells = empty_cells(board)
    if not open_cells:
        raise ValueError("No empty cells left to play")

    for idx in open_cells:
        if _completes_line(board, idx, mark):
            return idx

    threat = mark.opponent()
    for idx in open_cells:
        if _completes_line(board, idx, threat):
            return idx

    if board[CENTER] is None:
        return CENTER

    corners = [idx for idx in CORNERS if board[idx] is None]
    if corners:
        return rng.choice(corners)

    return rng.choice(open_cells)


def random_move(board: Board, rng: RandomSource) -> int:
    open_cells = empty_cells(board)
    if not open_cells:
        raise ValueError("No empty cells left to play")
    return rng.choice(open_cells)


class AIAgent:
    """Heuristic opponent bound to one mark."""

    def __init__(self, mark: Mark = Mark.O, rng: Optional[RandomSource] = None) -> None:
        self.mark = mark
        self.rng: RandomSource = rng if rng is not None else random.Random()

    def select_move(self, state: RoundState) -> Optional[int]:
        if not state.active or not empty_cells(state.board):
            return None
        move = choose_move(state.board, self.rng, self.mark)
        logger.debug("AI %s picked cell %d", self.mark.value, move)
        return move

"""Core rules engine for timed Tic-Tac-Toe.

The engine is deterministic and UI-agnostic so the controller, the HTTP layer
and the self-play harness all share it. Cells are addressed by a zero-based
row-major index (0,1,2 / 3,4,5 / 6,7,8).
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

BOARD_SIZE = 9
CENTER = 4
CORNERS: Sequence[int] = (0, 2, 6, 8)

# Scan order: rows top to bottom, columns left to right, then diagonals.
WINNING_LINES: Sequence[Tuple[int, int, int]] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class Mark(str, Enum):
    X = "X"
    O = "O"

    def opponent(self) -> "Mark":
        return Mark.O if self is Mark.X else Mark.X


class GameStatus(str, Enum):
    PLAYING = "playing"
    WON = "won"
    DRAW = "draw"


class GameMode(str, Enum):
    PLAYER_VS_PLAYER = "pvp"
    PLAYER_VS_AI = "pva"


Cell = Optional[Mark]
Board = Tuple[Cell, ...]
EMPTY_BOARD: Board = (None,) * BOARD_SIZE


@dataclass(frozen=True)
class Scoreboard:
    wins_x: int = 0
    wins_o: int = 0
    draws: int = 0

    @property
    def completed_rounds(self) -> int:
        return self.wins_x + self.wins_o + self.draws

    def record_win(self, winner: Mark) -> "Scoreboard":
        if winner is Mark.X:
            return replace(self, wins_x=self.wins_x + 1)
        return replace(self, wins_o=self.wins_o + 1)

    def record_draw(self) -> "Scoreboard":
        return replace(self, draws=self.draws + 1)


@dataclass(frozen=True)
class Outcome:
    status: GameStatus
    winner: Optional[Mark] = None
    winning_line: Tuple[int, ...] = ()


@dataclass(frozen=True)
class RoundState:
    board: Board = EMPTY_BOARD
    current_player: Mark = Mark.X
    status: GameStatus = GameStatus.PLAYING
    winner: Optional[Mark] = None
    winning_line: Tuple[int, ...] = ()
    mode: GameMode = GameMode.PLAYER_VS_AI
    scores: Scoreboard = field(default_factory=Scoreboard)

    @property
    def active(self) -> bool:
        return self.status is GameStatus.PLAYING

    @property
    def untouched(self) -> bool:
        """True while no mark has been placed in this round."""
        return all(cell is None for cell in self.board)


def empty_cells(board: Board) -> List[int]:
    return [idx for idx, cell in enumerate(board) if cell is None]


def check_board(board: Board) -> Outcome:
    """Report the first completed triple, a draw on a full board, or play on."""
    for line in WINNING_LINES:
        a, b, c = line
        mark = board[a]
        if mark is not None and mark is board[b] and mark is board[c]:
            return Outcome(GameStatus.WON, winner=mark, winning_line=line)
    if all(cell is not None for cell in board):
        return Outcome(GameStatus.DRAW)
    return Outcome(GameStatus.PLAYING)


def initial_state(
    mode: GameMode = GameMode.PLAYER_VS_AI,
    scores: Optional[Scoreboard] = None,
) -> RoundState:
    return RoundState(mode=mode, scores=scores if scores is not None else Scoreboard())


def apply_move(state: RoundState, index: int, player: Mark) -> RoundState:
    """Place ``player`` at ``index`` and resolve the round.

    Moves onto an occupied cell, or into a finished round, are ignored and the
    very same state object is returned.
    """
    if not 0 <= index < BOARD_SIZE:
        raise ValueError(f"Cell index out of range: {index}")
    if not state.active or state.board[index] is not None:
        return state

    board = list(state.board)
    board[index] = player
    new_board: Board = tuple(board)

    outcome = check_board(new_board)
    if outcome.status is GameStatus.WON:
        assert outcome.winner is not None
        return replace(
            state,
            board=new_board,
            status=GameStatus.WON,
            winner=outcome.winner,
            winning_line=outcome.winning_line,
            scores=state.scores.record_win(outcome.winner),
        )
    if outcome.status is GameStatus.DRAW:
        return replace(
            state,
            board=new_board,
            status=GameStatus.DRAW,
            scores=state.scores.record_draw(),
        )
    # Turn passes from the mark just placed, which a forfeited turn makes differ
    # from current_player.
    return replace(state, board=new_board, current_player=player.opponent())


def parse_mode(value: str) -> GameMode:
    try:
        return GameMode(value.lower().strip())
    except ValueError:
        valid = sorted(m.value for m in GameMode)
        raise ValueError(f"Unsupported mode '{value}'. Valid modes: {valid}") from None


def serialize_scores(scores: Scoreboard) -> Dict:
    return {"X": scores.wins_x, "O": scores.wins_o, "draws": scores.draws}


def serialize_state(state: RoundState) -> Dict:
    """Serialize RoundState to a JSON-friendly dict."""
    return {
        "board": [cell.value if cell else None for cell in state.board],
        "current_player": state.current_player.value,
        "status": state.status.value,
        "winner": state.winner.value if state.winner else None,
        "winning_line": list(state.winning_line),
        "mode": state.mode.value,
        "scores": serialize_scores(state.scores),
    }

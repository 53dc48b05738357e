from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from tictactoe.engine import (
    Board,
    GameMode,
    GameStatus,
    Mark,
    Scoreboard,
    apply_move,
    initial_state,
)

from .agent import RandomSource, choose_move, random_move

Policy = Callable[[Board, Mark, RandomSource], int]


def heuristic_policy(board: Board, mark: Mark, rng: RandomSource) -> int:
    return choose_move(board, rng, mark)


def random_policy(board: Board, mark: Mark, rng: RandomSource) -> int:
    return random_move(board, rng)


@dataclass
class GameResult:
    winner: Optional[Mark]
    status: GameStatus
    moves: List[int]


def play_game(x_policy: Policy, o_policy: Policy, rng: RandomSource) -> GameResult:
    """Play one untimed round between two policies, X moving first."""
    state = initial_state(mode=GameMode.PLAYER_VS_PLAYER)
    moves: List[int] = []
    while state.active:
        mark = state.current_player
        policy = x_policy if mark is Mark.X else o_policy
        index = policy(state.board, mark, rng)
        next_state = apply_move(state, index, mark)
        if next_state is state:
            raise RuntimeError(f"Policy for {mark.value} chose occupied cell {index}")
        moves.append(index)
        state = next_state
    return GameResult(winner=state.winner, status=state.status, moves=moves)


def simulate(
    games: int,
    rng: RandomSource,
    x_policy: Policy = random_policy,
    o_policy: Policy = heuristic_policy,
) -> Scoreboard:
    """Tally ``games`` rounds; by default a random X against the heuristic O."""
    if games < 0:
        raise ValueError("games must be non-negative")
    tally = Scoreboard()
    for _ in range(games):
        result = play_game(x_policy, o_policy, rng)
        if result.winner is not None:
            tally = tally.record_win(result.winner)
        else:
            tally = tally.record_draw()
    return tally

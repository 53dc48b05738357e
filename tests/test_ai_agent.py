from __future__ import annotations

import random

import pytest

from tictactoe.ai.agent import AIAgent, choose_move, random_move
from tictactoe.ai.selfplay import heuristic_policy, play_game, random_policy, simulate
from tictactoe.engine import GameStatus, Mark, RoundState

X, O, _ = Mark.X, Mark.O, None


class LastChoice:
    def __init__(self) -> None:
        self.seen = []

    def choice(self, seq):
        self.seen.append(list(seq))
        return seq[-1]


def test_win_beats_block() -> None:
    board = (X, X, _, O, O, _, _, _, _)
    assert choose_move(board, LastChoice()) == 5


def test_blocks_immediate_threat() -> None:
    board = (X, X, _, _, O, _, _, _, _)
    assert choose_move(board, LastChoice()) == 2


def test_takes_center_when_free() -> None:
    board = (X, _, _, _, _, _, _, _, _)
    assert choose_move(board, LastChoice()) == 4


def test_corner_choice_uses_rng() -> None:
    rng = LastChoice()
    board = (X, _, _, _, O, _, _, _, _)
    assert choose_move(board, rng) == 8
    assert rng.seen == [[2, 6, 8]]


def test_fallback_picks_among_remaining_cells() -> None:
    rng = LastChoice()
    board = (X, O, X, _, X, O, O, X, O)
    # Only index 3 is open and it wins for nobody.
    assert choose_move(board, rng) == 3
    assert rng.seen == [[3]]


def test_full_board_raises() -> None:
    with pytest.raises(ValueError):
        choose_move((X, O, X, X, O, O, O, X, X), LastChoice())
    with pytest.raises(ValueError):
        random_move((X, O, X, X, O, O, O, X, X), LastChoice())


def test_agent_returns_none_for_finished_round() -> None:
    finished = RoundState(board=(X, X, X, O, O, _, _, _, _), status=GameStatus.WON, winner=Mark.X)
    assert AIAgent(rng=LastChoice()).select_move(finished) is None


def test_agent_always_picks_an_empty_cell() -> None:
    agent = AIAgent(rng=random.Random(7))
    state = RoundState(board=(X, _, _, _, _, _, _, _, X), current_player=Mark.O)
    move = agent.select_move(state)
    assert move is not None and state.board[move] is None


def test_heuristic_o_outscores_random_x() -> None:
    tally = simulate(200, random.Random(1234))
    assert tally.completed_rounds == 200
    assert tally.wins_o > tally.wins_x


def test_play_game_records_every_move() -> None:
    result = play_game(heuristic_policy, random_policy, random.Random(3))
    assert result.status in (GameStatus.WON, GameStatus.DRAW)
    assert len(result.moves) == len(set(result.moves))
    assert 5 <= len(result.moves) <= 9


def test_heuristic_self_play_starts_in_the_center() -> None:
    result = play_game(heuristic_policy, heuristic_policy, random.Random(0))
    assert result.moves[0] == 4

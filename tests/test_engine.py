import pytest

from tictactoe.engine import (
    EMPTY_BOARD,
    GameMode,
    GameStatus,
    Mark,
    RoundState,
    Scoreboard,
    apply_move,
    check_board,
    initial_state,
    parse_mode,
    serialize_state,
)

X, O, _ = Mark.X, Mark.O, None


def play(state, *moves):
    for index, mark in moves:
        state = apply_move(state, index, mark)
    return state


def test_initial_state_defaults():
    state = initial_state()
    assert state.board == EMPTY_BOARD
    assert state.current_player is Mark.X
    assert state.status is GameStatus.PLAYING
    assert state.winner is None
    assert state.winning_line == ()
    assert state.mode is GameMode.PLAYER_VS_AI
    assert state.scores == Scoreboard()
    assert state.untouched


def test_check_board_playing_on_partial_board():
    assert check_board((X, O, _, _, _, _, _, _, _)).status is GameStatus.PLAYING


def test_check_board_reports_column_and_diagonal():
    column = check_board((_, O, X, _, O, X, _, _, X))
    assert column.winner is Mark.X
    assert column.winning_line == (2, 5, 8)

    diagonal = check_board((O, X, X, _, O, X, _, _, O))
    assert diagonal.winner is Mark.O
    assert diagonal.winning_line == (0, 4, 8)


def test_check_board_scan_order_prefers_rows():
    # Not reachable in play, but the scan order must stay deterministic.
    outcome = check_board((X, X, X, X, O, O, X, O, O))
    assert outcome.winning_line == (0, 1, 2)


def test_full_game_x_wins_top_row():
    state = play(initial_state(), (0, X), (4, O), (1, X), (8, O), (2, X))
    assert state.status is GameStatus.WON
    assert state.winner is Mark.X
    assert state.winning_line == (0, 1, 2)
    assert state.scores.wins_x == 1
    assert state.scores.completed_rounds == 1


def test_full_board_without_triple_is_draw():
    moves = [(0, X), (1, O), (2, X), (4, O), (3, X), (5, O), (7, X), (6, O), (8, X)]
    state = play(initial_state(), *moves)
    assert state.board == (X, O, X, X, O, O, O, X, X)
    assert state.status is GameStatus.DRAW
    assert state.winner is None
    assert state.scores.draws == 1


def test_move_on_occupied_cell_returns_same_state():
    state = apply_move(initial_state(), 4, Mark.X)
    assert apply_move(state, 4, Mark.O) is state


def test_finished_round_is_frozen():
    state = play(initial_state(), (0, X), (4, O), (1, X), (8, O), (2, X))
    assert apply_move(state, 5, Mark.O) is state
    assert state.scores.wins_x == 1


def test_turn_passes_from_the_mark_placed():
    state = initial_state()
    assert state.current_player is Mark.X
    state = apply_move(state, 3, Mark.O)
    assert state.board[3] is Mark.O
    assert state.current_player is Mark.X


def test_out_of_range_index_raises():
    with pytest.raises(ValueError):
        apply_move(initial_state(), 9, Mark.X)


def test_scores_carry_over_into_new_round():
    finished = play(initial_state(), (0, X), (4, O), (1, X), (8, O), (2, X))
    fresh = initial_state(mode=finished.mode, scores=finished.scores)
    assert fresh.board == EMPTY_BOARD
    assert fresh.scores.wins_x == 1


def test_parse_mode_accepts_values_and_rejects_unknown():
    assert parse_mode(" PVP ") is GameMode.PLAYER_VS_PLAYER
    with pytest.raises(ValueError, match="Unsupported mode"):
        parse_mode("ava")


def test_serialize_state_is_json_friendly():
    state = RoundState(board=(X, _, _, _, O, _, _, _, _), current_player=Mark.X)
    payload = serialize_state(state)
    assert payload["board"][:5] == ["X", None, None, None, "O"]
    assert payload["status"] == "playing"
    assert payload["mode"] == "pva"
    assert payload["scores"] == {"X": 0, "O": 0, "draws": 0}

"""Round owner: applies discrete events (clicks, ticks, AI moves, resets) to the game.

Every public method is a synchronous transition. Delayed work (timer ticks,
the AI's thinking pause) lives in :mod:`tictactoe.scheduler`, which calls back
into these methods with the ``round_id`` it was armed for.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional

from tictactoe.ai.agent import AIAgent, RandomSource
from tictactoe.config import Settings
from tictactoe.engine import (
    GameMode,
    Mark,
    RoundState,
    Scoreboard,
    apply_move,
    empty_cells,
    initial_state,
    serialize_state,
)
from tictactoe.presentation import RoundEnded, score_labels, serialize_notice, status_line, timer_warning

logger = logging.getLogger(__name__)

AI_MARK = Mark.O
HUMAN_MARK = Mark.X


@dataclass
class TimerState:
    seconds_remaining: int
    active: bool = True


class GameController:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        mode: Optional[GameMode] = None,
        rng: Optional[RandomSource] = None,
        agent: Optional[AIAgent] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.agent = agent or AIAgent(AI_MARK, self.rng)
        self.round_id = 0
        self.state: RoundState = initial_state(mode or self.settings.default_mode)
        self.timer = TimerState(seconds_remaining=self.settings.turn_seconds)
        self.notice: Optional[RoundEnded] = None
        self._sync_timer(reset=True)

    @property
    def ai_pending(self) -> bool:
        """True while the AI owes a move in the current round."""
        return (
            self.state.active
            and self.state.mode is GameMode.PLAYER_VS_AI
            and self.state.current_player is AI_MARK
        )

    def _is_stale(self, round_id: Optional[int]) -> bool:
        return round_id is not None and round_id != self.round_id

    def _sync_timer(self, reset: bool) -> None:
        if not self.state.active or self.ai_pending:
            self.timer.active = False
            return
        self.timer.active = True
        if reset:
            self.timer.seconds_remaining = self.settings.turn_seconds

    def _commit(self, new_state: RoundState) -> bool:
        if new_state is self.state:
            return False
        self.state = new_state
        if not new_state.active:
            self.notice = RoundEnded(kind=new_state.status, mode=new_state.mode, winner=new_state.winner)
            logger.info(
                "Round %d ended: %s (winner=%s)",
                self.round_id,
                new_state.status.value,
                new_state.winner.value if new_state.winner else None,
            )
        self._sync_timer(reset=True)
        return True

    # --- input events ---
    def select_cell(self, index: int) -> bool:
        """Place the mark whose turn it is. Returns False when the click is ignored."""
        if self.ai_pending:
            return False
        return self._commit(apply_move(self.state, index, self.state.current_player))

    def play_ai_move(self, round_id: Optional[int] = None) -> bool:
        if self._is_stale(round_id) or not self.ai_pending:
            return False
        move = self.agent.select_move(self.state)
        if move is None:
            return False
        return self._commit(apply_move(self.state, move, AI_MARK))

    def tick(self, round_id: Optional[int] = None) -> bool:
        """Count one time unit off the turn timer, forcing a move at zero."""
        if self._is_stale(round_id) or not self.timer.active or not self.state.active:
            return False
        self.timer.seconds_remaining -= 1
        if self.timer.seconds_remaining > 0:
            return True
        self._force_timeout_move()
        return True

    def _force_timeout_move(self) -> None:
        timed_out = self.state.current_player
        if self.state.mode is GameMode.PLAYER_VS_AI:
            mover = HUMAN_MARK
        else:
            # The opponent gets the forfeited move; the slow player moves next.
            mover = timed_out.opponent()
        index = self.rng.choice(empty_cells(self.state.board))
        logger.info(
            "Round %d: %s timed out, %s plays cell %d",
            self.round_id,
            timed_out.value,
            mover.value,
            index,
        )
        if not self._commit(apply_move(self.state, index, mover)):
            self._sync_timer(reset=True)

    # --- controller actions ---
    def _start_round(self, mode: GameMode, scores: Scoreboard) -> None:
        self.round_id += 1
        self.state = initial_state(mode=mode, scores=scores)
        self.notice = None
        self._sync_timer(reset=True)
        logger.debug("Round %d started (mode=%s)", self.round_id, mode.value)

    def new_round(self) -> None:
        self._start_round(self.state.mode, self.state.scores)

    def reset_scores(self) -> None:
        self._start_round(self.state.mode, Scoreboard())

    def set_mode(self, mode: GameMode) -> bool:
        if self.state.active and not self.state.untouched:
            logger.info("Mode change to %s rejected mid-round", mode.value)
            return False
        self._start_round(mode, self.state.scores)
        return True

    def snapshot(self) -> Dict:
        payload = serialize_state(self.state)
        payload.update(
            {
                "round_id": self.round_id,
                "ai_pending": self.ai_pending,
                "timer": {
                    "seconds_remaining": self.timer.seconds_remaining,
                    "active": self.timer.active,
                    "warning": self.timer.active and timer_warning(self.timer.seconds_remaining),
                },
                "notice": serialize_notice(self.notice) if self.notice else None,
                "labels": score_labels(self.state.mode),
            }
        )
        payload["message"] = status_line(payload)
        return payload

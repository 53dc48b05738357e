"""Text the browser shows for a snapshot: banners, status line and score labels."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from tictactoe.engine import GameMode, GameStatus, Mark

WARNING_SECONDS = 3


@dataclass(frozen=True)
class RoundEnded:
    kind: GameStatus
    mode: GameMode
    winner: Optional[Mark] = None


def describe_outcome(notice: RoundEnded) -> Dict[str, str]:
    if notice.kind is GameStatus.DRAW:
        return {"title": "It's a Draw!", "description": "Great game! Try again."}
    assert notice.winner is not None
    mark = notice.winner.value
    if notice.mode is GameMode.PLAYER_VS_PLAYER:
        return {
            "title": f"Player {mark} Wins!",
            "description": f"Great game! Player {mark} takes this round.",
        }
    return {
        "title": "You Won!" if notice.winner is Mark.X else "AI Won!",
        "description": f"Player {mark} wins this round!",
    }


def serialize_notice(notice: RoundEnded) -> Dict:
    payload = {
        "kind": notice.kind.value,
        "winner": notice.winner.value if notice.winner else None,
        "mode": notice.mode.value,
    }
    payload.update(describe_outcome(notice))
    return payload


def status_line(snapshot: Dict) -> str:
    pvp = snapshot["mode"] == GameMode.PLAYER_VS_PLAYER.value
    status = snapshot["status"]
    if status == GameStatus.DRAW.value:
        return "It's a Draw!"
    if status == GameStatus.WON.value:
        winner = snapshot["winner"]
        if pvp:
            return f"Player {winner} Won!"
        return "You Won!" if winner == Mark.X.value else "AI Won!"
    player = snapshot["current_player"]
    if pvp:
        return f"Player {player}'s Turn"
    return "Your Turn" if player == Mark.X.value else "AI Thinking..."


def score_labels(mode: GameMode) -> Dict[str, str]:
    if mode is GameMode.PLAYER_VS_PLAYER:
        return {"X": "Player X", "O": "Player O", "draws": "Draws"}
    return {"X": "You (X)", "O": "AI (O)", "draws": "Draws"}


def timer_warning(seconds_remaining: int) -> bool:
    return seconds_remaining <= WARNING_SECONDS

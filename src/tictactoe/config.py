"""Runtime settings, read from ``TICTACTOE_*`` environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from tictactoe.engine import GameMode, parse_mode

ENV_PREFIX = "TICTACTOE_"


@dataclass(frozen=True)
class Settings:
    turn_seconds: int = 10
    tick_interval: float = 1.0
    ai_delay: float = 1.0
    default_mode: GameMode = GameMode.PLAYER_VS_AI
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.turn_seconds < 1:
            raise ValueError("turn_seconds must be at least 1")
        if self.tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        if self.ai_delay < 0:
            raise ValueError("ai_delay must be non-negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        def get(name: str, default: str) -> str:
            return env.get(f"{ENV_PREFIX}{name}", default)

        try:
            return cls(
                turn_seconds=int(get("TURN_SECONDS", "10")),
                tick_interval=float(get("TICK_INTERVAL", "1.0")),
                ai_delay=float(get("AI_DELAY", "1.0")),
                default_mode=parse_mode(get("DEFAULT_MODE", GameMode.PLAYER_VS_AI.value)),
                log_level=get("LOG_LEVEL", "INFO").upper(),
            )
        except ValueError as exc:
            raise ValueError(f"Invalid {ENV_PREFIX}* setting: {exc}") from exc

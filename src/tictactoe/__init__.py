"""tictactoe package."""

from .engine import (  # noqa: F401
    GameMode,
    GameStatus,
    Mark,
    RoundState,
    Scoreboard,
    apply_move,
    check_board,
    initial_state,
    serialize_state,
)
from .ai import AIAgent, choose_move  # noqa: F401
from .config import Settings  # noqa: F401
from .controller import GameController, TimerState  # noqa: F401

__all__ = [
    "__version__",
    "GameMode",
    "GameStatus",
    "Mark",
    "RoundState",
    "Scoreboard",
    "apply_move",
    "check_board",
    "initial_state",
    "serialize_state",
    "AIAgent",
    "choose_move",
    "Settings",
    "GameController",
    "TimerState",
    "create_app",
]

__version__ = "0.1.0"


def create_app(settings=None):
    """Lazy import to avoid requiring FastAPI unless requested."""
    from tictactoe.api import create_app as factory

    return factory(settings)

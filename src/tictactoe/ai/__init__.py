"""AI components: the greedy move heuristic and a self-play harness."""

from .agent import AIAgent, choose_move, random_move  # noqa: F401
from .selfplay import play_game, simulate  # noqa: F401

"""Command-line entrypoint for tictactoe."""
import argparse
import random

from . import __version__
from .logging_config import setup_logging


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="tictactoe")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--serve", action="store_true", help="Run FastAPI server")
    parser.add_argument("--host", default="127.0.0.1", help="Server host")
    parser.add_argument("--port", type=int, default=8000, help="Server port")
    parser.add_argument(
        "--simulate",
        type=int,
        metavar="GAMES",
        help="Play GAMES self-play rounds (random X vs heuristic O) and print the tally.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for --simulate.")
    parser.add_argument("--log-level", default=None, help="Override TICTACTOE_LOG_LEVEL.")
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    setup_logging(args.log_level)

    if args.simulate is not None:
        from tictactoe.ai import simulate

        if args.simulate < 0:
            parser.error("--simulate must be non-negative")
        tally = simulate(args.simulate, random.Random(args.seed))
        print(f"games={tally.completed_rounds} X={tally.wins_x} O={tally.wins_o} draws={tally.draws}")
        return 0

    if args.serve:
        try:
            from uvicorn import run
        except ImportError:
            print("uvicorn is required to serve the API. Install the package dependencies.")
            return 1
        from tictactoe.api import create_app

        run(create_app(), host=args.host, port=args.port, reload=False)
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""CLI options for selecting players, board size, engine limits, and config paths."""


def parse_args(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description="Gobang (five-in-a-row) against an alpha-beta AI")
    parser.add_argument("--board-size", type=int, help="Board size (e.g. 13, 15 or 19)")
    parser.add_argument("--time-budget", type=float, help="Soft search budget in seconds per AI move")
    parser.add_argument("--hard-timeout", type=float, help="Watchdog limit in seconds per AI move")
    parser.add_argument("--move-timeout", type=float, default=None, help="Seconds per human move (default: unlimited)")
    parser.add_argument("--depth", type=int, help="Maximum iterative-deepening depth")
    parser.add_argument("--candidate-limit", type=int, help="Number of candidate moves to expand per node")
    parser.add_argument(
        "--mode",
        choices=["human-vs-ai", "ai-vs-human", "ai-vs-ai", "human-vs-human"],
        default="human-vs-ai",
        help="Play mode (who plays black/white)",
    )
    parser.add_argument("--settings", default="config/settings.yaml", help="Path to settings YAML")
    parser.add_argument("--weights", default=None, help="Path to evaluator weights YAML")
    parser.add_argument(
        "--search-backend",
        choices=["alphabeta", "minimax", "mcts"],
        default=None,
        help="Search backend for AI players (default from settings or alphabeta)",
    )
    parser.add_argument("--enable-vct", action="store_true", default=None, help="Probe for continuous-four wins before search")
    parser.add_argument("--classic", action="store_true", help="Classic Gobang: only exactly five wins (overlines do not)")
    parser.add_argument("--no-tt", action="store_true", help="Disable the transposition table")
    parser.add_argument("--tt-replace", choices=["always", "depth"], default=None, help="Transposition replacement policy")
    parser.add_argument("--seed", type=int, default=None, help="Seed for Zobrist keys and MCTS playouts")
    parser.add_argument("--rollout-limit", type=int, default=None, help="MCTS rollouts per move")
    parser.add_argument("--explore", type=float, default=None, help="UCT exploration constant for MCTS")
    parser.add_argument("--log-level", default="WARNING", help="Engine log level (DEBUG, INFO, WARNING, ...)")
    return parser.parse_args(argv)

"""Entry point for Gobang matches. Load config, wire players, start GobangGame."""

try:
    from utils.cli import parse_args
    from utils.logger import configure, log_event
    from utils.settings import EngineConfig, load_settings
    from GobangGame import GobangGame
    from AIPlayer import AIPlayer
    from Player import HumanPlayer
    from ai import heuristic
except ImportError:
    from Gobang_AI.utils.cli import parse_args
    from Gobang_AI.utils.logger import configure, log_event
    from Gobang_AI.utils.settings import EngineConfig, load_settings
    from Gobang_AI.GobangGame import GobangGame
    from Gobang_AI.AIPlayer import AIPlayer
    from Gobang_AI.Player import HumanPlayer
    from Gobang_AI.ai import heuristic


def render_text(board, last_move, color, outcome):
    print(board.to_text(last_move))
    if not outcome.is_over:
        print(f"{'Black (X)' if color == -1 else 'White (O)'} to move")


def build_config(args, settings):
    weights = heuristic.load_weights(args.weights) if args.weights else None
    return EngineConfig.from_settings(
        settings,
        weights=weights,
        board_size=args.board_size,
        time_budget=args.time_budget,
        hard_timeout=args.hard_timeout,
        max_depth=args.depth,
        candidate_limit=args.candidate_limit,
        search_backend=args.search_backend,
        enable_vct=args.enable_vct,
        allow_overline=False if args.classic else None,
        use_tt=False if args.no_tt else None,
        tt_replace=args.tt_replace,
        seed=args.seed,
        rollout_limit=args.rollout_limit,
        explore=args.explore,
    )


def build_players(mode, config):
    if mode == "ai-vs-ai":
        return AIPlayer(color=-1, config=config), AIPlayer(color=1, config=config)
    if mode == "human-vs-ai":
        return HumanPlayer(color=-1), AIPlayer(color=1, config=config)
    if mode == "ai-vs-human":
        return AIPlayer(color=-1, config=config), HumanPlayer(color=1)
    if mode == "human-vs-human":
        return HumanPlayer(color=-1), HumanPlayer(color=1)
    raise ValueError(f"Unsupported mode: {mode}")


def main(argv=None):
    args = parse_args(argv)
    configure(args.log_level)
    config = build_config(args, load_settings(args.settings))
    black, white = build_players(args.mode, config)

    game = GobangGame(
        board_size=config.board_size,
        black_player=black,
        white_player=white,
        move_timeout=args.move_timeout,
        logger=log_event,
        allow_overline=config.allow_overline,
        renderer=render_text,
        seed=config.seed,
    )
    result = game.play()
    outcome = {-1: "Black wins", 1: "White wins", 0: "Draw"}
    print(outcome.get(result, "Unknown result"))


if __name__ == "__main__":
    main()

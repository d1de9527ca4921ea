"""
ScoreKeeper - Live scoring for tennis and padel matches

Entry point for the console scoreboard.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from config import init_config, init_logging, APP_NAME, APP_VERSION, MATCH_DEFAULTS
from engine.rules import SportType
from models.schemas import RulesCreate


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        prog="scorekeeper",
        description="Console scoreboard for tennis and padel matches",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Best of three, standard sets
  scorekeeper --left Ana --right Bo

  # Padel, best of five, tie-break at 5-5
  scorekeeper --sport padel --sets-to-win 3 --tie-break-at 5
        """
    )

    parser.add_argument(
        '--sport',
        choices=[s.value for s in SportType],
        default=SportType.TENNIS.value,
        help='Sport being played (informational)'
    )
    parser.add_argument('--left', default="", help='Name of the left side')
    parser.add_argument('--right', default="", help='Name of the right side')

    # Rule settings
    parser.add_argument(
        '--sets-to-win',
        type=int,
        default=MATCH_DEFAULTS.sets_to_win,
        help='Sets needed to win the match'
    )
    parser.add_argument(
        '--games-per-set',
        type=int,
        default=MATCH_DEFAULTS.games_per_set,
        help='Games needed to win a set'
    )
    parser.add_argument(
        '--tie-break-at',
        type=int,
        default=MATCH_DEFAULTS.tie_break_at,
        help='Game score (each) at which a tie-break starts'
    )

    parser.add_argument(
        '--database',
        type=Path,
        help='Match history file (defaults to the per-user data directory)'
    )
    parser.add_argument(
        '--no-log-file',
        action='store_true',
        help='Log to the console only'
    )
    return parser


def rules_from_args(args: argparse.Namespace) -> RulesCreate:
    """Validate the rule settings given on the command line."""
    return RulesCreate(
        sport=args.sport,
        sets_to_win=args.sets_to_win,
        games_per_set=args.games_per_set,
        tie_break_at=args.tie_break_at,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for ScoreKeeper."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = rules_from_args(args)
    except ValidationError as e:
        parser.error(str(e))

    # Initialize configuration and directories
    init_config()
    init_logging(log_to_file=not args.no_log_file)

    # Initialize database
    from models.base import create_db_engine, create_session_factory, init_db
    from services.history import MatchHistoryService
    if args.database is not None:
        db_engine = create_db_engine(args.database)
        init_db(bind=db_engine)
        history = MatchHistoryService(create_session_factory(db_engine))
    else:
        init_db()
        history = MatchHistoryService()

    from app import ScoreKeeperApp, HELP_TEXT
    app = ScoreKeeperApp(history)

    print(f"{APP_NAME} {APP_VERSION}")
    print(app.new_match(settings, args.left, args.right))
    print(HELP_TEXT)

    for line in sys.stdin:
        if line.strip().lower() == "q":
            break
        print(app.handle_command(line))

    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Entry point for running the team bot."""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import LOG_FILE, LOG_LEVEL, TEAMS_DB, ensure_directories, validate_config

logger = logging.getLogger("teambot")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the team management Slack bot")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--db",
        type=Path,
        default=TEAMS_DB,
        help=f"Team database path (default: {TEAMS_DB})",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Check configuration and the team database, then exit",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print team and membership counts, then exit",
    )
    return parser.parse_args(argv)


def configure_logging(debug: bool) -> None:
    """Log to stderr and to the log file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(), logging.FileHandler(LOG_FILE)],
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    ensure_directories()
    configure_logging(args.debug)

    from src.teams import TeamStore

    store = TeamStore(args.db)

    if args.stats:
        stats = store.get_stats()
        print(f"{stats['teams']} team(s), {stats['memberships']} membership(s) in {args.db}")
        return 0

    issues = validate_config()
    for issue in issues:
        logger.warning(f"Configuration issue: {issue}")

    if args.validate_only:
        print("Configuration has issues (see above)" if issues else "Configuration is valid!")
        return 1 if issues else 0

    if issues:
        logger.error("Cannot start bot with an invalid configuration")
        return 1

    from src.bot.app import run_bot

    logger.info(f"Starting team bot (database: {args.db}, log file: {LOG_FILE})")

    try:
        run_bot(db_path=args.db)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error(f"Bot crashed: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

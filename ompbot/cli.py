"""Command-line entry point that runs the bot."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from .router import Router
from .telegram import BotAPI, TelegramError

log = logging.getLogger(__name__)

UPDATE_TIMEOUT = 60


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ompbot", description="Run the Telegram bot.")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="file with environment variables to load (default: .env)",
    )
    parser.add_argument("--debug", action="store_true", help="log debugging output")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Load the token, authorise the bot and serve updates until interrupted."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    load_dotenv(args.env_file)
    token = os.environ.get("TOKEN")
    if token is None:
        raise SystemExit("environment variable TOKEN not found in .env")

    bot = BotAPI(token)
    try:
        me = bot.get_me()
    except TelegramError as exc:
        raise SystemExit(str(exc)) from exc
    log.info("Authorized on account %s", me.user_name)

    router = Router(bot)
    try:
        for update in bot.iter_updates(timeout=UPDATE_TIMEOUT):
            router.handle_update(update)
    except KeyboardInterrupt:
        log.info("stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from moodlog.app.core.logging import configure_logging
from moodlog.app.schemas.mood import KNOWN_MOODS
from moodlog.client.api import MoodApiClient
from moodlog.client.controller import MoodController
from moodlog.client.presenter import HISTORY_ERROR_MESSAGE, MOOD_EMOJIS, render_text

DEFAULT_API_URL = "http://localhost:3000"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="moodlog", description="Log and review your moods")
    parser.add_argument(
        "--api-url",
        default=os.getenv("MOODLOG_API_URL", DEFAULT_API_URL),
        help="Base URL of the Mood Tracker API",
    )
    parser.add_argument("--verbose", action="store_true", help="Log client activity to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    log_cmd = subparsers.add_parser("log", help="Record a mood")
    log_cmd.add_argument("mood", choices=KNOWN_MOODS)
    log_cmd.add_argument("--note", default="", help="Optional note")
    log_cmd.add_argument("--city", default=None, help="Place for the weather lookup")

    subparsers.add_parser("history", help="Show the latest entries")
    subparsers.add_parser("stats", help="Show mood counts for the last 7 days")
    return parser


async def _log_mood(controller: MoodController, mood: str, note: str, city: str | None) -> int:
    await controller.load_weather(city)
    controller.select_mood(mood)
    controller.edit_note(note)
    view = await controller.submit()
    notice = controller.state.notice
    if notice is not None:
        print(notice.message)
    if view is None:
        return 1
    print(render_text(view))
    return 0


async def _history(controller: MoodController, *, stats_only: bool) -> int:
    view = await controller.load_history()
    if stats_only:
        for mood, count in view.stats.items():
            print(f"{MOOD_EMOJIS[mood]} {mood:<9} {count}")
    else:
        print(render_text(view))
    return 1 if view.message == HISTORY_ERROR_MESSAGE else 0


async def run(args: argparse.Namespace) -> int:
    controller = MoodController(MoodApiClient(args.api_url))
    try:
        if args.command == "log":
            return await _log_mood(controller, args.mood, args.note, args.city)
        return await _history(controller, stats_only=args.command == "stats")
    finally:
        await controller.aclose()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.INFO if args.verbose else logging.ERROR, to_file=False)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())

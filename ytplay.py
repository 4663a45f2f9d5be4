#!/usr/bin/env python3
"""
ytplay: search & play YouTube from the terminal
===============================================

Searches the YouTube Data API, shows a numbered list of results with their
durations, and plays the chosen video in mpv (or VLC).

API key lookup order:
1. Environment variable YT_API_KEY
2. Config file ~/.ytplay.conf (override with YTPLAY_CONFIG) holding YT_API_KEY="..."
3. Prompt on the terminal, optionally saving the key to the config file

Usage:
    ytplay "lofi beats"
    ytplay -n 5 "programming tutorials"
    ytplay -q "rick astley"
"""

import argparse
import asyncio
import logging
import sys
from typing import Callable, List, Optional, Sequence

import httpx

from yt_config import KeyResolver, default_resolvers, resolve_api_key
from yt_errors import YtPlayError
from yt_menu import render_menu, select
from yt_player import Player, detect_player
from yt_search import client_session, durations_for, fetch_durations, search_youtube

logger = logging.getLogger("ytplay")

DEFAULT_MAX_RESULTS = 10
MAX_RESULTS_LIMIT = 50  # API page size limit

EXAMPLES = """\
examples:
  ytplay "lofi beats"
  ytplay -n 5 "programming tutorials"
"""


def _result_count(value: str) -> int:
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if not 1 <= count <= MAX_RESULTS_LIMIT:
        raise argparse.ArgumentTypeError(f"must be between 1 and {MAX_RESULTS_LIMIT}")
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ytplay",
        description="Search & play YouTube from the terminal",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("query", nargs="*", help="Search terms")
    parser.add_argument(
        "-n", dest="max_results", metavar="NUM", type=_result_count,
        default=DEFAULT_MAX_RESULTS,
        help=f"Number of results to show (default: {DEFAULT_MAX_RESULTS})"
    )
    parser.add_argument("-q", dest="quiet", action="store_true", help="Quiet: skip menu and play first result")
    parser.add_argument("-v", dest="verbose", action="store_true", help="Verbose logging on stderr")
    return parser


async def run(
    query: str,
    max_results: int = DEFAULT_MAX_RESULTS,
    quiet: bool = False,
    resolvers: Optional[List[KeyResolver]] = None,
    player: Optional[Player] = None,
    client: Optional[httpx.AsyncClient] = None,
    prompt: Callable[[str], str] = input
) -> int:
    """Search, show the menu, play the selection. Returns the exit status."""
    if player is None:
        player = detect_player()
    if resolvers is None:
        resolvers = default_resolvers()
    api_key = resolve_api_key(resolvers)

    print(f"Searching YouTube for: {query} (max {max_results} results)")
    async with client_session(client) as session:
        results = await search_youtube(query, max_results, api_key, session)
        durations = await fetch_durations([r.id for r in results], api_key, session)

    print(render_menu(results, durations_for(results, durations)))

    choice = select(results, quiet=quiet, prompt=prompt)
    if choice is None:
        print("Goodbye.")
        return 0

    print(f"Playing: {choice.title} - {choice.url}")
    await player.play(choice.url)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    # httpx logs full request URLs, which carry the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if not args.query:
        parser.print_usage(sys.stderr)
        return 1

    query = " ".join(args.query)
    try:
        return asyncio.run(run(query, args.max_results, args.quiet))
    except YtPlayError as e:
        logger.debug("Run aborted", exc_info=True)
        print(f"[ERROR] {e}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())

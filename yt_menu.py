"""Result menu and selection prompt."""

import logging
import re
from typing import Callable, List, Optional

from yt_errors import InputError
from yt_search import SearchResult, format_duration

logger = logging.getLogger("ytplay.menu")

QUIT_TOKENS = ("q", "Q")
_NUMBER_RE = re.compile(r"^[0-9]+$")


def render_menu(results: List[SearchResult], durations: List[str]) -> str:
    """Numbered result list, one line per video: index, title, channel, duration."""
    lines = ["", "Results:"]
    for idx, (result, token) in enumerate(zip(results, durations), start=1):
        lines.append(f"{idx:2d}) {result.title}  -  {result.channel} ({format_duration(token)})")
    return "\n".join(lines)


def select(
    results: List[SearchResult],
    quiet: bool = False,
    prompt: Callable[[str], str] = input
) -> Optional[SearchResult]:
    """
    Pick the video to play.

    Quiet mode returns the first result without reading input. Otherwise a
    single prompt is shown; the quit token returns None and anything that is
    not a number in range raises InputError.
    """
    if quiet:
        return results[0]

    try:
        answer = prompt(f"\nEnter number to play (1-{len(results)}), or q to quit: ").strip()
    except EOFError:
        raise InputError("No selection entered.")

    if answer in QUIT_TOKENS:
        return None
    if not _NUMBER_RE.match(answer):
        raise InputError("Invalid selection.", {"input": answer})

    choice = int(answer)
    if not 1 <= choice <= len(results):
        raise InputError("Selection out of range.", {"input": choice})

    logger.debug(f"Selected {choice}: {results[choice - 1].id}")
    return results[choice - 1]

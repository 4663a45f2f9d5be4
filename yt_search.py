#!/usr/bin/env python3
"""
YouTube Search via the YouTube Data API v3
==========================================

Provides the two API calls ytplay needs and the duration helpers that go
with them:

- Keyword search (``search`` endpoint, videos only, one page)
- Duration lookup for a set of video IDs (``videos`` endpoint, contentDetails)
- ISO-8601 duration parsing and H:MM:SS / M:SS formatting

Both requests carry the API key as a query parameter and share the same
bounded retry policy: 2 retries with a fixed 1 second delay.
"""

import asyncio
import html
import logging
import os
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Iterable, List, Optional, Any

import httpx

from yt_errors import EmptyResultError, NetworkError

logger = logging.getLogger("ytplay.search")

# Configuration
API_BASE = os.environ.get("YT_API_BASE", "https://www.googleapis.com/youtube/v3")
SEARCH_URL = f"{API_BASE}/search"
VIDEOS_URL = f"{API_BASE}/videos"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

HTTP_RETRIES = 2
RETRY_DELAY = 1.0  # seconds
HTTP_TIMEOUT = 10.0  # seconds
RETRYABLE_STATUS = {408, 429, 500, 502, 503, 504}

ZERO_DURATION = "PT0S"

_DAYS_RE = re.compile(r"(\d+)D")
_HOURS_RE = re.compile(r"(\d+)H")
_MINUTES_RE = re.compile(r"(\d+)M")
_SECONDS_RE = re.compile(r"(\d+)S")


@dataclass(frozen=True)
class SearchResult:
    """One video from a search response."""
    id: str
    title: str
    channel: str

    @property
    def url(self) -> str:
        return watch_url(self.id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "channel": self.channel,
            "url": self.url
        }


@dataclass(frozen=True)
class DurationSpec:
    """Hours/minutes/seconds taken literally from a duration token."""
    hours: int = 0
    minutes: int = 0
    seconds: int = 0


def watch_url(video_id: str) -> str:
    return WATCH_URL.format(video_id=video_id)


def _match_int(pattern: re.Pattern, text: str) -> int:
    match = pattern.search(text)
    return int(match.group(1)) if match else 0


def parse_duration(token: Optional[str]) -> DurationSpec:
    """
    Parse an ISO-8601 duration token such as ``PT1H2M3S``.

    Each component is matched independently and defaults to 0, so malformed
    tokens degrade to zeros instead of raising. Values are not carried
    (``PT90S`` stays 90 seconds). A day component is folded into hours.
    """
    if not token:
        return DurationSpec()

    # M means months before the T and minutes after it
    date_part, sep, time_part = token.partition("T")
    if not sep:
        time_part = date_part

    days = _match_int(_DAYS_RE, date_part)
    return DurationSpec(
        hours=days * 24 + _match_int(_HOURS_RE, time_part),
        minutes=_match_int(_MINUTES_RE, time_part),
        seconds=_match_int(_SECONDS_RE, time_part)
    )


def format_duration(token: Optional[str]) -> str:
    """Format a duration token as H:MM:SS, or M:SS when under an hour."""
    spec = parse_duration(token)
    if spec.hours > 0:
        return f"{spec.hours}:{spec.minutes:02d}:{spec.seconds:02d}"
    return f"{spec.minutes}:{spec.seconds:02d}"


def _parse_item(item: Dict) -> Optional[SearchResult]:
    """Parse a search API item to SearchResult, or None if it has no video ID."""
    video_id = (item.get("id") or {}).get("videoId")
    if not video_id:
        return None

    snippet = item.get("snippet") or {}
    return SearchResult(
        id=video_id,
        title=html.unescape(snippet.get("title") or "Unknown"),
        channel=html.unescape(snippet.get("channelTitle") or "Unknown")
    )


def _api_error(response: httpx.Response) -> NetworkError:
    """Build a NetworkError carrying the API's own error message when it sent one."""
    reason = response.reason_phrase
    try:
        reason = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        pass
    return NetworkError(
        f"YouTube API returned HTTP {response.status_code}: {reason}",
        status_code=response.status_code
    )


@asynccontextmanager
async def client_session(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as owned:
        yield owned


async def get_json(client: httpx.AsyncClient, url: str, params: Dict[str, Any]) -> Dict:
    """
    GET ``url`` and return the decoded JSON body.

    Transport errors and 408/429/5xx responses are retried up to
    HTTP_RETRIES times, sleeping RETRY_DELAY between attempts. Any other
    HTTP error fails immediately.
    """
    safe_params = {k: v for k, v in params.items() if k != "key"}
    last_error: Optional[NetworkError] = None

    for attempt in range(1, HTTP_RETRIES + 2):
        logger.debug(f"GET {url} {safe_params} (attempt {attempt})")
        try:
            response = await client.get(url, params=params)
        except httpx.TransportError as e:
            last_error = NetworkError(f"Request to {url} failed: {e}")
        else:
            if response.status_code in RETRYABLE_STATUS:
                last_error = _api_error(response)
            elif response.is_error:
                raise _api_error(response)
            else:
                try:
                    data = response.json()
                except ValueError as e:
                    raise NetworkError(f"Invalid response from YouTube: {e}") from e
                if not isinstance(data, dict):
                    raise NetworkError("Invalid response from YouTube: expected a JSON object")
                return data

        if attempt <= HTTP_RETRIES:
            logger.warning(f"{last_error}; retrying in {RETRY_DELAY:g}s")
            await asyncio.sleep(RETRY_DELAY)

    logger.error(f"Giving up on {url} after {HTTP_RETRIES + 1} attempts")
    raise last_error


async def search_youtube(
    query: str,
    max_results: int,
    api_key: str,
    client: Optional[httpx.AsyncClient] = None
) -> List[SearchResult]:
    """
    Search YouTube for videos.

    Args:
        query: Free-text search query
        max_results: Page size requested from the API
        api_key: YouTube Data API key
        client: Optional shared httpx client

    Returns:
        SearchResult objects in API response order

    Raises:
        NetworkError: the request failed after retries
        EmptyResultError: the API returned no videos
    """
    params = {
        "part": "snippet",
        "type": "video",
        "maxResults": max_results,
        "q": query,
        "key": api_key
    }

    async with client_session(client) as session:
        data = await get_json(session, SEARCH_URL, params)

    results = []
    for item in data.get("items") or []:
        result = _parse_item(item)
        if result is not None:
            results.append(result)

    logger.info(f"Search '{query}' returned {len(results)} results")
    if not results:
        raise EmptyResultError()
    return results


async def fetch_durations(
    ids: Iterable[str],
    api_key: str,
    client: Optional[httpx.AsyncClient] = None
) -> Dict[str, str]:
    """
    Fetch duration tokens for a set of video IDs.

    Returns:
        Mapping of video ID to raw ISO-8601 duration token. IDs the API
        did not return are simply absent.
    """
    ids = list(ids)
    if not ids:
        return {}

    params = {
        "part": "contentDetails",
        "id": ",".join(ids),
        "key": api_key
    }

    async with client_session(client) as session:
        data = await get_json(session, VIDEOS_URL, params)

    durations = {}
    for item in data.get("items") or []:
        video_id = item.get("id")
        duration = (item.get("contentDetails") or {}).get("duration")
        if video_id and duration:
            durations[video_id] = duration

    missing = len(ids) - len(durations)
    if missing:
        logger.info(f"No duration returned for {missing} of {len(ids)} videos")
    return durations


def durations_for(results: List[SearchResult], durations: Dict[str, str]) -> List[str]:
    """Join durations to results by video ID, using PT0S where none was returned."""
    return [durations.get(result.id, ZERO_DURATION) for result in results]


# Quick test
if __name__ == "__main__":
    async def test():
        print("Testing YouTube search...")
        api_key = os.environ["YT_API_KEY"]
        results = await search_youtube("lofi beats", 5, api_key)
        durations = await fetch_durations([r.id for r in results], api_key)
        for r, token in zip(results, durations_for(results, durations)):
            print(f"  - {r.title} ({format_duration(token)}) by {r.channel}")

    asyncio.run(test())

"""
Pytest fixtures for ytplay tests.
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List

import httpx
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from yt_search import SearchResult


@pytest.fixture
def search_response():
    """Sample search endpoint response."""
    return {
        "kind": "youtube#searchListResponse",
        "items": [
            {
                "id": {"kind": "youtube#video", "videoId": "vid001"},
                "snippet": {"title": "Lofi Beats to Study To", "channelTitle": "Chill Channel"}
            },
            {
                "id": {"kind": "youtube#video", "videoId": "vid002"},
                "snippet": {"title": "Rock &amp; Roll Classics", "channelTitle": "Oldies"}
            },
            {
                "id": {"kind": "youtube#video", "videoId": "vid003"},
                "snippet": {"title": "Jazz Night", "channelTitle": "Smooth Jazz"}
            }
        ]
    }


@pytest.fixture
def details_response():
    """Sample videos endpoint response, deliberately out of request order."""
    return {
        "kind": "youtube#videoListResponse",
        "items": [
            {"id": "vid003", "contentDetails": {"duration": "PT1H2M3S"}},
            {"id": "vid001", "contentDetails": {"duration": "PT45S"}},
            {"id": "vid002", "contentDetails": {"duration": "PT3M5S"}}
        ]
    }


@pytest.fixture
def sample_results():
    """Parsed search results."""
    return [
        SearchResult(id="vid001", title="Lofi Beats to Study To", channel="Chill Channel"),
        SearchResult(id="vid002", title="Rock & Roll Classics", channel="Oldies"),
        SearchResult(id="vid003", title="Jazz Night", channel="Smooth Jazz")
    ]


@pytest.fixture
def mock_api():
    """
    Build an httpx.AsyncClient backed by canned responses.

    ``responses`` maps an endpoint name ("search" or "videos") to a list of
    httpx.Response objects (or exceptions) served in order. Every request
    is recorded in ``client.requests``.
    """
    def _build(responses: Dict[str, List]) -> httpx.AsyncClient:
        queues = {name: list(items) for name, items in responses.items()}
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            endpoint = request.url.path.rsplit("/", 1)[-1]
            item = queues[endpoint].pop(0)
            if isinstance(item, Exception):
                raise item
            return item

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client.requests = requests
        return client

    return _build


@pytest.fixture
def config_path(tmp_path):
    """Config file location inside a temporary directory."""
    return tmp_path / ".ytplay.conf"


@pytest.fixture
def scripted_prompt() -> Callable:
    """Prompt replacement that returns canned answers and records the questions."""
    def _build(*answers: str):
        asked = []
        queue = list(answers)

        def prompt(question: str) -> str:
            asked.append(question)
            if not queue:
                raise EOFError
            return queue.pop(0)

        prompt.asked = asked
        return prompt

    return _build

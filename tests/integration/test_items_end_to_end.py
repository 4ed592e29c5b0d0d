"""End-to-end tests for /api/items: real app, real SQLite cache, fake Reddit and Spotify."""

from collections.abc import Iterator
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from freshspot.config.settings import (
    DatabaseSettings,
    RedditSettings,
    Settings,
    SpotifySettings,
)
from freshspot.infrastructure.integrations import RedditClient, SpotifyClient
from freshspot.main import create_app

pytestmark = pytest.mark.integration

ALBUM_ID = "4yP0hdKOZPNshxUOjY0cZj"
SEARCHED_ID = "0hvT3yIEysuuvkK73vgdcW"
AUTH = {"Authorization": "Bearer integration-token"}


class FakeUpstream:
    """Serves a Reddit listing and Spotify payloads, recording every request."""

    def __init__(self) -> None:
        self.posts: list[dict[str, Any]] = []
        self.albums: dict[str, dict[str, Any]] = {}
        self.search_results: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.reddit_status = 200

    def reddit(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.reddit_status != 200:
            return httpx.Response(self.reddit_status, text="upstream error")
        children = [{"kind": "t3", "data": post} for post in self.posts]
        return httpx.Response(
            200,
            json={"data": {"children": children, "after": "t3_next", "before": None}},
        )

    def spotify(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/v1/albums":
            ids = request.url.params["ids"].split(",")
            return httpx.Response(200, json={"albums": [self.albums.get(i) for i in ids]})
        if request.url.path == "/v1/search":
            return httpx.Response(200, json={"albums": {"items": self.search_results}})
        return httpx.Response(404, json={"error": {"status": 404}})

    def spotify_calls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "api.spotify.test"]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def app(upstream: FakeUpstream) -> FastAPI:
    settings = Settings(
        database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:"),
        reddit=RedditSettings(base_url="https://reddit.test"),
        spotify=SpotifySettings(api_base_url="https://api.spotify.test/v1"),
    )
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI, upstream: FakeUpstream) -> Iterator[TestClient]:
    """Started app whose shared HTTP clients talk to the fake upstream."""
    with TestClient(app) as test_client:
        settings: Settings = app.state.settings
        app.state.reddit_client = RedditClient(
            settings.reddit,
            client=httpx.AsyncClient(transport=httpx.MockTransport(upstream.reddit)),
        )
        app.state.spotify_client = SpotifyClient(
            settings.spotify,
            client=httpx.AsyncClient(transport=httpx.MockTransport(upstream.spotify)),
        )
        yield test_client


def _post(post_id: str, title: str, url: str | None = None, score: int = 10) -> dict[str, Any]:
    return {
        "id": post_id,
        "title": title,
        "selftext": "",
        "url": url or f"https://www.reddit.com/r/hiphopheads/comments/{post_id}/",
        "score": score,
        "permalink": f"/r/hiphopheads/comments/{post_id}/slug/",
    }


@pytest.fixture
def album_feed(upstream, make_album) -> None:
    """One direct album link followed by one free-text album post."""
    upstream.posts = [
        _post(
            "direct",
            "[FRESH ALBUM] Kendrick Lamar - GNX",
            url=f"https://open.spotify.com/album/{ALBUM_ID}",
        ),
        _post("text", "[FRESH ALBUM] Clipse - Let God Sort Em Out"),
    ]
    upstream.albums = {ALBUM_ID: make_album(album_id=ALBUM_ID, name="GNX")}
    upstream.search_results = [
        make_album(album_id=SEARCHED_ID, name="Let God Sort Em Out", artist="Clipse")
    ]


# Hey future me - the first call resolves through Spotify, the second must be served
# entirely from the SQLite cache: same entries, zero Spotify requests.
@pytest.mark.usefixtures("album_feed")
def test_cold_then_warm_cache(client: TestClient, upstream) -> None:
    cold = client.get("/api/items", params={"q": "album"}, headers=AUTH)
    assert cold.status_code == 200
    assert [entry["id"] for entry in cold.json()["results"]] == ["direct", "text"]
    assert cold.json()["after"] == "t3_next"

    spotify_calls = upstream.spotify_calls()
    assert {call.url.path for call in spotify_calls} == {"/v1/albums", "/v1/search"}
    assert all(
        call.headers["Authorization"] == AUTH["Authorization"] for call in spotify_calls
    )

    upstream.requests.clear()
    upstream.posts[0]["score"] = 500
    warm = client.get("/api/items", params={"q": "album"}, headers=AUTH)

    assert upstream.spotify_calls() == []
    assert [e["catalog_info"] for e in warm.json()["results"]] == [
        e["catalog_info"] for e in cold.json()["results"]
    ]
    assert warm.json()["results"][0]["reddit_info"]["score"] == 500


def test_reddit_failure_is_502(client: TestClient, upstream) -> None:
    upstream.reddit_status = 503

    response = client.get("/api/items", headers=AUTH)

    assert response.status_code == 502
    assert upstream.spotify_calls() == []


@pytest.mark.usefixtures("album_feed")
def test_missing_token_never_reaches_upstream(client: TestClient, upstream) -> None:
    response = client.get("/api/items", params={"q": "album"})

    assert response.status_code == 401
    assert upstream.requests == []

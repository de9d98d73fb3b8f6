import asyncio
import json
from typing import Any, Callable, List, Optional

import pytest

from mediafetch.core.calls import MediaCallback
from mediafetch.core.errors import TransportFailure
from mediafetch.core.http import HttpRequest, HttpResponse, HttpTransport

MIRRORS = ("https://m0.test/", "https://m1.test/", "https://m2.test/")


class StubTransport(HttpTransport):
    """Scripted transport: the first route whose needle appears in the URL answers."""

    def __init__(self):
        self.routes = []
        self.requests: List[HttpRequest] = []
        self.closed = False

    def route(
        self,
        needle: str,
        body: Any = "",
        status: int = 200,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> "StubTransport":
        if not isinstance(body, str):
            body = json.dumps(body)
        self.routes.append((needle, body, status, error, gate))
        return self

    def fail(self, needle: str) -> "StubTransport":
        return self.route(needle, error=TransportFailure(f"connection refused: {needle}"))

    async def issue(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        for needle, body, status, error, gate in self.routes:
            if needle in request.url:
                if gate is not None:
                    await gate.wait()
                if error is not None:
                    raise error
                return HttpResponse(status_code=status, text=body, url=request.url)
        raise TransportFailure(f"No route for {request.url}")

    async def aclose(self) -> None:
        self.closed = True

    @property
    def urls(self) -> List[str]:
        return [r.url for r in self.requests]


class RecordingCallback(MediaCallback):
    def __init__(self, on_done: Optional[Callable[[], None]] = None):
        self.successes = []
        self.failures = []
        self.on_done = on_done

    def on_success(self, filters, items, changed):
        self.successes.append((filters, items, changed))
        if self.on_done:
            self.on_done()

    def on_failure(self, error, kind):
        self.failures.append((error, kind))
        if self.on_done:
            self.on_done()

    @property
    def calls(self) -> int:
        return len(self.successes) + len(self.failures)


def movie_record(imdb_id="tt0133093", title="The Matrix", percentage=88, **overrides):
    record = {
        "_id": imdb_id,
        "imdb_id": imdb_id,
        "title": title,
        "year": "1999",
        "synopsis": "A hacker learns the truth.",
        "runtime": "136",
        "trailer": "http://youtube.com/watch?v=m8e-FF8MsqU",
        "certification": "R",
        "genres": ["action", "science-fiction"],
        "images": {
            "poster": "http://img.test/images/original/matrix.jpg",
            "fanart": "http://img.test/images/original/matrix-fanart.jpg",
        },
        "rating": {"percentage": percentage, "votes": 1000},
        "torrents": {
            "en": {
                "1080p": {"url": "magnet:?xt=urn:btih:aaa", "seed": 1200, "peer": 80},
                "720p": {"url": "magnet:?xt=urn:btih:bbb", "seed": 600, "peer": 40},
            }
        },
    }
    record.update(overrides)
    return record


def episode_record(season, episode, title=None, **overrides):
    record = {
        "season": season,
        "episode": episode,
        "title": title or f"Episode {episode}",
        "overview": "Something happens.",
        "first_aired": 1200000000,
        "date_based": False,
        "torrents": {
            "0": {"url": "magnet:?xt=urn:btih:best", "seeds": 10, "peers": 1},
            "480p": {"url": "magnet:?xt=urn:btih:sd", "seeds": 5, "peers": 2},
            "720p": {"url": "magnet:?xt=urn:btih:hd", "seeds": 9, "peers": 3},
        },
    }
    record.update(overrides)
    return record


def show_record(imdb_id="tt0903747", title="Breaking Bad", **overrides):
    record = {
        "_id": imdb_id,
        "imdb_id": imdb_id,
        "tvdb_id": "81189",
        "title": title,
        "year": "2008",
        "num_seasons": 5,
        "images": {
            "poster": "http://img.test/images/original/bb.jpg",
            "fanart": "http://img.test/images/original/bb-fanart.jpg",
        },
    }
    record.update(overrides)
    return record


def show_detail_record(episodes=None, **overrides):
    record = show_record(
        status="ended",
        country="us",
        network="AMC",
        synopsis="A chemist turns to crime.",
        runtime="45",
        air_day="Sunday",
        air_time="21:00",
        genres=["drama", "crime"],
        rating={"percentage": 94},
        episodes=episodes
        if episodes is not None
        else [episode_record(1, 1, "Pilot"), episode_record(1, 2)],
    )
    record.update(overrides)
    return record


def yts_movie_record(imdb_code="tt1375666", title="Inception", rating=8.8, **overrides):
    record = {
        "id": 1,
        "imdb_code": imdb_code,
        "title": title,
        "title_english": title,
        "year": 2010,
        "rating": rating,
        "runtime": 148,
        "genres": ["Action", "Sci-Fi"],
        "synopsis": "A thief steals secrets through dreams.",
        "yt_trailer_code": "YoHD9XEInc0",
        "language": "en",
        "mpa_rating": "PG-13",
        "medium_cover_image": "https://yts.test/assets/medium-cover.jpg",
        "background_image_original": "https://yts.test/assets/background.jpg",
        "torrents": [
            {"url": "https://yts.test/torrent/a", "hash": "AAA", "quality": "720p", "seeds": 100, "peers": 10},
            {"url": "https://yts.test/torrent/b", "hash": "BBB", "quality": "1080p", "seeds": 200, "peers": 20},
        ],
    }
    record.update(overrides)
    return record


def yts_envelope(movies):
    return {
        "status": "ok",
        "status_message": "Query was successful",
        "data": {"movie_count": len(movies), "limit": 20, "page_number": 1, "movies": movies},
    }


@pytest.fixture
def transport():
    return StubTransport()

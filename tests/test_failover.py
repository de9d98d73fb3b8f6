import asyncio

import pytest

from conftest import MIRRORS, StubTransport, movie_record
from mediafetch.core.errors import (
    EmptyResponse,
    ErrorKind,
    MalformedEnvelope,
    TransportFailure,
)
from mediafetch.models.filters import Filters
from mediafetch.providers.base import MirrorCursor
from mediafetch.providers.movies_provider import MoviesProvider


def make_provider(transport):
    return MoviesProvider(mirrors=MIRRORS, transport=transport)


def test_mirror_cursor():
    cursor = MirrorCursor(MIRRORS)
    assert cursor.base == "https://m0.test/"
    assert not cursor.is_last
    last = cursor.advance().advance()
    assert last.base == "https://m2.test/"
    assert last.is_last
    # advancing returns a new cursor
    assert cursor.index == 0


@pytest.mark.asyncio
async def test_fails_over_and_sticks_to_working_mirror():
    transport = StubTransport().fail("m0.test").fail("m1.test").route("m2.test", [movie_record()])
    provider = make_provider(transport)

    result = await provider.fetch_list(None, Filters(keywords="matrix"))

    assert [m.video_id for m in result.items] == ["tt0133093"]
    assert [url.split("/")[2] for url in transport.urls] == ["m0.test", "m1.test", "m2.test"]
    assert provider.current_mirror == 2

    transport.requests.clear()
    await provider.fetch_list(None, Filters())
    assert [url.split("/")[2] for url in transport.urls] == ["m2.test"]


@pytest.mark.asyncio
async def test_all_mirrors_failing_raises_once():
    transport = StubTransport().fail("m0.test").fail("m1.test").fail("m2.test")
    provider = make_provider(transport)

    with pytest.raises(TransportFailure):
        await provider.fetch_list(None, Filters())

    assert len(transport.requests) == 3
    assert provider.current_mirror == 2


@pytest.mark.asyncio
async def test_error_status_triggers_failover():
    transport = StubTransport().route("m0.test", "Service Unavailable", status=503).route(
        "m1.test", [movie_record()]
    )
    provider = make_provider(transport)

    result = await provider.fetch_list(None, Filters())

    assert len(result.items) == 1
    assert provider.current_mirror == 1


@pytest.mark.asyncio
async def test_empty_body_is_not_retried():
    transport = StubTransport().route("m0.test", "").route("m1.test", [movie_record()])
    provider = make_provider(transport)

    with pytest.raises(EmptyResponse):
        await provider.fetch_list(None, Filters())

    assert len(transport.requests) == 1
    assert provider.current_mirror == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["<html>oops</html>", {"movies": []}])
async def test_unexpected_bodies_are_malformed(body):
    provider = make_provider(StubTransport().route("m0.test", body))

    with pytest.raises(MalformedEnvelope) as exc_info:
        await provider.fetch_list(None, Filters())

    assert exc_info.value.kind == ErrorKind.MALFORMED_ENVELOPE


@pytest.mark.asyncio
async def test_concurrent_calls_share_the_promoted_mirror():
    gate = asyncio.Event()
    transport = (
        StubTransport()
        .route("m0.test", error=TransportFailure("refused"), gate=gate)
        .route("m1.test", [movie_record()])
    )
    provider = make_provider(transport)

    first = asyncio.create_task(provider.fetch_list(None, Filters()))
    second = asyncio.create_task(provider.fetch_list(None, Filters()))
    await asyncio.sleep(0)
    gate.set()
    results = await asyncio.gather(first, second)

    assert all(len(r.items) == 1 for r in results)
    assert provider.current_mirror == 1


@pytest.mark.asyncio
async def test_end_to_end_search_query():
    transport = StubTransport().route("movies/1", [movie_record()])
    provider = make_provider(transport)

    result = await provider.fetch_list(None, Filters(keywords="matrix", page=1))

    assert transport.urls == [
        "https://m0.test/movies/1?limit=30&keywords=matrix&order=-1&lang=en&sort=popularity"
    ]
    [movie] = result.items
    assert movie.title == "The Matrix"
    assert movie.rating == "8.8"
    assert result.changed is True

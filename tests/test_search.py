import asyncio
from unittest.mock import patch

import pytest

from conftest import (
    MIRRORS,
    StubTransport,
    movie_record,
    show_record,
    yts_envelope,
    yts_movie_record,
)
from mediafetch.core.config import get_settings
from mediafetch.core.errors import ErrorKind
from mediafetch.providers.movies_provider import MoviesProvider
from mediafetch.providers.tv_provider import TVProvider
from mediafetch.providers.yts_provider import YtsMoviesProvider
from mediafetch.services.search import SearchAggregator, search_filters, search_providers

DELAY = 0.01


def make_providers(transport):
    return [
        MoviesProvider(mirrors=MIRRORS, transport=transport),
        TVProvider(mirrors=MIRRORS, transport=transport),
    ]


def catalog_transport(gate=None):
    return (
        StubTransport()
        .route("movies/", [movie_record()], gate=gate)
        .route("shows/", [show_record()], gate=gate)
    )


def test_search_filters():
    filters = search_filters("matrix")
    assert filters.keywords == "matrix"
    assert filters.page == 1
    assert filters.lang_code == get_settings().lang_code


@pytest.mark.asyncio
async def test_search_providers_skips_failures():
    transport = StubTransport().route("movies/", [movie_record()])
    providers = make_providers(transport)

    groups = await search_providers("matrix", providers)

    assert len(groups) == 1
    assert groups[0].provider_name == "Movies"
    assert groups[0].title == "Movie results"
    assert groups[0].items[0].title == "The Matrix"


@pytest.mark.asyncio
async def test_search_providers_times_out_slow_provider():
    transport = catalog_transport(gate=asyncio.Event())
    settings = get_settings().model_copy(update={"provider_timeout": 0.05})

    with patch("mediafetch.services.search.get_settings", return_value=settings):
        groups = await search_providers("matrix", make_providers(transport))

    assert groups == []


@pytest.mark.asyncio
async def test_query_is_debounced():
    transport = catalog_transport()
    groups = []
    aggregator = SearchAggregator(make_providers(transport), groups.append, delay=DELAY)

    aggregator.query("mat")
    aggregator.query("matr")
    aggregator.query("matrix")
    assert aggregator.pending
    await asyncio.sleep(DELAY * 5)
    await aggregator.wait()

    assert sorted(g.provider_name for g in groups) == ["Movies", "TV"]
    assert len(transport.requests) == 2
    assert all("keywords=matrix" in url for url in transport.urls)
    assert not aggregator.pending


@pytest.mark.asyncio
async def test_short_typed_queries_are_ignored():
    transport = catalog_transport()
    groups = []
    aggregator = SearchAggregator(
        make_providers(transport), groups.append, delay=DELAY, min_query_length=3
    )

    assert aggregator.on_query_text_change("abc") is True
    assert not aggregator.pending

    aggregator.on_query_text_change("abcd")
    assert aggregator.pending
    await asyncio.sleep(DELAY * 5)
    await aggregator.wait()
    assert len(groups) == 2


@pytest.mark.asyncio
async def test_submit_searches_regardless_of_length():
    transport = catalog_transport()
    groups = []
    aggregator = SearchAggregator(make_providers(transport), groups.append, delay=DELAY)

    assert aggregator.submit("up") is True
    await asyncio.sleep(DELAY * 5)
    await aggregator.wait()
    assert len(groups) == 2


@pytest.mark.asyncio
async def test_new_query_supersedes_in_flight_calls():
    gate = asyncio.Event()
    transport = catalog_transport(gate=gate)
    groups = []
    aggregator = SearchAggregator(make_providers(transport), groups.append, delay=DELAY)

    aggregator.query("first")
    await asyncio.sleep(DELAY * 5)
    stale = list(aggregator._handles)
    assert len(stale) == 2

    aggregator.query("second")
    assert all(h.cancelled for h in stale)
    await asyncio.sleep(DELAY * 5)
    gate.set()
    await aggregator.wait()
    for handle in stale:
        await handle.wait()

    assert len(groups) == 2
    assert sum("keywords=second" in url for url in transport.urls) == 2


@pytest.mark.asyncio
async def test_cancel_drops_pending_query():
    transport = catalog_transport()
    groups = []
    aggregator = SearchAggregator(make_providers(transport), groups.append, delay=DELAY)

    aggregator.query("matrix")
    aggregator.cancel()
    await asyncio.sleep(DELAY * 5)

    assert groups == []
    assert transport.requests == []


@pytest.mark.asyncio
async def test_failures_are_reported_per_provider():
    transport = StubTransport().route("movies/", [movie_record()])
    groups, failures = [], []
    providers = make_providers(transport)
    aggregator = SearchAggregator(
        providers,
        groups.append,
        on_failure=lambda provider, error, kind: failures.append((provider.name, kind)),
        delay=DELAY,
    )

    aggregator.query("matrix")
    await asyncio.sleep(DELAY * 5)
    await aggregator.wait()

    assert [g.provider_name for g in groups] == ["Movies"]
    assert failures == [("TV", ErrorKind.TRANSPORT_FAILURE)]


def yts_transport():
    return StubTransport().route("list_movies.json", yts_envelope([yts_movie_record()]))


@pytest.mark.asyncio
async def test_every_search_starts_at_page_one():
    transport = yts_transport()
    provider = YtsMoviesProvider(mirrors=MIRRORS, transport=transport)

    await search_providers("inception", [provider])
    await search_providers("inception", [provider])

    assert len(transport.urls) == 2
    assert all("&page=1&" in url for url in transport.urls)
    assert provider.next_page("like_count") == 1


@pytest.mark.asyncio
async def test_aggregated_queries_start_at_page_one():
    transport = yts_transport()
    groups = []
    provider = YtsMoviesProvider(mirrors=MIRRORS, transport=transport)
    aggregator = SearchAggregator([provider], groups.append, delay=DELAY)

    for words in ("inception", "inception"):
        aggregator.query(words)
        await asyncio.sleep(DELAY * 5)
        await aggregator.wait()

    assert len(groups) == 2
    assert len(transport.urls) == 2
    assert all("&page=1&" in url for url in transport.urls)
    assert aggregator.providers == [provider]

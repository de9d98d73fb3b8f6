"""YTS movies provider."""

import threading
from typing import Dict, List, Sequence

from mediafetch.core.config import Settings
from mediafetch.models.filters import Filters, Order, Sort
from mediafetch.normalizers.yts import YtsMovieNormalizer
from mediafetch.providers.base import CatalogRequest, Genre, MediaProvider, NavInfo
from mediafetch.providers.genres import YTS_GENRES, to_genres
from mediafetch.providers.query import QueryTable, compile_query


class YtsMoviesProvider(MediaProvider):
    """Movies from the YTS list_movies endpoint.

    YTS pages are tracked per sort key: the first list fetch for a sort asks
    for page 1, each later one for the next page. The page on the caller's
    filters is ignored and the served page is reported on the snapshot
    passed back to the callback. Counters live as long as the provider.
    paged() returns an instance without counters that serves the page
    named on the filters.

    List responses carry everything, so detail fetches make no request.
    """

    media_call_tag = "yts_movies_http_call"
    items_path = "list_movies.json"
    detail_in_list = True
    query_table = QueryTable(
        sort_tokens={
            Sort.TRENDING: "seeds",
            Sort.POPULARITY: "like_count",
            Sort.RATING: "rating",
            Sort.DATE: "date_added",
            Sort.YEAR: "year",
            Sort.ALPHABET: "title",
        },
        order_tokens=("asc", "desc"),
        limit=20,
        keywords_key="query_term",
        order_key="order_by",
        lang_key=None,
        sort_key="sort_by",
        page_key="page",
        extra=(("with_rt_ratings", "true"),),
    )

    def __init__(self, *args, track_pages: bool = True, **kwargs):
        self.track_pages = track_pages
        self._pages_lock = threading.Lock()
        self._current_pages: Dict[str, int] = {}
        super().__init__(*args, **kwargs)

    @property
    def name(self) -> str:
        return "YTS"

    @property
    def result_title(self) -> str:
        return "Movie results"

    def default_mirrors(self, settings: Settings) -> Sequence[str]:
        return settings.yts_api_urls

    def create_normalizer(self) -> YtsMovieNormalizer:
        return YtsMovieNormalizer(self, self.subs_provider, self.meta_provider)

    def next_page(self, sort_token: str) -> int:
        with self._pages_lock:
            page = self._current_pages.get(sort_token, 0) + 1
            self._current_pages[sort_token] = page
            return page

    def build_list_request(self, filters: Filters) -> CatalogRequest:
        if self.track_pages:
            filters.page = self.next_page(self.query_table.sort_token(filters.sort))
        else:
            filters.page = filters.page or 1
        return CatalogRequest(
            path=self.items_path,
            params=compile_query(filters, self.query_table),
        )

    def get_navigation(self) -> List[NavInfo]:
        return [
            NavInfo(sort=Sort.TRENDING, default_order=Order.DESC, label="Trending", icon="yts_filter_trending"),
            NavInfo(sort=Sort.POPULARITY, default_order=Order.DESC, label="Popular", icon="yts_filter_popular_now"),
            NavInfo(sort=Sort.RATING, default_order=Order.DESC, label="Top rated", icon="yts_filter_top_rated"),
            NavInfo(sort=Sort.DATE, default_order=Order.DESC, label="Release date", icon="yts_filter_release_date"),
            NavInfo(sort=Sort.YEAR, default_order=Order.DESC, label="Year", icon="yts_filter_year"),
            NavInfo(sort=Sort.ALPHABET, default_order=Order.ASC, label="A-Z", icon="yts_filter_a_to_z"),
        ]

    def get_genres(self) -> List[Genre]:
        return to_genres(YTS_GENRES)

    def paged(self) -> "YtsMoviesProvider":
        return self.spawn(track_pages=False)

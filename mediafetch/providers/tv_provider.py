"""TV shows provider for the catalog API."""

from typing import List, Sequence

from mediafetch.core.config import Settings
from mediafetch.models.filters import Order, Sort
from mediafetch.normalizers.tv import ShowNormalizer
from mediafetch.providers.base import Genre, MediaProvider, NavInfo
from mediafetch.providers.genres import CATALOG_GENRES, to_genres
from mediafetch.providers.query import QueryTable


class TVProvider(MediaProvider):
    """TV shows from the catalog API.

    The list endpoint (shows/{page}) returns shallow shows; the detail
    endpoint (show/{imdb_id}) returns the full show with its episodes.
    """

    media_call_tag = "tv_http_call"
    items_path = "shows/"
    item_details_path = "show/"
    query_table = QueryTable(
        sort_tokens={
            Sort.POPULARITY: "popularity",
            Sort.TRENDING: "trending",
            Sort.YEAR: "year",
            Sort.DATE: "updated",
            Sort.RATING: "rating",
            Sort.ALPHABET: "name",
        },
        order_tokens=("1", "-1"),
        limit=30,
        lang_key=None,
    )

    @property
    def name(self) -> str:
        return "TV"

    @property
    def result_title(self) -> str:
        return "Show results"

    def default_mirrors(self, settings: Settings) -> Sequence[str]:
        return settings.tv_api_urls

    def create_normalizer(self) -> ShowNormalizer:
        return ShowNormalizer(self, self.subs_provider, self.meta_provider)

    def get_navigation(self) -> List[NavInfo]:
        return [
            NavInfo(sort=Sort.TRENDING, default_order=Order.DESC, label="Trending", icon="tvshow_filter_trending"),
            NavInfo(sort=Sort.POPULARITY, default_order=Order.DESC, label="Popular", icon="tvshow_filter_popular_now"),
            NavInfo(sort=Sort.RATING, default_order=Order.DESC, label="Top rated", icon="tvshow_filter_top_rated"),
            NavInfo(sort=Sort.DATE, default_order=Order.DESC, label="Last updated", icon="tvshow_filter_last_updated"),
            NavInfo(sort=Sort.YEAR, default_order=Order.DESC, label="Year", icon="tvshow_filter_year"),
            NavInfo(sort=Sort.ALPHABET, default_order=Order.DESC, label="A-Z", icon="tvshow_filter_a_to_z"),
        ]

    def get_genres(self) -> List[Genre]:
        return to_genres(CATALOG_GENRES)

"""Movies provider for the catalog API."""

from typing import List, Sequence

from mediafetch.core.config import Settings
from mediafetch.models.filters import Order, Sort
from mediafetch.normalizers.catalog import CatalogMovieNormalizer
from mediafetch.providers.base import Genre, MediaProvider, NavInfo
from mediafetch.providers.genres import CATALOG_GENRES, to_genres
from mediafetch.providers.query import QueryTable


class MoviesProvider(MediaProvider):
    """Movies from the catalog API, e.g. GET movies/2?limit=30&...&sort=rating."""

    media_call_tag = "movies_http_call"
    items_path = "movies/"
    item_details_path = "movie/"
    query_table = QueryTable(
        sort_tokens={
            Sort.POPULARITY: "popularity",
            Sort.YEAR: "year",
            Sort.DATE: "last added",
            Sort.RATING: "rating",
            Sort.ALPHABET: "name",
            Sort.TRENDING: "trending",
        },
        order_tokens=("1", "-1"),
        limit=30,
    )

    @property
    def name(self) -> str:
        return "Movies"

    @property
    def result_title(self) -> str:
        return "Movie results"

    def default_mirrors(self, settings: Settings) -> Sequence[str]:
        return settings.movies_api_urls

    def create_normalizer(self) -> CatalogMovieNormalizer:
        return CatalogMovieNormalizer(self, self.subs_provider, self.meta_provider)

    def get_navigation(self) -> List[NavInfo]:
        return [
            NavInfo(sort=Sort.TRENDING, default_order=Order.DESC, label="Trending", icon="movie_filter_trending"),
            NavInfo(sort=Sort.POPULARITY, default_order=Order.DESC, label="Popular", icon="movie_filter_popular_now"),
            NavInfo(sort=Sort.RATING, default_order=Order.DESC, label="Top rated", icon="movie_filter_top_rated"),
            NavInfo(sort=Sort.DATE, default_order=Order.DESC, label="Release date", icon="movie_filter_release_date"),
            NavInfo(sort=Sort.YEAR, default_order=Order.DESC, label="Year", icon="movie_filter_year"),
            NavInfo(sort=Sort.ALPHABET, default_order=Order.ASC, label="A-Z", icon="movie_filter_a_to_z"),
        ]

    def get_genres(self) -> List[Genre]:
        return to_genres(CATALOG_GENRES)

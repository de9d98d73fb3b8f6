"""Anime provider for the anime catalog API."""

from typing import List, Sequence

from mediafetch.core.config import Settings
from mediafetch.models.filters import Order, Sort
from mediafetch.normalizers.anime import AnimeNormalizer
from mediafetch.providers.base import Genre, MediaProvider, NavInfo
from mediafetch.providers.genres import ANIME_GENRES, to_genres
from mediafetch.providers.query import QueryTable


class AnimeProvider(MediaProvider):
    """Anime shows. Same query shape as the TV catalog."""

    media_call_tag = "anime_http_call"
    items_path = "animes/"
    item_details_path = "anime/"
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
        return "Anime"

    @property
    def result_title(self) -> str:
        return "Anime results"

    def default_mirrors(self, settings: Settings) -> Sequence[str]:
        return settings.anime_api_urls

    def create_normalizer(self) -> AnimeNormalizer:
        return AnimeNormalizer(self, self.subs_provider, self.meta_provider)

    def get_navigation(self) -> List[NavInfo]:
        return [
            NavInfo(sort=Sort.POPULARITY, default_order=Order.DESC, label="Popular", icon="anime_filter_popular_now"),
            NavInfo(sort=Sort.YEAR, default_order=Order.DESC, label="Year", icon="anime_filter_year"),
            NavInfo(sort=Sort.ALPHABET, default_order=Order.ASC, label="A-Z", icon="anime_filter_a_to_z"),
        ]

    def get_genres(self) -> List[Genre]:
        return to_genres(ANIME_GENRES)

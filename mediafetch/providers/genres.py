"""Genre taxonomies of the catalog sources."""

from typing import List, Sequence, Tuple

from mediafetch.providers.base import Genre

CATALOG_GENRES: Sequence[Tuple[str | None, str]] = (
    (None, "All"),
    ("action", "Action"),
    ("adventure", "Adventure"),
    ("animation", "Animation"),
    ("comedy", "Comedy"),
    ("crime", "Crime"),
    ("disaster", "Disaster"),
    ("documentary", "Documentary"),
    ("drama", "Drama"),
    ("eastern", "Eastern"),
    ("family", "Family"),
    ("fantasy", "Fantasy"),
    ("fan-film", "Fan Film"),
    ("film-noir", "Film Noir"),
    ("history", "History"),
    ("holiday", "Holiday"),
    ("horror", "Horror"),
    ("indie", "Indie"),
    ("music", "Music"),
    ("mystery", "Mystery"),
    ("road", "Road"),
    ("romance", "Romance"),
    ("science-fiction", "Science Fiction"),
    ("short", "Short"),
    ("sports", "Sports"),
    ("suspense", "Suspense"),
    ("thriller", "Thriller"),
    ("tv-movie", "TV Movie"),
    ("war", "War"),
    ("western", "Western"),
)

ANIME_GENRES: Sequence[Tuple[str | None, str]] = (
    (None, "All"),
    ("action", "Action"),
    ("adventure", "Adventure"),
    ("comedy", "Comedy"),
    ("drama", "Drama"),
    ("ecchi", "Ecchi"),
    ("fantasy", "Fantasy"),
    ("horror", "Horror"),
    ("mecha", "Mecha"),
    ("mystery", "Mystery"),
    ("psychological", "Psychological"),
    ("romance", "Romance"),
    ("sci-fi", "Sci-Fi"),
    ("slice of life", "Slice of Life"),
    ("sports", "Sports"),
    ("supernatural", "Supernatural"),
    ("thriller", "Thriller"),
)

YTS_GENRES: Sequence[Tuple[str | None, str]] = (
    (None, "All"),
    ("action", "Action"),
    ("adventure", "Adventure"),
    ("animation", "Animation"),
    ("biography", "Biography"),
    ("comedy", "Comedy"),
    ("crime", "Crime"),
    ("documentary", "Documentary"),
    ("drama", "Drama"),
    ("family", "Family"),
    ("fantasy", "Fantasy"),
    ("film-noir", "Film Noir"),
    ("game-show", "Game Show"),
    ("history", "History"),
    ("horror", "Horror"),
    ("music", "Music"),
    ("musical", "Musical"),
    ("mystery", "Mystery"),
    ("news", "News"),
    ("reality-tv", "Reality TV"),
    ("romance", "Romance"),
    ("science-fiction", "Science Fiction"),
    ("sports", "Sports"),
    ("talk-show", "Talk Show"),
    ("thriller", "Thriller"),
    ("war", "War"),
    ("western", "Western"),
)


def to_genres(entries: Sequence[Tuple[str | None, str]]) -> List[Genre]:
    return [Genre(key=key, label=label) for key, label in entries]

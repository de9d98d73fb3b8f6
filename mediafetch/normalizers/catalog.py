"""Normalizer for the generic movie catalog schema."""

from mediafetch.models.media import Movie, Torrent
from mediafetch.normalizers.base import (
    Normalizer,
    apply_images,
    as_count,
    as_str,
    join_genres,
    rating_from_percentage,
)


class CatalogMovieNormalizer(Normalizer):
    """Movies as served by the catalog API.

    List endpoints return a JSON array of movies; the detail endpoint
    returns a single movie object with the same fields.
    """

    def parse_item(self, record: dict) -> Movie:
        movie = Movie(**self.capabilities())

        movie.video_id = record["imdb_id"]
        movie.imdb_id = movie.video_id
        movie.title = record.get("title")
        movie.year = as_str(record.get("year"))
        movie.genre = join_genres(record.get("genres"))

        rating = record.get("rating") or {}
        if rating.get("percentage") is not None:
            movie.rating = rating_from_percentage(rating["percentage"])

        movie.trailer = record.get("trailer")
        movie.runtime = as_str(record.get("runtime"))
        movie.synopsis = record.get("synopsis")
        movie.certification = record.get("certification")

        apply_images(movie, record.get("images"))

        for language, qualities in (record.get("torrents") or {}).items():
            torrent_map = {}
            for quality, entry in (qualities or {}).items():
                if not entry or not entry.get("url"):
                    continue
                torrent_map[quality] = Torrent(
                    url=entry["url"],
                    seeds=as_count(entry.get("seed", entry.get("seeds"))),
                    peers=as_count(entry.get("peer", entry.get("peers"))),
                    hash=entry.get("hash"),
                    quality=quality,
                    language=language,
                )
            movie.torrents[language] = torrent_map

        return movie

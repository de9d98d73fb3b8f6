"""Normalizer for the YTS list_movies schema."""

from typing import Any, List

from mediafetch.core.errors import MalformedEnvelope
from mediafetch.models.media import Movie, Torrent
from mediafetch.normalizers.base import (
    Normalizer,
    as_count,
    as_str,
    is_placeholder,
    join_genres,
)

TRAILER_URL = "http://youtube.com/watch?v="


class YtsMovieNormalizer(Normalizer):
    """YTS wraps its movies in a {status, data: {movies: [...]}} envelope.

    Movies carry every detail in the list response, including torrents.
    """

    def records(self, payload: Any) -> List[Any]:
        if not isinstance(payload, dict):
            raise MalformedEnvelope(
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        status = payload.get("status")
        if status != "ok":
            raise MalformedEnvelope(
                f"API status is not OK: {payload.get('status_message', status)}"
            )
        data = payload.get("data")
        if not isinstance(data, dict):
            raise MalformedEnvelope("API content doesn't have 'data' element")
        movies = data.get("movies") or []
        if not isinstance(movies, list):
            raise MalformedEnvelope("API 'movies' element is not a list")
        return movies

    def parse_item(self, record: dict) -> Movie:
        movie = Movie(**self.capabilities())

        movie.video_id = record["imdb_code"]
        movie.imdb_id = movie.video_id
        movie.title = record.get("title_english") or record.get("title")
        movie.year = as_str(record.get("year"))
        movie.genre = join_genres(record.get("genres"))
        if record.get("rating") is not None:
            movie.rating = f"{float(record['rating']):.1f}"
        if record.get("yt_trailer_code"):
            movie.trailer = TRAILER_URL + record["yt_trailer_code"]
        movie.runtime = as_str(record.get("runtime"))
        movie.synopsis = record.get("synopsis") or record.get("description_full")
        movie.certification = record.get("mpa_rating")

        cover = record.get("medium_cover_image")
        if not is_placeholder(cover):
            movie.image = cover
        background = record.get("background_image_original")
        if not is_placeholder(background):
            movie.full_image = movie.header_image = background

        language = record.get("language") or "en"
        torrent_map = {}
        for entry in record.get("torrents") or []:
            quality = entry.get("quality")
            if not quality or not entry.get("url") or quality in torrent_map:
                continue
            torrent_map[quality] = Torrent(
                url=entry["url"],
                seeds=as_count(entry.get("seeds")),
                peers=as_count(entry.get("peers")),
                hash=entry.get("hash"),
                quality=quality,
                language=language,
            )
        if torrent_map:
            movie.torrents[language] = torrent_map

        return movie

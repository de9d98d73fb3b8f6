"""Normalizer for the TV catalog schema."""

import logging
from typing import List

from mediafetch.models.media import Episode, Show, ShowStatus, Torrent
from mediafetch.normalizers.base import (
    RECORD_ERRORS,
    Normalizer,
    apply_images,
    as_count,
    as_int,
    as_str,
    join_genres,
    rating_from_percentage,
)

logger = logging.getLogger(__name__)

STATUS_MAP = {
    "ended": ShowStatus.ENDED,
    "returning series": ShowStatus.CONTINUING,
    "in production": ShowStatus.CONTINUING,
    "continuing": ShowStatus.CONTINUING,
    "canceled": ShowStatus.CANCELED,
}


def parse_status(value: str | None) -> ShowStatus:
    if not value:
        return ShowStatus.UNKNOWN
    return STATUS_MAP.get(value.strip().lower(), ShowStatus.UNKNOWN)


class ShowNormalizer(Normalizer):
    """Shows as served by the TV catalog API.

    The list endpoint carries a shallow record per show. The detail
    endpoint adds the synopsis, air schedule and every episode with its
    torrents. id_field names the key holding the show id, which becomes
    the video id.
    """

    def __init__(self, *args, id_field: str = "imdb_id", **kwargs):
        super().__init__(*args, **kwargs)
        self.id_field = id_field

    def parse_item(self, record: dict) -> Show:
        show = Show(**self.capabilities())
        show.title = record.get("title")
        show.video_id = record[self.id_field]
        show.imdb_id = record.get("imdb_id")
        show.tvdb_id = as_str(record.get("tvdb_id"))
        seasons = record.get("num_seasons", record.get("seasons"))
        show.seasons = as_int(seasons) if seasons is not None else 0
        show.year = as_str(record.get("year"))
        apply_images(show, record.get("images"), keep_full=False)
        return show

    def parse_detail(self, record: dict) -> Show:
        show = self.parse_item(record)
        apply_images(show, record.get("images"))

        show.status = parse_status(record.get("status"))
        show.country = record.get("country")
        show.network = record.get("network")
        show.synopsis = record.get("synopsis")
        show.runtime = as_str(record.get("runtime"))
        show.air_day = record.get("air_day")
        show.air_time = record.get("air_time")

        rating = record.get("rating") or {}
        if rating.get("percentage") is not None:
            show.rating = rating_from_percentage(rating["percentage"])
        show.genre = join_genres(record.get("genres"))

        show.episodes = self.parse_episodes(show, record.get("episodes") or [])
        return show

    def parse_episodes(self, show: Show, records: list) -> List[Episode]:
        """Build the episode list, keeping the first record of each S{n}E{n}.

        A record claims its key as soon as its season and episode numbers
        read, so a later duplicate is dropped even when the first one turns
        out to be malformed.
        """
        episodes = []
        seen = set()
        for record in records:
            try:
                season = as_int(record["season"])
                number = as_int(record["episode"])
                key = f"S{season}E{number}"
                if key in seen:
                    continue
                seen.add(key)
                episodes.append(self.parse_episode(show, record, season, number))
            except RECORD_ERRORS as e:
                logger.warning(
                    f"Skipping malformed episode of {show.title}", exc_info=e
                )
        return episodes

    def parse_episode(
        self, show: Show, record: dict, season: int, number: int
    ) -> Episode:
        episode = Episode(**self.capabilities(with_meta=True))

        for quality, entry in (record.get("torrents") or {}).items():
            # "0" duplicates the best available quality
            if quality == "0" or not entry:
                continue
            episode.torrents[quality] = Torrent(
                url=str(entry["url"]),
                seeds=as_count(entry.get("seeds")),
                peers=as_count(entry.get("peers")),
                quality=quality,
            )

        episode.show_name = show.title
        episode.date_based = bool(record.get("date_based", False))
        aired = record.get("first_aired")
        episode.aired = as_int(aired) if aired is not None else None
        episode.title = record.get("title")
        episode.overview = record.get("overview")
        episode.season = season
        episode.episode = number
        episode.video_id = f"{show.video_id}{season}{number}"
        episode.imdb_id = show.imdb_id
        episode.image = episode.full_image = episode.header_image = show.header_image
        return episode

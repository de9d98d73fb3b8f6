"""Media models produced by catalog providers."""

import copy
from enum import Enum
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, Field, NonNegativeInt

CAPABILITIES = ("media_provider", "subs_provider", "meta_provider")


class Torrent(BaseModel):
    """A downloadable rendition of a movie or episode."""

    url: str
    seeds: NonNegativeInt = 0
    peers: NonNegativeInt = 0
    hash: Optional[str] = None
    quality: Optional[str] = None
    language: Optional[str] = None


class ShowStatus(str, Enum):
    ENDED = "ended"
    CONTINUING = "continuing"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


class MediaItem(BaseModel):
    """Fields shared by every media variant.

    The provider references are capabilities the presentation layer uses
    later to look up subtitles and extra metadata. They are wired in when the
    item is built and are never serialized.
    """

    video_id: Optional[str] = None
    imdb_id: Optional[str] = None
    title: Optional[str] = None
    year: Optional[str] = None
    genre: str = ""
    rating: Optional[str] = None
    image: Optional[str] = None
    full_image: Optional[str] = None
    header_image: Optional[str] = None

    media_provider: Any = Field(default=None, exclude=True, repr=False)
    subs_provider: Any = Field(default=None, exclude=True, repr=False)
    meta_provider: Any = Field(default=None, exclude=True, repr=False)

    def capability_refs(self) -> Iterator[Any]:
        for name in CAPABILITIES:
            ref = getattr(self, name)
            if ref is not None:
                yield ref

    def clone(self) -> "MediaItem":
        """Deep copy whose capability references still point at the originals."""
        memo = {id(ref): ref for ref in self.capability_refs()}
        return copy.deepcopy(self, memo)


class Movie(MediaItem):
    kind: Literal["movie"] = "movie"
    trailer: Optional[str] = None
    runtime: Optional[str] = None
    synopsis: Optional[str] = None
    certification: Optional[str] = None
    # language -> quality -> torrent
    torrents: Dict[str, Dict[str, Torrent]] = {}


class Episode(MediaItem):
    kind: Literal["episode"] = "episode"
    show_name: Optional[str] = None
    date_based: bool = False
    aired: Optional[int] = None  # epoch seconds
    overview: Optional[str] = None
    season: int = 0
    episode: int = 0
    # quality -> torrent
    torrents: Dict[str, Torrent] = {}


class Show(MediaItem):
    kind: Literal["show"] = "show"
    tvdb_id: Optional[str] = None
    seasons: int = 0
    status: ShowStatus = ShowStatus.UNKNOWN
    country: Optional[str] = None
    network: Optional[str] = None
    synopsis: Optional[str] = None
    runtime: Optional[str] = None
    air_day: Optional[str] = None
    air_time: Optional[str] = None
    episodes: List[Episode] = []

    def capability_refs(self) -> Iterator[Any]:
        yield from super().capability_refs()
        for episode in self.episodes:
            yield from episode.capability_refs()


Media = Annotated[Union[Movie, Show, Episode], Field(discriminator="kind")]

"""Shared helpers for turning raw catalog payloads into media models."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List

from mediafetch.core.errors import MalformedEnvelope
from mediafetch.models.media import MediaItem

logger = logging.getLogger(__name__)

PLACEHOLDER_SENTINEL = "posterholder"

# Raised by a malformed record; the record is skipped.
RECORD_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def cap_words(text: str) -> str:
    """Capitalize the first letter of every space separated word."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def join_genres(genres: Iterable[str] | None) -> str:
    if not genres:
        return ""
    return ", ".join(cap_words(genre) for genre in genres if genre)


def rating_from_percentage(percentage: Any) -> str:
    """Convert a 0-100 percentage into a 0-10 rating string."""
    return f"{float(percentage) / 10:.1f}"


def thumbnail(url: str) -> str:
    return url.replace("/original/", "/medium/")


def is_placeholder(url: str | None) -> bool:
    return not url or PLACEHOLDER_SENTINEL in url


def as_int(value: Any) -> int:
    """JSON numbers may arrive as floats or numeric strings."""
    return int(float(value))


def as_count(value: Any) -> int:
    """Seed and peer counts; missing or negative values count as zero."""
    if value is None:
        return 0
    return max(0, as_int(value))


def as_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def apply_images(media: MediaItem, images: dict | None, keep_full: bool = True) -> None:
    """Set thumbnail, full and header images, skipping placeholder artwork."""
    if not images:
        return
    poster = images.get("poster")
    fanart = images.get("fanart")
    if not is_placeholder(poster):
        media.image = thumbnail(poster)
        if keep_full:
            media.full_image = poster
    if not is_placeholder(fanart):
        media.header_image = thumbnail(fanart)


class Normalizer(ABC):
    """Converts one source schema into media models.

    Capability references given here are attached to every item built.
    """

    def __init__(self, media_provider=None, subs_provider=None, meta_provider=None):
        self.media_provider = media_provider
        self.subs_provider = subs_provider
        self.meta_provider = meta_provider

    def capabilities(self, with_meta: bool = False) -> dict:
        caps = {
            "media_provider": self.media_provider,
            "subs_provider": self.subs_provider,
        }
        if with_meta:
            caps["meta_provider"] = self.meta_provider
        return caps

    def records(self, payload: Any) -> List[Any]:
        """Return the raw records of a list payload."""
        if not isinstance(payload, list):
            raise MalformedEnvelope(
                f"Expected a JSON array, got {type(payload).__name__}"
            )
        return payload

    def normalize_list(self, payload: Any, items: List[Any]) -> List[Any]:
        """Append every well-formed record of the payload to items."""
        for record in self.records(payload):
            try:
                media = self.parse_item(record)
            except RECORD_ERRORS as e:
                logger.warning(
                    f"{type(self).__name__}: skipping malformed record", exc_info=e
                )
                continue
            if media is not None:
                items.append(media)
        return items

    def normalize_detail(self, payload: Any) -> List[Any]:
        """Return the detailed item of an object payload, or an empty list."""
        if not isinstance(payload, dict):
            raise MalformedEnvelope(
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        try:
            media = self.parse_detail(payload)
        except RECORD_ERRORS as e:
            logger.warning(f"{type(self).__name__}: malformed detail", exc_info=e)
            return []
        return [media] if media is not None else []

    @abstractmethod
    def parse_item(self, record: dict) -> MediaItem | None:
        """Build one item from a list record, or None to leave it out."""
        pass

    def parse_detail(self, record: dict) -> MediaItem | None:
        return self.parse_item(record)

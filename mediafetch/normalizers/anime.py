"""Normalizer for the anime catalog list schema."""

import logging

from mediafetch.models.media import Show
from mediafetch.normalizers.tv import ShowNormalizer

logger = logging.getLogger(__name__)


class AnimeNormalizer(ShowNormalizer):
    """Anime list records are typed; only shows are listed.

    The catalog has no anime movies, so records typed "movie" are skipped.
    Details share the TV show schema, keyed by the catalog's own id.
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("id_field", "_id")
        super().__init__(*args, **kwargs)

    def parse_item(self, record: dict) -> Show | None:
        media_type = (record.get("type") or "show").lower()
        if media_type != "show":
            logger.debug(f"Skipping anime record of type {media_type}")
            return None
        return super().parse_item(record)

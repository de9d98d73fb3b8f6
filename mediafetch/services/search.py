"""Search service for fanning a keyword query out to providers."""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel

from mediafetch.core.calls import FetchHandle, MediaCallback
from mediafetch.core.config import get_settings
from mediafetch.core.errors import ErrorKind
from mediafetch.models.filters import Filters
from mediafetch.models.media import Media
from mediafetch.providers import ProviderRegistry
from mediafetch.providers.base import MediaProvider

logger = logging.getLogger(__name__)


class ResultGroup(BaseModel):
    """The results of one provider for one query."""

    provider_name: str
    title: str
    items: List[Media] = []


def search_filters(keywords: str) -> Filters:
    return Filters(keywords=keywords, page=1, lang_code=get_settings().lang_code)


async def search_providers(
    keywords: str,
    providers: Optional[Sequence[MediaProvider]] = None,
) -> List[ResultGroup]:
    """Search every provider concurrently.

    Each query runs on fresh provider instances, so it always starts at
    page 1. Providers that fail or time out are logged and left out of the
    result.

    Returns:
        One ResultGroup per provider that answered, in provider order.
    """
    settings = get_settings()
    timeout = settings.provider_timeout
    if providers is None:
        providers = ProviderRegistry.all()
    filters = search_filters(keywords)

    async def fetch_from_provider(provider: MediaProvider) -> ResultGroup | None:
        try:
            result = await asyncio.wait_for(
                provider.fetch_list(None, filters), timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Timeout searching {provider.name} after {timeout}s")
            return None
        except Exception as e:
            logger.error(f"Error searching {provider.name}: {e}", exc_info=e)
            return None
        return ResultGroup(
            provider_name=provider.name,
            title=provider.result_title,
            items=result.items,
        )

    groups = await asyncio.gather(
        *[fetch_from_provider(p.spawn()) for p in providers]
    )
    return [group for group in groups if group is not None]


class _GroupCallback(MediaCallback):
    def __init__(self, aggregator: "SearchAggregator", provider: MediaProvider, generation: int):
        self.aggregator = aggregator
        self.provider = provider
        self.generation = generation

    def on_success(self, filters, items, changed) -> None:
        if self.generation != self.aggregator.generation:
            return
        self.aggregator.on_group(
            ResultGroup(
                provider_name=self.provider.name,
                title=self.provider.result_title,
                items=items,
            )
        )

    def on_failure(self, error, kind) -> None:
        if self.generation != self.aggregator.generation:
            return
        logger.warning(f"Search on {self.provider.name} failed ({kind.value}): {error}")
        if self.aggregator.on_failure is not None:
            self.aggregator.on_failure(self.provider, error, kind)


class SearchAggregator:
    """Debounced, cancellable search across several providers.

    Each query waits for a quiet period before it is dispatched. A newer
    query cancels the pending timer and every in-flight call of the older
    one. Queries run on instances spawned from the given providers, so they
    never move those providers' pagination. Groups are handed to on_group
    as each provider answers, in no particular order.

    All methods must be called from the event loop thread.
    """

    def __init__(
        self,
        providers: Sequence[MediaProvider],
        on_group: Callable[[ResultGroup], None],
        on_failure: Optional[Callable[[MediaProvider, Exception, ErrorKind], None]] = None,
        delay: float | None = None,
        min_query_length: int | None = None,
    ):
        settings = get_settings()
        self.providers = list(providers)
        self.on_group = on_group
        self.on_failure = on_failure
        self.delay = delay if delay is not None else settings.search_delay_ms / 1000
        self.min_query_length = (
            min_query_length
            if min_query_length is not None
            else settings.search_min_query_length
        )
        self.generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._handles: List[FetchHandle] = []
        self._active: List[MediaProvider] = []

    def on_query_text_change(self, text: str) -> bool:
        """Typed input: only queries longer than the minimum are searched."""
        if len(text) > self.min_query_length:
            self.query(text)
        return True

    def submit(self, text: str) -> bool:
        self.query(text)
        return True

    def query(self, words: str) -> None:
        """Schedule a search for words once the quiet period has passed."""
        self.cancel()
        if not words:
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._load, words)

    def cancel(self) -> None:
        """Drop the pending query and cancel every in-flight call."""
        self.generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()

    @property
    def pending(self) -> bool:
        return self._timer is not None or any(not h.done() for h in self._handles)

    async def wait(self) -> None:
        """Wait until the in-flight calls of the current query finish."""
        for handle in list(self._handles):
            await handle.wait()

    def _load(self, words: str) -> None:
        self._timer = None
        for provider in self._active:
            provider.cancel_all()
        # Every query gets its own instances, so each one starts at page 1.
        self._active = [provider.spawn() for provider in self.providers]
        generation = self.generation
        filters = search_filters(words)
        logger.info(f"Searching {len(self._active)} provider(s) for {words!r}")
        for provider in self._active:
            callback = _GroupCallback(self, provider, generation)
            self._handles.append(provider.list_fetch(None, filters, callback))

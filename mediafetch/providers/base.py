"""Provider base classes and interfaces."""

import asyncio
import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, NamedTuple, Optional, Sequence, Tuple

from cachetools import TTLCache
from pydantic import BaseModel

from mediafetch.core.calls import CallTracker, FetchHandle, MediaCallback, running_loop
from mediafetch.core.config import Settings, get_settings
from mediafetch.core.errors import (
    EmptyResponse,
    EmptyResult,
    MalformedEnvelope,
    MediaFetchError,
    TransportFailure,
)
from mediafetch.core.http import HttpRequest, HttpResponse, HttpTransport, NiquestsTransport
from mediafetch.models.filters import Filters, Order, Sort
from mediafetch.models.media import MediaItem
from mediafetch.normalizers.base import Normalizer
from mediafetch.providers.query import QueryTable, compile_query, encode_query

logger = logging.getLogger(__name__)


class NavInfo(BaseModel):
    """A sort tab: a sort and default order with a label and icon reference."""

    sort: Sort
    default_order: Order
    label: str
    icon: str


class Genre(BaseModel):
    """A genre choice. A key of None means all genres."""

    key: str | None
    label: str


class FetchResult(NamedTuple):
    filters: Filters | None
    items: List[MediaItem]
    changed: bool


class CatalogRequest(NamedTuple):
    """A request relative to a mirror base URL."""

    path: str
    params: Sequence[Tuple[str, str]] = ()

    def url(self, base: str) -> str:
        query = encode_query(self.params)
        return f"{base}{self.path}?{query}" if query else f"{base}{self.path}"


class MirrorCursor(NamedTuple):
    """Position of one call in the provider's mirror list."""

    mirrors: Tuple[str, ...]
    index: int = 0

    @property
    def base(self) -> str:
        return self.mirrors[self.index]

    @property
    def is_last(self) -> bool:
        return self.index >= len(self.mirrors) - 1

    def advance(self) -> "MirrorCursor":
        return self._replace(index=self.index + 1)


class _PreparedList(NamedTuple):
    items: List[MediaItem]
    size: int
    filters: Filters
    request: CatalogRequest


class MediaProvider(ABC):
    """Abstract base class for catalog providers.

    A provider turns Filters into media items from one catalog source. It
    compiles the query, fetches it from the first working mirror and
    normalizes the payload.

    Calls are non-blocking: list_fetch and detail_fetch schedule the work
    on the event loop and return a FetchHandle at once. The awaitable
    fetch_list and fetch_detail raise MediaFetchError instead of calling
    back.

    Mutable state is the sticky mirror index, the detail cache and, for some
    providers, pagination counters. Each is guarded by a lock.
    """

    media_call_tag = "media_http_call"
    items_path = ""
    item_details_path = ""
    query_table: QueryTable
    # Providers whose list responses already carry full detail skip the
    # detail request.
    detail_in_list = False
    default_navigation_index = 1

    def __init__(
        self,
        mirrors: Sequence[str] | None = None,
        transport: HttpTransport | None = None,
        tracker: CallTracker | None = None,
        subs_provider: Any = None,
        meta_provider: Any = None,
        loop: asyncio.AbstractEventLoop | None = None,
        main_loop: asyncio.AbstractEventLoop | None = None,
    ):
        settings = get_settings()
        self._settings = settings
        self.mirrors: Tuple[str, ...] = tuple(
            mirrors if mirrors is not None else self.default_mirrors(settings)
        )
        if not self.mirrors:
            raise ValueError(f"{self.name} needs at least one mirror")
        self.transport = transport if transport is not None else NiquestsTransport()
        self._tracker = tracker if tracker is not None else CallTracker()
        self._loop = loop
        self._main_loop = main_loop
        self._mirror_lock = threading.Lock()
        self._current_mirror = 0
        self._detail_cache = TTLCache(maxsize=100, ttl=settings.detail_cache_ttl)
        self._cache_lock = threading.Lock()
        self.subs_provider = subs_provider
        self.meta_provider = meta_provider
        self.normalizer = self.create_normalizer()

    async def aclose(self) -> None:
        """Properly close the HTTP transport."""
        await self.transport.aclose()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique name of this provider."""
        pass

    @property
    def result_title(self) -> str:
        """Title of this provider's group in search results."""
        return "Search results"

    @abstractmethod
    def default_mirrors(self, settings: Settings) -> Sequence[str]:
        pass

    @abstractmethod
    def create_normalizer(self) -> Normalizer:
        pass

    @abstractmethod
    def get_navigation(self) -> List[NavInfo]:
        """Return the sort tabs, in display order."""
        pass

    @abstractmethod
    def get_genres(self) -> List[Genre]:
        pass

    def spawn(self, **overrides) -> "MediaProvider":
        """Return a new provider of the same kind.

        The new instance shares this one's transport, capabilities and loops,
        and starts on the same mirror. It has its own call tracker, detail
        cache and pagination state, so calls made through it neither see nor
        move this provider's counters.
        """
        options = dict(
            mirrors=self.mirrors,
            transport=self.transport,
            subs_provider=self.subs_provider,
            meta_provider=self.meta_provider,
            loop=self._loop,
            main_loop=self._main_loop,
        )
        options.update(overrides)
        provider = type(self)(**options)
        provider._promote_mirror(self.current_mirror)
        return provider

    def paged(self) -> "MediaProvider":
        """Return a provider that serves the page named on the filters."""
        return self

    @property
    def current_mirror(self) -> int:
        with self._mirror_lock:
            return self._current_mirror

    def _promote_mirror(self, index: int) -> None:
        with self._mirror_lock:
            if index > self._current_mirror:
                self._current_mirror = index

    # --- list ---

    def build_list_request(self, filters: Filters) -> CatalogRequest:
        """Build the list request. The page goes in the path."""
        return CatalogRequest(
            path=f"{self.items_path}{filters.page or 1}",
            params=compile_query(filters, self.query_table),
        )

    def _prepare_list(
        self, existing: Optional[Sequence[MediaItem]], filters: Optional[Filters]
    ) -> _PreparedList:
        snapshot = (filters if filters is not None else Filters()).snapshot()
        items = list(existing) if existing else []
        request = self.build_list_request(snapshot)
        return _PreparedList(items, len(items), snapshot, request)

    async def _complete_list(self, prepared: _PreparedList) -> FetchResult:
        response = await self._fetch_with_failover(prepared.request)
        payload = self._decode(response)
        try:
            items = self.normalizer.normalize_list(payload, prepared.items)
        except (KeyError, TypeError, AttributeError) as exc:
            raise MalformedEnvelope(f"Unexpected response from {self.name}", exc) from exc
        return FetchResult(prepared.filters, items, len(items) > prepared.size)

    async def fetch_list(
        self,
        existing: Optional[Sequence[MediaItem]] = None,
        filters: Optional[Filters] = None,
    ) -> FetchResult:
        """Fetch a page of items, appended to a copy of existing."""
        return await self._complete_list(self._prepare_list(existing, filters))

    def list_fetch(
        self,
        existing: Optional[Sequence[MediaItem]],
        filters: Optional[Filters],
        callback: MediaCallback,
    ) -> FetchHandle:
        """Fetch a page of items and report it through callback.

        The filters are copied before this returns, so the caller may keep
        changing its own instance.
        """
        prepared = self._prepare_list(existing, filters)
        return self._submit(lambda: self._complete_list(prepared), callback)

    # --- detail ---

    async def _complete_detail(self, media: MediaItem) -> FetchResult:
        if self.detail_in_list:
            return FetchResult(None, [media], True)

        # Cached items stay private; every caller gets its own copies.
        with self._cache_lock:
            cached = self._detail_cache.get(media.video_id)
        if cached is not None:
            return FetchResult(None, [item.clone() for item in cached], True)

        request = CatalogRequest(path=f"{self.item_details_path}{media.video_id}")
        response = await self._fetch_with_failover(request)
        detailed = self.normalizer.normalize_detail(self._decode(response))
        if not detailed:
            raise EmptyResult(f"{self.name} returned no detail for {media.video_id}")
        with self._cache_lock:
            self._detail_cache[media.video_id] = detailed
        return FetchResult(None, [item.clone() for item in detailed], True)

    async def fetch_detail(self, items: Sequence[MediaItem], index: int) -> FetchResult:
        """Fetch the detailed version of items[index]."""
        return await self._complete_detail(items[index])

    def detail_fetch(
        self, items: Sequence[MediaItem], index: int, callback: MediaCallback
    ) -> FetchHandle:
        """Fetch the detailed version of items[index] and report it through callback."""
        media = items[index]
        if self.detail_in_list:
            handle = FetchHandle(self.media_call_tag, self._main_loop)
            handle.deliver(callback.on_success, None, [media], True)
            return handle
        return self._submit(lambda: self._complete_detail(media), callback)

    # --- cancellation ---

    def cancel_all(self) -> int:
        """Cancel every in-flight call of this provider."""
        return self._tracker.cancel(self.media_call_tag)

    # --- plumbing ---

    async def _fetch_with_failover(self, request: CatalogRequest) -> HttpResponse:
        """Fetch request from the current mirror, moving down the list on failure.

        Each call carries its own cursor; only the starting index is shared.
        """
        cursor = MirrorCursor(self.mirrors, self.current_mirror)
        while True:
            url = request.url(cursor.base)
            try:
                response = await self.transport.issue(
                    HttpRequest(url=url, tag=self.media_call_tag)
                )
                if not response.ok:
                    raise TransportFailure(
                        f"Couldn't connect to {self.name}: HTTP {response.status_code}"
                    )
                return response
            except TransportFailure as e:
                if cursor.is_last:
                    logger.error(f"{self.name}: last mirror {cursor.base} failed: {e}")
                    raise
                cursor = cursor.advance()
                self._promote_mirror(cursor.index)
                logger.warning(f"{self.name}: mirror failed ({e}), retrying on {cursor.base}")

    def _decode(self, response: HttpResponse) -> Any:
        if not response.text.strip():
            raise EmptyResponse(f"Empty response from {self.name}")
        try:
            return json.loads(response.text)
        except ValueError as exc:
            raise MalformedEnvelope(f"Invalid JSON from {self.name}", exc) from exc

    def _submit(
        self,
        operation: Callable[[], Awaitable[FetchResult]],
        callback: MediaCallback,
    ) -> FetchHandle:
        handle = FetchHandle(self.media_call_tag, self._main_loop)
        loop = running_loop()
        if loop is not None:
            handle.attach(loop.create_task(self._run(handle, operation, callback)), loop)
        elif self._loop is not None:
            future = asyncio.run_coroutine_threadsafe(
                self._run(handle, operation, callback), self._loop
            )
            handle.attach(future, self._loop)
        else:
            raise RuntimeError(
                f"{self.name}: no running event loop and no worker loop configured"
            )
        return self._tracker.track(handle)

    async def _run(
        self,
        handle: FetchHandle,
        operation: Callable[[], Awaitable[FetchResult]],
        callback: MediaCallback,
    ) -> None:
        try:
            result = await operation()
        except asyncio.CancelledError:
            logger.debug(f"{self.name}: call cancelled")
            raise
        except MediaFetchError as e:
            logger.warning(f"{self.name}: {e.kind.value}: {e}")
            handle.deliver(callback.on_failure, e, e.kind)
            return
        handle.deliver(callback.on_success, result.filters, result.items, result.changed)

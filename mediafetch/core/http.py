"""HTTP transport used by catalog providers."""

import logging
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Mapping, NamedTuple

import niquests
from aiolimiter import AsyncLimiter
from urllib3.util import Retry

from mediafetch.core.config import get_settings
from mediafetch.core.errors import TransportFailure

logger = logging.getLogger(__name__)


class HttpRequest(NamedTuple):
    url: str
    headers: Mapping[str, str] = MappingProxyType({})
    tag: str | None = None


class HttpResponse(NamedTuple):
    status_code: int
    text: str
    url: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport(ABC):
    """Issues GET requests for providers.

    Implementations raise TransportFailure for connection errors and
    timeouts and return every other response, whatever its status.
    Cancelling the awaiting task cancels the request.
    """

    @abstractmethod
    async def issue(self, request: HttpRequest) -> HttpResponse:
        pass

    async def aclose(self) -> None:
        pass


class NiquestsTransport(HttpTransport):
    """Transport backed by a niquests async session."""

    DEFAULT_HEADERS = {
        "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36",
        "Accept": "application/json",
    }

    def __init__(
        self,
        retry_config: Retry | None = None,
        rate_limiter: AsyncLimiter | None = None,
    ):
        settings = get_settings()
        self._settings = settings
        if retry_config is None:
            retry_config = Retry(
                total=2,
                backoff_factor=0.5,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["HEAD", "GET", "OPTIONS"],
            )
        self.session = niquests.AsyncSession(retries=retry_config)
        if settings.proxy:
            self.session.proxies = {"http": settings.proxy, "https": settings.proxy}
        if rate_limiter is None:
            rate_limiter = AsyncLimiter(settings.requests_per_minute, 60.0)
        self.rate_limiter = rate_limiter

    async def issue(self, request: HttpRequest) -> HttpResponse:
        headers = {**self.DEFAULT_HEADERS, **request.headers}
        logger.debug(f"Making request to: {request.url} (tag={request.tag})")
        try:
            async with self.rate_limiter:
                response = await self.session.get(
                    request.url,
                    headers=headers,
                    timeout=self._settings.request_timeout,
                )
        except niquests.exceptions.RequestException as exc:
            raise TransportFailure(f"Request to {request.url} failed: {exc}", exc) from exc

        return HttpResponse(
            status_code=response.status_code or 0,
            text=response.text or "",
            url=request.url,
        )

    async def aclose(self) -> None:
        """Properly close the internal HTTP session."""
        if hasattr(self, "session") and self.session:
            await self.session.close()

"""Callback contract and cancellable handles for provider calls."""

import asyncio
import concurrent.futures
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Set

from mediafetch.core.errors import ErrorKind

logger = logging.getLogger(__name__)


class MediaCallback(ABC):
    """Receives the outcome of a list or detail fetch."""

    @abstractmethod
    def on_success(self, filters, items: List[Any], changed: bool) -> None:
        pass

    @abstractmethod
    def on_failure(self, error: Exception, kind: ErrorKind) -> None:
        pass


def running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class FetchHandle:
    """Handle for one in-flight provider call.

    cancel() may be called from any thread, any number of times, including
    after the call has completed. Once cancelled, the handle never delivers
    a callback.
    """

    def __init__(
        self,
        tag: str | None = None,
        main_loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.tag = tag
        self._main_loop = main_loop
        self._lock = threading.Lock()
        self._cancelled = False
        self._future: asyncio.Future | concurrent.futures.Future | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def attach(
        self,
        future: asyncio.Future | concurrent.futures.Future,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        with self._lock:
            self._future = future
            self._loop = loop
            cancelled = self._cancelled
        if cancelled:
            self._cancel_future()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def done(self) -> bool:
        return self._future is None or self._future.done()

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
        self._cancel_future()

    def _cancel_future(self) -> None:
        future, loop = self._future, self._loop
        if future is None or future.done():
            return
        if isinstance(future, concurrent.futures.Future):
            future.cancel()
        elif loop is running_loop():
            future.cancel()
        elif loop is not None and not loop.is_closed():
            loop.call_soon_threadsafe(future.cancel)

    def add_done_callback(self, fn: Callable[["FetchHandle"], None]) -> None:
        if self._future is None:
            fn(self)
            return
        self._future.add_done_callback(lambda _: fn(self))

    async def wait(self) -> None:
        """Wait for the call to finish, whether it completed or was cancelled."""
        future = self._future
        if future is None:
            return
        if isinstance(future, concurrent.futures.Future):
            future = asyncio.wrap_future(future)
        await asyncio.wait({future})

    def deliver(self, fn: Callable[..., None], *args) -> None:
        """Invoke a callback in the main context unless the call was cancelled."""
        main_loop = self._main_loop
        if main_loop is None or main_loop is running_loop():
            self._invoke(fn, args)
        elif not main_loop.is_closed():
            main_loop.call_soon_threadsafe(self._invoke, fn, args)

    def _invoke(self, fn: Callable[..., None], args: tuple) -> None:
        if self._cancelled:
            logger.debug(f"Dropping callback for cancelled call (tag={self.tag})")
            return
        fn(*args)


class CallTracker:
    """Tracks live handles by tag so they can be cancelled in bulk."""

    def __init__(self):
        self._lock = threading.Lock()
        self._calls: Dict[str, Set[FetchHandle]] = {}

    def track(self, handle: FetchHandle) -> FetchHandle:
        tag = handle.tag or ""
        with self._lock:
            self._calls.setdefault(tag, set()).add(handle)
        handle.add_done_callback(self._discard)
        return handle

    def _discard(self, handle: FetchHandle) -> None:
        tag = handle.tag or ""
        with self._lock:
            calls = self._calls.get(tag)
            if calls is not None:
                calls.discard(handle)
                if not calls:
                    del self._calls[tag]

    def pending(self, tag: Optional[str] = None) -> int:
        with self._lock:
            if tag is None:
                return sum(len(calls) for calls in self._calls.values())
            return len(self._calls.get(tag, ()))

    def cancel(self, tag: str) -> int:
        """Cancel every live call carrying the tag. Returns how many were cancelled."""
        with self._lock:
            calls = list(self._calls.pop(tag, ()))
        for handle in calls:
            handle.cancel()
        if calls:
            logger.debug(f"Cancelled {len(calls)} call(s) tagged {tag}")
        return len(calls)

"""
Response cache for provider lookups
"""
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from time import monotonic
from typing import Callable, Optional, Tuple

import httpx

from core.config import GEOLOCATION_CACHE_TTL
from core.monitoring.metrics import record_cache_event

logger = logging.getLogger("app")

# Заголовки, которые теряют смысл после того, как тело уже прочитано и декодировано
_DROPPED_HEADERS = {"content-encoding", "content-length", "transfer-encoding"}


@dataclass(frozen=True)
class CachedResponse:
    status_code: int
    body: bytes
    content_type: Optional[str]
    inserted_at: float


class ResponseCache:
    """
    In-memory TTL cache keyed by request URL. get/put are atomic per key.

    Bounded: put() purges expired entries and then evicts the oldest ones
    beyond max_entries.
    """

    def __init__(
        self,
        ttl_seconds: float = GEOLOCATION_CACHE_TTL.total_seconds(),
        clock: Callable[[], float] = monotonic,
        max_entries: int = 500,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max(1, int(max_entries))
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[CachedResponse, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def get(self, key: str) -> Optional[CachedResponse]:
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            entry, expires_at = item
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return entry

    def put(self, key: str, entry: CachedResponse, ttl: Optional[float] = None) -> None:
        ttl = self.ttl_seconds if ttl is None else ttl
        with self._lock:
            now = self._clock()
            self._purge_expired(now)

            self._entries.pop(key, None)
            self._entries[key] = (entry, now + ttl)

            # Самые старые записи вытесняются первыми
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CachingTransport(httpx.AsyncBaseTransport):
    """
    httpx transport that memoizes successful GET responses.

    On a miss with a 2xx response the body is read once, stored, and replayed
    to the caller in a fresh response. Non-2xx responses pass through.
    """

    def __init__(self, cache: ResponseCache, transport: httpx.AsyncBaseTransport):
        self.cache = cache
        self._transport = transport

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.method != "GET":
            return await self._transport.handle_async_request(request)

        key = str(request.url)
        cached = self.cache.get(key)
        if cached is not None:
            record_cache_event(hit=True)
            headers = {"content-type": cached.content_type} if cached.content_type else {}
            return httpx.Response(
                cached.status_code,
                headers=headers,
                content=cached.body,
                request=request,
            )

        record_cache_event(hit=False)
        response = await self._transport.handle_async_request(request)

        if not 200 <= response.status_code < 300:
            return response

        try:
            body = await response.aread()
        finally:
            await response.aclose()

        content_type = response.headers.get("content-type")
        self.cache.put(key, CachedResponse(
            status_code=response.status_code,
            body=body,
            content_type=content_type,
            inserted_at=self.cache.now(),
        ))

        headers = [
            (name, value) for name, value in response.headers.multi_items()
            if name.lower() not in _DROPPED_HEADERS
        ]
        return httpx.Response(
            response.status_code,
            headers=headers,
            content=body,
            request=request,
        )

    async def aclose(self) -> None:
        await self._transport.aclose()

from collections import defaultdict
from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Iterable
from threading import RLock
from time import monotonic

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


class GraphRateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client sliding-window limit on the configured rendering paths."""

    def __init__(
        self,
        app,
        limited_paths: Iterable[str],
        requests_per_window: int = 30,
        window_seconds: int = 60,
    ) -> None:
        super().__init__(app)
        self.limited_paths = frozenset(limited_paths)
        self.max_requests = max(1, requests_per_window)
        self.window_seconds = max(1, window_seconds)
        self._requests_by_client: dict[str, deque[float]] = defaultdict(deque)
        self._lock = RLock()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path not in self.limited_paths:
            return await call_next(request)

        retry_after = self._reserve_slot(self._client_key(request), monotonic())
        if retry_after is not None:
            return JSONResponse(
                status_code=429,
                content={"detail": "Too Many Requests"},
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)

    def _reserve_slot(self, client: str, now: float) -> int | None:
        """Record a request for client, or return seconds until a slot frees up."""

        with self._lock:
            timestamps = self._requests_by_client[client]
            while timestamps and timestamps[0] <= now - self.window_seconds:
                timestamps.popleft()

            if len(timestamps) >= self.max_requests:
                return max(1, int(self.window_seconds - (now - timestamps[0])))

            timestamps.append(now)
            return None

    @staticmethod
    def _client_key(request: Request) -> str:
        # First X-Forwarded-For entry is the client behind the proxy chain.
        forwarded_for = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop

        if request.client and request.client.host:
            return request.client.host

        return "unknown"

# classroom_api/core/request_guard.py - Pluggable "is this request allowed" policies
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Dict
import logging
import threading
import time

from starlette.requests import Request

from classroom_api.core.config import Settings

logger = logging.getLogger(__name__)


class RequestGuard(ABC):
    """
    Policy consulted before routing.

    Providers only answer whether a request may proceed; the HTTP layer
    decides what to send back when it may not.
    """

    @abstractmethod
    def is_allowed(self, request: Request) -> bool:
        ...


class AllowAllGuard(RequestGuard):
    def is_allowed(self, request: Request) -> bool:
        return True


class SlidingWindowGuard(RequestGuard):
    """Allow at most ``max_requests`` per client within ``interval_seconds``"""

    def __init__(
        self,
        max_requests: int,
        interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        self.max_requests = max_requests
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    @property
    def tracked_clients(self) -> int:
        return len(self._hits)

    @staticmethod
    def client_key(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _sweep(self, window_start: float) -> None:
        # Forget clients whose newest hit has left the window; caller holds the lock
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in stale:
            del self._hits[key]

    def is_allowed(self, request: Request) -> bool:
        key = self.client_key(request)
        now = self._clock()
        window_start = now - self.interval_seconds

        with self._lock:
            if now - self._last_sweep >= self.interval_seconds:
                self._sweep(window_start)
                self._last_sweep = now

            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= window_start:
                hits.popleft()

            if len(hits) >= self.max_requests:
                logger.warning(f"Request guard denied {request.method} {request.url.path} for {key}")
                return False

            hits.append(now)
            return True


def build_request_guard(settings: Settings) -> RequestGuard:
    """Pick the guard described by the settings"""
    if not settings.RATE_LIMIT_ENABLED:
        return AllowAllGuard()
    return SlidingWindowGuard(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        interval_seconds=settings.RATE_LIMIT_INTERVAL_SECONDS,
    )

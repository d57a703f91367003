from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque, Dict


class RateLimiter:
    """
    Sliding-window request counter keyed by client (usually the IP).

    At most `max_requests` hits per `window_seconds` per key. Owned by the
    application object; `sweep()` is called periodically by the scheduler to
    forget idle clients.
    """

    def __init__(
        self,
        max_requests: int = 20,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = int(max_requests)
        self.window_seconds = float(window_seconds)
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}

    def _prune(self, hits: Deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()

    def hit(self, key: str) -> bool:
        now = self._clock()
        hits = self._hits.get(key)
        if hits is None:
            hits = self._hits[key] = deque()
        self._prune(hits, now)
        if len(hits) >= self.max_requests:
            return False
        hits.append(now)
        return True

    def retry_after(self, key: str) -> float:
        hits = self._hits.get(key)
        if not hits:
            return 0.0
        return max(0.0, self.window_seconds - (self._clock() - hits[0]))

    def sweep(self) -> int:
        now = self._clock()
        dropped = 0
        for key in list(self._hits):
            hits = self._hits[key]
            self._prune(hits, now)
            if not hits:
                del self._hits[key]
                dropped += 1
        return dropped

    def __len__(self) -> int:
        return len(self._hits)

from __future__ import annotations

import asyncio
import logging
import time

from common.config.config import Config
from common.config.constants import DEFAULT_MAX_BUNDLES_PER_SEC, RATE_LIMIT_WINDOW_MSEC

_LOG = logging.getLogger(__name__)


class RateLimiter:
    """Fixed one-second window: at most `max_per_sec` acquires per window.

    An acquire over the ceiling sleeps until the window ends and opens a new window with itself counted.
    """

    def __init__(self, max_per_sec: int = DEFAULT_MAX_BUNDLES_PER_SEC) -> None:
        if max_per_sec < 1:
            raise ValueError(f"Wrong rate limit: {max_per_sec}")

        self._max_per_sec = max_per_sec
        self._cnt = 0
        self._window_start_msec = self._now_msec()
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, cfg: Config) -> RateLimiter:
        return cls(cfg.max_bundles_per_sec)

    @property
    def max_per_sec(self) -> int:
        return self._max_per_sec

    @property
    def count(self) -> int:
        return self._cnt

    async def acquire(self) -> float:
        """Returns the time spent waiting, in seconds."""
        async with self._lock:
            now = self._now_msec()
            elapsed_msec = now - self._window_start_msec
            if elapsed_msec >= RATE_LIMIT_WINDOW_MSEC:
                self._cnt = 0
                self._window_start_msec = now
                elapsed_msec = 0

            if self._cnt < self._max_per_sec:
                self._cnt += 1
                return 0.0

            wait_msec = min(max(RATE_LIMIT_WINDOW_MSEC - elapsed_msec, 0), RATE_LIMIT_WINDOW_MSEC)
            _LOG.debug("rate limit %s/sec is reached, wait %s msec", self._max_per_sec, wait_msec)
            await self._wait(wait_msec / 1000)

            self._cnt = 1
            self._window_start_msec = self._now_msec()
            return wait_msec / 1000

    def _now_msec(self) -> float:
        return time.monotonic() * 1000

    async def _wait(self, sec: float) -> None:
        await asyncio.sleep(sec)

from __future__ import annotations

import abc
import asyncio
import logging
from typing import Sequence

from common.config.config import Config
from common.http.errors import BaseHttpError
from .api import BundleResult
from .bundle import Bundle
from .errors import FuryRemoteError
from .rate_limiter import RateLimiter
from .result import ResultAccumulator

_LOG = logging.getLogger(__name__)


class BundleSender(abc.ABC):
    @abc.abstractmethod
    async def send_bundle(self, tx_list: Sequence[str]) -> BundleResult: ...


class SubmissionLoop:
    """Sends bundles one by one, in order, and stops on the first failed one.

    Nothing is retried: a bundle is sent at most once.
    """

    def __init__(self, cfg: Config, sender: BundleSender, rate_limiter: RateLimiter) -> None:
        self._cfg = cfg
        self._sender = sender
        self._rate_limiter = rate_limiter

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    async def send_one(self, bundle: Bundle) -> BundleResult:
        await self._rate_limiter.acquire()
        return await self._sender.send_bundle(bundle.tx_list)

    async def submit(self, bundle_list: Sequence[Bundle], acc: ResultAccumulator | None = None) -> ResultAccumulator:
        if acc is None:
            acc = ResultAccumulator()

        bundle_cnt = len(bundle_list)
        for idx, bundle in enumerate(bundle_list):
            _LOG.debug("send bundle %s/%s with %s transactions", idx + 1, bundle_cnt, len(bundle))
            try:
                result = await self.send_one(bundle)
            except (BaseHttpError, FuryRemoteError) as exc:
                _LOG.warning("bundle %s/%s failed: %s", idx + 1, bundle_cnt, str(exc))
                acc.fail(str(exc))
                break

            if not result.is_ok:
                _LOG.warning("bundle %s/%s is rejected: %s %s", idx + 1, bundle_cnt, result.code, result.message)
                acc.fail(f"Bundle {idx + 1} rejected: {result.message} (code {result.code})")
                break

            acc.add(result)
            if idx < bundle_cnt - 1:
                await asyncio.sleep(self._cfg.rate_limit_delay_sec)

        return acc

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import aiohttp
import aiohttp.client as _cl
import aiohttp.typedefs as _td
from typing_extensions import Self

from .errors import HttpTransportError, HttpResponseFormatError
from ..config.config import Config
from ..config.utils import LogMsgFilter
from ..utils.cached import cached_property
from ..utils.json_logger import log_msg

_LOG = logging.getLogger(__name__)

HttpClientSession = _cl.ClientSession
HttpClientTimeout = _cl.ClientTimeout
HttpURL = _td.URL
HttpStrOrURL = _td.StrOrURL


@dataclass
class HttpClientRequest:
    method: str
    url: HttpURL
    data: str | None
    header_dict: dict[str, str]


class HttpClient:
    """Async HTTP client with one remote base URL.

    Every request is sent once: the caller decides what to do on failure.
    """

    def __init__(self, cfg: Config) -> None:
        self._cfg = cfg
        self._msg_filter = LogMsgFilter(self._cfg)
        self._base_url: HttpURL | None = None
        self._timeout = HttpClientTimeout(total=cfg.timeout_sec)
        self._is_started = False
        self._header_dict = {
            "Accept": "application/json",
            "Content-Type": "application/json; charset=utf-8",
        }

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.stop()

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        if self._is_started:
            await self.session.close()
            self._is_started = False
            self.__dict__.pop("session", None)

    @cached_property
    def session(self) -> HttpClientSession:
        self._is_started = True
        return HttpClientSession(timeout=self._timeout)

    def set_timeout_sec(self, timeout_sec: float) -> Self:
        assert not self._is_started
        self._timeout = HttpClientTimeout(total=timeout_sec)
        return self

    def connect(self, *, base_url: HttpStrOrURL) -> Self:
        base_url = HttpURL(base_url)
        assert base_url.is_absolute(), "'base_url' must be absolute"

        _LOG.debug("connect to the URL: %s", str(base_url), extra=self._msg_filter)
        self._base_url = base_url
        return self

    @property
    def base_url(self) -> HttpURL:
        assert self._base_url is not None, "HttpClient must have the remote URL"
        return self._base_url

    def _build_url(self, path: str, base_url: HttpURL | None = None) -> HttpURL:
        base_url = base_url or self.base_url
        if not path:
            return base_url
        return HttpURL(str(base_url).rstrip("/") + "/" + path.lstrip("/"))

    async def _post_json(self, path: str, payload: dict | list, *, base_url: HttpURL | None = None) -> Any:
        request = HttpClientRequest(
            method="POST",
            url=self._build_url(path, base_url),
            data=json.dumps(payload),
            header_dict=self._header_dict,
        )
        return self._decode_json(request, await self._send_request(request))

    async def _get_json(self, path: str, *, base_url: HttpURL | None = None) -> Any:
        request = HttpClientRequest(
            method="GET",
            url=self._build_url(path, base_url),
            data=None,
            header_dict=self._header_dict,
        )
        return self._decode_json(request, await self._send_request(request))

    async def _send_request(self, request: HttpClientRequest) -> str:
        _LOG.debug(log_msg("send {Method} request to {Path}", Method=request.method, Path=str(request.url)), extra=self._msg_filter)

        try:
            if request.data is not None:
                resp = await self.session.post(request.url, data=request.data, headers=request.header_dict)
            else:
                resp = await self.session.get(request.url, headers=request.header_dict)
            text = await resp.text()

        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            self._exception_handler(request, exc)
            raise HttpTransportError(f"Request failed: {exc or type(exc).__name__}", url=str(request.url)) from exc

        if not 200 <= resp.status < 300:
            _LOG.debug(
                log_msg("error response {Status} from {Path}: {Body}", Status=resp.status, Path=str(request.url), Body=text),
                extra=self._msg_filter,
            )
            raise HttpTransportError(f"HTTP error! Status: {resp.status} - {text}", url=str(request.url), status=resp.status)

        return text

    def _exception_handler(self, request: HttpClientRequest, exc: BaseException) -> None:
        """Exception handler for send request.
        By default, output to logs the exception message.
        """
        msg = log_msg("error on request to {Path}: {Error}", Path=str(request.url), Error=str(exc))
        _LOG.warning(msg, extra=self._msg_filter)

    @staticmethod
    def _decode_json(request: HttpClientRequest, text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError as exc:
            raise HttpResponseFormatError(f"Wrong JSON response from {request.url}", str(exc)) from exc

from __future__ import annotations

import itertools
import logging
import typing as tp
from typing import TypeVar

import solders.commitment_config as _commit
import solders.rpc.config as _cfg
import solders.rpc.requests as _req
import solders.rpc.responses as _resp

from .errors import SolRpcError, SolRpcErrorInfo
from ..config.config import Config
from ..http.client import HttpClient, HttpClientRequest
from ..http.errors import HttpResponseFormatError
from ..solana.pubkey import SolPubKey

_LOG = logging.getLogger(__name__)

_SolRpcResp = TypeVar("_SolRpcResp", bound=_resp.RPCResult)

_SoldersCommit = _commit.CommitmentLevel
_SoldersRpcCtxCfg = _cfg.RpcContextConfig

_SoldersRpcReq = _req.Body
_SoldersGetBalance = _req.GetBalance

_SoldersGetBalanceResp = _resp.GetBalanceResp


class SolClient(HttpClient):
    """Balance queries against the Solana JSON-RPC node, used for pre-flight checks only."""

    def __init__(self, cfg: Config) -> None:
        super().__init__(cfg)
        self._id = itertools.count()
        self.connect(base_url=cfg.rpc_url)

    def _get_next_id(self) -> int:
        return next(self._id)

    async def _send_rpc_request(self, request: _SoldersRpcReq, parser: type[_SolRpcResp]) -> _SolRpcResp:
        client_request = HttpClientRequest(
            method="POST",
            url=self.base_url,
            data=request.to_json(),
            header_dict=self._header_dict,
        )
        resp_json = await self._send_request(client_request)

        try:
            resp = parser.from_json(resp_json)
        except ValueError as exc:
            _LOG.warning("bad Solana response '%s' on the request '%s'", resp_json, client_request.data)
            raise HttpResponseFormatError("Wrong response from Solana", str(exc)) from exc

        if isinstance(resp, tp.get_args(SolRpcErrorInfo)):
            raise SolRpcError(resp)
        return resp

    async def get_balance(self, address: SolPubKey | str) -> int:
        address = SolPubKey.from_raw(address)
        cfg = _SoldersRpcCtxCfg(_SoldersCommit.Confirmed, None)
        req = _SoldersGetBalance(address, cfg, self._get_next_id())
        resp = await self._send_rpc_request(req, _SoldersGetBalanceResp)
        return resp.value

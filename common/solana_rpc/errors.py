from __future__ import annotations

from typing import Union

import solders.rpc.errors as _err
import solders.rpc.responses as _resp

from ..solana.errors import SolError

SolRpcErrorInfo = Union[
    _resp.RPCError,
    _err.ParseErrorMessage,
    _err.InvalidRequestMessage,
    _err.MethodNotFoundMessage,
    _err.InvalidParamsMessage,
    _err.InternalErrorMessage,
]


class SolRpcError(SolError):
    def __init__(self, src: SolRpcErrorInfo) -> None:
        super().__init__(getattr(src, "message", "<Unknown>"))
        self._rpc_data = src

    @property
    def rpc_data(self) -> SolRpcErrorInfo:
        return self._rpc_data

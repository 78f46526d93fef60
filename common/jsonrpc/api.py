from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import model_validator

from ..utils.pydantic import ResponseModel

JsonRpcIdField = Union[int, str, None]


class JsonRpcErrorModel(ResponseModel):
    code: int
    message: str = ""
    data: Any = None


class JsonRpcResp(ResponseModel):
    """JSON-RPC 2.0 answer, as relayed by block engines and RPC nodes.

    Either `error` or `result` is present, `result` can be null. An error wins over a result.
    """

    jsonrpc: Literal["2.0"]
    id: JsonRpcIdField = None
    result: Any = None
    error: JsonRpcErrorModel | None = None

    @model_validator(mode="after")
    def _check_result_or_error(self) -> JsonRpcResp:
        if not (self.is_error or self.is_result):
            raise ValueError("Response must have either 'error' or 'result' field")
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_result(self) -> bool:
        return (not self.is_error) and ("result" in self.model_fields_set)

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from typing_extensions import Self

_T = TypeVar("_T")


def _to_plain(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    elif isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> Self:
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str) -> Self:
        return cls(valid=False, error=error)

    def __bool__(self) -> bool:
        return self.valid


@dataclass(frozen=True)
class ApiResponse(Generic[_T]):
    success: bool
    result: _T | None = None
    error: str | None = None
    # number of items completed before the failure, set only on failure
    completed_cnt: int | None = None

    @classmethod
    def from_error(cls, error: str) -> Self:
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        res = dict(success=self.success)
        if self.result is not None:
            res["result"] = _to_plain(self.result)
        if self.error is not None:
            res["error"] = self.error
        if self.completed_cnt is not None:
            res["completedCnt"] = self.completed_cnt
        return res


@dataclass(frozen=True)
class BatchResult:
    success: bool
    results: list | None = None
    error: str | None = None
    completed_cnt: int | None = None

    @classmethod
    def from_error(cls, error: str) -> Self:
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        res = dict(success=self.success)
        if self.results is not None:
            res["results"] = _to_plain(self.results)
        if self.error is not None:
            res["error"] = self.error
        if self.completed_cnt is not None:
            res["completedCnt"] = self.completed_cnt
        return res


class ResultAccumulator:
    """Collects per-item results in order and keeps them when a later item fails.

    It's shared by the bundle loop and by the outer batch loops,
    so both layers report partial progress the same way.
    """

    def __init__(self) -> None:
        self._result_list: list = list()
        self._error: str | None = None

    def add(self, result: Any) -> None:
        assert not self.is_failed, "cannot add results after the failure"
        self._result_list.append(result)

    def fail(self, error: str) -> None:
        self._error = error

    @property
    def is_failed(self) -> bool:
        return self._error is not None

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def completed_cnt(self) -> int:
        return len(self._result_list)

    @property
    def result_list(self) -> list:
        return list(self._result_list)

    def to_api_response(self, *, wrap_each: bool = False) -> ApiResponse:
        result_list = self.result_list
        if wrap_each:
            result_list = [[result] for result in result_list]

        if self.is_failed:
            return ApiResponse(success=False, result=result_list, error=self._error, completed_cnt=self.completed_cnt)
        return ApiResponse(success=True, result=result_list)

    def to_batch_result(self) -> BatchResult:
        if self.is_failed:
            return BatchResult(success=False, results=self.result_list, error=self._error, completed_cnt=self.completed_cnt)
        return BatchResult(success=True, results=self.result_list)

from __future__ import annotations

from typing import Sequence

from pydantic import ValidationError as PydanticValidationError


class BaseHttpError(Exception):
    def __init__(self, message: str, error_list: str | Sequence[str] = tuple()):
        super().__init__(message)
        self._msg = message
        if isinstance(error_list, str):
            self._error_list = tuple([error_list])
        else:
            self._error_list = tuple(error_list)

    @property
    def message(self) -> str:
        return self._msg

    @property
    def error_list(self) -> Sequence[str]:
        return self._error_list

    def __str__(self) -> str:
        if not self._error_list:
            return self._msg
        return self._msg + ". " + ". ".join(self._error_list)

    @staticmethod
    def _format_pydantic_error_list(src: PydanticValidationError) -> list[str]:
        error_list: list[str] = list()
        for error in src.errors():
            input_name = ".".join(str(v) for v in error["loc"])
            error_list.append(f"The parameter '{input_name}': {error['msg']}.")
        return error_list


class HttpTransportError(BaseHttpError):
    """Non-2xx response or network failure, keeps the endpoint for diagnosis."""

    def __init__(self, message: str, *, url: str, status: int | None = None) -> None:
        super().__init__(message)
        self._url = url
        self._status = status

    @property
    def url(self) -> str:
        return self._url

    @property
    def status(self) -> int | None:
        return self._status

    def __str__(self) -> str:
        return f"{self._msg} at {self._url}"


class HttpResponseFormatError(BaseHttpError):
    """2xx response which can't be parsed into the expected model."""

    @classmethod
    def from_pydantic(cls, message: str, src: PydanticValidationError) -> HttpResponseFormatError:
        return cls(message, cls._format_pydantic_error_list(src))

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError


class FuryError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self._msg = message

    @property
    def message(self) -> str:
        return self._msg

    def __str__(self) -> str:
        return self._msg


class FuryValidationError(FuryError):
    """Malformed input caught before any network call."""

    @classmethod
    def from_pydantic(cls, request_name: str, src: PydanticValidationError) -> FuryValidationError:
        error_list: list[str] = list()
        for error in src.errors():
            input_name = ".".join(str(v) for v in error["loc"])
            error_list.append(f"the parameter '{input_name}': {error['msg']}")
        return cls(f"Invalid {request_name}: " + "; ".join(error_list))


class FuryRemoteError(FuryError):
    """The API answered with 2xx but reported a failure, or returned an unusable payload."""

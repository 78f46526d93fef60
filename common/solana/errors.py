from __future__ import annotations

from typing import Sequence


class SolError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self._msg = message

    @property
    def message(self) -> str:
        return self._msg

    def to_string(self) -> str:
        return self._msg

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return self.to_string()


class SolDecodeError(SolError):
    """Secret key or transaction blob can't be decoded."""


class SolSigningError(SolError):
    def __init__(self, message: str, unsigned_key_list: Sequence[str] = tuple()) -> None:
        if unsigned_key_list:
            message = f"{message}: {', '.join(unsigned_key_list)}"
        super().__init__(message)
        self._unsigned_key_list = tuple(unsigned_key_list)

    @property
    def unsigned_key_list(self) -> tuple[str, ...]:
        return self._unsigned_key_list

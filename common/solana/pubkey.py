from __future__ import annotations

from typing import Final, Union

import solders.pubkey as _pk
from typing_extensions import Self

_SoldersPubKey = _pk.Pubkey


class SolPubKey(_SoldersPubKey):
    """Account address.

    Wallet addresses reach the SDK as base58 text from callers and as raw keys
    from decoded transactions, so the key compares equal to both forms.
    """

    key_size: Final[int] = _SoldersPubKey.LENGTH

    @classmethod
    def from_raw(cls, raw: _RawSolPubKey) -> Self:
        if isinstance(raw, cls):
            return raw
        elif isinstance(raw, _SoldersPubKey):
            return cls(bytes(raw))
        elif isinstance(raw, str):
            return cls.from_string(raw)
        elif isinstance(raw, (bytes, bytearray)):
            return cls.from_bytes(raw)
        raise ValueError(f"Wrong address type {type(raw).__name__}")

    @classmethod
    def from_string(cls, address: str) -> Self:
        try:
            return cls(bytes(_SoldersPubKey.from_string(address.strip())))
        except ValueError as exc:
            raise ValueError(f"Wrong base58 address {address}: {exc}") from exc

    @classmethod
    def from_bytes(cls, raw: bytes | bytearray) -> Self:
        if len(raw) != cls.key_size:
            raise ValueError(f"Wrong address length: {len(raw)}")
        return cls(bytes(raw))

    def to_string(self) -> str:
        return str(self)

    def to_bytes(self) -> bytes:
        return bytes(self)

    def __repr__(self) -> str:
        return self.to_string()

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __deepcopy__(self, memo: dict) -> Self:
        memo[id(self)] = self
        return self

    def __eq__(self, other) -> bool:
        if isinstance(other, _SoldersPubKey):
            return self.to_bytes() == bytes(other)
        elif isinstance(other, str):
            return self.to_string() == other
        elif isinstance(other, (bytes, bytearray)):
            return self.to_bytes() == bytes(other)
        return False

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)


_RawSolPubKey = Union[str, bytes, bytearray, SolPubKey, _SoldersPubKey]

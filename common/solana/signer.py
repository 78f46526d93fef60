from __future__ import annotations

from typing import Final, Union

import base58
import solders.keypair as _key
import solders.signature as _sig

from .errors import SolDecodeError
from .pubkey import SolPubKey
from ..utils.cached import cached_property

SolKeyPair = _key.Keypair
_SoldersSig = _sig.Signature

_SEED_SIZE: Final[int] = 32
_KEYPAIR_SIZE: Final[int] = 64


class SolSigner:
    """Signing identity built from a caller-supplied secret key.

    The secret never leaves the object: string representations show the public address only.
    """

    def __init__(self, keypair: SolKeyPair) -> None:
        self._keypair = keypair

    @classmethod
    def from_raw(cls, raw: _RawSigner) -> SolSigner:
        if isinstance(raw, SolSigner):
            return raw
        elif isinstance(raw, SolKeyPair):
            return cls(raw)
        elif isinstance(raw, str):
            return cls.from_base58(raw)
        elif isinstance(raw, (bytes, bytearray)):
            return cls.from_bytes(bytes(raw))
        raise SolDecodeError(f"Wrong input type {type(raw).__name__}")

    @classmethod
    def from_base58(cls, secret: str) -> SolSigner:
        if not isinstance(secret, str) or not secret.strip():
            raise SolDecodeError("empty secret key")

        try:
            raw = base58.b58decode(secret.strip())
        except ValueError as exc:
            raise SolDecodeError(f"invalid base58 secret key: {exc}") from exc

        return cls.from_bytes(raw)

    @classmethod
    def from_bytes(cls, raw: bytes) -> SolSigner:
        if len(raw) == _SEED_SIZE:
            return cls(SolKeyPair.from_seed(raw))
        elif len(raw) == _KEYPAIR_SIZE:
            try:
                return cls(SolKeyPair.from_bytes(raw))
            except ValueError as exc:
                # the public half doesn't match the secret half
                raise SolDecodeError(f"invalid keypair bytes: {exc}") from exc
        raise SolDecodeError("invalid secret key length")

    @cached_property
    def pubkey(self) -> SolPubKey:
        return SolPubKey.from_raw(self._keypair.pubkey())

    @property
    def keypair(self) -> SolKeyPair:
        return self._keypair

    def sign_message(self, message: bytes) -> _SoldersSig:
        return self._keypair.sign_message(message)

    def to_string(self) -> str:
        return self.pubkey.to_string()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"SolSigner({self.to_string()})"

    def __hash__(self) -> int:
        return hash(self.pubkey)

    def __deepcopy__(self, memo: dict) -> SolSigner:
        """The object is not mutable, so there is no point in creating a copy."""
        memo[id(self)] = self
        return self

    def __eq__(self, other) -> bool:
        if other is self:
            return True
        elif isinstance(other, SolSigner):
            return self.pubkey == other.pubkey
        elif isinstance(other, str):
            return self.to_string() == other
        return False


_RawSigner = Union[SolSigner, SolKeyPair, bytes, bytearray, str]

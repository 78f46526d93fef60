from __future__ import annotations

from typing import Iterable, Iterator

from .pubkey import SolPubKey
from .signer import SolSigner


class SolSignerRegistry:
    """Address -> signing identity map for the wallets taking part in one operation."""

    def __init__(self) -> None:
        self._signer_dict: dict[SolPubKey, SolSigner] = dict()

    @classmethod
    def from_signer_list(cls, signer_list: Iterable[SolSigner]) -> SolSignerRegistry:
        registry = cls()
        for signer in signer_list:
            registry.add(signer)
        return registry

    @classmethod
    def from_secret_list(cls, secret_list: Iterable[str]) -> SolSignerRegistry:
        """Fails on the first bad secret, a partial registry is never returned."""
        return cls.from_signer_list([SolSigner.from_base58(secret) for secret in secret_list])

    def add(self, signer: SolSigner) -> None:
        self._signer_dict[signer.pubkey] = signer

    def get(self, address: SolPubKey | str) -> SolSigner | None:
        if isinstance(address, str):
            try:
                address = SolPubKey.from_string(address)
            except ValueError:
                return None
        return self._signer_dict.get(SolPubKey.from_raw(address), None)

    @property
    def address_list(self) -> tuple[SolPubKey, ...]:
        return tuple(self._signer_dict.keys())

    def __contains__(self, address: SolPubKey | str) -> bool:
        return self.get(address) is not None

    def __len__(self) -> int:
        return len(self._signer_dict)

    def __iter__(self) -> Iterator[SolSigner]:
        return iter(self._signer_dict.values())

from __future__ import annotations

import logging
from typing import Sequence

from .errors import SolSigningError
from .signer import SolSigner
from .signer_registry import SolSignerRegistry
from .transaction import SolVersionedTx

_LOG = logging.getLogger(__name__)


class SolTxCoSigner:
    """Completes signatures on partially-signed transactions issued by the remote service.

    Each required signer is resolved against the primary identity first, then against the registry.
    The result is returned only if every required slot holds a valid signature,
    otherwise SolSigningError is raised and nothing is returned.
    """

    def __init__(self, primary: SolSigner, registry: SolSignerRegistry | None = None) -> None:
        self._primary = primary
        self._registry = registry or SolSignerRegistry()

    @property
    def primary(self) -> SolSigner:
        return self._primary

    def _resolve_signer(self, address) -> SolSigner | None:
        if self._primary.pubkey == address:
            return self._primary
        return self._registry.get(address)

    def complete_tx(self, tx: SolVersionedTx) -> SolVersionedTx:
        if tx.required_signer_cnt == 0:
            return tx

        signer_list: list[SolSigner] = list()
        for address in tx.required_signer_list:
            if signer := self._resolve_signer(address):
                signer_list.append(signer)

        if not signer_list:
            raise SolSigningError(
                "no local signer for the transaction",
                [key.to_string() for key in tx.required_signer_list],
            )

        tx.sign(signer_list)

        if unsigned_key_list := tx.unsigned_signer_list:
            raise SolSigningError(
                "transaction has unsigned slots",
                [key.to_string() for key in unsigned_key_list],
            )

        _LOG.debug("%s: %d of %d slots signed locally", tx, len(signer_list), tx.required_signer_cnt)
        return tx

    def complete(self, tx_base58: str) -> str:
        tx = SolVersionedTx.from_base58(tx_base58)
        return self.complete_tx(tx).to_base58()

    def complete_list(self, tx_base58_list: Sequence[str]) -> tuple[str, ...]:
        return tuple([self.complete(tx) for tx in tx_base58_list])

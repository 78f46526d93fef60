from __future__ import annotations

from typing import Sequence, Union

import base58
import solders.errors as _err
import solders.message as _msg
import solders.signature as _sig
import solders.transaction as _tx
from typing_extensions import Self

from .errors import SolDecodeError
from .pubkey import SolPubKey
from .signer import SolSigner
from ..utils.cached import cached_property

_SoldersVersionedTx = _tx.VersionedTransaction
_SoldersSig = _sig.Signature
_solders_msg_to_bytes = _msg.to_bytes_versioned

SolTxMessageInfo = Union[_msg.Message, _msg.MessageV0]


class SolVersionedTx:
    """Wire-level view of a (legacy or v0) transaction received from the remote service.

    Required signers are the first `num_required_signatures` static account keys,
    the signature slots are parallel to them.
    """

    def __init__(self, solders_tx: _SoldersVersionedTx) -> None:
        self._solders_tx = solders_tx

    @classmethod
    def from_bytes(cls, raw: bytes) -> Self:
        try:
            return cls(_SoldersVersionedTx.from_bytes(raw))
        except (_err.BincodeError, ValueError) as exc:
            raise SolDecodeError(f"invalid transaction data: {exc}") from exc

    @classmethod
    def from_base58(cls, raw: str) -> Self:
        try:
            data = base58.b58decode(raw)
        except ValueError as exc:
            raise SolDecodeError(f"invalid base58 transaction: {exc}") from exc

        if not data:
            raise SolDecodeError("empty transaction")
        return cls.from_bytes(data)

    @property
    def message(self) -> SolTxMessageInfo:
        return self._solders_tx.message

    @cached_property
    def message_bytes(self) -> bytes:
        return bytes(_solders_msg_to_bytes(self._solders_tx.message))

    @property
    def required_signer_cnt(self) -> int:
        return self._solders_tx.message.header.num_required_signatures

    @cached_property
    def required_signer_list(self) -> tuple[SolPubKey, ...]:
        # the order is significant: it matches the order of signature slots
        key_list = self._solders_tx.message.account_keys[: self.required_signer_cnt]
        return tuple([SolPubKey.from_raw(key) for key in key_list])

    @property
    def signature_list(self) -> tuple[_SoldersSig, ...]:
        return tuple(self._solders_tx.signatures)

    def is_slot_signed(self, idx: int) -> bool:
        sig_list = self._solders_tx.signatures
        if idx >= len(sig_list):
            return False

        sig = sig_list[idx]
        if sig == _SoldersSig.default():
            return False
        return sig.verify(self.required_signer_list[idx], self.message_bytes)

    @property
    def is_fully_signed(self) -> bool:
        return all(self.is_slot_signed(idx) for idx in range(self.required_signer_cnt))

    @property
    def unsigned_signer_list(self) -> tuple[SolPubKey, ...]:
        return tuple(
            [key for idx, key in enumerate(self.required_signer_list) if not self.is_slot_signed(idx)]
        )

    def sign(self, signer_list: Sequence[SolSigner]) -> None:
        """Fill the slots of the passed signers.

        Slots that already hold a valid signature are kept as is,
        slots of unknown signers are left untouched.
        """
        signer_dict = {signer.pubkey: signer for signer in signer_list}
        old_sig_list = list(self._solders_tx.signatures)

        sig_list: list[_SoldersSig] = list()
        for idx, key in enumerate(self.required_signer_list):
            old_sig = old_sig_list[idx] if idx < len(old_sig_list) else _SoldersSig.default()
            signer = signer_dict.get(key, None)
            if (signer is None) or self.is_slot_signed(idx):
                sig_list.append(old_sig)
            else:
                sig_list.append(signer.sign_message(self.message_bytes))

        self._solders_tx = _SoldersVersionedTx.populate(self._solders_tx.message, sig_list)

    def to_bytes(self) -> bytes:
        return bytes(self._solders_tx)

    def to_base58(self) -> str:
        return str(base58.b58encode(self.to_bytes()), "utf-8")

    def to_string(self) -> str:
        sig_list = self._solders_tx.signatures
        if sig_list and sig_list[0] != _SoldersSig.default():
            return "SolVersionedTx:" + str(sig_list[0])
        return "SolVersionedTx:<NO SIGNATURE>"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return self.to_string()

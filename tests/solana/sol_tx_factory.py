from __future__ import annotations

from typing import Sequence

import base58
import solders.hash as _hash
import solders.keypair as _key
import solders.message as _msg
import solders.pubkey as _pk
import solders.signature as _sig
import solders.system_program as _sys
import solders.transaction as _tx

from common.solana.signer import SolSigner


def new_signer() -> SolSigner:
    return SolSigner(_key.Keypair())


def new_secret(signer: SolSigner) -> str:
    return str(base58.b58encode(bytes(signer.keypair)), "utf-8")


def build_tx(signer_list: Sequence[SolSigner], presigner_list: Sequence[SolSigner] = tuple()) -> _tx.VersionedTransaction:
    """v0 transaction where each signer pays 1 lamport to a random account,
    the first signer is the fee payer, slots of presigners are already filled."""
    ix_list = [
        _sys.transfer(
            _sys.TransferParams(
                from_pubkey=signer.keypair.pubkey(),
                to_pubkey=_pk.Pubkey.new_unique(),
                lamports=1,
            )
        )
        for signer in signer_list
    ]
    msg = _msg.MessageV0.try_compile(signer_list[0].keypair.pubkey(), ix_list, [], _hash.Hash.default())
    msg_bytes = bytes(_msg.to_bytes_versioned(msg))

    presigner_dict = {signer.keypair.pubkey(): signer for signer in presigner_list}
    key_list = msg.account_keys[: msg.header.num_required_signatures]
    sig_list = [
        presigner_dict[key].keypair.sign_message(msg_bytes) if key in presigner_dict else _sig.Signature.default()
        for key in key_list
    ]
    return _tx.VersionedTransaction.populate(msg, sig_list)


def build_tx_base58(signer_list: Sequence[SolSigner], presigner_list: Sequence[SolSigner] = tuple()) -> str:
    return str(base58.b58encode(bytes(build_tx(signer_list, presigner_list))), "utf-8")

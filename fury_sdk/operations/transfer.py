from __future__ import annotations

import logging
from typing import Sequence

from common.config.constants import TRANSFER_ITEM_PAUSE_SEC
from common.solana.signer import SolSigner
from common.solana.signer_registry import SolSignerRegistry
from .base import BaseOperation
from ..api import TransferItem, Wallet
from ..result import ApiResponse, BatchResult, ResultAccumulator, ValidationResult
from ..validation import is_valid_address_len, is_valid_amount, is_valid_wallet

_LOG = logging.getLogger(__name__)


class TransferOperation(BaseOperation):
    """SOL transfer, or SPL token transfer when the token address is set."""

    @staticmethod
    def validate(
        sender: Wallet,
        receiver: str,
        amount: str,
        token_address: str | None = None,
    ) -> ValidationResult:
        if not is_valid_wallet(sender):
            return ValidationResult.fail("Invalid sender wallet")
        if not (isinstance(receiver, str) and receiver.strip()):
            return ValidationResult.fail("Receiver address is required")
        if not is_valid_address_len(receiver):
            return ValidationResult.fail("Invalid receiver address format")
        if not is_valid_amount(amount):
            return ValidationResult.fail(f"Invalid amount: {amount}")
        if token_address and (not is_valid_address_len(token_address)):
            return ValidationResult.fail("Invalid token address format")
        return ValidationResult.ok()

    async def transfer_tokens(
        self,
        sender: Wallet,
        receiver: str,
        amount: str,
        token_address: str | None = None,
    ) -> ApiResponse:
        return await self._run("transfer", self._transfer_tokens(sender, receiver, amount, token_address))

    async def transfer_sol(self, sender: Wallet, receiver: str, amount: str) -> ApiResponse:
        return await self.transfer_tokens(sender, receiver, amount)

    async def transfer_token(self, sender: Wallet, receiver: str, token_address: str, amount: str) -> ApiResponse:
        return await self.transfer_tokens(sender, receiver, amount, token_address)

    async def _transfer_tokens(
        self,
        sender: Wallet,
        receiver: str,
        amount: str,
        token_address: str | None,
    ) -> ApiResponse:
        if not (res := self.validate(sender, receiver, amount, token_address)):
            return ApiResponse.from_error(res.error)

        sender_signer = SolSigner.from_base58(sender.private_key)
        _LOG.debug(
            "transfer %s %s from %s to %s",
            amount,
            token_address or "SOL",
            sender_signer,
            receiver,
        )

        tx_list = await self._api_client.get_transfer_tx_list(sender_signer.to_string(), receiver, amount, token_address)
        acc = await self._sign_and_submit(tx_list, sender_signer, SolSignerRegistry())
        return acc.to_api_response()

    async def batch_transfer(self, sender: Wallet, item_list: Sequence[TransferItem]) -> BatchResult:
        return await self._run("batch_transfer", self._batch_transfer(sender, item_list), BatchResult)

    async def _batch_transfer(self, sender: Wallet, item_list: Sequence[TransferItem]) -> BatchResult:
        acc = ResultAccumulator()
        for idx, item in enumerate(item_list):
            res = await self.transfer_tokens(sender, item.receiver, item.amount, item.token_address)
            if not res.success:
                acc.fail(f"Transfer {idx + 1} failed: {res.error}")
                break

            acc.add(res.result)
            if idx < len(item_list) - 1:
                await self._pause(TRANSFER_ITEM_PAUSE_SEC)

        return acc.to_batch_result()

from __future__ import annotations

import logging
from typing import Sequence

from common.config.constants import EST_TX_FEE_SOL, MIX_RECIPIENT_PAUSE_SEC
from common.solana.signer import SolSigner
from common.solana.signer_registry import SolSignerRegistry
from .base import BaseOperation
from ..api import RecipientModel, Wallet
from ..result import ApiResponse, BatchResult, ResultAccumulator, ValidationResult
from ..validation import is_valid_amount, is_valid_wallet

_LOG = logging.getLogger(__name__)


class MixerOperation(BaseOperation):
    """Routes SOL to recipients through intermediate wallets held by the API, one recipient per call."""

    @staticmethod
    def _check_recipient(wallet: Wallet) -> ValidationResult:
        if not is_valid_wallet(wallet):
            return ValidationResult.fail("Invalid recipient wallet data")
        if not wallet.amount:
            return ValidationResult.fail("Recipient wallet must have an amount specified")
        if not is_valid_amount(wallet.amount):
            return ValidationResult.fail(f"Invalid amount: {wallet.amount}")
        return ValidationResult.ok()

    @staticmethod
    def _check_balance(recipient_list: Sequence[Wallet], sender_balance: float) -> ValidationResult:
        total_amount = sum(float(wallet.amount) for wallet in recipient_list)
        need_amount = total_amount + EST_TX_FEE_SOL * len(recipient_list)
        if need_amount > sender_balance:
            return ValidationResult.fail(
                f"Insufficient balance. Need at least {need_amount} SOL, but have {sender_balance} SOL"
            )
        return ValidationResult.ok()

    @classmethod
    def validate_single(
        cls,
        sender: Wallet,
        recipient: Wallet,
        sender_balance: float | None = None,
    ) -> ValidationResult:
        if not is_valid_wallet(sender):
            return ValidationResult.fail("Invalid sender wallet")
        if not (res := cls._check_recipient(recipient)):
            return res
        if sender_balance is not None:
            return cls._check_balance([recipient], sender_balance)
        return ValidationResult.ok()

    @classmethod
    def validate(
        cls,
        sender: Wallet,
        recipient_list: Sequence[Wallet],
        sender_balance: float | None = None,
    ) -> ValidationResult:
        if not is_valid_wallet(sender):
            return ValidationResult.fail("Invalid sender wallet")
        if not recipient_list:
            return ValidationResult.fail("No recipient wallets")

        for wallet in recipient_list:
            if not (res := cls._check_recipient(wallet)):
                return res

        if sender_balance is not None:
            return cls._check_balance(recipient_list, sender_balance)
        return ValidationResult.ok()

    async def mix_sol_to_single_recipient(
        self,
        sender: Wallet,
        recipient: Wallet,
        *,
        check_balance: bool = False,
    ) -> ApiResponse:
        return await self._run("mix", self._mix_sol_to_single_recipient(sender, recipient, check_balance))

    async def _mix_sol_to_single_recipient(self, sender: Wallet, recipient: Wallet, check_balance: bool) -> ApiResponse:
        if not (res := self.validate_single(sender, recipient)):
            return ApiResponse.from_error(res.error)

        sender_signer = SolSigner.from_base58(sender.private_key)
        if check_balance:
            balance = await self._get_sol_balance(sender_signer.pubkey)
            if not (res := self.validate_single(sender, recipient, balance)):
                return ApiResponse.from_error(res.error)

        recipient_signer = SolSigner.from_base58(recipient.private_key)
        registry = SolSignerRegistry.from_signer_list([recipient_signer])
        recipient_model_list = [RecipientModel(address=recipient_signer.to_string(), amount=str(recipient.amount))]
        _LOG.debug("mix SOL from %s to %s", sender_signer, recipient_signer)

        tx_list = await self._api_client.get_mixer_tx_list(sender_signer.to_string(), recipient_model_list)
        _LOG.debug("received %s partially signed transactions", len(tx_list))

        acc = await self._sign_and_submit(tx_list, sender_signer, registry)
        return acc.to_api_response()

    async def batch_mix_sol(
        self,
        sender: Wallet,
        recipient_list: Sequence[Wallet],
        *,
        check_balance: bool = False,
    ) -> BatchResult:
        return await self._run("batch_mix", self._batch_mix_sol(sender, recipient_list, check_balance), BatchResult)

    async def _batch_mix_sol(self, sender: Wallet, recipient_list: Sequence[Wallet], check_balance: bool) -> BatchResult:
        if not recipient_list:
            return BatchResult(success=True, results=[])

        if not (res := self.validate(sender, recipient_list)):
            return BatchResult.from_error(res.error)

        if check_balance:
            balance = await self._get_sol_balance(SolSigner.from_base58(sender.private_key).pubkey)
            if not (res := self.validate(sender, recipient_list, balance)):
                return BatchResult.from_error(res.error)

        acc = ResultAccumulator()
        for idx, recipient in enumerate(recipient_list):
            recipient_address = SolSigner.from_base58(recipient.private_key).to_string()
            mix_res = await self.mix_sol_to_single_recipient(sender, recipient)
            if not mix_res.success:
                acc.fail(f"Mixing to recipient {idx + 1} ({recipient_address}) failed: {mix_res.error}")
                break

            acc.add(mix_res.result)
            if idx < len(recipient_list) - 1:
                await self._pause(MIX_RECIPIENT_PAUSE_SEC)

        return acc.to_batch_result()

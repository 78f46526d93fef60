from __future__ import annotations

import logging
from typing import Sequence

from common.config.constants import EST_TX_FEE_SOL, DISTRIBUTE_BATCH_PAUSE_SEC
from common.solana.signer import SolSigner
from common.solana.signer_registry import SolSignerRegistry
from .base import BaseOperation
from ..api import RecipientModel, Wallet
from ..bundle import split_list
from ..result import ApiResponse, BatchResult, ResultAccumulator, ValidationResult
from ..validation import is_valid_amount, is_valid_wallet

_LOG = logging.getLogger(__name__)


class DistributeOperation(BaseOperation):
    """Sends SOL from one sender to several recipients, the recipients co-sign their transactions."""

    @staticmethod
    def validate(
        sender: Wallet,
        recipient_list: Sequence[Wallet],
        sender_balance: float | None = None,
    ) -> ValidationResult:
        if not is_valid_wallet(sender):
            return ValidationResult.fail("Invalid sender wallet")

        if not recipient_list:
            return ValidationResult.fail("No recipient wallets")

        for wallet in recipient_list:
            if not is_valid_wallet(wallet):
                return ValidationResult.fail("Invalid recipient wallet data")
            if not wallet.amount:
                return ValidationResult.fail("Recipient wallet must have an amount specified")
            if not is_valid_amount(wallet.amount):
                return ValidationResult.fail(f"Invalid amount: {wallet.amount}")

        if sender_balance is not None:
            total_amount = sum(float(wallet.amount) for wallet in recipient_list)
            need_amount = total_amount + EST_TX_FEE_SOL
            if need_amount > sender_balance:
                return ValidationResult.fail(
                    f"Insufficient balance. Need at least {need_amount} SOL, but have {sender_balance} SOL"
                )

        return ValidationResult.ok()

    async def distribute_sol(
        self,
        sender: Wallet,
        recipient_list: Sequence[Wallet],
        *,
        check_balance: bool = False,
    ) -> ApiResponse:
        return await self._run("distribute", self._distribute_sol(sender, recipient_list, check_balance))

    async def _distribute_sol(self, sender: Wallet, recipient_list: Sequence[Wallet], check_balance: bool) -> ApiResponse:
        if not (res := self.validate(sender, recipient_list)):
            return ApiResponse.from_error(res.error)

        sender_signer = SolSigner.from_base58(sender.private_key)
        if check_balance:
            balance = await self._get_sol_balance(sender_signer.pubkey)
            if not (res := self.validate(sender, recipient_list, balance)):
                return ApiResponse.from_error(res.error)

        recipient_signer_list = [SolSigner.from_base58(wallet.private_key) for wallet in recipient_list]
        registry = SolSignerRegistry.from_signer_list(recipient_signer_list)

        # recipient secrets stay local: the API gets addresses and amounts only
        recipient_model_list = [
            RecipientModel(address=signer.to_string(), amount=str(wallet.amount))
            for signer, wallet in zip(recipient_signer_list, recipient_list)
        ]
        _LOG.debug("distribute SOL from %s to %s recipients", sender_signer, len(recipient_model_list))

        tx_list = await self._api_client.get_distribute_tx_list(sender_signer.to_string(), recipient_model_list)
        _LOG.debug("received %s partially signed transactions", len(tx_list))

        acc = await self._sign_and_submit(tx_list, sender_signer, registry)
        return acc.to_api_response()

    async def batch_distribute_sol(self, sender: Wallet, recipient_list: Sequence[Wallet]) -> BatchResult:
        return await self._run("batch_distribute", self._batch_distribute_sol(sender, recipient_list), BatchResult)

    async def _batch_distribute_sol(self, sender: Wallet, recipient_list: Sequence[Wallet]) -> BatchResult:
        if not recipient_list:
            return BatchResult(success=True, results=[])

        max_cnt = self._cfg.max_recipients_per_batch
        if len(recipient_list) <= max_cnt:
            res = await self.distribute_sol(sender, recipient_list)
            return BatchResult(
                success=res.success,
                results=[res.result] if res.success else [],
                error=res.error,
                completed_cnt=None if res.success else 0,
            )

        if not (valid_res := self.validate(sender, recipient_list)):
            return BatchResult.from_error(valid_res.error)

        group_list = split_list(recipient_list, max_cnt)
        _LOG.debug("split distribution into %s batches of max %s recipients", len(group_list), max_cnt)

        acc = ResultAccumulator()
        for idx, group in enumerate(group_list):
            res = await self.distribute_sol(sender, group)
            if not res.success:
                acc.fail(f"Batch {idx + 1} failed: {res.error}")
                break

            acc.add(res.result)
            if idx < len(group_list) - 1:
                await self._pause(DISTRIBUTE_BATCH_PAUSE_SEC)

        return acc.to_batch_result()

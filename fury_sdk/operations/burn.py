from __future__ import annotations

import logging
from typing import Sequence

from common.config.constants import BURN_ITEM_PAUSE_SEC
from common.solana.signer import SolSigner
from common.solana.signer_registry import SolSignerRegistry
from .base import BaseOperation
from ..api import BurnItem, Wallet
from ..result import ApiResponse, BatchResult, ResultAccumulator, ValidationResult
from ..validation import is_valid_address_len, is_valid_amount, is_valid_wallet

_LOG = logging.getLogger(__name__)


class BurnOperation(BaseOperation):
    @staticmethod
    def validate(wallet: Wallet, token_address: str, amount: str) -> ValidationResult:
        if not is_valid_wallet(wallet):
            return ValidationResult.fail("Invalid wallet")
        if not (isinstance(token_address, str) and token_address.strip()):
            return ValidationResult.fail("Token address is required")
        if not is_valid_address_len(token_address):
            return ValidationResult.fail("Invalid token address format")
        if not is_valid_amount(amount):
            return ValidationResult.fail(f"Invalid amount: {amount}")
        return ValidationResult.ok()

    async def burn_token(self, wallet: Wallet, token_address: str, amount: str) -> ApiResponse:
        return await self._run("burn", self._burn_token(wallet, token_address, amount))

    async def _burn_token(self, wallet: Wallet, token_address: str, amount: str) -> ApiResponse:
        if not (res := self.validate(wallet, token_address, amount)):
            return ApiResponse.from_error(res.error)

        signer = SolSigner.from_base58(wallet.private_key)
        _LOG.debug("burn %s of %s from %s", amount, token_address, signer)

        tx_list = await self._api_client.get_burn_tx_list(signer.to_string(), token_address, amount)
        acc = await self._sign_and_submit(tx_list, signer, SolSignerRegistry())
        return acc.to_api_response()

    async def batch_burn_token(self, wallet: Wallet, item_list: Sequence[BurnItem]) -> BatchResult:
        return await self._run("batch_burn", self._batch_burn_token(wallet, item_list), BatchResult)

    async def _batch_burn_token(self, wallet: Wallet, item_list: Sequence[BurnItem]) -> BatchResult:
        acc = ResultAccumulator()
        for idx, item in enumerate(item_list):
            res = await self.burn_token(wallet, item.token_address, item.amount)
            if not res.success:
                acc.fail(f"Burn {idx + 1} failed: {res.error}")
                break

            acc.add(res.result)
            if idx < len(item_list) - 1:
                await self._pause(BURN_ITEM_PAUSE_SEC)

        return acc.to_batch_result()

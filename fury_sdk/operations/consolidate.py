from __future__ import annotations

import logging
from typing import Mapping, Sequence

from common.solana.signer import SolSigner
from common.solana.signer_registry import SolSignerRegistry
from .base import BaseOperation
from ..api import Wallet
from ..result import ApiResponse, ValidationResult
from ..validation import is_valid_percentage, is_valid_wallet, short_address

_LOG = logging.getLogger(__name__)


class ConsolidateOperation(BaseOperation):
    """Moves a percentage of SOL from many source wallets into one receiver."""

    @staticmethod
    def validate(
        source_list: Sequence[Wallet],
        receiver: Wallet,
        percentage: float,
        source_balance_dict: Mapping[str, float] | None = None,
    ) -> ValidationResult:
        if not is_valid_wallet(receiver):
            return ValidationResult.fail("Invalid receiver wallet")

        if not source_list:
            return ValidationResult.fail("No source wallets")

        for wallet in source_list:
            if not is_valid_wallet(wallet):
                return ValidationResult.fail("Invalid source wallet data")

            if source_balance_dict is not None:
                address = SolSigner.from_base58(wallet.private_key).to_string()
                if source_balance_dict.get(address, 0) <= 0:
                    return ValidationResult.fail(f"Source wallet {short_address(address)} has no balance")

        if not is_valid_percentage(percentage):
            return ValidationResult.fail("Percentage must be between 1 and 100")

        return ValidationResult.ok()

    async def consolidate_sol(
        self,
        source_list: Sequence[Wallet],
        receiver: Wallet,
        percentage: float,
        *,
        check_balance: bool = False,
    ) -> ApiResponse:
        return await self._run("consolidate", self._consolidate_sol(source_list, receiver, percentage, check_balance))

    async def _consolidate_sol(
        self,
        source_list: Sequence[Wallet],
        receiver: Wallet,
        percentage: float,
        check_balance: bool,
    ) -> ApiResponse:
        if not (res := self.validate(source_list, receiver, percentage)):
            return ApiResponse.from_error(res.error)

        receiver_signer = SolSigner.from_base58(receiver.private_key)
        source_signer_list = [SolSigner.from_base58(wallet.private_key) for wallet in source_list]

        if check_balance:
            balance_dict: dict[str, float] = dict()
            for signer in source_signer_list:
                balance_dict[signer.to_string()] = await self._get_sol_balance(signer.pubkey)
            if not (res := self.validate(source_list, receiver, percentage, balance_dict)):
                return ApiResponse.from_error(res.error)

        registry = SolSignerRegistry.from_signer_list(source_signer_list)
        _LOG.debug("consolidate %s%% of SOL from %s wallets to %s", percentage, len(source_signer_list), receiver_signer)

        tx_list = await self._api_client.get_consolidate_tx_list(
            [signer.to_string() for signer in source_signer_list],
            receiver_signer.to_string(),
            float(percentage),
        )
        _LOG.debug("received %s partially prepared transactions", len(tx_list))

        acc = await self._sign_and_submit(tx_list, receiver_signer, registry)
        return acc.to_api_response()

from __future__ import annotations

import logging

from common.solana.signer import SolSigner
from common.solana.signer_registry import SolSignerRegistry
from .base import BaseOperation
from ..api import TokenCleanerConfig, Wallet
from ..result import ApiResponse, ValidationResult
from ..validation import is_valid_address_len, is_valid_amount, is_valid_percentage, is_valid_wallet

_LOG = logging.getLogger(__name__)


class TokenCleanerOperation(BaseOperation):
    """Sell from one wallet and buy back from another, the seller pays the fees."""

    @staticmethod
    def validate(seller: Wallet, buyer: Wallet, cfg: TokenCleanerConfig) -> ValidationResult:
        if not is_valid_wallet(seller):
            return ValidationResult.fail("Invalid seller wallet")
        if not is_valid_wallet(buyer):
            return ValidationResult.fail("Invalid buyer wallet")
        if not is_valid_address_len(cfg.token_address):
            return ValidationResult.fail("Invalid token address format")
        if not is_valid_percentage(cfg.sell_percentage):
            return ValidationResult.fail("Invalid sell percentage (must be between 1-100)")
        if not is_valid_percentage(cfg.buy_percentage):
            return ValidationResult.fail("Invalid buy percentage (must be between 1-100)")
        if not is_valid_amount(cfg.buy_amount):
            return ValidationResult.fail("Invalid buy amount")
        return ValidationResult.ok()

    async def clean_token(self, seller: Wallet, buyer: Wallet, cfg: TokenCleanerConfig) -> ApiResponse:
        return await self._run("clean", self._clean_token(seller, buyer, cfg))

    async def _clean_token(self, seller: Wallet, buyer: Wallet, cfg: TokenCleanerConfig) -> ApiResponse:
        if not (res := self.validate(seller, buyer, cfg)):
            return ApiResponse.from_error(res.error)

        seller_signer = SolSigner.from_base58(seller.private_key)
        buyer_signer = SolSigner.from_base58(buyer.private_key)
        registry = SolSignerRegistry.from_signer_list([seller_signer, buyer_signer])
        _LOG.debug(
            "clean %s: sell %s%% from %s, buy %s%% by %s",
            cfg.token_address,
            cfg.sell_percentage,
            seller_signer,
            cfg.buy_percentage,
            buyer_signer,
        )

        # the same wallet can be on both sides
        address_list = list(dict.fromkeys([seller_signer.to_string(), buyer_signer.to_string()]))
        tx_list = await self._api_client.get_cleaner_tx_list(
            seller_signer.to_string(),
            buyer_signer.to_string(),
            address_list,
            cfg,
        )
        _LOG.debug("received %s partially prepared transactions", len(tx_list))

        acc = await self._sign_and_submit(tx_list, seller_signer, registry)
        return acc.to_api_response()

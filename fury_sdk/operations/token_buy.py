from __future__ import annotations

import logging
from typing import Sequence

from common.solana.signer import SolSigner
from common.solana.signer_registry import SolSignerRegistry
from .base import BaseOperation
from ..api import TokenBuyConfig, Wallet
from ..result import ApiResponse, ValidationResult
from ..validation import check_protocol, check_trade_wallet_list, is_valid_amount

_LOG = logging.getLogger(__name__)


class TokenBuyOperation(BaseOperation):
    @staticmethod
    def validate(wallet_list: Sequence[Wallet], cfg: TokenBuyConfig) -> ValidationResult:
        if not cfg.token_address:
            return ValidationResult.fail("Invalid token address")
        if not is_valid_amount(cfg.sol_amount):
            return ValidationResult.fail("Invalid SOL amount")
        if not (res := check_protocol(cfg.protocol)):
            return res
        return check_trade_wallet_list(wallet_list)

    async def buy_token_single(self, wallet: Wallet, cfg: TokenBuyConfig) -> ApiResponse:
        return await self._run("buy", self._buy_token([wallet], cfg, None, wrap_each=False))

    async def buy_token_batch(
        self,
        wallet_list: Sequence[Wallet],
        cfg: TokenBuyConfig,
        amount_list: Sequence[float] | None = None,
    ) -> ApiResponse:
        return await self._run("batch_buy", self._buy_token(wallet_list, cfg, amount_list, wrap_each=True))

    async def _buy_token(
        self,
        wallet_list: Sequence[Wallet],
        cfg: TokenBuyConfig,
        amount_list: Sequence[float] | None,
        *,
        wrap_each: bool,
    ) -> ApiResponse:
        if not (res := self.validate(wallet_list, cfg)):
            return ApiResponse.from_error(res.error)

        signer_list = [SolSigner.from_base58(wallet.private_key) for wallet in wallet_list]
        registry = SolSignerRegistry.from_signer_list(signer_list)
        _LOG.debug(
            "buy %s for %s SOL on %s with %s wallets",
            cfg.token_address,
            cfg.sol_amount,
            cfg.protocol,
            len(signer_list),
        )

        bundle_list = await self._api_client.get_buy_bundle_list(
            [signer.to_string() for signer in signer_list],
            cfg,
            amount_list,
        )
        _LOG.debug("received %s bundles", len(bundle_list))

        acc = await self._sign_and_submit_bundle_list(bundle_list, signer_list[0], registry)
        return acc.to_api_response(wrap_each=wrap_each)

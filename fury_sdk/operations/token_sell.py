from __future__ import annotations

import logging
from typing import Sequence

from common.solana.signer import SolSigner
from common.solana.signer_registry import SolSignerRegistry
from .base import BaseOperation
from ..api import TokenSellConfig, Wallet
from ..bundle import Bundle
from ..result import ApiResponse, ValidationResult
from ..validation import check_protocol, check_trade_wallet_list, is_valid_percentage

_LOG = logging.getLogger(__name__)

_SELL_PERCENT_ERROR = "Invalid sell percentage (must be between 1-100)"


class TokenSellOperation(BaseOperation):
    @staticmethod
    def validate(
        wallet_list: Sequence[Wallet],
        cfg: TokenSellConfig,
        percent_list: Sequence[float] | None = None,
    ) -> ValidationResult:
        if not cfg.token_address:
            return ValidationResult.fail("Invalid token address")
        if not is_valid_percentage(cfg.sell_percent):
            return ValidationResult.fail(_SELL_PERCENT_ERROR)
        for percent in percent_list or tuple():
            # zero means "use the common percentage"
            if percent and not is_valid_percentage(percent):
                return ValidationResult.fail(_SELL_PERCENT_ERROR)
        if not (res := check_protocol(cfg.protocol)):
            return res
        return check_trade_wallet_list(wallet_list)

    async def sell_token_single(self, wallet: Wallet, cfg: TokenSellConfig) -> ApiResponse:
        return await self._run("sell", self._sell_token([wallet], cfg, None, wrap_each=False))

    async def sell_token_batch(
        self,
        wallet_list: Sequence[Wallet],
        cfg: TokenSellConfig,
        percent_list: Sequence[float] | None = None,
    ) -> ApiResponse:
        return await self._run("batch_sell", self._sell_token(wallet_list, cfg, percent_list, wrap_each=True))

    async def _sell_token(
        self,
        wallet_list: Sequence[Wallet],
        cfg: TokenSellConfig,
        percent_list: Sequence[float] | None,
        *,
        wrap_each: bool,
    ) -> ApiResponse:
        if not (res := self.validate(wallet_list, cfg, percent_list)):
            return ApiResponse.from_error(res.error)

        signer_list = [SolSigner.from_base58(wallet.private_key) for wallet in wallet_list]
        registry = SolSignerRegistry.from_signer_list(signer_list)
        address_list = [signer.to_string() for signer in signer_list]
        _LOG.debug("sell %s%% of %s on %s with %s wallets", cfg.sell_percent, cfg.token_address, cfg.protocol, len(address_list))

        bundle_list: list[Bundle] = list()
        if percent_list:
            # each wallet has its own percentage: one request per wallet
            for idx, address in enumerate(address_list):
                percent = percent_list[idx] if idx < len(percent_list) else None
                bundle_list.extend(await self._api_client.get_sell_bundle_list([address], cfg, percent or None))
        else:
            bundle_list.extend(await self._api_client.get_sell_bundle_list(address_list, cfg))
        _LOG.debug("received %s bundles", len(bundle_list))

        acc = await self._sign_and_submit_bundle_list(bundle_list, signer_list[0], registry)
        return acc.to_api_response(wrap_each=wrap_each)
